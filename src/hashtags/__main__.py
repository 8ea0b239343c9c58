"""해시태그 브라우저 CLI

사용법:
    python -m hashtags channel <channel_id> [--sort count] [--asc] [--grouped]
    python -m hashtags team <team_id> [--sort name]
    python -m hashtags posts <tag> [--channel <channel_id>] [--page 2] [--per-page 50]
"""

import argparse
import asyncio
import json
import sys

from hashtags import DEFAULT_PAGE_SIZE, PAGE_SIZE_OPTIONS
from hashtags.config import Config, ConfigurationError
from hashtags.core.plugin_config import load_plugin_config, merge_plugin_config
from hashtags.logging_config import setup_logging
from hashtags.plugin import HashtagsPlugin
from hashtags.presentation.hashtag_list import HashtagListView, Tab
from hashtags.presentation.tag_results import TagResultsView
from hashtags.presentation.types import ViewState, render_text
from hashtags.sorting import SortConfig, SortKey, SortOrder


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hashtags",
        description="Browse hashtags and hashtag posts from the hashtags server plugin",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
예시:
  python -m hashtags channel 4xp9fdt1pbgium
  python -m hashtags team 8ja3kd9sgfd --sort count --grouped
  python -m hashtags posts release --channel 4xp9fdt1pbgium --page 2
        """
    )
    parser.add_argument(
        "--config", default=None,
        help="플러그인 설정 YAML (환경변수 설정을 덮어씀)"
    )
    parser.add_argument(
        "--json", action="store_true",
        help="JSON 형식으로 출력"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    for name, id_help in (("channel", "채널 ID"), ("team", "팀 ID")):
        list_parser = sub.add_parser(name, help=f"{name} hashtags")
        list_parser.add_argument("id", help=id_help)
        list_parser.add_argument(
            "--sort", choices=[k.value for k in SortKey], default=SortKey.TIME.value,
            help="정렬 기준 (기본: time)"
        )
        list_parser.add_argument(
            "--asc", action="store_true",
            help="오름차순 정렬 (기본: 내림차순)"
        )
        list_parser.add_argument(
            "--grouped", action="store_true",
            help="접두사 그룹으로 표시"
        )

    posts_parser = sub.add_parser("posts", help="posts referencing a hashtag")
    posts_parser.add_argument("tag", help="해시태그 (# 없이)")
    posts_parser.add_argument("--channel", default=None, help="채널 범위로 제한")
    posts_parser.add_argument("--page", type=int, default=1, help="페이지 (1부터)")
    posts_parser.add_argument(
        "--per-page", type=int, choices=PAGE_SIZE_OPTIONS, default=None,
        help="페이지 크기"
    )
    return parser


async def _list_hashtags(plugin: HashtagsPlugin, args: argparse.Namespace) -> int:
    is_team = args.command == "team"
    view = HashtagListView(
        plugin.client,
        channel_id="" if is_team else args.id,
        team_id=args.id if is_team else None,
        on_select=lambda tag, channel_id: None,
    )
    view.active_tab = Tab.TEAM if is_team else Tab.CHANNEL
    view.sort_config = SortConfig(
        SortKey(args.sort), SortOrder.ASC if args.asc else SortOrder.DESC
    )
    view.grouped = args.grouped

    await view.load()
    if view.state is ViewState.ERROR:
        print(f"Error: {view.error}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(view.data.to_dict(), ensure_ascii=False, indent=2))
        return 0

    view.expanded_groups = {g.prefix for g in view.data.groups}
    print(render_text(view.render()))
    return 0


async def _list_posts(plugin: HashtagsPlugin, args: argparse.Namespace, config: dict) -> int:
    view = TagResultsView(
        plugin.client,
        args.tag.lstrip("#"),
        on_back=lambda: None,
        channel_id=args.channel,
        team_name=config.get("team_name", ""),
        base_url=config["base_url"],
        page_size=args.per_page or config.get("page_size") or DEFAULT_PAGE_SIZE,
    )
    view.page = max(args.page, 1)

    await view.load()
    if view.state is ViewState.ERROR:
        print(f"Error: {view.error}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(view.result.to_dict(), ensure_ascii=False, indent=2))
        return 0

    print(render_text(view.render()))
    return 0


async def run(args: argparse.Namespace, config: dict) -> int:
    plugin = HashtagsPlugin()
    await plugin.on_load(config)
    try:
        if args.command == "posts":
            return await _list_posts(plugin, args, config)
        return await _list_hashtags(plugin, args)
    finally:
        await plugin.on_unload()


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        Config.validate()
        config = Config.as_plugin_config()
        if args.config:
            config = merge_plugin_config(config, load_plugin_config(args.config))
    except (ConfigurationError, FileNotFoundError, TypeError, ValueError) as e:
        print(str(e), file=sys.stderr)
        return 2

    setup_logging()
    return asyncio.run(run(args, config))


if __name__ == "__main__":
    sys.exit(main())
