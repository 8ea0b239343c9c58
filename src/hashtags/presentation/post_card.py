"""Fallback post card

Used when the host provides no post renderer. Draws a self-contained
card: author, date, channel, the message with the selected hashtag
highlighted, and a "View Post" action.
"""

import logging
import re
import webbrowser
from datetime import datetime, timezone, tzinfo
from typing import Optional, Protocol, Sequence

from hashtags.models import PostSummary
from hashtags.presentation.types import RenderNode

logger = logging.getLogger(__name__)

# '&' 뒤의 '#'은 이스케이프된 엔티티(&#039;)이므로 제외
_HASHTAG_RE = re.compile(r"(?<!&)#([a-zA-Z0-9](?:[a-zA-Z0-9-]*[a-zA-Z0-9])?)")

_HTML_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#039;"),
)

HIGHLIGHT_STYLE = (
    "color: var(--link-color); font-weight: 600; "
    "background-color: rgba(var(--button-bg-rgb), 0.08);"
)


class PostRenderer(Protocol):
    """Host capability that draws one post of a hashtag search"""

    def render(self, post: PostSummary, tag: str) -> RenderNode: ...


class Navigator(Protocol):
    """Host navigation primitive (client-side history push)"""

    def push(self, path: str) -> None: ...


class BrowserNavigator:
    """Full page URL change; the last resort when the host has no history API"""

    def __init__(self, base_url: str = ""):
        self.base_url = base_url.rstrip("/")

    def push(self, path: str) -> None:
        webbrowser.open(f"{self.base_url}{path}")


def escape_html(text: str) -> str:
    for char, entity in _HTML_ESCAPES:
        text = text.replace(char, entity)
    return text


def highlight_hashtags(message: str, tag: str) -> str:
    """Escape ``message`` and wrap hashtag tokens equal to ``tag``

    Comparison is case-insensitive. Other hashtags are left as escaped text.
    """
    wanted = tag.lstrip("#").lower()

    def _replace(match: re.Match) -> str:
        if match.group(1).lower() == wanted:
            return f'<span style="{HIGHLIGHT_STYLE}">{match.group(0)}</span>'
        return match.group(0)

    return _HASHTAG_RE.sub(_replace, escape_html(message))


def format_post_date(create_at: int, tz: Optional[tzinfo] = None) -> str:
    """Millisecond timestamp → ``Jan 05, 2024, 14:30``"""
    moment = datetime.fromtimestamp(create_at / 1000, tz=tz or timezone.utc)
    if tz is None:
        moment = moment.astimezone()
    return moment.strftime("%b %d, %Y, %H:%M")


def permalink(team_name: str, post_id: str) -> str:
    return f"/{team_name}/pl/{post_id}"


def avatar_url(user_id: str, base_url: str = "") -> str:
    if not user_id:
        return ""
    return f"{base_url.rstrip('/')}/api/v4/users/{user_id}/image"


def navigate_to_post(
    path: str,
    navigators: Sequence[Optional[Navigator]],
    fallback: Navigator,
) -> None:
    """Navigate with the first available host navigator, else ``fallback``"""
    for navigator in navigators:
        if navigator is not None:
            navigator.push(path)
            return
    logger.debug("No host navigator available, falling back to URL change: %s", path)
    fallback.push(path)


class FallbackPostRenderer:
    """Self-drawn post card"""

    def __init__(
        self,
        team_name: str = "",
        navigators: Sequence[Optional[Navigator]] = (),
        base_url: str = "",
        tz: Optional[tzinfo] = None,
    ):
        self.team_name = team_name
        self.navigators = list(navigators)
        self.base_url = base_url
        self.tz = tz
        self._fallback = BrowserNavigator(base_url)

    def go_to_post(self, post: PostSummary) -> None:
        navigate_to_post(
            permalink(self.team_name, post.id), self.navigators, self._fallback
        )

    def render(self, post: PostSummary, tag: str) -> RenderNode:
        open_post = lambda: self.go_to_post(post)  # noqa: E731
        return RenderNode(
            kind="post",
            action=open_post,
            data={
                "post_id": post.id,
                "avatar_url": avatar_url(post.user_id, self.base_url),
            },
            children=[
                RenderNode(kind="author", text=post.username or "Unknown User"),
                RenderNode(kind="date", text=format_post_date(post.create_at, self.tz)),
                RenderNode(kind="channel", text=post.channel_display_name),
                RenderNode(
                    kind="message",
                    text=post.message,
                    html=highlight_hashtags(post.message, tag),
                ),
                RenderNode(kind="button", text="View Post", action=open_post),
            ],
        )
