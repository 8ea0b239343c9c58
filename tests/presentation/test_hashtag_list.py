"""HashtagListView 테스트

탭 전환, 정렬, 그룹 보기, 설정 기억, 오래된 응답 폐기를 검증합니다.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from hashtags.client import HashtagApiError
from hashtags.preferences import MemoryPreferenceStore
from hashtags.presentation.hashtag_list import HashtagListView, Tab
from hashtags.presentation.types import ViewState
from hashtags.sorting import SortConfig, SortKey, SortOrder

from conftest import make_summary


def _view(client, preferences=None, on_select=None, team_id="team1"):
    return HashtagListView(
        client,
        channel_id="chan1",
        team_id=team_id,
        on_select=on_select or MagicMock(),
        preferences=preferences,
    )


def _hashtag_texts(node):
    return [n.text for n in node.find_all("hashtag")]


class TestLoading:
    async def test_initial_state_is_loading(self, fake_client):
        view = _view(fake_client)
        assert view.state is ViewState.LOADING
        assert view.render().find("text").text == "Loading..."

    async def test_channel_tab_fetches_channel(self, fake_client):
        view = _view(fake_client)
        await view.load()

        fake_client.fetch_hashtags.assert_awaited_once_with("chan1")
        fake_client.fetch_team_hashtags.assert_not_called()
        assert view.state is ViewState.SUCCESS

    async def test_team_tab_fetches_team(self, fake_client):
        view = _view(fake_client)
        await view.select_tab(Tab.TEAM)

        fake_client.fetch_team_hashtags.assert_awaited_once_with("team1")
        assert view.active_tab is Tab.TEAM

    async def test_same_tab_does_not_refetch(self, fake_client):
        view = _view(fake_client)
        await view.load()
        await view.select_tab(Tab.CHANNEL)
        assert fake_client.fetch_hashtags.await_count == 1

    async def test_team_tab_without_team(self, fake_client):
        view = _view(fake_client, team_id=None)
        await view.select_tab(Tab.TEAM)

        assert view.state is ViewState.ERROR
        assert view.error == "No team selected."
        fake_client.fetch_team_hashtags.assert_not_called()

    async def test_error_shows_message(self, fake_client):
        fake_client.fetch_hashtags.side_effect = HashtagApiError(500, "Failed to get hashtags")
        view = _view(fake_client)
        await view.load()

        assert view.state is ViewState.ERROR
        assert view.render().find("error").text == "Error: Failed to get hashtags"

    async def test_timeout_is_error(self, fake_client):
        fake_client.fetch_hashtags.side_effect = asyncio.TimeoutError()
        view = _view(fake_client)
        await view.load()

        assert view.state is ViewState.ERROR
        assert view.error == "Failed to fetch hashtags"

    async def test_set_scope_reloads_once(self, fake_client):
        view = _view(fake_client)
        await view.load()

        await view.set_scope("chan2", "team1")
        await view.set_scope("chan2", "team1")

        assert fake_client.fetch_hashtags.await_args_list[-1].args == ("chan2",)
        assert fake_client.fetch_hashtags.await_count == 2

    async def test_stale_response_discarded(self, fake_client):
        release = asyncio.Event()
        channel_data = make_summary()

        async def slow_channel(channel_id):
            await release.wait()
            return channel_data

        team_data = MagicMock()
        fake_client.fetch_hashtags = AsyncMock(side_effect=slow_channel)
        fake_client.fetch_team_hashtags = AsyncMock(return_value=team_data)

        view = _view(fake_client)
        pending = asyncio.create_task(view.load())
        await asyncio.sleep(0)

        await view.select_tab(Tab.TEAM)
        release.set()
        await pending

        assert view.data is team_data
        assert view.state is ViewState.SUCCESS


class TestSorting:
    async def test_default_is_recent_first(self, fake_client):
        view = _view(fake_client)
        await view.load()

        assert _hashtag_texts(view.render()) == ["#release-2", "#bug", "#release-1", "#idea"]

    async def test_count_then_toggle(self, fake_client):
        view = _view(fake_client)
        await view.load()

        view.sort(SortKey.COUNT)
        assert view.sort_config == SortConfig(SortKey.COUNT, SortOrder.DESC)
        assert _hashtag_texts(view.render()) == ["#bug", "#release-1", "#idea", "#release-2"]

        view.sort(SortKey.COUNT)
        assert view.sort_config.sort_order is SortOrder.ASC
        assert _hashtag_texts(view.render())[0] == "#release-2"

    async def test_sort_header_indicator(self, fake_client):
        view = _view(fake_client)
        await view.load()
        view.sort(SortKey.NAME)

        header = view.render().find("sort_header")
        active = [n for n in header.children if n.kind == "sort" and n.active]
        assert [(n.text, n.detail) for n in active] == [("A-Z", "▼")]

    async def test_sort_expands_groups_in_grouped_view(self, fake_client):
        view = _view(fake_client)
        await view.load()
        view.toggle_grouped()
        assert view.expanded_groups == set()

        view.sort(SortKey.COUNT)

        assert view.expanded_groups == {"release"}


class TestGroupedView:
    async def test_groups_then_ungrouped(self, fake_client):
        view = _view(fake_client)
        await view.load()
        view.toggle_grouped()

        rows = view.render().find("list").children
        assert [(r.kind, r.text) for r in rows] == [
            ("group", "release"),
            ("hashtag", "#bug"),
            ("hashtag", "#idea"),
        ]
        assert rows[0].detail == "2 tags"
        assert rows[0].children == []

    async def test_expand_group(self, fake_client):
        view = _view(fake_client)
        await view.load()
        view.toggle_grouped()
        view.toggle_group("release")

        group = view.render().find("group")
        assert group.active is True
        assert [c.text for c in group.children] == ["#release-2", "#release-1"]

        view.toggle_group("release")
        assert view.render().find("group").children == []

    async def test_every_tag_shown_once(self, fake_client):
        view = _view(fake_client)
        await view.load()
        view.toggle_grouped()
        view.toggle_group("release")

        tags = _hashtag_texts(view.render())
        assert sorted(tags) == ["#bug", "#idea", "#release-1", "#release-2"]

    async def test_toggle_button_label(self, fake_client):
        view = _view(fake_client)
        await view.load()
        assert view.render().find("button").text == "List View"
        view.toggle_grouped()
        assert view.render().find("button").text == "Grouped"


class TestPreferences:
    async def test_checkbox_hidden_with_defaults(self, fake_client):
        view = _view(fake_client, preferences=MemoryPreferenceStore())
        await view.load()
        assert view.render().find("checkbox") is None

    async def test_checkbox_shown_after_change(self, fake_client):
        view = _view(fake_client, preferences=MemoryPreferenceStore())
        await view.load()
        view.sort(SortKey.NAME)

        checkbox = view.render().find("checkbox")
        assert checkbox.text == "Remember these settings"
        assert checkbox.active is False

    async def test_remember_writes_and_forget_clears(self, fake_client):
        store = MemoryPreferenceStore()
        view = _view(fake_client, preferences=store)
        view.toggle_grouped()

        view.set_remember(True)
        assert store.read() == {
            "showGrouped": True,
            "sortBy": "time",
            "sortOrder": "desc",
            "remember": True,
        }

        view.sort(SortKey.COUNT)
        assert store.read()["sortBy"] == "count"

        view.set_remember(False)
        assert store.read() is None

    async def test_changes_not_written_without_remember(self, fake_client):
        store = MemoryPreferenceStore()
        view = _view(fake_client, preferences=store)
        view.sort(SortKey.COUNT)
        assert store.read() is None

    def test_restored_on_creation(self, fake_client):
        store = MemoryPreferenceStore(
            {"showGrouped": True, "sortBy": "name", "sortOrder": "asc", "remember": True}
        )
        view = _view(fake_client, preferences=store)

        assert view.grouped is True
        assert view.sort_config == SortConfig(SortKey.NAME, SortOrder.ASC)
        assert view.remember is True
        assert view.has_user_preferences


class TestSelect:
    async def test_channel_tab_passes_channel(self, fake_client):
        on_select = MagicMock()
        view = _view(fake_client, on_select=on_select)
        await view.load()

        await view.select("bug")

        on_select.assert_called_once_with("bug", "chan1")

    async def test_team_tab_passes_none(self, fake_client):
        on_select = AsyncMock()
        view = _view(fake_client, on_select=on_select)
        await view.select_tab(Tab.TEAM)

        await view.select("bug")

        on_select.assert_awaited_once_with("bug", None)

    async def test_hashtag_node_action(self, fake_client):
        on_select = MagicMock()
        view = _view(fake_client, on_select=on_select)
        await view.load()

        node = view.render().find("hashtag", "#idea")
        await node.action()

        on_select.assert_called_once_with("idea", "chan1")
