"""Hashtag list view

Two tabs (this channel / entire team), client-side sorting, optional
grouping by prefix with per-group expand state, and an optional
remembered preference.

State machine: LOADING -> SUCCESS | ERROR, re-entered on every load.
Each load carries a generation number and a response is applied only if
no newer load has started since, so a slow response for a previous tab
or channel never replaces the current one.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from enum import Enum
from typing import Any, Callable, Optional

from hashtags.client import HashtagClient, HashtagClientError
from hashtags.models import HashtagGroup, HashtagSummary, HashtagSummaryResponse
from hashtags.preferences import (
    DEFAULT_PREFERENCE,
    PreferenceStore,
    UserSortPreference,
    load_preference,
)
from hashtags.presentation.types import RenderNode, ViewState, plural
from hashtags.sorting import SortConfig, SortKey, sort_groups, sort_hashtags

logger = logging.getLogger(__name__)

OnSelect = Callable[[str, Optional[str]], Any]

SORT_LABELS = {
    SortKey.TIME: "Recent Activity",
    SortKey.COUNT: "Post Count",
    SortKey.NAME: "A-Z",
}


class Tab(str, Enum):
    CHANNEL = "channel"
    TEAM = "team"


TAB_LABELS = {
    Tab.CHANNEL: "This Channel",
    Tab.TEAM: "Entire Team",
}


class HashtagListView:
    """View model for the hashtag list.

    Args:
        client: Fetch client.
        channel_id: Current channel, used by the channel tab and passed to
            ``on_select`` while that tab is active.
        team_id: Current team, used by the team tab.
        on_select: ``(tag, channel_id | None)`` callback, sync or async.
        preferences: Optional store for the remembered sort/group state.
    """

    def __init__(
        self,
        client: HashtagClient,
        channel_id: str,
        team_id: Optional[str],
        on_select: OnSelect,
        preferences: Optional[PreferenceStore] = None,
    ) -> None:
        self.client = client
        self.channel_id = channel_id
        self.team_id = team_id
        self.on_select = on_select
        self.preferences = preferences

        self.active_tab = Tab.CHANNEL
        self.state = ViewState.LOADING
        self.data: Optional[HashtagSummaryResponse] = None
        self.error: Optional[str] = None
        self.expanded_groups: set[str] = set()

        self.grouped = DEFAULT_PREFERENCE.grouped_view
        self.sort_config = DEFAULT_PREFERENCE.sort_config
        self.remember = False
        self._generation = 0

        stored = load_preference(preferences)
        if stored is not None:
            self.grouped = stored.grouped_view
            self.sort_config = stored.sort_config
            self.remember = True

    # -- Fetching --------------------------------------------------------------

    async def load(self) -> None:
        """Fetch hashtags for the active tab."""
        self._generation += 1
        generation = self._generation
        self.state = ViewState.LOADING
        self.error = None

        try:
            if self.active_tab is Tab.CHANNEL:
                logger.debug("Fetching channel hashtags: %s", self.channel_id)
                data = await self.client.fetch_hashtags(self.channel_id)
            else:
                if not self.team_id:
                    raise HashtagClientError("No team selected.")
                logger.debug("Fetching team hashtags: %s", self.team_id)
                data = await self.client.fetch_team_hashtags(self.team_id)
        except (HashtagClientError, asyncio.TimeoutError) as e:
            if generation != self._generation:
                return
            logger.error("Failed to fetch hashtags (%s): %s", self.active_tab.value, e)
            self.error = str(e) or "Failed to fetch hashtags"
            self.state = ViewState.ERROR
            return

        if generation != self._generation:
            logger.debug("Discarding stale hashtag response (generation %d)", generation)
            return
        self.data = data
        self.state = ViewState.SUCCESS

    async def select_tab(self, tab: Tab) -> None:
        tab = Tab(tab)
        if tab is self.active_tab:
            return
        self.active_tab = tab
        await self.load()

    async def set_scope(self, channel_id: str, team_id: Optional[str]) -> None:
        """Follow a channel/team switch; reloads once if either changed."""
        if channel_id == self.channel_id and team_id == self.team_id:
            return
        self.channel_id = channel_id
        self.team_id = team_id
        await self.load()

    # -- Interaction -----------------------------------------------------------

    def sort(self, key: SortKey) -> None:
        """Select a sort key; selecting the active key flips the order.

        In grouped view every group is expanded so the new order is visible.
        """
        self.sort_config = self.sort_config.toggled(key)
        if self.grouped and self.data is not None:
            self.expanded_groups = {g.prefix for g in self.data.groups}
        self._persist()

    def toggle_grouped(self) -> None:
        self.grouped = not self.grouped
        self._persist()

    def toggle_group(self, prefix: str) -> None:
        if prefix in self.expanded_groups:
            self.expanded_groups.discard(prefix)
        else:
            self.expanded_groups.add(prefix)

    def set_remember(self, remember: bool) -> None:
        """Checking persists the current settings; unchecking removes them."""
        self.remember = remember
        self._persist()

    async def select(self, tag: str) -> None:
        scope = self.channel_id if self.active_tab is Tab.CHANNEL else None
        logger.debug("Selecting tag %s (tab=%s, channel=%s)", tag, self.active_tab.value, scope)
        result = self.on_select(tag, scope)
        if inspect.isawaitable(result):
            await result

    @property
    def preference(self) -> UserSortPreference:
        return UserSortPreference(
            grouped_view=self.grouped,
            sort_by=self.sort_config.sort_by,
            sort_order=self.sort_config.sort_order,
            remember=self.remember,
        )

    @property
    def has_user_preferences(self) -> bool:
        """Whether the "remember these settings" option is offered."""
        return self.remember or not self.preference.is_default

    def _persist(self) -> None:
        if self.preferences is None:
            return
        if self.remember:
            self.preferences.write(self.preference.to_dict())
        else:
            self.preferences.clear()

    # -- Derived rows ----------------------------------------------------------

    def sorted_groups(self) -> list[tuple[HashtagGroup, list[HashtagSummary]]]:
        if self.data is None:
            return []
        return [
            (group, sort_hashtags(group.tags, self.sort_config))
            for group in sort_groups(self.data.groups, self.sort_config)
        ]

    def sorted_ungrouped(self) -> list[HashtagSummary]:
        if self.data is None:
            return []
        return sort_hashtags(self.data.ungrouped(), self.sort_config)

    def sorted_flat(self) -> list[HashtagSummary]:
        if self.data is None:
            return []
        return sort_hashtags(self.data.all_tags(), self.sort_config)

    # -- Rendering -------------------------------------------------------------

    def render(self) -> RenderNode:
        root = RenderNode(kind="hashtag_list", data={"state": self.state.value})
        if self.state is ViewState.ERROR:
            root.children.append(RenderNode(kind="error", text=f"Error: {self.error}"))
            return root
        if self.state is ViewState.LOADING or self.data is None:
            root.children.append(RenderNode(kind="text", text="Loading..."))
            return root

        root.children.append(self._render_tabs())
        root.children.append(self._render_sort_header())
        if self.has_user_preferences:
            root.children.append(
                RenderNode(
                    kind="checkbox",
                    text="Remember these settings",
                    active=self.remember,
                    action=lambda: self.set_remember(not self.remember),
                )
            )

        rows = RenderNode(kind="list")
        if self.grouped:
            for group, tags in self.sorted_groups():
                rows.children.append(self._render_group(group, tags))
            rows.children.extend(self._render_tag(t) for t in self.sorted_ungrouped())
        else:
            rows.children.extend(self._render_tag(t) for t in self.sorted_flat())
        root.children.append(rows)
        return root

    def _render_tabs(self) -> RenderNode:
        return RenderNode(
            kind="tabs",
            children=[
                RenderNode(
                    kind="tab",
                    text=TAB_LABELS[tab],
                    active=tab is self.active_tab,
                    action=lambda tab=tab: self.select_tab(tab),
                    data={"tab": tab.value},
                )
                for tab in Tab
            ],
        )

    def _render_sort_header(self) -> RenderNode:
        header = RenderNode(kind="sort_header")
        header.children.append(
            RenderNode(
                kind="button",
                text="Grouped" if self.grouped else "List View",
                active=self.grouped,
                action=self.toggle_grouped,
                data={"toggle": "grouped"},
            )
        )
        for key in SortKey:
            active = key is self.sort_config.sort_by
            indicator = ("▼" if self.sort_config.descending else "▲") if active else ""
            header.children.append(
                RenderNode(
                    kind="sort",
                    text=SORT_LABELS[key],
                    detail=indicator,
                    active=active,
                    action=lambda key=key: self.sort(key),
                    data={"key": key.value},
                )
            )
        return header

    def _render_group(self, group: HashtagGroup, tags: list[HashtagSummary]) -> RenderNode:
        expanded = group.prefix in self.expanded_groups
        return RenderNode(
            kind="group",
            text=group.prefix,
            detail=plural(len(group.tags), "tag"),
            active=expanded,
            action=lambda: self.toggle_group(group.prefix),
            data={"prefix": group.prefix},
            children=[self._render_tag(t) for t in tags] if expanded else [],
        )

    def _render_tag(self, tag: HashtagSummary) -> RenderNode:
        return RenderNode(
            kind="hashtag",
            text=f"#{tag.tag}",
            detail=plural(tag.count, "post"),
            action=lambda: self.select(tag.tag),
            data={"tag": tag.tag},
        )
