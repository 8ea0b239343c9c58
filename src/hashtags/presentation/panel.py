"""Right-hand sidebar panel

Switches between the hashtag list and the results for a selected tag.

    NO_CHANNEL -> LIST -> RESULTS -> LIST (back)
    any state  -> ERROR (render failure)

Channel and team identifiers are passed in by the host; the panel never
reads application-wide state.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional, Sequence

from hashtags import DEFAULT_PAGE_SIZE
from hashtags.client import HashtagClient
from hashtags.preferences import PreferenceStore
from hashtags.presentation.hashtag_list import HashtagListView
from hashtags.presentation.post_card import Navigator, PostRenderer
from hashtags.presentation.tag_results import TagResultsView
from hashtags.presentation.types import RenderNode

logger = logging.getLogger(__name__)

NO_CHANNEL_MESSAGE = "Please select a channel to view hashtags."


class PanelState(str, Enum):
    NO_CHANNEL = "no_channel"
    LIST = "list"
    RESULTS = "results"
    ERROR = "error"


class HashtagPanel:
    """Panel orchestrator holding the selected hashtag."""

    def __init__(
        self,
        client: HashtagClient,
        channel_id: Optional[str],
        team_id: Optional[str],
        team_name: str = "",
        preferences: Optional[PreferenceStore] = None,
        renderer: Optional[PostRenderer] = None,
        navigators: Sequence[Optional[Navigator]] = (),
        base_url: str = "",
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self.client = client
        self.channel_id = channel_id
        self.team_id = team_id
        self.team_name = team_name
        self.preferences = preferences
        self.renderer = renderer
        self.navigators = list(navigators)
        self.base_url = base_url
        self.page_size = page_size

        self.selected_tag: Optional[str] = None
        self.selected_channel_id: Optional[str] = None
        self.error: Optional[str] = None
        self.list_view: Optional[HashtagListView] = None
        self.results_view: Optional[TagResultsView] = None

    @property
    def state(self) -> PanelState:
        if self.error is not None:
            return PanelState.ERROR
        if not self.channel_id:
            return PanelState.NO_CHANNEL
        if self.selected_tag:
            return PanelState.RESULTS
        return PanelState.LIST

    def _ensure_list_view(self) -> HashtagListView:
        if self.list_view is None:
            self.list_view = HashtagListView(
                self.client,
                channel_id=self.channel_id,
                team_id=self.team_id,
                on_select=self.select_tag,
                preferences=self.preferences,
            )
        return self.list_view

    async def open(self) -> None:
        """Load whatever the current state shows."""
        state = self.state
        if state is PanelState.LIST:
            await self._ensure_list_view().load()
        elif state is PanelState.RESULTS and self.results_view is not None:
            await self.results_view.load()

    async def select_tag(self, tag: str, channel_id: Optional[str] = None) -> None:
        """Show posts for ``tag``; ``channel_id`` scopes the query when given."""
        if self.results_view is not None:
            self.results_view.close()
        self.selected_tag = tag
        self.selected_channel_id = channel_id
        self.results_view = TagResultsView(
            self.client,
            tag,
            on_back=self.back,
            channel_id=channel_id,
            renderer=self.renderer,
            team_name=self.team_name,
            navigators=self.navigators,
            base_url=self.base_url,
            page_size=self.page_size,
        )
        await self.results_view.load()

    async def back(self) -> None:
        """Return to the list, clearing the tag and its channel scope."""
        if self.results_view is not None:
            self.results_view.close()
        self.results_view = None
        self.selected_tag = None
        self.selected_channel_id = None
        if self.state is PanelState.LIST:
            await self._ensure_list_view().load()

    async def set_context(
        self,
        channel_id: Optional[str],
        team_id: Optional[str],
        team_name: Optional[str] = None,
    ) -> None:
        """Follow the host's current channel and team."""
        if team_name is not None:
            self.team_name = team_name
        self.channel_id = channel_id
        self.team_id = team_id
        if not channel_id:
            return

        if self.list_view is None:
            if self.state is PanelState.LIST:
                await self._ensure_list_view().load()
            return

        if self.state is PanelState.LIST:
            await self.list_view.set_scope(channel_id, team_id)
        else:
            # results stay on screen; the list picks the change up on back()
            self.list_view.channel_id = channel_id
            self.list_view.team_id = team_id

    def render(self) -> RenderNode:
        """Render the current state; any failure becomes an error banner."""
        try:
            return self._render()
        except Exception as e:
            logger.exception("Hashtag panel render failed")
            self.error = str(e) or "An unexpected error occurred"
            return self._render_error()

    def _render(self) -> RenderNode:
        state = self.state
        if state is PanelState.ERROR:
            return self._render_error()
        if state is PanelState.NO_CHANNEL:
            return RenderNode(
                kind="panel",
                data={"state": state.value},
                children=[RenderNode(kind="warning", text=NO_CHANNEL_MESSAGE)],
            )
        if state is PanelState.RESULTS and self.results_view is not None:
            body = self.results_view.render()
        else:
            body = self._ensure_list_view().render()
        return RenderNode(kind="panel", data={"state": state.value}, children=[body])

    def _render_error(self) -> RenderNode:
        return RenderNode(
            kind="panel",
            data={"state": PanelState.ERROR.value},
            children=[RenderNode(kind="error", text=self.error or "")],
        )
