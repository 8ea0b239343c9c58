"""Tag results view

Lists the posts referencing one hashtag, optionally scoped to a channel.

State machine: LOADING -> SUCCESS | EMPTY | ERROR, re-entered when the
tag, the channel scope or the page window changes. Responses that arrive
after ``close()`` or after a newer load started are discarded.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Callable, Optional, Sequence

from hashtags import DEFAULT_PAGE_SIZE, PAGE_SIZE_OPTIONS
from hashtags.client import HashtagClient, HashtagClientError
from hashtags.models import PaginatedPostResponse, PostSummary
from hashtags.presentation.post_card import FallbackPostRenderer, Navigator, PostRenderer
from hashtags.presentation.types import RenderNode, ViewState

logger = logging.getLogger(__name__)


def _validate_page_size(page_size: int) -> int:
    if page_size not in PAGE_SIZE_OPTIONS:
        raise ValueError(
            f"Unsupported page size {page_size}, expected one of {PAGE_SIZE_OPTIONS}"
        )
    return page_size


class TagResultsView:
    """View model for the posts of a selected hashtag.

    ``renderer`` is the host's post renderer. Without one, posts are drawn
    by ``FallbackPostRenderer`` using ``team_name``, ``navigators`` and
    ``base_url`` for the "View Post" action.
    """

    def __init__(
        self,
        client: HashtagClient,
        tag: str,
        on_back: Callable[[], Any],
        channel_id: Optional[str] = None,
        renderer: Optional[PostRenderer] = None,
        team_name: str = "",
        navigators: Sequence[Optional[Navigator]] = (),
        base_url: str = "",
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self.client = client
        self.tag = tag
        self.on_back = on_back
        self.channel_id = channel_id
        self.renderer = renderer or FallbackPostRenderer(
            team_name=team_name, navigators=navigators, base_url=base_url
        )

        self.page = 1
        self.per_page = _validate_page_size(page_size)
        self.result: Optional[PaginatedPostResponse] = None
        self.posts: list[PostSummary] = []
        self.state = ViewState.LOADING
        self.error: Optional[str] = None

        self.mounted = True
        self._generation = 0
        # (page, per_page) of the posts currently shown
        self._shown_window: Optional[tuple[int, int]] = None

    # -- Fetching --------------------------------------------------------------

    def _is_current(self, generation: int) -> bool:
        return self.mounted and generation == self._generation

    async def load(self) -> None:
        if not self.mounted:
            return
        self._generation += 1
        generation = self._generation
        self.state = ViewState.LOADING
        self.error = None
        logger.debug(
            "Fetching posts for tag %s (channel=%s, page=%d, per_page=%d)",
            self.tag, self.channel_id, self.page, self.per_page,
        )

        try:
            result = await self.client.fetch_hashtag_posts(
                self.tag,
                channel_id=self.channel_id,
                page=self.page,
                per_page=self.per_page,
            )
        except (HashtagClientError, asyncio.TimeoutError) as e:
            if not self._is_current(generation):
                return
            logger.error("Failed to fetch posts for tag %s: %s", self.tag, e)
            # previously loaded posts stay visible next to the error, and the
            # page window goes back to the one they belong to
            if self._shown_window is not None:
                self.page, self.per_page = self._shown_window
            self.error = str(e) or "Failed to fetch posts"
            self.state = ViewState.ERROR
            return

        if not self._is_current(generation):
            logger.debug("Discarding stale posts response for tag %s", self.tag)
            return

        self.result = result
        self.posts = list(result.posts)
        self._shown_window = (self.page, self.per_page)
        self.state = ViewState.SUCCESS if self.posts else ViewState.EMPTY

    def close(self) -> None:
        """Mark the view unmounted; in-flight results are dropped."""
        self.mounted = False

    async def set_tag(self, tag: str) -> None:
        if tag == self.tag:
            return
        self.tag = tag
        self.page = 1
        self._shown_window = None
        await self.load()

    async def set_channel(self, channel_id: Optional[str]) -> None:
        if channel_id == self.channel_id:
            return
        self.channel_id = channel_id
        self.page = 1
        self._shown_window = None
        await self.load()

    # -- Pagination ------------------------------------------------------------

    @property
    def paginated(self) -> bool:
        """Pagination controls exist only for the paginated response revision."""
        return self.result is not None and not self.result.legacy

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.result is not None and self.result.has_next

    @property
    def range_label(self) -> str:
        return self.result.range_label if self.result is not None else ""

    async def next_page(self) -> None:
        if not self.has_next:
            return
        self.page += 1
        await self.load()

    async def previous_page(self) -> None:
        if not self.has_previous:
            return
        self.page -= 1
        await self.load()

    async def set_page_size(self, page_size: int) -> None:
        self.per_page = _validate_page_size(page_size)
        self.page = 1
        await self.load()

    # -- Navigation ------------------------------------------------------------

    async def back(self) -> None:
        self.close()
        result = self.on_back()
        if inspect.isawaitable(result):
            await result

    @property
    def empty_message(self) -> str:
        message = f"No messages found with #{self.tag}"
        if self.channel_id:
            message += " in this channel"
        return message

    # -- Rendering -------------------------------------------------------------

    def render(self) -> RenderNode:
        root = RenderNode(
            kind="tag_results",
            data={"state": self.state.value, "tag": self.tag},
        )
        root.children.append(
            RenderNode(
                kind="header",
                children=[
                    RenderNode(kind="button", text="Back", action=self.back),
                    RenderNode(kind="title", text=f"#{self.tag}"),
                ],
            )
        )

        if self.error:
            root.children.append(RenderNode(kind="error", text=f"Error: {self.error}"))

        if self.state is ViewState.LOADING:
            root.children.append(RenderNode(kind="text", text="Loading posts..."))
            return root
        if self.state is ViewState.EMPTY:
            root.children.append(RenderNode(kind="text", text=self.empty_message))
            return root
        if not self.posts:
            return root

        root.children.append(
            RenderNode(
                kind="posts",
                children=[self.renderer.render(post, self.tag) for post in self.posts],
            )
        )
        if self.paginated:
            root.children.append(self._render_pagination())
        return root

    def _render_pagination(self) -> RenderNode:
        return RenderNode(
            kind="pagination",
            text="Showing",
            detail=self.range_label,
            children=[
                RenderNode(
                    kind="button",
                    text="Previous",
                    disabled=not self.has_previous,
                    action=self.previous_page,
                ),
                RenderNode(
                    kind="button",
                    text="Next",
                    disabled=not self.has_next,
                    action=self.next_page,
                ),
                RenderNode(
                    kind="page_size",
                    text="Per page",
                    detail=str(self.per_page),
                    children=[
                        RenderNode(
                            kind="option",
                            text=str(size),
                            active=size == self.per_page,
                            action=lambda size=size: self.set_page_size(size),
                        )
                        for size in PAGE_SIZE_OPTIONS
                    ],
                ),
            ],
        )
