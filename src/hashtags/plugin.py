"""Hashtags plugin bootstrap.

Registers the hashtag panel as a right-hand sidebar component and a
channel header button that opens it. All settings come from the dict
passed to ``on_load()`` (environment defaults, optionally overridden by a
YAML file), not from the Config singleton.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from hashtags import DEFAULT_PAGE_SIZE, PAGE_SIZE_OPTIONS, PLUGIN_ID, __version__
from hashtags.client import HashtagClient
from hashtags.core.plugin import Plugin, PluginMeta
from hashtags.core.registry import PluginRegistry, Store
from hashtags.preferences import (
    JsonFilePreferenceStore,
    MemoryPreferenceStore,
    PreferenceStore,
)
from hashtags.presentation.panel import HashtagPanel
from hashtags.presentation.post_card import Navigator, PostRenderer
from hashtags.presentation.types import RenderNode

logger = logging.getLogger(__name__)

RHS_TITLE = "Hashtags"
HEADER_TOOLTIP = "View Hashtags"
HEADER_DESCRIPTION = "Open hashtag browser for this channel"
HEADER_ICON = RenderNode(
    kind="icon",
    data={"class_name": "icon fa fa-hashtag", "style": {"fontSize": "15px"}},
)


class HashtagsPlugin(Plugin):
    """Hashtag browser plugin.

    The registered sidebar component is ``create_panel``: the host calls it
    with the current channel and team to obtain a panel.
    """

    meta = PluginMeta(
        id=PLUGIN_ID,
        name="hashtags",
        version=__version__,
        description="Browse hashtags used in a channel or team",
    )

    def __init__(self) -> None:
        self._config: dict[str, Any] = {}
        self._client: Optional[HashtagClient] = None
        self._preferences: Optional[PreferenceStore] = None
        self._hide_rhs = None

    async def on_load(self, config: dict[str, Any]) -> None:
        page_size = config.get("page_size")
        if page_size is not None and page_size not in PAGE_SIZE_OPTIONS:
            raise ValueError(
                f"Unsupported page_size {page_size!r}, expected one of {PAGE_SIZE_OPTIONS}"
            )

        self._config = config
        self._client = HashtagClient(
            base_url=config["base_url"],
            plugin_id=config.get("plugin_id") or PLUGIN_ID,
            token=config.get("token") or "",
            timeout=config.get("http_timeout"),
        )

        preferences_path = config.get("preferences_path")
        if preferences_path:
            self._preferences = JsonFilePreferenceStore(preferences_path)
        else:
            self._preferences = MemoryPreferenceStore()

        logger.info(
            "HashtagsPlugin loaded: base_url=%s, plugin_id=%s",
            config["base_url"],
            self._client.plugin_id,
        )

    async def on_unload(self) -> None:
        if self._client is not None:
            await self._client.close()
            logger.info("HashtagsPlugin: client closed")

    @property
    def client(self) -> Optional[HashtagClient]:
        return self._client

    def create_panel(
        self,
        channel_id: Optional[str],
        team_id: Optional[str],
        team_name: Optional[str] = None,
        renderer: Optional[PostRenderer] = None,
        navigators: Sequence[Optional[Navigator]] = (),
    ) -> HashtagPanel:
        if self._client is None:
            raise RuntimeError("HashtagsPlugin.create_panel() called before on_load()")
        return HashtagPanel(
            self._client,
            channel_id=channel_id,
            team_id=team_id,
            team_name=team_name if team_name is not None else self._config.get("team_name", ""),
            preferences=self._preferences,
            renderer=renderer,
            navigators=navigators,
            base_url=self._config["base_url"],
            page_size=self._config.get("page_size") or DEFAULT_PAGE_SIZE,
        )

    def initialize(self, registry: PluginRegistry, store: Store) -> bool:
        try:
            logger.info("Hashtags plugin initializing...")

            rhs = registry.register_right_hand_sidebar_component(
                self.create_panel, RHS_TITLE
            )
            show_action = getattr(rhs, "show_rhs_plugin", None)
            if not show_action:
                raise RuntimeError("Failed to register RHS component")

            hide_action = rhs.hide_rhs_plugin
            self._hide_rhs = lambda: store.dispatch(hide_action)

            registry.register_channel_header_button_action(
                HEADER_ICON,
                lambda: store.dispatch(show_action),
                HEADER_TOOLTIP,
                HEADER_DESCRIPTION,
            )

            logger.info("Hashtags plugin initialized successfully")
            return True
        except Exception:
            logger.exception("Error initializing hashtags plugin")
            return False

    def uninitialize(self) -> None:
        if self._hide_rhs is not None:
            self._hide_rhs()
            self._hide_rhs = None
