"""Host extension points consumed by plugins.

The host application exposes a registry for UI surfaces and a store that
accepts actions. ``LocalPluginRegistry`` and ``LocalStore`` implement both
in-process for the CLI and for tests.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Protocol

logger = logging.getLogger(__name__)

SHOW_RHS_PLUGIN = "SHOW_RHS_PLUGIN"
HIDE_RHS_PLUGIN = "HIDE_RHS_PLUGIN"


@dataclass(frozen=True)
class RhsRegistration:
    """Actions returned by a sidebar registration, to be dispatched on the store."""

    show_rhs_plugin: Any
    hide_rhs_plugin: Any


@dataclass
class HeaderButton:
    icon: Any
    action: Callable[[], Any]
    tooltip_text: str
    description: str = ""


class PluginRegistry(Protocol):
    def register_right_hand_sidebar_component(
        self, component: Any, title: str
    ) -> Optional[RhsRegistration]: ...

    def register_channel_header_button_action(
        self,
        icon: Any,
        action: Callable[[], Any],
        tooltip_text: str,
        description: str = "",
    ) -> None: ...


class Store(Protocol):
    def dispatch(self, action: Any) -> Any: ...


class LocalPluginRegistry:
    """In-process registry keeping what plugins registered."""

    def __init__(self) -> None:
        self.components: dict[str, Any] = {}
        self.header_buttons: list[HeaderButton] = []

    def register_right_hand_sidebar_component(
        self, component: Any, title: str
    ) -> RhsRegistration:
        self.components[title] = component
        logger.debug("Registered sidebar component: %s", title)
        return RhsRegistration(
            show_rhs_plugin={"type": SHOW_RHS_PLUGIN, "title": title},
            hide_rhs_plugin={"type": HIDE_RHS_PLUGIN, "title": title},
        )

    def register_channel_header_button_action(
        self,
        icon: Any,
        action: Callable[[], Any],
        tooltip_text: str,
        description: str = "",
    ) -> None:
        self.header_buttons.append(
            HeaderButton(
                icon=icon,
                action=action,
                tooltip_text=tooltip_text,
                description=description,
            )
        )
        logger.debug("Registered channel header button: %s", tooltip_text)


@dataclass
class LocalStore:
    """Action sink tracking which sidebar component is open."""

    actions: list[Any] = field(default_factory=list)
    open_rhs: Optional[str] = None

    def dispatch(self, action: Any) -> Any:
        self.actions.append(action)
        if isinstance(action, dict):
            if action.get("type") == SHOW_RHS_PLUGIN:
                self.open_rhs = action.get("title")
            elif action.get("type") == HIDE_RHS_PLUGIN and self.open_rhs == action.get("title"):
                self.open_rhs = None
        return action
