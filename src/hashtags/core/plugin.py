"""Plugin base class and metadata.

A plugin describes itself with PluginMeta, owns its resources between
``on_load()`` and ``on_unload()``, and contributes UI surfaces to the
host application through ``initialize(registry, store)``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from hashtags.core.registry import PluginRegistry, Store


@dataclass(frozen=True)
class PluginMeta:
    """Immutable plugin identity.

    ``id`` is the host-facing identifier used in URL paths
    (``/plugins/<id>/...``).
    """

    id: str
    name: str
    version: str
    description: str = ""


class Plugin(ABC):
    """Base class for host plugins.

    Subclasses must:
      - Set ``meta`` as a class attribute.
      - Implement ``initialize()`` to register their UI surfaces.
      - Optionally override ``on_load()``/``on_unload()`` to manage
        resources and ``uninitialize()`` to hide what they registered.
    """

    meta: PluginMeta

    async def on_load(self, config: dict[str, Any]) -> None:
        """Called before ``initialize()`` with the plugin's settings."""

    async def on_unload(self) -> None:
        """Called after ``uninitialize()`` to release resources."""

    @abstractmethod
    def initialize(self, registry: "PluginRegistry", store: "Store") -> bool:
        """Register UI surfaces. Returns False when registration failed."""

    def uninitialize(self) -> None:
        """Undo what ``initialize()`` made visible. Default: nothing."""
