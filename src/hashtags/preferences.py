"""Persisted hashtag list preferences

The list view reads, writes and clears a single named entry through a
``PreferenceStore``. Storage is synchronous and unlocked; concurrent
writers overwrite each other.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Protocol

from hashtags.sorting import SortConfig, SortKey, SortOrder

logger = logging.getLogger(__name__)

PREFERENCES_KEY = "hashtag-list-preferences"


class PreferenceStore(Protocol):
    """Read/write/clear capability for the stored preference object"""

    def read(self) -> Optional[dict[str, Any]]: ...

    def write(self, data: dict[str, Any]) -> None: ...

    def clear(self) -> None: ...


@dataclass(frozen=True)
class UserSortPreference:
    """Grouping and sort choice a user asked to remember"""

    grouped_view: bool = False
    sort_by: SortKey = SortKey.TIME
    sort_order: SortOrder = SortOrder.DESC
    remember: bool = False

    @property
    def sort_config(self) -> SortConfig:
        return SortConfig(self.sort_by, self.sort_order)

    @property
    def is_default(self) -> bool:
        return (
            self.grouped_view == DEFAULT_PREFERENCE.grouped_view
            and self.sort_by == DEFAULT_PREFERENCE.sort_by
            and self.sort_order == DEFAULT_PREFERENCE.sort_order
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserSortPreference":
        """Build from the stored object; unknown values fall back to defaults"""
        try:
            sort_by = SortKey(data.get("sortBy", DEFAULT_PREFERENCE.sort_by))
        except ValueError:
            sort_by = DEFAULT_PREFERENCE.sort_by
        try:
            sort_order = SortOrder(data.get("sortOrder", DEFAULT_PREFERENCE.sort_order))
        except ValueError:
            sort_order = DEFAULT_PREFERENCE.sort_order
        grouped = data.get("showGrouped")
        return cls(
            grouped_view=grouped if isinstance(grouped, bool) else DEFAULT_PREFERENCE.grouped_view,
            sort_by=sort_by,
            sort_order=sort_order,
            remember=bool(data.get("remember", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "showGrouped": self.grouped_view,
            "sortBy": self.sort_by.value,
            "sortOrder": self.sort_order.value,
            "remember": self.remember,
        }


DEFAULT_PREFERENCE = UserSortPreference()


class MemoryPreferenceStore:
    """Process-local store"""

    def __init__(self, initial: Optional[dict[str, Any]] = None):
        self._data = dict(initial) if initial is not None else None

    def read(self) -> Optional[dict[str, Any]]:
        return dict(self._data) if self._data is not None else None

    def write(self, data: dict[str, Any]) -> None:
        self._data = dict(data)

    def clear(self) -> None:
        self._data = None


class JsonFilePreferenceStore:
    """Stores the preference object as a JSON file in a directory"""

    def __init__(self, directory: str, key: str = PREFERENCES_KEY):
        """
        Args:
            directory: 파일을 저장할 디렉토리 경로
            key: 저장 항목 이름 (파일명)
        """
        self.directory = directory
        self.key = key

    @property
    def path(self) -> str:
        return os.path.join(self.directory, f"{self.key}.json")

    def read(self) -> Optional[dict[str, Any]]:
        if not os.path.exists(self.path):
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to read preferences {self.path}: {e}")
            return None
        return data if isinstance(data, dict) else None

    def write(self, data: dict[str, Any]) -> None:
        try:
            Path(self.directory).mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
        except OSError as e:
            logger.error(f"Failed to save preferences {self.path}: {e}")

    def clear(self) -> None:
        try:
            if os.path.exists(self.path):
                os.remove(self.path)
        except OSError as e:
            logger.error(f"Failed to remove preferences {self.path}: {e}")


def load_preference(store: Optional[PreferenceStore]) -> Optional[UserSortPreference]:
    """Stored preference, only when the user asked to remember it"""
    if store is None:
        return None
    data = store.read()
    if not data or not data.get("remember"):
        return None
    return UserSortPreference.from_dict(data)
