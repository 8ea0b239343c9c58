"""Client-side ordering of hashtags and hashtag groups.

All sorts are stable. Descending order keeps the input order among ties,
matching an ascending sort of the reversed comparison.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Iterable, Union

from pyuca import Collator

from hashtags.models import HashtagGroup, HashtagSummary


class SortKey(str, Enum):
    TIME = "time"
    COUNT = "count"
    NAME = "name"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"

    def flipped(self) -> "SortOrder":
        return SortOrder.ASC if self is SortOrder.DESC else SortOrder.DESC


@dataclass(frozen=True)
class SortConfig:
    """Active sort key and direction."""

    sort_by: SortKey = SortKey.TIME
    sort_order: SortOrder = SortOrder.DESC

    def toggled(self, key: SortKey) -> "SortConfig":
        """Same key flips the order; a new key starts descending."""
        key = SortKey(key)
        if key == self.sort_by:
            return SortConfig(key, self.sort_order.flipped())
        return SortConfig(key, SortOrder.DESC)

    @property
    def descending(self) -> bool:
        return self.sort_order is SortOrder.DESC


@lru_cache(maxsize=1)
def _collator() -> Collator:
    # DUCET 테이블 로드는 한 번만
    return Collator()


def _name_key(text: str) -> tuple:
    """Unicode collation key: case and accents only break ties."""
    return _collator().sort_key(text)


def _tag_key(tag: HashtagSummary, key: SortKey) -> Union[int, tuple]:
    if key is SortKey.TIME:
        return tag.last_used or 0
    if key is SortKey.COUNT:
        return tag.count
    return _name_key(tag.tag)


def sort_hashtags(
    tags: Iterable[HashtagSummary], config: SortConfig
) -> list[HashtagSummary]:
    return sorted(
        tags,
        key=lambda t: _tag_key(t, config.sort_by),
        reverse=config.descending,
    )


def group_metric(group: HashtagGroup, key: SortKey) -> Union[int, str]:
    """Aggregate used to order groups.

    time: most recent ``last_used`` among members (missing counts as 0).
    count: total usage of all members.
    name: the group prefix.
    """
    key = SortKey(key)
    if key is SortKey.TIME:
        return max((t.last_used or 0 for t in group.tags), default=0)
    if key is SortKey.COUNT:
        return sum(t.count for t in group.tags)
    return group.prefix


def sort_groups(
    groups: Iterable[HashtagGroup], config: SortConfig
) -> list[HashtagGroup]:
    def sort_key(group: HashtagGroup) -> Union[int, tuple]:
        metric = group_metric(group, config.sort_by)
        if config.sort_by is SortKey.NAME:
            return _name_key(metric)
        return metric

    return sorted(groups, key=sort_key, reverse=config.descending)
