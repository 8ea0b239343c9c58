"""Data transfer shapes exchanged with the hashtags server plugin.

Every type here is a read-only projection of server JSON. Parsing is
strict about structure (objects must be objects, lists must be lists)
and lenient about optional fields.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


class MalformedResponseError(ValueError):
    """Server payload does not have the expected shape."""


def _require_dict(data: Any, what: str) -> dict:
    if not isinstance(data, dict):
        raise MalformedResponseError(
            f"Expected object for {what}, got {type(data).__name__}"
        )
    return data


def _list_or_empty(data: dict, key: str, what: str) -> list:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise MalformedResponseError(
            f"Expected array for {what}.{key}, got {type(value).__name__}"
        )
    return value


def _optional_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class HashtagSummary:
    """One hashtag with its usage count in the requested scope."""

    tag: str
    count: int = 0
    last_used: Optional[int] = None
    create_at: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Any) -> "HashtagSummary":
        data = _require_dict(data, "hashtag")
        if not data.get("tag"):
            raise MalformedResponseError(f"Hashtag entry without tag: {data}")
        return cls(
            tag=str(data["tag"]),
            count=max(_optional_int(data.get("count")) or 0, 0),
            last_used=_optional_int(data.get("lastUsed")) or None,
            create_at=_optional_int(data.get("createAt")) or None,
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"tag": self.tag, "count": self.count}
        if self.last_used is not None:
            result["lastUsed"] = self.last_used
        if self.create_at is not None:
            result["createAt"] = self.create_at
        return result


@dataclass(frozen=True)
class HashtagGroup:
    """Hashtags sharing a prefix, as grouped by the server."""

    prefix: str
    tags: tuple[HashtagSummary, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> "HashtagGroup":
        data = _require_dict(data, "group")
        return cls(
            prefix=str(data.get("prefix", "")),
            tags=tuple(
                HashtagSummary.from_dict(t)
                for t in _list_or_empty(data, "tags", "group")
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"prefix": self.prefix, "tags": [t.to_dict() for t in self.tags]}


@dataclass(frozen=True)
class HashtagSummaryResponse:
    """Hashtags for a channel or team.

    ``hashtags`` holds every tag, grouped ones included. A tag is
    "ungrouped" when no group lists an entry with the same tag value.
    """

    hashtags: tuple[HashtagSummary, ...] = ()
    groups: tuple[HashtagGroup, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> "HashtagSummaryResponse":
        data = _require_dict(data, "hashtag response")
        return cls(
            hashtags=tuple(
                HashtagSummary.from_dict(h)
                for h in _list_or_empty(data, "hashtags", "hashtag response")
            ),
            groups=tuple(
                HashtagGroup.from_dict(g)
                for g in _list_or_empty(data, "groups", "hashtag response")
            ),
        )

    def grouped_tag_names(self) -> set[str]:
        return {t.tag for g in self.groups for t in g.tags}

    def ungrouped(self) -> list[HashtagSummary]:
        grouped = self.grouped_tag_names()
        return [h for h in self.hashtags if h.tag not in grouped]

    def all_tags(self) -> list[HashtagSummary]:
        """Grouped tags followed by the ungrouped remainder."""
        grouped = [t for g in self.groups for t in g.tags]
        return grouped + self.ungrouped()

    def to_dict(self) -> dict[str, Any]:
        return {
            "hashtags": [h.to_dict() for h in self.hashtags],
            "groups": [g.to_dict() for g in self.groups],
        }


@dataclass(frozen=True)
class PostSummary:
    """Read-only projection of a chat post referencing a hashtag."""

    id: str
    message: str = ""
    create_at: int = 0
    username: str = ""
    user_id: str = ""
    channel_id: str = ""
    channel_name: str = ""
    channel_display_name: str = ""
    team_id: str = ""
    embeds: tuple = ()
    reactions: tuple = ()
    files: tuple = ()

    @classmethod
    def from_dict(cls, data: Any) -> "PostSummary":
        data = _require_dict(data, "post")
        if not data.get("id"):
            raise MalformedResponseError(f"Post entry without id: {data}")
        metadata = data.get("metadata") or {}
        if not isinstance(metadata, dict):
            metadata = {}
        return cls(
            id=str(data["id"]),
            message=data.get("message") or "",
            create_at=_optional_int(data.get("create_at")) or 0,
            username=data.get("username") or "",
            user_id=data.get("user_id") or "",
            channel_id=data.get("channel_id") or "",
            channel_name=data.get("channel_name") or "",
            channel_display_name=data.get("channel_display_name") or "",
            team_id=data.get("team_id") or "",
            embeds=tuple(metadata.get("embeds") or ()),
            reactions=tuple(metadata.get("reactions") or ()),
            files=tuple(metadata.get("files") or ()),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "message": self.message,
            "create_at": self.create_at,
            "username": self.username,
            "user_id": self.user_id,
            "channel_id": self.channel_id,
            "channel_name": self.channel_name,
            "channel_display_name": self.channel_display_name,
            "team_id": self.team_id,
        }


@dataclass(frozen=True)
class PaginatedPostResponse:
    """One page of posts plus the total count.

    ``has_more`` is trusted from the server. ``legacy`` marks a page
    adapted from the old flat-array response, which carries no
    pagination information.
    """

    posts: tuple[PostSummary, ...] = ()
    total_count: int = 0
    has_more: bool = False
    page: int = 1
    per_page: int = 0
    legacy: bool = field(default=False, compare=False)

    @classmethod
    def from_dict(
        cls, data: Any, page: int = 1, per_page: int = 0
    ) -> "PaginatedPostResponse":
        data = _require_dict(data, "post page")
        posts = tuple(
            PostSummary.from_dict(p)
            for p in _list_or_empty(data, "posts", "post page")
        )
        total = _optional_int(data.get("totalCount", data.get("total_count")))
        has_more = data.get("hasMore", data.get("has_more", False))
        return cls(
            posts=posts,
            total_count=total if total is not None else len(posts),
            has_more=bool(has_more),
            page=max(page, 1),
            per_page=per_page or len(posts),
        )

    @property
    def range_start(self) -> int:
        start = (self.page - 1) * self.per_page + 1
        # 0 when the page holds nothing (no results, or a page past the end)
        return start if start <= self.total_count else 0

    @property
    def range_end(self) -> int:
        if self.range_start == 0:
            return 0
        return min(self.page * self.per_page, self.total_count)

    @property
    def range_label(self) -> str:
        """Displayed window, e.g. ``41-45 of 45``."""
        return f"{self.range_start}-{self.range_end} of {self.total_count}"

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.has_more

    def to_dict(self) -> dict[str, Any]:
        return {
            "posts": [p.to_dict() for p in self.posts],
            "totalCount": self.total_count,
            "hasMore": self.has_more,
        }


def adapt_legacy_posts(data: Any) -> PaginatedPostResponse:
    """Wrap the deprecated flat post array as a single complete page."""
    if not isinstance(data, list):
        raise MalformedResponseError(
            f"Expected array of posts, got {type(data).__name__}"
        )
    posts = tuple(PostSummary.from_dict(p) for p in data)
    return PaginatedPostResponse(
        posts=posts,
        total_count=len(posts),
        has_more=False,
        page=1,
        per_page=len(posts),
        legacy=True,
    )


def parse_post_response(
    data: Any, page: int = 1, per_page: int = 0
) -> PaginatedPostResponse:
    """Parse either posts response revision into the paginated envelope."""
    if data is None:
        raise MalformedResponseError("Empty posts response")
    if isinstance(data, list):
        return adapt_legacy_posts(data)
    return PaginatedPostResponse.from_dict(data, page=page, per_page=per_page)
