"""Pytest 설정"""

import os
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

# 테스트 환경 변수 설정 (config 모듈 로드 전에)
os.environ.setdefault("HASHTAGS_BASE_URL", "http://chat.test")
os.environ.setdefault("HASHTAGS_PLUGIN_ID", "com.ecf.hashtags")

# src 경로 추가
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from hashtags.models import (  # noqa: E402
    HashtagGroup,
    HashtagSummary,
    HashtagSummaryResponse,
    PaginatedPostResponse,
    PostSummary,
)


def make_summary() -> HashtagSummaryResponse:
    """release-* 그룹 하나와 그룹 밖 태그 두 개"""
    r1 = HashtagSummary(tag="release-1", count=4, last_used=100)
    r2 = HashtagSummary(tag="release-2", count=1, last_used=300)
    bug = HashtagSummary(tag="bug", count=9, last_used=200)
    idea = HashtagSummary(tag="idea", count=2)
    return HashtagSummaryResponse(
        hashtags=(bug, r1, idea, r2),
        groups=(HashtagGroup(prefix="release", tags=(r1, r2)),),
    )


def make_posts(count: int, start: int = 0) -> tuple[PostSummary, ...]:
    return tuple(
        PostSummary(
            id=f"post{i}",
            message=f"message {i} #release",
            create_at=1700000000000 + i,
            username=f"user{i}",
            user_id=f"u{i}",
            channel_id="chan1",
            channel_display_name="Town Square",
        )
        for i in range(start, start + count)
    )


def make_page(
    total: int, page: int = 1, per_page: int = 20
) -> PaginatedPostResponse:
    start = (page - 1) * per_page
    shown = max(min(per_page, total - start), 0)
    return PaginatedPostResponse(
        posts=make_posts(shown, start),
        total_count=total,
        has_more=start + shown < total,
        page=page,
        per_page=per_page,
    )


@pytest.fixture()
def fake_client():
    """HashtagClient 대역 (fetch_* 는 AsyncMock)"""
    client = MagicMock()
    client.fetch_hashtags = AsyncMock(return_value=make_summary())
    client.fetch_team_hashtags = AsyncMock(return_value=make_summary())
    client.fetch_hashtag_posts = AsyncMock(return_value=make_page(3))
    return client
