"""HashtagClient 테스트

mock aiohttp 세션으로 URL 구성, 쿼리 파라미터, 오류 매핑을 검증합니다.
"""

import json

import aiohttp
import pytest
from unittest.mock import AsyncMock, MagicMock

from hashtags.client import (
    HashtagApiError,
    HashtagClient,
    HashtagClientError,
    HashtagConnectionError,
    HashtagResponseError,
)


# === 헬퍼 ===

class MockAsyncContextManager:
    """aiohttp의 async with session.get() 패턴을 mock하기 위한 컨텍스트 매니저"""
    def __init__(self, response):
        self.response = response

    async def __aenter__(self):
        return self.response

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return False


def _mock_session(response, method="get"):
    """mock aiohttp 세션 생성"""
    session = MagicMock()
    session.closed = False
    ctx = MockAsyncContextManager(response)
    getattr(session, method).return_value = ctx
    return session


def _mock_response(status=200, body=None, text=None):
    response = MagicMock()
    response.status = status
    if text is None:
        text = json.dumps(body)
    response.text = AsyncMock(return_value=text)
    return response


def _client_with(response) -> HashtagClient:
    client = HashtagClient(base_url="http://chat.test/")
    client._session = _mock_session(response)
    return client


SUMMARY_BODY = {
    "hashtags": [{"tag": "release-1", "count": 2, "lastUsed": 10}],
    "groups": [{"prefix": "release", "tags": [{"tag": "release-1", "count": 2}]}],
}


class TestClientSetup:
    def test_api_base(self):
        client = HashtagClient(base_url="http://chat.test/", plugin_id="my.plugin")
        assert client.api_base == "http://chat.test/plugins/my.plugin/api"

    def test_default_plugin_id(self):
        client = HashtagClient(base_url="http://chat.test")
        assert client.plugin_id == "com.ecf.hashtags"

    def test_headers_without_token(self):
        headers = HashtagClient(base_url="http://chat.test")._build_headers()
        assert headers["X-Requested-With"] == "XMLHttpRequest"
        assert "Authorization" not in headers

    def test_headers_with_token(self):
        headers = HashtagClient(base_url="http://chat.test", token="abc")._build_headers()
        assert headers["Authorization"] == "Bearer abc"

    async def test_close(self):
        client = HashtagClient(base_url="http://chat.test")
        session = MagicMock()
        session.closed = False
        session.close = AsyncMock()
        client._session = session

        await client.close()

        session.close.assert_awaited_once()
        assert client._session is None

    async def test_context_manager_closes(self):
        session = MagicMock()
        session.closed = False
        session.close = AsyncMock()
        async with HashtagClient(base_url="http://chat.test") as client:
            client._session = session
        session.close.assert_awaited_once()


class TestFetchHashtags:
    async def test_channel_hashtags(self):
        client = _client_with(_mock_response(body=SUMMARY_BODY))

        result = await client.fetch_hashtags("chan1")

        client._session.get.assert_called_once_with(
            "http://chat.test/plugins/com.ecf.hashtags/api/hashtags",
            params={"channel_id": "chan1"},
        )
        assert result.hashtags[0].tag == "release-1"
        assert result.groups[0].prefix == "release"

    async def test_team_hashtags(self):
        client = _client_with(_mock_response(body=SUMMARY_BODY))

        await client.fetch_team_hashtags("team1")

        client._session.get.assert_called_once_with(
            "http://chat.test/plugins/com.ecf.hashtags/api/team_hashtags",
            params={"team_id": "team1"},
        )

    async def test_api_error_carries_body_text(self):
        client = _client_with(_mock_response(status=500, text="Failed to get hashtags"))

        with pytest.raises(HashtagApiError) as exc_info:
            await client.fetch_hashtags("chan1")

        assert str(exc_info.value) == "Failed to get hashtags"
        assert exc_info.value.status == 500

    async def test_bad_request_is_client_error(self):
        client = _client_with(_mock_response(status=400, text="Missing channel_id"))

        with pytest.raises(HashtagClientError, match="Missing channel_id"):
            await client.fetch_hashtags("")

    async def test_invalid_json(self):
        client = _client_with(_mock_response(text="<html>"))

        with pytest.raises(HashtagResponseError, match="Invalid JSON"):
            await client.fetch_hashtags("chan1")

    async def test_malformed_payload(self):
        client = _client_with(_mock_response(body=None))

        with pytest.raises(HashtagResponseError):
            await client.fetch_hashtags("chan1")

    async def test_connection_error(self):
        client = HashtagClient(base_url="http://chat.test")
        session = MagicMock()
        session.closed = False
        session.get.side_effect = aiohttp.ClientConnectionError("refused")
        client._session = session

        with pytest.raises(HashtagConnectionError, match="Network error"):
            await client.fetch_hashtags("chan1")


class TestFetchHashtagPosts:
    async def test_paginated_envelope(self):
        body = {
            "posts": [{"id": "p1", "message": "#release"}],
            "totalCount": 45,
            "hasMore": True,
        }
        client = _client_with(_mock_response(body=body))

        page = await client.fetch_hashtag_posts("release", channel_id="chan1", page=2, per_page=20)

        client._session.get.assert_called_once_with(
            "http://chat.test/plugins/com.ecf.hashtags/api/posts",
            params={"tag": "release", "channel_id": "chan1", "page": "2", "per_page": "20"},
        )
        assert page.total_count == 45
        assert page.page == 2
        assert page.per_page == 20
        assert page.legacy is False

    async def test_absent_params_omitted(self):
        client = _client_with(_mock_response(body={"posts": [], "totalCount": 0, "hasMore": False}))

        await client.fetch_hashtag_posts("release")

        _, kwargs = client._session.get.call_args
        assert kwargs["params"] == {"tag": "release"}

    async def test_flat_array_adapted(self):
        client = _client_with(_mock_response(body=[{"id": "a"}, {"id": "b"}]))

        page = await client.fetch_hashtag_posts("release")

        assert page.legacy is True
        assert page.total_count == 2
        assert page.has_more is False

    async def test_not_found(self):
        client = _client_with(_mock_response(status=404, text="Not found"))

        with pytest.raises(HashtagApiError) as exc_info:
            await client.fetch_hashtag_posts("release")

        assert exc_info.value.detail == "Not found"
