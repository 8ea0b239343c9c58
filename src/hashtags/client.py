"""Hashtags server plugin HTTP client

Read-only client for the REST endpoints exposed by the hashtags server
plugin under ``/plugins/<plugin-id>/api``. Every call is a single GET;
nothing is retried.
"""

import json
import logging
from typing import Any, Optional

import aiohttp

from hashtags import PLUGIN_ID
from hashtags.models import (
    HashtagSummaryResponse,
    MalformedResponseError,
    PaginatedPostResponse,
    parse_post_response,
)

logger = logging.getLogger(__name__)


# === 예외 ===

class HashtagClientError(Exception):
    """Base error for hashtag client failures"""
    pass


class HashtagApiError(HashtagClientError):
    """Non-success HTTP status; the message is the response body text"""

    def __init__(self, status: int, detail: str):
        self.status = status
        self.detail = detail
        super().__init__(detail)


class HashtagConnectionError(HashtagClientError):
    """Transport failure before a response was received"""
    pass


class HashtagResponseError(HashtagClientError):
    """Successful status but the payload could not be understood"""
    pass


# === 클라이언트 ===

class HashtagClient:
    """Client for the hashtags server plugin

    사용 예:
        async with HashtagClient(base_url="http://localhost:8065") as client:
            summary = await client.fetch_hashtags("channel-id")
            page = await client.fetch_hashtag_posts("release", page=1, per_page=20)
    """

    def __init__(
        self,
        base_url: str,
        plugin_id: str = PLUGIN_ID,
        token: str = "",
        timeout: Optional[float] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.plugin_id = plugin_id
        self.token = token
        self.timeout = timeout
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def api_base(self) -> str:
        return f"{self.base_url}/plugins/{self.plugin_id}/api"

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                headers=self._build_headers(),
            )
        return self._session

    def _build_headers(self) -> dict:
        headers = {
            "X-Requested-With": "XMLHttpRequest",
            "Accept": "application/json",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "HashtagClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # === Hashtag API ===

    async def fetch_hashtags(self, channel_id: str) -> HashtagSummaryResponse:
        """Hashtags used in one channel"""
        data = await self._get_json("/hashtags", {"channel_id": channel_id})
        return self._parse(HashtagSummaryResponse.from_dict, data)

    async def fetch_team_hashtags(self, team_id: str) -> HashtagSummaryResponse:
        """Hashtags used across the public channels of a team"""
        data = await self._get_json("/team_hashtags", {"team_id": team_id})
        return self._parse(HashtagSummaryResponse.from_dict, data)

    async def fetch_hashtag_posts(
        self,
        tag: str,
        channel_id: Optional[str] = None,
        page: Optional[int] = None,
        per_page: Optional[int] = None,
    ) -> PaginatedPostResponse:
        """Posts referencing ``tag``, optionally scoped to a channel

        Both server revisions are accepted: the paginated envelope and the
        older flat array, which is adapted into a single complete page.
        """
        params: dict[str, Any] = {"tag": tag}
        if channel_id:
            params["channel_id"] = channel_id
        if page is not None:
            params["page"] = page
        if per_page is not None:
            params["per_page"] = per_page

        data = await self._get_json("/posts", params)
        return self._parse(
            lambda d: parse_post_response(d, page=page or 1, per_page=per_page or 0),
            data,
        )

    # === 헬퍼 메서드 ===

    async def _get_json(self, endpoint: str, params: dict[str, Any]) -> Any:
        session = await self._get_session()
        url = f"{self.api_base}{endpoint}"
        query = {k: str(v) for k, v in params.items()}
        logger.debug("GET %s %s", url, query)

        try:
            async with session.get(url, params=query) as response:
                body = await response.text()
                if not 200 <= response.status < 300:
                    logger.error(
                        "Hashtag API error: %s %s -> %d", endpoint, query, response.status
                    )
                    raise HashtagApiError(response.status, body)
        except aiohttp.ClientError as e:
            raise HashtagConnectionError(f"Network error: {e}") from e

        try:
            return json.loads(body)
        except json.JSONDecodeError as e:
            raise HashtagResponseError(f"Invalid JSON from {endpoint}: {e}") from e

    @staticmethod
    def _parse(parser, data: Any):
        try:
            return parser(data)
        except MalformedResponseError as e:
            raise HashtagResponseError(str(e)) from e
