"""설정 관리

카테고리별로 구분된 설정을 관리합니다.
- 경로 설정: get_*() 메서드 (cwd 기준 계산 필요)
- 그 외 설정: @dataclass 하위 그룹 (모듈 로드 시 평가)
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from hashtags import DEFAULT_PAGE_SIZE, PAGE_SIZE_OPTIONS, PLUGIN_ID

load_dotenv()


class ConfigurationError(Exception):
    """설정 오류 예외

    필수 환경변수 누락 등 설정 관련 오류 시 발생합니다.
    """

    def __init__(self, missing_vars: List[str], invalid_vars: Optional[List[str]] = None):
        self.missing_vars = missing_vars
        self.invalid_vars = invalid_vars or []
        parts = []
        if missing_vars:
            parts.append(f"Required settings are missing: {', '.join(missing_vars)}")
        if self.invalid_vars:
            parts.append(f"Invalid settings: {', '.join(self.invalid_vars)}")
        super().__init__("; ".join(parts))


def _get_path(env_var: str, default_subdir: str) -> str:
    """환경변수가 없으면 현재 경로 하위 폴더 반환"""
    env_value = os.getenv(env_var)
    if env_value:
        return env_value
    return str(Path.cwd() / default_subdir)


def _parse_bool(value: str | None, default: bool = False) -> bool:
    """문자열을 bool로 변환"""
    if value is None:
        return default
    return value.lower() == "true"


def _parse_int(value: str | None, default: int) -> int:
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _parse_float(value: str | None) -> Optional[float]:
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return None


@dataclass
class ServerConfig:
    """Host server connection"""

    base_url: str = os.getenv("HASHTAGS_BASE_URL", "http://localhost:8065")
    plugin_id: str = os.getenv("HASHTAGS_PLUGIN_ID", PLUGIN_ID)
    token: str = os.getenv("HASHTAGS_TOKEN", "")
    # None = aiohttp 기본값 사용
    http_timeout: Optional[float] = _parse_float(os.getenv("HASHTAGS_HTTP_TIMEOUT"))


@dataclass
class ViewConfig:
    """Panel defaults"""

    page_size: int = _parse_int(os.getenv("HASHTAGS_PAGE_SIZE"), DEFAULT_PAGE_SIZE)
    team_name: str = os.getenv("HASHTAGS_TEAM_NAME", "")


class Config:
    """애플리케이션 설정

    설정 접근 방식:
    - 경로 관련: get_*() 메서드 (런타임에 cwd 기준 계산)
    - 그 외: 하위 설정 그룹 (모듈 로드 시 평가)
    """

    debug: bool = _parse_bool(os.getenv("DEBUG"), False)

    server = ServerConfig()
    view = ViewConfig()

    # ========================================
    # 경로 설정 (런타임에 cwd 기준 계산)
    # ========================================
    @staticmethod
    def get_log_path() -> str:
        """로그 경로"""
        return _get_path("LOG_PATH", "logs")

    @staticmethod
    def get_preferences_path() -> str:
        """목록 보기 설정 저장 경로"""
        return _get_path("PREFERENCES_PATH", ".local/preferences")

    # ========================================
    # 검증
    # ========================================
    @classmethod
    def validate(cls) -> None:
        """필수 설정 검증

        Raises:
            ConfigurationError: 필수 설정 누락 또는 허용되지 않는 값일 때
        """
        missing = []
        if not cls.server.base_url:
            missing.append("HASHTAGS_BASE_URL")
        if not cls.server.plugin_id:
            missing.append("HASHTAGS_PLUGIN_ID")

        invalid = []
        if cls.view.page_size not in PAGE_SIZE_OPTIONS:
            invalid.append(
                f"HASHTAGS_PAGE_SIZE={cls.view.page_size} "
                f"(expected one of {PAGE_SIZE_OPTIONS})"
            )

        if missing or invalid:
            raise ConfigurationError(missing, invalid)

    @classmethod
    def as_plugin_config(cls) -> dict:
        """Settings in the shape ``HashtagsPlugin.on_load()`` expects"""
        return {
            "base_url": cls.server.base_url,
            "plugin_id": cls.server.plugin_id,
            "token": cls.server.token,
            "http_timeout": cls.server.http_timeout,
            "page_size": cls.view.page_size,
            "team_name": cls.view.team_name,
            "preferences_path": cls.get_preferences_path(),
        }
