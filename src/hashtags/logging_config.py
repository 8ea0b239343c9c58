"""로깅 설정 모듈

로깅 레벨 가이드라인
==================

logger.exception()
    - 예상치 못한 오류로 스택 트레이스가 필요한 경우
    - 예: 패널 렌더링 실패

logger.error()
    - 예상된 오류이거나 스택 트레이스가 불필요한 경우
    - 서버 플러그인 호출 실패, 설정 파일 저장 실패
    - 예: "Failed to fetch hashtags (channel): ..."

logger.warning()
    - 복구 가능한 경고 상황
    - 예: 저장된 설정 파일을 읽을 수 없음

logger.info()
    - 주요 상태 변경 (플러그인 초기화/해제)

logger.debug()
    - 요청 URL, 오래된 응답 폐기 등 상세 정보
"""

import logging
from datetime import datetime
from pathlib import Path

from hashtags.config import Config


def setup_logging() -> logging.Logger:
    """로깅 설정 및 로거 반환"""
    log_dir = Path(Config.get_log_path())
    log_dir.mkdir(parents=True, exist_ok=True)

    log_file = log_dir / f"hashtags_{datetime.now().strftime('%Y%m%d')}.log"

    logging.basicConfig(
        level=logging.DEBUG if Config.debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.FileHandler(log_file, encoding="utf-8"),
            logging.StreamHandler()
        ]
    )

    # aiohttp 내부 로그는 DEBUG일 때만
    if not Config.debug:
        logging.getLogger("aiohttp").setLevel(logging.WARNING)

    return logging.getLogger("hashtags")
