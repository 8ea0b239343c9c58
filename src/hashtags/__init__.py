"""Hashtag browser client for the com.ecf.hashtags chat plugin."""

PLUGIN_ID = "com.ecf.hashtags"

# 게시물 페이지 크기 (서버 플러그인이 허용하는 값)
PAGE_SIZE_OPTIONS = (10, 20, 50)
DEFAULT_PAGE_SIZE = 20

__version__ = "1.0.0"
