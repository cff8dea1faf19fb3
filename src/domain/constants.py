"""
Domain Constants: scan intake 전역 상수.

레코드 포맷, 회전 정책, 정적 파일 MIME 타입 등.
"""

import os

# =============================================================================
# Log Record Format (로그 레코드 포맷)
# =============================================================================
# 한 줄 = 한 레코드: code|qtty|timestamp\n

RECORD_SEPARATOR = "|"
RECORD_FIELD_COUNT = 3
CODE_PIPE_REPLACEMENT = "_"

# =============================================================================
# Rotation (회전 정책)
# =============================================================================
# 마지막 레코드와의 간격이 이 값을 넘으면 새 세션으로 보고 파일을 비움

DEFAULT_STALE_AFTER_MS = 2000
DEFAULT_LOCK_TIMEOUT = 10.0

# =============================================================================
# Client Buffer
# =============================================================================

CODE_MAX_LENGTH = 6
DEFAULT_QTTY_FIELD = "1"

# =============================================================================
# Static Files
# =============================================================================

INDEX_FILENAME = "index.html"

MIME_TYPES = {
    ".html": "text/html; charset=utf-8",
    ".css": "text/css; charset=utf-8",
    ".js": "application/javascript; charset=utf-8",
    ".json": "application/json; charset=utf-8",
    ".webmanifest": "application/manifest+json; charset=utf-8",
    ".svg": "image/svg+xml",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".ico": "image/x-icon",
}


def get_mime_type(filename: str) -> str:
    """
    파일명에서 MIME 타입 추출.

    Args:
        filename: 파일명 (확장자 포함)

    Returns:
        MIME 타입 문자열 (알 수 없으면 octet-stream)
    """
    ext = os.path.splitext(filename)[1].lower()
    return MIME_TYPES.get(ext, "application/octet-stream")
