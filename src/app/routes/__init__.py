"""
FastAPI Routes.

intake (JSON API) + static (브라우저 클라이언트). static은 catch-all이므로 마지막에 등록.
"""

from . import intake, static

__all__ = ["intake", "static"]
