"""
Application Services.

역할:
- intake: /addItem 파라미터 검증 → Log Store 기록
"""

from .intake import IntakeService, sanitize_code

__all__ = [
    "IntakeService",
    "sanitize_code",
]
