"""
Core layer: 로그 파일 쓰기와 서버 시계.

역할:
- Log Store (append + 회전, 파일 락)
- 단조 비감소 epoch ms 시계
"""

from .clock import ServerClock
from .log_store import LogStore, last_timestamp

__all__ = [
    "ServerClock",
    "LogStore",
    "last_timestamp",
]
