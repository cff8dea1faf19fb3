"""
Client layer: 스캔 버퍼와 일괄 전송.

역할:
- buffer: 추가/편집 상태 머신 (순수 함수)
- capture: 키보드 웨지 스캐너 입력
- sender: /getTime + 순차 /addItem
"""

from .buffer import (
    BufferState,
    clear,
    normalize_code,
    select_for_edit,
    set_code_field,
    set_qtty_field,
    submit,
)
from .capture import SUBMIT, KeyEvent, feed_text, handle_key
from .sender import BatchSender, Notice, SendOutcome

__all__ = [
    # buffer
    "BufferState",
    "clear",
    "normalize_code",
    "select_for_edit",
    "set_code_field",
    "set_qtty_field",
    "submit",
    # capture
    "SUBMIT",
    "KeyEvent",
    "feed_text",
    "handle_key",
    # sender
    "BatchSender",
    "Notice",
    "SendOutcome",
]
