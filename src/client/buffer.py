"""
Client Buffer: 전송 대기 스캔 목록의 상태 머신.

상태:
- Adding (editing_index=None, 기본)
- Editing(i)

모든 전이는 순수 함수: BufferState → 새 BufferState.
검증 실패는 ClientValidationError (상태 변화 없음, 네트워크 호출 없음).

불변식:
- editing_index는 유효한 entries 인덱스 또는 None
- clear / 전송 완료 시 editing_index=None
"""

import re
from dataclasses import dataclass, replace

from src.domain.constants import CODE_MAX_LENGTH, DEFAULT_QTTY_FIELD
from src.domain.errors import ClientValidationError, ErrorCodes
from src.domain.schemas import BufferEntry, format_number, parse_number

_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class BufferState:
    """버퍼 + 폼 필드 상태."""
    entries: tuple[BufferEntry, ...] = ()
    editing_index: int | None = None
    sending: bool = False
    code_field: str = ""
    qtty_field: str = DEFAULT_QTTY_FIELD
    code_selected: bool = False  # 코드 필드 전체 선택 (다음 입력이 덮어씀)
    scroll_pending: bool = False  # 새 항목으로 스크롤 필요

    @property
    def is_editing(self) -> bool:
        return self.editing_index is not None


def normalize_code(text: str, captured: bool = False) -> str:
    """
    코드 필드 정규화.

    대소문자는 유지, 연속 공백은 한 칸으로 축약.
    키 캡처로 만들어진 값은 마지막 6자 (고정 길이 스캐너 코드),
    직접 입력은 앞 6자 (maxlength).
    """
    collapsed = _WHITESPACE_RE.sub(" ", text)
    if captured:
        return collapsed[-CODE_MAX_LENGTH:]
    return collapsed[:CODE_MAX_LENGTH]


def set_code_field(state: BufferState, text: str, captured: bool = False) -> BufferState:
    """코드 필드 변경 (정규화 적용, 선택 해제)."""
    return replace(
        state,
        code_field=normalize_code(text, captured=captured),
        code_selected=False,
    )


def set_qtty_field(state: BufferState, text: str) -> BufferState:
    return replace(state, qtty_field=text)


def validate_fields(state: BufferState) -> BufferEntry:
    """
    폼 필드 → BufferEntry.

    Raises:
        ClientValidationError: EMPTY_CODE (field="code"),
            INVALID_QUANTITY (field="qtty")
    """
    code = state.code_field.strip()
    if not code:
        raise ClientValidationError(ErrorCodes.EMPTY_CODE, field="code")

    qtty = parse_number(state.qtty_field)
    if qtty is None or qtty <= 0:
        raise ClientValidationError(ErrorCodes.INVALID_QUANTITY, field="qtty")

    return BufferEntry(code=code, qtty=qtty)


def submit(state: BufferState) -> BufferState:
    """
    폼 제출.

    Adding: 끝에 추가 + 스크롤 표시.
    Editing(i): entries[i] 교체 후 Adding으로.
    성공 시 코드 필드 비움, 수량은 기본값.
    전송 중이면 무시.
    """
    if state.sending:
        return state
    entry = validate_fields(state)
    reset = {
        "code_field": "",
        "qtty_field": DEFAULT_QTTY_FIELD,
        "code_selected": False,
    }

    if state.editing_index is not None:
        entries = list(state.entries)
        entries[state.editing_index] = entry
        return replace(
            state,
            entries=tuple(entries),
            editing_index=None,
            scroll_pending=False,
            **reset,
        )

    return replace(
        state,
        entries=state.entries + (entry,),
        scroll_pending=True,
        **reset,
    )


def select_for_edit(state: BufferState, index: int) -> BufferState:
    """
    항목 편집 시작.

    Raises:
        IndexError: 유효하지 않은 인덱스
    """
    if state.sending:
        return state
    if not 0 <= index < len(state.entries):
        raise IndexError(f"No buffer entry at index {index}")

    entry = state.entries[index]
    return replace(
        state,
        editing_index=index,
        code_field=entry.code,
        qtty_field=format_number(entry.qtty),
        code_selected=True,
    )


def clear(state: BufferState) -> BufferState:
    """
    버퍼 전체 삭제 (전송 중이면 무시).

    편집 중이었으면 폼 필드도 기본값으로.
    """
    if state.sending:
        return state
    changes: dict = {
        "entries": (),
        "editing_index": None,
        "code_selected": False,
        "scroll_pending": False,
    }
    if state.editing_index is not None:
        changes.update(code_field="", qtty_field=DEFAULT_QTTY_FIELD)
    return replace(state, **changes)


def acknowledge_scroll(state: BufferState) -> BufferState:
    return replace(state, scroll_pending=False)


def begin_send(state: BufferState) -> BufferState:
    return replace(state, sending=True)


def finish_send(state: BufferState, success: bool) -> BufferState:
    """
    전송 종료 (성공/실패 모두 호출).

    성공: 버퍼 비움. 공통: sending 해제, 편집 상태 해제.
    """
    changes: dict = {"sending": False, "editing_index": None}
    if state.editing_index is not None:
        changes.update(code_field="", qtty_field=DEFAULT_QTTY_FIELD, code_selected=False)
    if success:
        changes["entries"] = ()
    return replace(state, **changes)
