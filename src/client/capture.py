"""
Input Capture: 키보드 웨지 스캐너 입력 → 코드 필드.

바코드 스캐너는 키 입력을 그대로 보내므로, 코드 입력란에 포커스가 없어도
(페이지 본문에 포커스) 코드 필드가 채워져야 한다.

규칙 (다른 입력 필드에 포커스가 없을 때만):
- 출력 가능한 한 글자 → 코드 필드 끝에 추가 (마지막 6자 유지)
- Backspace → 마지막 글자 삭제
- Enter (반복 아님) → SUBMIT
- Ctrl/Alt/Meta 조합, 기타 키 → 무시
"""

from dataclasses import dataclass

from src.client.buffer import BufferState, set_code_field

SUBMIT = "submit"


@dataclass(frozen=True)
class KeyEvent:
    """키 입력 이벤트."""
    key: str  # "A", "Backspace", "Enter", ...
    repeat: bool = False
    ctrl: bool = False
    alt: bool = False
    meta: bool = False
    focus: str | None = None  # 포커스를 가진 입력 필드 (None = 페이지 본문)


def is_printable(key: str) -> bool:
    return len(key) == 1 and key.isprintable()


def handle_key(state: BufferState, event: KeyEvent) -> tuple[BufferState, str | None]:
    """
    키 입력 처리.

    Returns:
        (새 상태, 액션) - 액션은 SUBMIT 또는 None
    """
    if event.focus is not None:
        return state, None
    if event.ctrl or event.alt or event.meta:
        return state, None

    # 전체 선택 상태면 입력이 기존 텍스트를 덮어씀
    current = "" if state.code_selected else state.code_field

    if is_printable(event.key):
        return set_code_field(state, current + event.key, captured=True), None
    if event.key == "Backspace":
        return set_code_field(state, current[:-1], captured=True), None
    if event.key == "Enter":
        return state, None if event.repeat else SUBMIT

    return state, None


def feed_text(state: BufferState, text: str) -> BufferState:
    """스캐너 한 번의 입력(개행 제외)을 키 입력으로 재생."""
    for char in text:
        state, _ = handle_key(state, KeyEvent(key=char))
    return state
