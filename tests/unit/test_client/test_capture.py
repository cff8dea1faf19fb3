"""
test_capture.py - Input Capture 테스트

검증 포인트:
1. 본문 포커스에서 출력 가능한 글자 → 코드 필드 (마지막 6자)
2. Backspace, Enter(반복 아님) 처리
3. 다른 필드 포커스/조합키 → 무시
"""

import pytest

from src.client.buffer import BufferState, select_for_edit, set_code_field, submit
from src.client.capture import SUBMIT, KeyEvent, feed_text, handle_key


class TestHandleKey:
    """handle_key 함수 테스트."""

    def test_printable_appends(self):
        """글자 추가."""
        state, action = handle_key(set_code_field(BufferState(), "AB"), KeyEvent(key="C"))

        assert state.code_field == "ABC"
        assert action is None

    def test_keeps_last_six(self):
        """6자 초과 → 마지막 6자."""
        state = set_code_field(BufferState(), "ABCDEF")

        state, _ = handle_key(state, KeyEvent(key="G"))

        assert state.code_field == "BCDEFG"

    def test_backspace_removes_last(self):
        """Backspace → 마지막 글자 삭제."""
        state, _ = handle_key(set_code_field(BufferState(), "ABC"), KeyEvent(key="Backspace"))

        assert state.code_field == "AB"

    def test_backspace_on_empty(self):
        """빈 필드 Backspace → 그대로."""
        state, _ = handle_key(BufferState(), KeyEvent(key="Backspace"))

        assert state.code_field == ""

    def test_enter_submits(self):
        """Enter → SUBMIT."""
        _, action = handle_key(BufferState(), KeyEvent(key="Enter"))

        assert action == SUBMIT

    def test_repeating_enter_ignored(self):
        """반복 Enter → 무시."""
        _, action = handle_key(BufferState(), KeyEvent(key="Enter", repeat=True))

        assert action is None

    @pytest.mark.parametrize("focus", ["qtty", "code", "search"])
    def test_ignored_when_field_focused(self, focus: str):
        """다른 입력 필드에 포커스 → 무시."""
        state = set_code_field(BufferState(), "AB")

        for key in ("C", "Backspace", "Enter"):
            new_state, action = handle_key(state, KeyEvent(key=key, focus=focus))
            assert new_state is state
            assert action is None

    @pytest.mark.parametrize("modifier", ["ctrl", "alt", "meta"])
    def test_modifier_combos_ignored(self, modifier: str):
        """Ctrl/Alt/Meta 조합 → 무시."""
        state = BufferState()

        new_state, action = handle_key(state, KeyEvent(key="v", **{modifier: True}))

        assert new_state is state
        assert action is None

    @pytest.mark.parametrize("key", ["Shift", "ArrowLeft", "F5", "Tab"])
    def test_named_keys_ignored(self, key: str):
        """기타 키 → 무시."""
        state = BufferState()

        new_state, action = handle_key(state, KeyEvent(key=key))

        assert new_state is state
        assert action is None

    def test_selected_text_overwritten(self):
        """편집 시작 후 첫 글자가 선택된 코드를 덮어씀."""
        state = submit(set_code_field(BufferState(), "OLD"))
        state = select_for_edit(state, 0)

        state, _ = handle_key(state, KeyEvent(key="N"))

        assert state.code_field == "N"
        assert state.code_selected is False


class TestFeedText:
    """feed_text 함수 테스트."""

    def test_scanner_burst(self):
        """스캐너 입력 재생 → 마지막 6자."""
        state = feed_text(BufferState(), "0012345678")

        assert state.code_field == "345678"

    def test_whitespace_collapsed(self):
        """연속 공백 축약."""
        state = feed_text(BufferState(), "A  B")

        assert state.code_field == "A B"
