"""
Error definitions for scan intake.

규칙:
- 조용한 실패 금지 → IntakeError로 명시적 실패
- NaN/Inf → 항상 reject
- 클라이언트 검증 실패는 네트워크 호출 전에 ClientValidationError
"""

from typing import Any

# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """에러 코드 상수. 새 코드 추가 시 ERROR_STATUS/ERROR_MESSAGES에도 추가."""

    # === Intake validation (4xx) ===
    MISSING_CODE = "MISSING_CODE"
    INVALID_QTTY = "INVALID_QTTY"
    NON_POSITIVE_QTTY = "NON_POSITIVE_QTTY"
    INVALID_DATE = "INVALID_DATE"

    # === Log store (5xx) ===
    LOG_WRITE_FAILED = "LOG_WRITE_FAILED"
    LOG_LOCK_TIMEOUT = "LOG_LOCK_TIMEOUT"

    # === Client ===
    EMPTY_CODE = "EMPTY_CODE"
    INVALID_QUANTITY = "INVALID_QUANTITY"


ERROR_STATUS: dict[str, int] = {
    ErrorCodes.MISSING_CODE: 400,
    ErrorCodes.INVALID_QTTY: 400,
    ErrorCodes.NON_POSITIVE_QTTY: 400,
    ErrorCodes.INVALID_DATE: 400,
    ErrorCodes.LOG_WRITE_FAILED: 500,
    ErrorCodes.LOG_LOCK_TIMEOUT: 500,
}

ERROR_MESSAGES: dict[str, str] = {
    ErrorCodes.MISSING_CODE: 'Missing or empty "code" parameter',
    ErrorCodes.INVALID_QTTY: 'Missing or invalid "qtty" parameter',
    ErrorCodes.NON_POSITIVE_QTTY: 'The "qtty" parameter must be greater than zero',
    ErrorCodes.INVALID_DATE: 'The "date" parameter is not valid',
    ErrorCodes.LOG_WRITE_FAILED: "Could not write to the intake log",
    ErrorCodes.LOG_LOCK_TIMEOUT: "Intake log is busy, try again",
    ErrorCodes.EMPTY_CODE: "Enter a code",
    ErrorCodes.INVALID_QUANTITY: "Enter a quantity greater than zero",
}


class IntakeError(Exception):
    """
    서버 측 intake 처리 실패.

    HTTP 응답으로 변환될 때:
    - status: ERROR_STATUS[code] (알 수 없는 코드는 500)
    - body: {"ok": false, "error": message}

    Usage:
        raise IntakeError(ErrorCodes.INVALID_QTTY, qtty="abc")
    """

    def __init__(self, code: str, **context: Any) -> None:
        self.code = code
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"[{self.code}] {ctx_str}" if ctx_str else f"[{self.code}]"

    @property
    def status(self) -> int:
        return ERROR_STATUS.get(self.code, 500)

    @property
    def message(self) -> str:
        """사용자에게 보여줄 메시지."""
        return ERROR_MESSAGES.get(self.code, "Internal server error")

    def to_dict(self) -> dict[str, Any]:
        """로그/JSON 직렬화용."""
        return {
            "code": self.code,
            **self.context,
        }


class ClientValidationError(Exception):
    """
    클라이언트 폼 검증 실패.

    field는 포커스를 되돌릴 입력 필드 ("code" 또는 "qtty").
    """

    def __init__(self, code: str, field: str) -> None:
        self.code = code
        self.field = field
        super().__init__(ERROR_MESSAGES.get(code, code))

    @property
    def message(self) -> str:
        return str(self)
