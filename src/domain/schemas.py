"""
Data schemas for scan intake.

규칙:
- LogRecord 한 줄 포맷: code|qtty|timestamp
- 숫자 필드: 유한한 값만 허용 (NaN/Inf reject)
- IntakeResult: 서버 응답/클라이언트 디코딩 공용 타입
"""

import math
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from src.domain.constants import RECORD_FIELD_COUNT, RECORD_SEPARATOR

# 10진수 리터럴만 허용 ("1_000", "nan", "inf" 등은 거부)
_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


# =============================================================================
# Number Helpers
# =============================================================================


def parse_number(raw: Any) -> float | None:
    """
    문자열/숫자를 유한한 float로 파싱.

    Args:
        raw: 쿼리 파라미터 값 등

    Returns:
        유한한 float, 파싱 불가/빈 값/NaN/Inf면 None
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        text = str(raw).strip()
        if not _NUMBER_RE.fullmatch(text):
            return None
        try:
            value = float(text)
        except ValueError:
            return None
    if not math.isfinite(value):
        return None
    return value


def format_number(value: float) -> str:
    """
    숫자를 레코드용 문자열로 변환 (JavaScript Number 표기와 동일).

    - 자릿수는 최단 표현 (repr 기준), 정수 값은 소수점 없이 (3.0 → "3")
    - 1e-6 <= |x| < 1e21 은 위치 표기 (0.00001, 1152921504606847000)
    - 그 밖은 0 채움 없는 지수 표기 (1e-7, 1e+21)
    """
    value = float(value)
    if math.isnan(value):
        return "NaN"
    sign = "-" if value < 0 else ""
    if math.isinf(value):
        return sign + "Infinity"
    if value == 0:
        return "0"

    _, digit_tuple, exponent = Decimal(repr(abs(value))).normalize().as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    k = len(digits)
    n = exponent + k  # value = 0.<digits> × 10^n

    if k <= n <= 21:
        text = digits + "0" * (n - k)
    elif 0 < n <= 21:
        text = f"{digits[:n]}.{digits[n:]}"
    elif -6 < n <= 0:
        text = "0." + "0" * -n + digits
    else:
        mantissa = digits if k == 1 else f"{digits[0]}.{digits[1:]}"
        text = f"{mantissa}e{n - 1:+d}"
    return sign + text


# =============================================================================
# Log Record
# =============================================================================


@dataclass(frozen=True)
class LogRecord:
    """로그 파일의 한 레코드."""
    code: str
    qtty: float
    timestamp: float  # epoch ms

    def to_line(self) -> str:
        """개행 없는 레코드 텍스트."""
        return RECORD_SEPARATOR.join(
            (self.code, format_number(self.qtty), format_number(self.timestamp))
        )

    @classmethod
    def from_line(cls, line: str) -> "LogRecord | None":
        """
        레코드 한 줄 파싱.

        Returns:
            LogRecord, 필드 부족/숫자 파싱 실패 시 None
        """
        parts = line.rstrip("\r\n").split(RECORD_SEPARATOR)
        if len(parts) < RECORD_FIELD_COUNT:
            return None
        qtty = parse_number(parts[1])
        timestamp = parse_number(parts[2])
        if qtty is None or timestamp is None:
            return None
        return cls(code=parts[0], qtty=qtty, timestamp=timestamp)


# =============================================================================
# Intake Result (서버/클라이언트 공용)
# =============================================================================


@dataclass
class IntakeResult:
    """
    모든 JSON 응답의 단일 구조.

    None인 필드는 직렬화 시 생략.
    """
    ok: bool
    error: str | None = None
    written: str | None = None
    server_time: int | None = None
    message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """JSON 직렬화용 (serverTime은 camelCase)."""
        data: dict[str, Any] = {"ok": self.ok}
        if self.error is not None:
            data["error"] = self.error
        if self.written is not None:
            data["written"] = self.written
        if self.server_time is not None:
            data["serverTime"] = self.server_time
        if self.message is not None:
            data["message"] = self.message
        return data

    @classmethod
    def from_dict(cls, data: Any) -> "IntakeResult":
        """
        JSON 본문 디코딩.

        Raises:
            ValueError: dict가 아니거나 ok가 bool이 아닐 때
        """
        if not isinstance(data, dict) or not isinstance(data.get("ok"), bool):
            raise ValueError(f"Not an intake result: {data!r}")

        server_time = data.get("serverTime")
        if server_time is not None:
            parsed = parse_number(server_time)
            server_time = int(parsed) if parsed is not None else None

        return cls(
            ok=data["ok"],
            error=_opt_str(data.get("error")),
            written=_opt_str(data.get("written")),
            server_time=server_time,
            message=_opt_str(data.get("message")),
        )


def _opt_str(value: Any) -> str | None:
    return None if value is None else str(value)


# =============================================================================
# Client Buffer
# =============================================================================


@dataclass(frozen=True)
class BufferEntry:
    """전송 대기 중인 스캔 항목."""
    code: str  # ≤ 6자, trim + 공백 축약
    qtty: float  # 양의 유한수
