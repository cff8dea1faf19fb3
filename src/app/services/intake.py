"""
Intake Service: 쿼리 파라미터 → LogRecord

규칙:
- code: 필수, 정리 후 비어 있으면 reject (| → _, 개행 → 공백)
- qtty: 필수, 유한한 숫자. 0/음수 허용 (require_positive_qtty=true면 reject)
- date: 선택, 없으면 서버 시계. 있으면 유한한 양수
- 검증 실패 시 Log Store는 건드리지 않음
"""

import logging
import re
from typing import Any

from src.core.clock import ServerClock
from src.core.log_store import LogStore
from src.domain.constants import CODE_PIPE_REPLACEMENT, RECORD_SEPARATOR
from src.domain.errors import ErrorCodes, IntakeError
from src.domain.schemas import LogRecord, parse_number

logger = logging.getLogger(__name__)

_NEWLINES_RE = re.compile(r"[\r\n]+")


def sanitize_code(raw: Any) -> str:
    """
    레코드 포맷을 깨지 않도록 코드 정리.

    Args:
        raw: 쿼리 값 (None 허용)

    Returns:
        개행 → 공백, | → _, 앞뒤 공백 제거된 문자열
    """
    text = "" if raw is None else str(raw)
    text = _NEWLINES_RE.sub(" ", text)
    text = text.replace(RECORD_SEPARATOR, CODE_PIPE_REPLACEMENT)
    return text.strip()


class IntakeService:
    """
    /addItem 처리 서비스.

    검증/정규화 후 LogStore.append에 위임.
    """

    def __init__(
        self,
        store: LogStore,
        clock: ServerClock | None = None,
        require_positive_qtty: bool = False,
    ):
        """
        Args:
            store: 대상 LogStore
            clock: date 기본값용 시계 (기본: store의 시계)
            require_positive_qtty: 서버에서도 qtty > 0 강제 여부
        """
        self.store = store
        self.clock = clock or store.clock
        self.require_positive_qtty = require_positive_qtty

    def add_item(self, code: Any, qtty: Any, date: Any = None) -> LogRecord:
        """
        레코드 한 건 검증 후 기록.

        Args:
            code: 원본 코드
            qtty: 원본 수량 (숫자 형태 문자열)
            date: 원본 epoch ms (없거나 빈 값이면 서버 시각)

        Returns:
            기록된 LogRecord

        Raises:
            IntakeError: MISSING_CODE, INVALID_QTTY, NON_POSITIVE_QTTY,
                INVALID_DATE, LOG_WRITE_FAILED, LOG_LOCK_TIMEOUT
        """
        clean_code = sanitize_code(code)
        if not clean_code:
            raise IntakeError(ErrorCodes.MISSING_CODE)

        qtty_num = parse_number(qtty)
        if qtty_num is None:
            raise IntakeError(ErrorCodes.INVALID_QTTY, qtty=qtty)
        if qtty_num <= 0:
            if self.require_positive_qtty:
                raise IntakeError(ErrorCodes.NON_POSITIVE_QTTY, qtty=qtty)
            logger.warning(f"Accepting non-positive qtty {qtty!r} for code {clean_code!r}")

        if date is None or date == "":
            date_num: float = self.clock.now_ms()
        else:
            parsed_date = parse_number(date)
            if parsed_date is None or parsed_date <= 0:
                raise IntakeError(ErrorCodes.INVALID_DATE, date=date)
            date_num = parsed_date

        return self.store.append(clean_code, qtty_num, date_num)
