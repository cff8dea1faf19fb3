"""
Log Store: 플랫 텍스트 파일에 레코드 append + 회전.

규칙:
- 한 줄 = 한 레코드 (code|qtty|timestamp), UTF-8
- 레코드는 재작성하지 않음. 파일 전체 truncate만 허용
- 마지막 레코드가 stale_after_ms보다 오래됐으면 truncate 후 append
  (로그에는 한 번의 연속된 스캔 세션만 남는다)
- 마지막 줄이 깨졌으면 회전 건너뛰고 append (기록 실패로 만들지 않음)
- 파일 없음 = 빈 내용 (에러 아님)

동시성:
- read → check → rotate → append 구간 전체를 FileLock으로 직렬화
- 락 파일: <log_file>.lock
"""

import logging
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

from filelock import FileLock, Timeout

from src.core.clock import ServerClock
from src.domain.constants import (
    DEFAULT_LOCK_TIMEOUT,
    DEFAULT_STALE_AFTER_MS,
    RECORD_FIELD_COUNT,
    RECORD_SEPARATOR,
)
from src.domain.errors import ErrorCodes, IntakeError
from src.domain.schemas import LogRecord, parse_number

logger = logging.getLogger(__name__)


def last_timestamp(content: str) -> float | None:
    """
    내용의 마지막 레코드 timestamp.

    Args:
        content: 로그 파일 전체 내용

    Returns:
        timestamp (ms), 레코드가 없거나 마지막 줄이 깨졌으면 None
    """
    stripped = content.strip()
    if not stripped:
        return None
    last_line = stripped.split("\n")[-1]
    parts = last_line.split(RECORD_SEPARATOR)
    if len(parts) < RECORD_FIELD_COUNT:
        return None
    return parse_number(parts[2])


class LogStore:
    """
    Intake 로그 파일 관리.

    Usage:
        store = LogStore(Path("valores.txt"))
        record = store.append("ABC123", 2, 1700000000000)
    """

    def __init__(
        self,
        path: Path,
        stale_after_ms: int = DEFAULT_STALE_AFTER_MS,
        lock_timeout: float = DEFAULT_LOCK_TIMEOUT,
        clock: ServerClock | None = None,
    ):
        """
        Args:
            path: 로그 파일 경로
            stale_after_ms: 회전 기준 간격 (ms)
            lock_timeout: 락 대기 시간 (초)
            clock: 회전 판단에 쓰는 시계
        """
        self.path = path
        self.stale_after_ms = stale_after_ms
        self.lock_timeout = lock_timeout
        self.clock = clock or ServerClock()
        self._lock_path = path.with_name(path.name + ".lock")

    @contextmanager
    def _file_lock(self) -> Generator[None, None, None]:
        """
        로그 파일 락 획득.

        Raises:
            IntakeError: LOG_LOCK_TIMEOUT
        """
        self._lock_path.parent.mkdir(parents=True, exist_ok=True)
        lock = FileLock(self._lock_path, timeout=self.lock_timeout)

        try:
            lock.acquire()
        except Timeout as e:
            raise IntakeError(
                ErrorCodes.LOG_LOCK_TIMEOUT,
                path=str(self.path),
                timeout=self.lock_timeout,
            ) from e

        try:
            yield
        finally:
            lock.release()

    def _read(self) -> str:
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return ""
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Could not read {self.path}: {e}")
            raise IntakeError(
                ErrorCodes.LOG_WRITE_FAILED, path=str(self.path), error=str(e)
            ) from e

    def is_stale(self, content: str, now: float) -> bool:
        """마지막 레코드가 회전 기준보다 오래됐는지."""
        last = last_timestamp(content)
        if last is None:
            if content.strip():
                logger.warning(
                    f"Last line of {self.path} has no valid timestamp; skipping rotation"
                )
            return False
        return now - last > self.stale_after_ms

    def append(
        self,
        code: str,
        qtty: float,
        timestamp: float,
        now: float | None = None,
    ) -> LogRecord:
        """
        레코드 한 줄 append (필요 시 먼저 truncate).

        Args:
            code: 정리된 코드 (| 와 개행 없음)
            qtty: 수량
            timestamp: 레코드 timestamp (epoch ms)
            now: 회전 판단 기준 시각 (기본: 서버 시계)

        Returns:
            기록된 LogRecord

        Raises:
            IntakeError: LOG_WRITE_FAILED, LOG_LOCK_TIMEOUT
        """
        record = LogRecord(code=code, qtty=qtty, timestamp=timestamp)
        line = record.to_line() + "\n"

        with self._file_lock():
            content = self._read()
            if now is None:
                now = self.clock.now_ms()

            rotate = self.is_stale(content, now)
            if rotate:
                logger.info(f"Rotating {self.path}: last record older than {self.stale_after_ms}ms")

            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                with open(self.path, "w" if rotate else "a", encoding="utf-8") as f:
                    f.write(line)
            except OSError as e:
                logger.error(f"Could not append to {self.path}: {e}")
                raise IntakeError(
                    ErrorCodes.LOG_WRITE_FAILED, path=str(self.path), error=str(e)
                ) from e

        logger.info(f"Appended to {self.path.name}: {record.to_line()}")
        return record

    def read_records(self) -> list[LogRecord]:
        """
        현재 파일의 레코드 목록 (깨진 줄은 건너뜀).

        Returns:
            LogRecord 목록 (파일 순서)
        """
        records = []
        for line in self._read().splitlines():
            if not line.strip():
                continue
            record = LogRecord.from_line(line)
            if record is not None:
                records.append(record)
        return records
