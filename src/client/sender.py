"""
Batch Sender: 버퍼를 /addItem 요청으로 순차 전송.

동작:
1. sending=True (전송/삭제 버튼 비활성)
2. /getTime 한 번 조회 → 배치 전체에 같은 timestamp
   (실패 시 로컬 시각 사용 + 알림, 전송은 계속)
3. 항목마다 /addItem 을 원래 순서대로 하나씩 await
4. 전부 성공: 버퍼 비움 + "Sent N item(s)"
   하나라도 실패: 나머지 중단, 에러 메시지 표시, 버퍼 유지
   (이미 기록된 항목은 서버에서 롤백되지 않음)
5. finally: sending=False
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

import httpx

from src.client.buffer import BufferState, begin_send, finish_send
from src.domain.schemas import BufferEntry, IntakeResult, format_number

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notice:
    """사용자에게 잠깐 보여줄 메시지."""
    level: str  # "ok", "error", "info"
    text: str


@dataclass
class SendOutcome:
    """send() 결과."""
    state: BufferState
    notices: list[Notice] = field(default_factory=list)
    sent: int = 0


class IntakeRequestError(Exception):
    """/addItem 요청 실패 (서버 에러 메시지 또는 응답 원문)."""


def describe_error(response: httpx.Response) -> str:
    """
    에러 응답 → 사용자 메시지.

    IntakeResult 본문이면 error 필드, 아니면 응답 원문.
    """
    try:
        result = IntakeResult.from_dict(response.json())
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    return result.error or f"HTTP {response.status_code}"


class BatchSender:
    """
    버퍼 일괄 전송.

    Usage:
        async with httpx.AsyncClient(base_url="http://127.0.0.1:3000") as client:
            outcome = await BatchSender(client).send(state)
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            client: base_url이 설정된 httpx.AsyncClient
            clock: /getTime 실패 시 쓸 로컬 시계 (초 단위 epoch)
        """
        self.client = client
        self.clock = clock

    async def fetch_server_time(self) -> int:
        """
        서버 시각 조회.

        Raises:
            httpx.HTTPError: 전송/HTTP 상태 에러
            ValueError: 응답 디코딩 실패
        """
        response = await self.client.get("/getTime", headers={"Accept": "application/json"})
        response.raise_for_status()
        result = IntakeResult.from_dict(response.json())
        if not result.ok or result.server_time is None:
            raise ValueError(f"Unexpected /getTime response: {result}")
        return result.server_time

    async def add_item(self, entry: BufferEntry, timestamp: int) -> IntakeResult:
        """
        항목 한 건 전송.

        Raises:
            IntakeRequestError: 서버가 실패 응답
            httpx.HTTPError: 전송 에러
        """
        response = await self.client.get(
            "/addItem",
            params={
                "code": entry.code,
                "qtty": format_number(entry.qtty),
                "date": str(timestamp),
            },
            headers={"Accept": "application/json"},
        )
        if not response.is_success:
            raise IntakeRequestError(describe_error(response))

        try:
            result = IntakeResult.from_dict(response.json())
        except ValueError as e:
            raise IntakeRequestError(response.text or "Invalid response") from e
        if not result.ok:
            raise IntakeRequestError(result.error or "Request failed")
        return result

    async def send(self, state: BufferState) -> SendOutcome:
        """
        버퍼 전체 전송.

        Args:
            state: 현재 버퍼 상태

        Returns:
            SendOutcome (새 상태, 알림, 성공 전송 수)
        """
        if state.sending:
            return SendOutcome(state, [Notice("info", "A send is already in progress")])
        if not state.entries:
            return SendOutcome(state, [Notice("info", "Nothing to send")])

        state = begin_send(state)
        total = len(state.entries)
        notices: list[Notice] = []
        sent = 0
        success = False

        try:
            try:
                timestamp = await self.fetch_server_time()
            except (httpx.HTTPError, ValueError) as e:
                logger.warning(f"Could not read server time, using local clock: {e}")
                timestamp = int(self.clock() * 1000)
                notices.append(Notice("error", "Could not read server time; using local time"))

            for entry in state.entries:
                await self.add_item(entry, timestamp)
                sent += 1

            success = True
            notices.append(Notice("ok", f"Sent {sent} item(s)"))
            logger.info(f"Batch sent: {sent} item(s) at {timestamp}")

        except (httpx.HTTPError, IntakeRequestError) as e:
            logger.error(f"Batch failed after {sent}/{total}: {e}")
            notices.append(Notice("error", f"Send failed after {sent} of {total}: {e}"))

        finally:
            state = finish_send(state, success)

        return SendOutcome(state, notices, sent)
