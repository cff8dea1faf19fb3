"""
Server clock: epoch milliseconds, 뒤로 가지 않음.

시스템 시계가 NTP 보정 등으로 되돌아가도 /getTime 응답과
기본 레코드 timestamp는 이전 값보다 작아지지 않는다.
"""

import threading
import time
from collections.abc import Callable


class ServerClock:
    """단조 비감소 epoch ms 시계."""

    def __init__(self, source: Callable[[], float] = time.time):
        """
        Args:
            source: 초 단위 epoch 값을 돌려주는 함수 (테스트에서 교체)
        """
        self._source = source
        self._lock = threading.Lock()
        self._last = 0

    def now_ms(self) -> int:
        """현재 epoch ms (직전 반환값 이상)."""
        current = int(self._source() * 1000)
        with self._lock:
            if current > self._last:
                self._last = current
            return self._last
