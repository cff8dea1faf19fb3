#!/usr/bin/env python3
"""
scan_client.py - 터미널용 스캔 클라이언트

USB/블루투스 바코드 스캐너(키보드 웨지)가 터미널에 보내는 한 줄을
스캔 한 건으로 보고 버퍼에 추가한 뒤, 명령으로 일괄 전송한다.

입력:
    ABC123      스캔 (현재 수량으로 버퍼에 추가, 편집 중이면 교체)
    :q 5        수량 필드 설정
    :e 2        2번 항목 편집 (다음 스캔/:q 후 빈 줄로 확정)
    :x          버퍼 비우기
    :s          전송
    :l          목록
    :h          도움말

사용법:
    # 기본 서버 (default.yaml client.base_url)
    uv run python scripts/scan_client.py

    # 서버 지정
    uv run python scripts/scan_client.py --base-url http://192.168.0.10:3000
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

import httpx
from dotenv import load_dotenv

# src 패키지 임포트를 위한 경로 추가
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from src.app.config import load_config  # noqa: E402
from src.client.buffer import (  # noqa: E402
    BufferState,
    acknowledge_scroll,
    clear,
    select_for_edit,
    set_qtty_field,
    submit,
)
from src.client.capture import feed_text  # noqa: E402
from src.client.sender import BatchSender  # noqa: E402
from src.domain.errors import ClientValidationError  # noqa: E402
from src.domain.schemas import format_number  # noqa: E402

logger = logging.getLogger(__name__)

HELP_TEXT = """\
<code>   scan (add, or replace the entry being edited)
(empty)  submit the current fields
:q N     set quantity
:e I     edit entry I
:x       clear buffer
:s       send buffer
:l       list buffer
:h       help"""


def render_table(state: BufferState) -> list[str]:
    """버퍼 목록 출력 줄."""
    if not state.entries:
        return ["(buffer empty)"]
    lines = []
    for i, entry in enumerate(state.entries):
        marker = "*" if i == state.editing_index else " "
        lines.append(f"{marker}{i + 1:>3}  {entry.code:<6}  x{format_number(entry.qtty)}")
    return lines


class ScanSession:
    """
    터미널 스캔 세션.

    상태는 BufferState 하나, 모든 변경은 buffer/capture 전이 함수로.
    """

    def __init__(self, sender: BatchSender):
        self.sender = sender
        self.state = BufferState()

    def _submit(self) -> list[str]:
        was_editing = self.state.is_editing
        try:
            self.state = submit(self.state)
        except ClientValidationError as e:
            return [f"! {e.message} ({e.field})"]
        self.state = acknowledge_scroll(self.state)
        if was_editing:
            return ["updated", *render_table(self.state)]
        return [render_table(self.state)[-1]]

    async def handle_line(self, line: str) -> list[str]:
        """
        입력 한 줄 처리.

        Returns:
            출력할 줄 목록
        """
        text = line.rstrip("\r\n")

        if not text.startswith(":"):
            if text:
                self.state = feed_text(self.state, text)
            return self._submit()

        command, _, arg = text[1:].partition(" ")
        arg = arg.strip()

        if command == "q":
            self.state = set_qtty_field(self.state, arg)
            return [f"qtty = {arg}"]
        if command == "e":
            try:
                self.state = select_for_edit(self.state, int(arg) - 1)
            except (ValueError, IndexError):
                return [f"! no entry {arg!r}"]
            return [f"editing {self.state.code_field} x{self.state.qtty_field}"]
        if command == "x":
            self.state = clear(self.state)
            return ["buffer cleared"]
        if command == "s":
            outcome = await self.sender.send(self.state)
            self.state = outcome.state
            return [f"[{notice.level}] {notice.text}" for notice in outcome.notices]
        if command == "l":
            return render_table(self.state)
        if command == "h":
            return HELP_TEXT.splitlines()

        return [f"! unknown command :{command} (:h for help)"]


async def run(base_url: str, timeout: float) -> int:
    async with httpx.AsyncClient(base_url=base_url, timeout=timeout) as client:
        session = ScanSession(BatchSender(client))
        print(f"Ready to scan ({base_url}). :h for help, Ctrl+D to exit.")

        loop = asyncio.get_running_loop()
        while True:
            line = await loop.run_in_executor(None, sys.stdin.readline)
            if not line:
                break
            for out in await session.handle_line(line):
                print(out)

        if session.state.entries:
            logger.warning(f"Exiting with {len(session.state.entries)} unsent item(s)")
    return 0


def client_settings(args: argparse.Namespace, config: dict) -> tuple[str, float]:
    """명령행 옵션 우선, 없으면 config client 섹션."""
    base_url = args.base_url if args.base_url is not None else config["client"]["base_url"]
    timeout = args.timeout if args.timeout is not None else config["client"]["timeout"]
    return base_url, timeout


def main() -> int:
    load_dotenv()
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    parser = argparse.ArgumentParser(description="Terminal barcode scan client")
    parser.add_argument("--config", type=Path, default=None, help="YAML config path")
    parser.add_argument("--base-url", default=None, help="Intake server URL")
    parser.add_argument("--timeout", type=float, default=None, help="Request timeout (s)")
    args = parser.parse_args()

    config = load_config(args.config)
    base_url, timeout = client_settings(args, config)

    try:
        return asyncio.run(run(base_url, timeout))
    except KeyboardInterrupt:
        print("\nExiting.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
