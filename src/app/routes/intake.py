"""
Intake Routes: 스캔 레코드 기록 + 서버 시각.

- GET /addItem?code=&qtty=&date= → 레코드 한 줄 기록
- GET /getTime → 서버 epoch ms
- GET /health → 헬스 체크

에러는 IntakeError로 올리고 main의 exception handler가
{"ok": false, "error": ...} JSON으로 변환한다.
"""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from src.app.services.intake import IntakeService
from src.core.clock import ServerClock
from src.domain.schemas import IntakeResult

router = APIRouter()


def get_intake_service(request: Request) -> IntakeService:
    """Request에서 IntakeService 가져오기."""
    return request.app.state.intake_service


def get_clock(request: Request) -> ServerClock:
    """Request에서 서버 시계 가져오기."""
    return request.app.state.clock


# 파일 락을 잡으므로 동기 핸들러 (threadpool에서 실행)
@router.get("/addItem")
def add_item(
    request: Request,
    code: str | None = None,
    qtty: str | None = None,
    date: str | None = None,
) -> JSONResponse:
    """레코드 한 건 기록."""
    record = get_intake_service(request).add_item(code, qtty, date)
    result = IntakeResult(ok=True, written=record.to_line())
    return JSONResponse(result.to_dict())


@router.get("/getTime")
async def get_time(request: Request) -> JSONResponse:
    """서버 시각 (배치 timestamp용)."""
    result = IntakeResult(ok=True, server_time=get_clock(request).now_ms())
    return JSONResponse(result.to_dict())


@router.get("/health")
async def health() -> JSONResponse:
    """헬스 체크."""
    return JSONResponse(IntakeResult(ok=True).to_dict())
