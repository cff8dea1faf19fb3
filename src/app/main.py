"""
FastAPI 애플리케이션 진입점.

실행:
- 개발: uv run uvicorn src.app.main:app --reload
- 프로덕션: uv run python -m src.app.main
"""

import logging
import socket
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.app.config import load_config, resolve_path
from src.app.routes import intake, static
from src.app.services.intake import IntakeService
from src.core.clock import ServerClock
from src.core.log_store import LogStore
from src.domain.errors import IntakeError
from src.domain.schemas import IntakeResult

logger = logging.getLogger(__name__)


def list_endpoints(port: int) -> list[str]:
    """
    접속 가능한 URL 목록.

    호스트의 비-loopback IPv4/IPv6 주소 + 127.0.0.1 + 0.0.0.0
    """
    endpoints: list[str] = []
    try:
        infos = socket.getaddrinfo(socket.gethostname(), None)
    except OSError:
        infos = []

    for family, _, _, _, sockaddr in infos:
        address = str(sockaddr[0])
        if address.startswith("127.") or address == "::1":
            continue
        if family == socket.AF_INET:
            url = f"http://{address}:{port}"
        elif family == socket.AF_INET6:
            url = f"http://[{address}]:{port}"
        else:
            continue
        if url not in endpoints:
            endpoints.append(url)

    endpoints.append(f"http://127.0.0.1:{port}")
    endpoints.append(f"http://0.0.0.0:{port}")
    return endpoints


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """시작 시 접속 URL과 로그 파일 위치 출력."""
    port = app.state.config["server"]["port"]
    logger.info("Server listening on:")
    for url in list_endpoints(port):
        logger.info(f"  {url}")
    logger.info(f"Intake log: {app.state.log_store.path}")

    yield


# =============================================================================
# Exception Handlers
# =============================================================================


async def intake_error_handler(request: Request, exc: IntakeError) -> JSONResponse:
    if exc.status >= 500:
        logger.error(f"{request.url.path} failed: {exc}")
    else:
        logger.info(f"{request.url.path} rejected: {exc}")
    return JSONResponse(
        IntakeResult(ok=False, error=exc.message).to_dict(), status_code=exc.status
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # 매칭되지 않는 경로/메서드는 모두 404
    if exc.status_code in (404, 405):
        return static.not_found()
    return JSONResponse(
        IntakeResult(ok=False, error=str(exc.detail)).to_dict(),
        status_code=exc.status_code,
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        IntakeResult(ok=False, error="Invalid request").to_dict(), status_code=400
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.url.path}")
    return JSONResponse(
        IntakeResult(ok=False, error="Internal server error").to_dict(), status_code=500
    )


# =============================================================================
# App Factory
# =============================================================================


def create_app(config: dict | None = None) -> FastAPI:
    """
    앱 생성.

    Args:
        config: 설정 dict (기본: load_config())
    """
    if config is None:
        config = load_config()

    clock = ServerClock()
    log_store = LogStore(
        resolve_path(config["paths"]["log_file"]),
        stale_after_ms=config["log_store"]["stale_after_ms"],
        lock_timeout=config["log_store"]["lock_timeout"],
        clock=clock,
    )

    app = FastAPI(
        title="Scan Intake",
        description="바코드 스캔 → 플랫 로그 파일 기록",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.clock = clock
    app.state.log_store = log_store
    app.state.intake_service = IntakeService(
        log_store,
        clock=clock,
        require_positive_qtty=config["intake"]["require_positive_qtty"],
    )
    app.state.public_dir = resolve_path(config["paths"]["public_dir"])

    app.add_exception_handler(IntakeError, intake_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(intake.router, tags=["Intake"])
    app.include_router(static.router, tags=["Static"])

    return app


load_dotenv()
app = create_app()


# =============================================================================
# CLI Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    settings = load_config()
    uvicorn.run(
        create_app(settings),
        host=settings["server"]["host"],
        port=settings["server"]["port"],
    )
