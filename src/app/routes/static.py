"""
Static Routes: 브라우저 클라이언트 파일 서빙.

- GET / → public/index.html (없으면 사용법 JSON)
- GET /<path> → public/ 아래 파일

경로 순회 방지:
- resolve()로 symlink까지 따라간 실제 경로가 public/ 내부인지 확인
- 디렉터리는 그 안의 index.html
"""

from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse, JSONResponse, Response

from src.domain.constants import INDEX_FILENAME, get_mime_type
from src.domain.schemas import IntakeResult

router = APIRouter()

USAGE_MESSAGE = (
    "Use /addItem?code=ITEM&qtty=QTTY&date=DATE to append to the intake log. "
    "Use /getTime to read the server time."
)


def get_public_dir(request: Request) -> Path:
    """Request에서 public_dir 경로 가져오기."""
    return request.app.state.public_dir


def resolve_static(public_dir: Path, pathname: str) -> Path | None:
    """
    요청 경로 → public_dir 내부 파일 경로.

    Args:
        public_dir: 정적 파일 루트
        pathname: URL 경로 ("/app.js", "" 등)

    Returns:
        서빙할 파일 경로, 루트 밖이거나 파일이 없으면 None
    """
    rel_path = pathname.lstrip("/") or INDEX_FILENAME

    try:
        root = public_dir.resolve(strict=True)
        resolved = (root / rel_path).resolve()
        resolved.relative_to(root)
    except (ValueError, OSError):
        return None

    if resolved.is_dir():
        resolved = resolved / INDEX_FILENAME
    if not resolved.is_file():
        return None
    return resolved


def not_found() -> JSONResponse:
    return JSONResponse(
        IntakeResult(ok=False, error="Not found").to_dict(), status_code=404
    )


@router.get("/")
async def root(request: Request) -> Response:
    """브라우저 UI 또는 사용법."""
    file_path = resolve_static(get_public_dir(request), INDEX_FILENAME)
    if file_path is not None:
        return FileResponse(path=file_path, media_type=get_mime_type(file_path.name))
    return JSONResponse(IntakeResult(ok=True, message=USAGE_MESSAGE).to_dict())


@router.get("/{pathname:path}")
async def static_file(request: Request, pathname: str) -> Response:
    """정적 파일 (없으면 404 JSON)."""
    file_path = resolve_static(get_public_dir(request), pathname)
    if file_path is None:
        return not_found()
    return FileResponse(path=file_path, media_type=get_mime_type(file_path.name))
