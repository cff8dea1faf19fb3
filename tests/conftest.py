"""
Pytest fixtures for scan intake tests.

구성:
- 경로: tmp 로그 파일, tmp public 디렉터리
- 설정: tmp 경로를 가리키는 config dict
- 앱: create_app(config) + TestClient
"""

import copy
from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.app.config import DEFAULT_CONFIG
from src.app.main import create_app
from src.core.clock import ServerClock
from src.core.log_store import LogStore

# =============================================================================
# Path Fixtures
# =============================================================================

@pytest.fixture
def log_path(tmp_path: Path) -> Path:
    """테스트용 로그 파일 경로 (아직 생성 안 됨)."""
    return tmp_path / "data" / "valores.txt"


@pytest.fixture
def public_dir(tmp_path: Path) -> Path:
    """index.html, app.js가 있는 public 디렉터리."""
    public = tmp_path / "public"
    public.mkdir()
    (public / "index.html").write_text(
        "<!DOCTYPE html><html><body><h1>Scan Intake</h1></body></html>",
        encoding="utf-8",
    )
    (public / "app.js").write_text("console.log('scan');", encoding="utf-8")
    (public / "assets").mkdir()
    (public / "assets" / "index.html").write_text("<p>assets</p>", encoding="utf-8")
    return public


# =============================================================================
# Config / Store Fixtures
# =============================================================================

@pytest.fixture
def test_config(log_path: Path, public_dir: Path) -> dict:
    """tmp 경로를 쓰는 설정."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    config["paths"]["log_file"] = str(log_path)
    config["paths"]["public_dir"] = str(public_dir)
    config["log_store"]["lock_timeout"] = 2.0
    return config


@pytest.fixture
def fixed_clock() -> ServerClock:
    """1700000000000 ms 고정 시계."""
    return ServerClock(source=lambda: 1_700_000_000.0)


@pytest.fixture
def log_store(log_path: Path, fixed_clock: ServerClock) -> LogStore:
    """고정 시계를 쓰는 LogStore."""
    return LogStore(log_path, clock=fixed_clock)


# =============================================================================
# App Fixtures
# =============================================================================

@pytest.fixture
def app(test_config: dict) -> FastAPI:
    """테스트용 FastAPI 앱."""
    return create_app(test_config)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """FastAPI TestClient."""
    with TestClient(app) as client:
        yield client
