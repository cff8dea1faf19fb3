"""
설정 로드: default.yaml + 환경 변수.

우선순위 (높은 순):
1. 환경 변수 (PORT, INTAKE_LOG_FILE, INTAKE_PUBLIC_DIR)
2. default.yaml
3. DEFAULT_CONFIG
"""

import copy
import os
import sys
from pathlib import Path
from typing import Any

import yaml

from src.domain.constants import DEFAULT_LOCK_TIMEOUT, DEFAULT_STALE_AFTER_MS

DEFAULT_CONFIG: dict[str, Any] = {
    "server": {
        "host": "0.0.0.0",
        "port": 3000,
    },
    "paths": {
        "log_file": "valores.txt",
        "public_dir": "public",
    },
    "log_store": {
        "stale_after_ms": DEFAULT_STALE_AFTER_MS,
        "lock_timeout": DEFAULT_LOCK_TIMEOUT,
    },
    "intake": {
        "require_positive_qtty": False,
    },
    "client": {
        "base_url": "http://127.0.0.1:3000",
        "timeout": 10.0,
    },
}


def project_root() -> Path:
    """
    상대 경로 기준 디렉터리.

    단일 실행 파일로 패키징된 경우(sys.frozen) 실행 파일 옆,
    그 외에는 프로젝트 루트.
    """
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parent.parent.parent


def _deep_merge(base: dict, override: dict) -> dict:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Path | None = None) -> dict:
    """
    설정 파일 로드.

    Args:
        config_path: YAML 경로 (기본: 프로젝트 루트의 default.yaml)

    Returns:
        DEFAULT_CONFIG에 파일/환경 변수를 덮어쓴 설정 dict
    """
    if config_path is None:
        config_path = project_root() / "default.yaml"

    data: dict[str, Any] = {}
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

    config = _deep_merge(DEFAULT_CONFIG, data)

    if os.getenv("PORT"):
        config["server"]["port"] = int(os.environ["PORT"])
    if os.getenv("INTAKE_LOG_FILE"):
        config["paths"]["log_file"] = os.environ["INTAKE_LOG_FILE"]
    if os.getenv("INTAKE_PUBLIC_DIR"):
        config["paths"]["public_dir"] = os.environ["INTAKE_PUBLIC_DIR"]

    return config


def resolve_path(value: str | Path) -> Path:
    """설정 경로 → 절대 경로 (상대 경로는 project_root 기준)."""
    path = Path(value)
    if not path.is_absolute():
        path = project_root() / path
    return path
