# src/dispatch_queue/config.py

"""Settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object per process, read once at import.
- Every value has a working default; nothing is required.
- Malformed values fall back to defaults instead of failing at import.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv

ENV_PREFIX = "DISPATCH"

DEFAULT_TASK_CAPACITY = 8
DEFAULT_WORKER_NAME = "dispatch-worker"
DEFAULT_PUMP_INTERVAL_SECONDS = 0.05


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Optional[Path]) -> Optional[Path]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- Logging ----
    log_level: str
    log_dir: Optional[Path]

    # ---- Tasks ----
    task_capacity: int

    # ---- Worker thread ----
    worker_name: str
    worker_daemon: bool

    # ---- Event-loop pump ----
    pump_interval_seconds: float

    @staticmethod
    def from_env(*, dotenv: bool = True) -> "Settings":
        if dotenv:
            load_dotenv(find_dotenv(usecwd=True), override=False)

        log_level = _env(_k("LOG_LEVEL"), "INFO").strip().upper() or "INFO"
        log_dir = _env_path(_k("LOG_DIR"), None)

        task_capacity = _env_int(_k("TASK_CAPACITY"), DEFAULT_TASK_CAPACITY)
        if task_capacity < 0:
            task_capacity = DEFAULT_TASK_CAPACITY

        worker_name = _env(_k("WORKER_NAME"), DEFAULT_WORKER_NAME).strip() or DEFAULT_WORKER_NAME
        # Daemon workers let interpreter exit reach the atexit shutdown hook.
        worker_daemon = _env_bool(_k("WORKER_DAEMON"), True)

        pump_interval_seconds = _env_float(_k("PUMP_INTERVAL_SECONDS"), DEFAULT_PUMP_INTERVAL_SECONDS)
        if pump_interval_seconds <= 0:
            pump_interval_seconds = DEFAULT_PUMP_INTERVAL_SECONDS

        return Settings(
            log_level=log_level,
            log_dir=log_dir,
            task_capacity=task_capacity,
            worker_name=worker_name,
            worker_daemon=worker_daemon,
            pump_interval_seconds=pump_interval_seconds,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
