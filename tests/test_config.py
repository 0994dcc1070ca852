# tests/test_config.py

from __future__ import annotations

import os
from pathlib import Path

import pytest

from dispatch_queue.config import (
    DEFAULT_PUMP_INTERVAL_SECONDS,
    DEFAULT_TASK_CAPACITY,
    DEFAULT_WORKER_NAME,
    Settings,
)

_VARS = (
    "DISPATCH_LOG_LEVEL",
    "DISPATCH_LOG_DIR",
    "DISPATCH_TASK_CAPACITY",
    "DISPATCH_WORKER_NAME",
    "DISPATCH_WORKER_DAEMON",
    "DISPATCH_PUMP_INTERVAL_SECONDS",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    s = Settings.from_env(dotenv=False)

    assert s.log_level == "INFO"
    assert s.log_dir is None
    assert s.task_capacity == DEFAULT_TASK_CAPACITY
    assert s.worker_name == DEFAULT_WORKER_NAME
    assert s.worker_daemon is True
    assert s.pump_interval_seconds == DEFAULT_PUMP_INTERVAL_SECONDS


def test_values_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("DISPATCH_LOG_LEVEL", "debug")
    monkeypatch.setenv("DISPATCH_LOG_DIR", str(tmp_path))
    monkeypatch.setenv("DISPATCH_TASK_CAPACITY", "3")
    monkeypatch.setenv("DISPATCH_WORKER_NAME", "bg")
    monkeypatch.setenv("DISPATCH_WORKER_DAEMON", "no")
    monkeypatch.setenv("DISPATCH_PUMP_INTERVAL_SECONDS", "0.5")

    s = Settings.from_env(dotenv=False)

    assert s.log_level == "DEBUG"
    assert s.log_dir == tmp_path
    assert s.task_capacity == 3
    assert s.worker_name == "bg"
    assert s.worker_daemon is False
    assert s.pump_interval_seconds == 0.5


def test_malformed_values_fall_back_to_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DISPATCH_TASK_CAPACITY", "lots")
    monkeypatch.setenv("DISPATCH_PUMP_INTERVAL_SECONDS", "-1")
    monkeypatch.setenv("DISPATCH_WORKER_NAME", "   ")

    s = Settings.from_env(dotenv=False)

    assert s.task_capacity == DEFAULT_TASK_CAPACITY
    assert s.pump_interval_seconds == DEFAULT_PUMP_INTERVAL_SECONDS
    assert s.worker_name == DEFAULT_WORKER_NAME


def test_dotenv_file_is_loaded(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    (tmp_path / ".env").write_text("DISPATCH_TASK_CAPACITY=5\n", "utf-8")
    monkeypatch.chdir(tmp_path)

    try:
        s = Settings.from_env()
    finally:
        os.environ.pop("DISPATCH_TASK_CAPACITY", None)

    assert s.task_capacity == 5
