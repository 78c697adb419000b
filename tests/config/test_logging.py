"""Tests for the microwave logging setup."""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Generator
from pathlib import Path

import pytest

from microwave.config.logging import configure_logging
from microwave.core.oven import Microwave
from microwave.core.store import JsonFileStore


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None, None, None]:
    """Restore the ``microwave`` logger after each test."""
    logger = logging.getLogger("microwave")
    handlers, level, propagate = logger.handlers[:], logger.level, logger.propagate
    yield
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = propagate


def _json_events(err: str) -> list[dict]:
    return [json.loads(line) for line in err.splitlines() if line.startswith("{")]


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True)
        assert logging.getLogger("microwave").level == logging.DEBUG

    def test_non_verbose_sets_warning(self) -> None:
        configure_logging(verbose=False)
        assert logging.getLogger("microwave").level == logging.WARNING

    def test_root_logger_is_left_alone(self) -> None:
        root = logging.getLogger()
        handlers = root.handlers[:]
        configure_logging(verbose=True, log_json=True)
        assert root.handlers == handlers
        assert not logging.getLogger("microwave").propagate

    def test_reconfiguring_replaces_the_handler(self) -> None:
        configure_logging()
        configure_logging(log_json=True)
        assert len(logging.getLogger("microwave").handlers) == 1


class TestOvenEvents:
    def test_accepted_command_is_logged(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        oven = Microwave(user="alice", tick_interval=3600.0)
        try:
            oven.start(30)
        finally:
            oven.shutdown()
        started = [e for e in _json_events(capfd.readouterr().err) if e["event"] == "started"]
        assert started[0]["user"] == "alice"
        assert started[0]["remaining"] == 30
        assert started[0]["level"] == "info"
        assert started[0]["logger"] == "microwave.oven"
        assert "timestamp" in started[0]

    def test_rejection_is_logged_at_debug(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        Microwave(tick_interval=3600.0).stop()
        events = _json_events(capfd.readouterr().err)
        rejected = [e for e in events if e["event"] == "command rejected"]
        assert rejected[0]["error"] == "cant_stop_when_idle"
        assert rejected[0]["level"] == "debug"

    def test_rejection_is_quiet_without_verbose(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=False, log_json=True)
        Microwave(tick_interval=3600.0).stop()
        assert _json_events(capfd.readouterr().err) == []

    def test_failed_tick_is_logged_with_traceback(
        self, capfd: pytest.CaptureFixture[str], tmp_path: Path
    ) -> None:
        configure_logging(log_json=True)
        store = JsonFileStore(tmp_path)
        oven = Microwave(store, tick_interval=0.01)
        try:
            oven.start(1000)
            with store.locked():
                (tmp_path / "oven.json").write_text("garbage")
            deadline = time.monotonic() + 5.0
            while oven.ticker.running and time.monotonic() < deadline:
                time.sleep(0.01)
        finally:
            oven.shutdown()
        failed = [
            e for e in _json_events(capfd.readouterr().err) if e["event"] == "countdown tick failed"
        ]
        assert failed[0]["level"] == "error"
        assert "StoreError" in failed[0]["exception"]
