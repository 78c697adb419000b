"""Tests for the pure state-transition functions."""

import pytest

from microwave.core import transitions
from microwave.core.domain import (
    CloseCommand,
    DoorClosedIdleState,
    DoorOpenIdleState,
    DoorOpenPausedState,
    OpenCommand,
    RunningState,
    StartCommand,
    StopCommand,
)
from microwave.core.time_remaining import TimeRemaining

USER = "alice"


class TestIdleDoorTransitions:
    def test_open_when_idle(self) -> None:
        result = transitions.open_when_idle(OpenCommand(USER), DoorClosedIdleState())
        assert result == DoorOpenIdleState()

    def test_close_when_idle(self) -> None:
        result = transitions.close_when_idle(CloseCommand(USER), DoorOpenIdleState())
        assert result == DoorClosedIdleState()


class TestStart:
    def test_start_runs_for_the_requested_time(self) -> None:
        cmd = StartCommand(USER, how_long=TimeRemaining(300))
        result = transitions.start(cmd, DoorClosedIdleState())
        assert result == RunningState(remaining=TimeRemaining(300))


class TestPauseAndResume:
    """Opening and closing the door carries the remaining time over unchanged."""

    def test_open_when_running_pauses(self) -> None:
        result = transitions.open_when_running(
            OpenCommand(USER), RunningState(remaining=TimeRemaining(250))
        )
        assert result == DoorOpenPausedState(remaining=TimeRemaining(250))

    def test_close_when_paused_resumes(self) -> None:
        result = transitions.close_when_paused(
            CloseCommand(USER), DoorOpenPausedState(remaining=TimeRemaining(250))
        )
        assert result == RunningState(remaining=TimeRemaining(250))

    @pytest.mark.parametrize("seconds", [1, 42, 250, 5999])
    def test_pause_then_resume_preserves_remaining(self, seconds: int) -> None:
        running = RunningState(remaining=TimeRemaining(seconds))
        paused = transitions.open_when_running(OpenCommand(USER), running)
        resumed = transitions.close_when_paused(CloseCommand(USER), paused)
        assert resumed == running
        assert resumed.remaining is running.remaining


class TestStop:
    def test_stop_when_running(self) -> None:
        result = transitions.stop_when_running(
            StopCommand(USER), RunningState(remaining=TimeRemaining(10))
        )
        assert result == DoorClosedIdleState()

    def test_stop_when_paused(self) -> None:
        result = transitions.stop_when_paused(
            StopCommand(USER), DoorOpenPausedState(remaining=TimeRemaining(10))
        )
        assert result == DoorClosedIdleState()


class TestTickWhenRunning:
    def test_tick_counts_down_one_second(self) -> None:
        result = transitions.tick_when_running(RunningState(remaining=TimeRemaining(250)))
        assert result == RunningState(remaining=TimeRemaining(249))

    def test_last_tick_returns_to_idle(self) -> None:
        result = transitions.tick_when_running(RunningState(remaining=TimeRemaining(1)))
        assert result == DoorClosedIdleState()
