"""State transitions — one pure function per legal (state, command) pair.

Each function accepts only the state type it is legal from, so a type checker
rejects e.g. ``open_when_idle(cmd, RunningState(...))``.  None of them do I/O;
the dispatcher logs and persists.
"""

from __future__ import annotations

from microwave.core.domain import (
    CloseCommand,
    DoorClosedIdleState,
    DoorOpenIdleState,
    DoorOpenPausedState,
    OpenCommand,
    RunningState,
    StartCommand,
    State,
    StopCommand,
)


def open_when_idle(cmd: OpenCommand, current: DoorClosedIdleState) -> DoorOpenIdleState:
    return DoorOpenIdleState()


def close_when_idle(cmd: CloseCommand, current: DoorOpenIdleState) -> DoorClosedIdleState:
    return DoorClosedIdleState()


def start(cmd: StartCommand, current: DoorClosedIdleState) -> RunningState:
    return RunningState(remaining=cmd.how_long)


def open_when_running(cmd: OpenCommand, current: RunningState) -> DoorOpenPausedState:
    """Pause the countdown; the remaining time is carried over untouched."""
    return DoorOpenPausedState(remaining=current.remaining)


def close_when_paused(cmd: CloseCommand, current: DoorOpenPausedState) -> RunningState:
    """Resume exactly where :func:`open_when_running` left off."""
    return RunningState(remaining=current.remaining)


def stop_when_running(cmd: StopCommand, current: RunningState) -> DoorClosedIdleState:
    return DoorClosedIdleState()


def stop_when_paused(cmd: StopCommand, current: DoorOpenPausedState) -> DoorClosedIdleState:
    return DoorClosedIdleState()


def tick_when_running(current: RunningState) -> State:
    """Advance the countdown by one second.

    Returns a ``RunningState`` with one second less, or ``DoorClosedIdleState``
    once the last second has elapsed.
    """
    remaining = current.remaining.decrement()
    if remaining is None:
        return DoorClosedIdleState()
    return RunningState(remaining=remaining)
