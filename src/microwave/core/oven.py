"""Microwave — dispatches operator commands against the persisted state.

Every public operation runs as one critical section on the store: load the
current state, pick the transition for the (state, command) pair or the
matching :class:`Error`, save on success, and start or stop the countdown
ticker when entering or leaving ``Running``.  Rejections never write.
"""

from __future__ import annotations

from typing import assert_never

import structlog

from microwave.core import transitions
from microwave.core.domain import (
    ApiResult,
    CloseCommand,
    DoorClosedIdleState,
    DoorOpenIdleState,
    DoorOpenPausedState,
    Error,
    OpenCommand,
    RunningState,
    StartCommand,
    State,
    StopCommand,
    UserId,
)
from microwave.core.store import InMemoryStore, StateStore, StoreError
from microwave.core.ticker import Ticker
from microwave.core.time_remaining import TimeRemaining

_DEFAULT_USER = "operator"

log = structlog.get_logger("microwave.oven")


class Microwave:
    """The command dispatcher for a single oven.

    The ticker is owned by the dispatcher and started or stopped only while
    the store lock is held, so a firing can never resurrect ``Running`` after
    a command has left it.
    """

    def __init__(
        self,
        store: StateStore | None = None,
        *,
        user: UserId = _DEFAULT_USER,
        tick_interval: float = 1.0,
    ) -> None:
        self._store: StateStore = store if store is not None else InMemoryStore()
        self._user = user
        self._ticker = Ticker(
            self._scheduled_tick, interval=tick_interval, guard=self._store.locked
        )

    @property
    def ticker(self) -> Ticker:
        return self._ticker

    # -- public API ----------------------------------------------------------

    def open(self) -> ApiResult:
        """Open the door, pausing the countdown if one is running."""
        cmd = OpenCommand(user=self._user)
        with self._store.locked():
            current = self._store.load()
            if isinstance(current, DoorClosedIdleState):
                return self._accept("door opened", transitions.open_when_idle(cmd, current))
            if isinstance(current, RunningState):
                return self._accept(
                    "door opened while running", transitions.open_when_running(cmd, current)
                )
            if isinstance(current, (DoorOpenIdleState, DoorOpenPausedState)):
                return self._reject("open", current, Error.CANT_OPEN_DOOR_WHEN_DOOR_IS_ALREADY_OPEN)
            assert_never(current)

    def close(self) -> ApiResult:
        """Close the door, resuming the countdown if it was paused."""
        cmd = CloseCommand(user=self._user)
        with self._store.locked():
            current = self._store.load()
            if isinstance(current, DoorOpenIdleState):
                return self._accept("door closed", transitions.close_when_idle(cmd, current))
            if isinstance(current, DoorOpenPausedState):
                return self._accept(
                    "door closed while paused", transitions.close_when_paused(cmd, current)
                )
            if isinstance(current, (DoorClosedIdleState, RunningState)):
                return self._reject(
                    "close", current, Error.CANT_CLOSE_DOOR_WHEN_DOOR_IS_ALREADY_CLOSED
                )
            assert_never(current)

    def start(self, seconds: int) -> ApiResult:
        """Start a countdown of *seconds* from a closed, idle oven."""
        with self._store.locked():
            current = self._store.load()
            how_long = TimeRemaining.create(seconds)
            if how_long is None:
                return self._reject("start", current, Error.CANT_USE_NEGATIVE_TIME_REMAINING)
            cmd = StartCommand(user=self._user, how_long=how_long)
            if isinstance(current, DoorClosedIdleState):
                return self._accept("started", transitions.start(cmd, current))
            if isinstance(current, (DoorOpenIdleState, RunningState, DoorOpenPausedState)):
                return self._reject("start", current, Error.CANT_START)
            assert_never(current)

    def stop(self) -> ApiResult:
        """Abandon the countdown, whether running or paused."""
        cmd = StopCommand(user=self._user)
        with self._store.locked():
            current = self._store.load()
            if isinstance(current, RunningState):
                return self._accept("stopped", transitions.stop_when_running(cmd, current))
            if isinstance(current, DoorOpenPausedState):
                return self._accept(
                    "stopped while paused", transitions.stop_when_paused(cmd, current)
                )
            if isinstance(current, (DoorClosedIdleState, DoorOpenIdleState)):
                return self._reject("stop", current, Error.CANT_STOP_WHEN_IDLE)
            assert_never(current)

    def get_state(self) -> State:
        with self._store.locked():
            return self._store.load()

    def tick(self) -> State:
        """Advance a running countdown by one second.

        Run by the ticker on every firing.  Any state other than
        ``Running`` is left alone; a countdown that runs out returns the oven
        to ``DoorClosedIdle`` and stops the ticker.
        """
        with self._store.locked():
            current = self._store.load()
            if not isinstance(current, RunningState):
                return current
            new_state = transitions.tick_when_running(current)
            self._store.save(new_state)
            if not isinstance(new_state, RunningState):
                self._ticker.stop()
                log.info("countdown finished", user=self._user)
            return new_state

    def resume_countdown(self) -> State:
        """Host the countdown for an oven already persisted as ``Running``.

        Used when another process started the oven; starts the ticker iff the
        stored state is ``Running``.
        """
        with self._store.locked():
            current = self._store.load()
            if isinstance(current, RunningState):
                self._ticker.start()
            return current

    def shutdown(self, timeout: float | None = 1.0) -> None:
        """Stop the ticker without touching the persisted state."""
        with self._store.locked():
            self._ticker.stop()
        self._ticker.join(timeout)

    # -- private helpers -----------------------------------------------------

    def _scheduled_tick(self) -> None:
        """Ticker callback.  A store failure ends the countdown in this process.

        The persisted state is left as it was; ``resume_countdown()`` picks
        it up again once the store is readable.
        """
        try:
            self.tick()
        except StoreError:
            log.exception("countdown tick failed", user=self._user)
            self._ticker.stop()

    def _accept(self, event: str, new_state: State) -> ApiResult:
        """Persist *new_state* and sync the ticker with it.  Caller holds the lock."""
        self._store.save(new_state)
        if isinstance(new_state, RunningState):
            self._ticker.start()
            log.info(event, user=self._user, remaining=new_state.remaining.seconds)
        else:
            self._ticker.stop()
            log.info(event, user=self._user)
        return ApiResult(state=new_state, error=Error.NO_ERROR)

    def _reject(self, command: str, current: State, error: Error) -> ApiResult:
        log.debug("command rejected", command=command, error=error.value, user=self._user)
        return ApiResult(state=current, error=error)
