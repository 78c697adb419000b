"""State stores — the single persisted slot holding the oven's current state.

Every store implements the same small contract:

* ``load()`` returns the current :data:`State` (``DoorClosedIdleState`` until
  something else has been saved)
* ``save(state)`` replaces it
* ``locked()`` is a context manager granting exclusive access; callers hold
  it across a whole load-compute-save so no other writer can interleave

The lock is re-entrant within one thread.
"""

from __future__ import annotations

import fcntl
import json
import threading
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from pathlib import Path
from typing import Any, Protocol, TextIO

from microwave.core.domain import (
    INITIAL_STATE,
    DoorClosedIdleState,
    DoorOpenIdleState,
    DoorOpenPausedState,
    RunningState,
    State,
)
from microwave.core.time_remaining import TimeRemaining

_DEFAULT_STATE_FILE = "oven.json"

_STATE_NAMES: dict[type, str] = {
    DoorClosedIdleState: "door_closed_idle",
    DoorOpenIdleState: "door_open_idle",
    RunningState: "running",
    DoorOpenPausedState: "door_open_paused",
}


class StoreError(Exception):
    """Raised when the persisted state cannot be read or written."""


class StateStore(Protocol):
    def load(self) -> State: ...

    def save(self, state: State) -> None: ...

    def locked(self) -> AbstractContextManager[None]: ...


class InMemoryStore:
    """Keeps the state in a single in-process cell."""

    def __init__(self, initial: State = INITIAL_STATE) -> None:
        self._state: State = initial
        self._lock = threading.RLock()

    def load(self) -> State:
        return self._state

    def save(self, state: State) -> None:
        self._state = state

    @contextmanager
    def locked(self) -> Iterator[None]:
        with self._lock:
            yield


def state_to_dict(state: State) -> dict[str, Any]:
    """Serialize *state* to the JSON-compatible form written to disk."""
    remaining = getattr(state, "remaining", None)
    return {
        "state": _STATE_NAMES[type(state)],
        "remaining": remaining.seconds if remaining is not None else None,
    }


def state_from_dict(data: dict[str, Any]) -> State:
    """Inverse of :func:`state_to_dict`.  Raises :class:`StoreError` on bad input."""
    name = data.get("state")
    if name == "door_closed_idle":
        return DoorClosedIdleState()
    if name == "door_open_idle":
        return DoorOpenIdleState()
    if name in ("running", "door_open_paused"):
        raw = data.get("remaining")
        remaining = TimeRemaining.create(raw) if isinstance(raw, int) else None
        if remaining is None:
            raise StoreError(f"{name} state needs a positive remaining time, got {raw!r}")
        if name == "running":
            return RunningState(remaining=remaining)
        return DoorOpenPausedState(remaining=remaining)
    raise StoreError(f"unknown state {name!r}")


class JsonFileStore:
    """Persists the state to ``<state_dir>/oven.json``.

    Exclusive access is held with a thread lock plus an ``flock`` on a sidecar
    ``.lock`` file, so separate processes sharing the directory serialize on
    the same slot as well.
    """

    def __init__(self, state_dir: Path, filename: str = _DEFAULT_STATE_FILE) -> None:
        self._state_dir = state_dir
        self._path = state_dir / filename
        self._lock_path = state_dir / f"{filename}.lock"
        self._lock = threading.RLock()
        self._depth = 0
        self._lock_file: TextIO | None = None

    @property
    def path(self) -> Path:
        return self._path

    @contextmanager
    def locked(self) -> Iterator[None]:
        with self._lock:
            if self._depth == 0:
                self._acquire_file_lock()
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
                if self._depth == 0:
                    self._release_file_lock()

    def load(self) -> State:
        """Read the state file; a missing file means a fresh, idle oven."""
        if not self._path.exists():
            return INITIAL_STATE
        try:
            with open(self._path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise StoreError(f"cannot read {self._path}: {exc}") from exc
        if not isinstance(data, dict):
            raise StoreError(f"cannot read {self._path}: expected a JSON object")
        return state_from_dict(data)

    def save(self, state: State) -> None:
        try:
            self._state_dir.mkdir(parents=True, exist_ok=True)
            with open(self._path, "w") as f:
                json.dump(state_to_dict(state), f)
        except OSError as exc:
            raise StoreError(f"cannot write {self._path}: {exc}") from exc

    # -- private helpers -----------------------------------------------------

    def _acquire_file_lock(self) -> None:
        try:
            self._state_dir.mkdir(parents=True, exist_ok=True)
            self._lock_file = open(self._lock_path, "a")
        except OSError as exc:
            raise StoreError(f"cannot open {self._lock_path}: {exc}") from exc
        fcntl.flock(self._lock_file, fcntl.LOCK_EX)

    def _release_file_lock(self) -> None:
        lock_file, self._lock_file = self._lock_file, None
        if lock_file is not None:
            fcntl.flock(lock_file, fcntl.LOCK_UN)
            lock_file.close()
