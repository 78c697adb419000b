"""Domain model — states, commands and errors of the microwave oven.

Business rules:

* the oven cannot be running while the door is open
* the oven cannot be running with no time left

Neither rule is checked at runtime.  There is simply no state type that could
hold such a combination: only :class:`RunningState` and
:class:`DoorOpenPausedState` carry a :class:`TimeRemaining`, and ``Running``
has no door field at all.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from microwave.core.time_remaining import TimeRemaining

UserId = str

# -- states --------------------------------------------------------------------


@dataclass(frozen=True)
class DoorClosedIdleState:
    """Door closed, nothing cooking."""


@dataclass(frozen=True)
class DoorOpenIdleState:
    """Door open, nothing cooking."""


@dataclass(frozen=True)
class RunningState:
    """Door closed and counting down."""

    remaining: TimeRemaining


@dataclass(frozen=True)
class DoorOpenPausedState:
    """Door opened mid-countdown; the remaining time is kept for resuming."""

    remaining: TimeRemaining


State = Union[DoorClosedIdleState, DoorOpenIdleState, RunningState, DoorOpenPausedState]

INITIAL_STATE: State = DoorClosedIdleState()

# -- commands ------------------------------------------------------------------


@dataclass(frozen=True)
class OpenCommand:
    user: UserId


@dataclass(frozen=True)
class CloseCommand:
    user: UserId


@dataclass(frozen=True)
class StartCommand:
    user: UserId
    how_long: TimeRemaining


@dataclass(frozen=True)
class StopCommand:
    user: UserId


Command = Union[OpenCommand, CloseCommand, StartCommand, StopCommand]

# -- errors --------------------------------------------------------------------


class Error(Enum):
    """Every way a command can be rejected, plus the no-error sentinel."""

    NO_ERROR = "no_error"
    CANT_USE_NEGATIVE_TIME_REMAINING = "cant_use_negative_time_remaining"
    CANT_OPEN_DOOR_WHEN_DOOR_IS_ALREADY_OPEN = "cant_open_door_when_door_is_already_open"
    CANT_CLOSE_DOOR_WHEN_DOOR_IS_ALREADY_CLOSED = "cant_close_door_when_door_is_already_closed"
    CANT_START = "cant_start"
    CANT_STOP_WHEN_IDLE = "cant_stop_when_idle"


@dataclass(frozen=True)
class ApiResult:
    """The state after a command together with the (possibly empty) error.

    On rejection ``state`` is the unchanged current state.
    """

    state: State
    error: Error = Error.NO_ERROR

    @property
    def ok(self) -> bool:
        return self.error is Error.NO_ERROR
