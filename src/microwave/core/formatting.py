"""Human-readable rendering of states and errors for the presentation layer."""

from __future__ import annotations

from typing import assert_never

from microwave.core.domain import (
    DoorClosedIdleState,
    DoorOpenIdleState,
    DoorOpenPausedState,
    Error,
    RunningState,
    State,
)

DEFAULT_LOCALE = "en-US"

_MESSAGES_EN: dict[Error, str] = {
    Error.NO_ERROR: "",
    Error.CANT_USE_NEGATIVE_TIME_REMAINING: "Can't Use Negative Time",
    Error.CANT_OPEN_DOOR_WHEN_DOOR_IS_ALREADY_OPEN: "Can't Open Door When Door Is Already Open",
    Error.CANT_CLOSE_DOOR_WHEN_DOOR_IS_ALREADY_CLOSED: "Can't Close Door When Door Is Already Closed",
    Error.CANT_START: "Can't Start",
    Error.CANT_STOP_WHEN_IDLE: "Can't Stop When Idle",
}

_MESSAGES_FR: dict[Error, str] = {
    Error.NO_ERROR: "",
    Error.CANT_USE_NEGATIVE_TIME_REMAINING: "Impossible d'utiliser un temps négatif",
    Error.CANT_OPEN_DOOR_WHEN_DOOR_IS_ALREADY_OPEN: (
        "Impossible d'ouvrir la porte quand la porte est déjà ouverte"
    ),
    Error.CANT_CLOSE_DOOR_WHEN_DOOR_IS_ALREADY_CLOSED: (
        "Impossible de fermer la porte quand la porte est déjà fermée"
    ),
    Error.CANT_START: "Impossible de démarrer",
    Error.CANT_STOP_WHEN_IDLE: "Impossible d'arrêter à l'arrêt",
}


def state_to_string(state: State) -> str:
    """Render *state* as a short status line, e.g. ``Running, 5:00 remaining``."""
    if isinstance(state, DoorClosedIdleState):
        return "Door closed, idle"
    if isinstance(state, DoorOpenIdleState):
        return "Door open, idle"
    if isinstance(state, RunningState):
        return f"Running, {state.remaining} remaining"
    if isinstance(state, DoorOpenPausedState):
        return f"Door open, paused at {state.remaining} remaining"
    assert_never(state)


def error_to_string(locale: str, error: Error) -> str:
    """Render *error* in the language of *locale*.

    Tags whose primary language is French (``fr``, ``fr-FR``, ``fr_CA`` ...)
    get French; anything else falls back to English.
    """
    language = locale.replace("_", "-").split("-", 1)[0].lower()
    messages = _MESSAGES_FR if language == "fr" else _MESSAGES_EN
    return messages[error]
