"""Shared pytest fixtures for microwave tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator

import pytest

from microwave.core.domain import State
from microwave.core.oven import Microwave
from microwave.core.store import InMemoryStore

# Long enough that the background ticker never fires during a test; tests
# drive the countdown by calling ``Microwave.tick()`` directly.
IDLE_TICK_INTERVAL = 3600.0


@pytest.fixture()
def make_oven() -> Iterator[Callable[..., Microwave]]:
    """Build ovens over an in-memory store seeded with a given state."""
    ovens: list[Microwave] = []

    def _make(initial: State | None = None, **kwargs: object) -> Microwave:
        store = InMemoryStore(initial) if initial is not None else InMemoryStore()
        kwargs.setdefault("tick_interval", IDLE_TICK_INTERVAL)
        oven = Microwave(store, **kwargs)  # type: ignore[arg-type]
        ovens.append(oven)
        return oven

    yield _make
    for oven in ovens:
        oven.shutdown()
