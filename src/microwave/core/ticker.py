"""Ticker — a background source of "one second elapsed" events."""

from __future__ import annotations

import threading
from contextlib import AbstractContextManager, nullcontext
from typing import Callable

_DEFAULT_INTERVAL = 1.0


class Ticker:
    """Calls *on_tick* every *interval* seconds on a daemon thread.

    ``start()`` and ``stop()`` are idempotent.  Each ``start()`` after a
    ``stop()`` begins a fresh schedule with its own worker thread.

    If *guard* is given, every firing enters ``guard()`` first and re-checks
    that its schedule is still live before calling *on_tick*.  A ``stop()``
    made while holding the same guard therefore takes effect before the next
    firing, even one already waiting on the guard.
    """

    def __init__(
        self,
        on_tick: Callable[[], object],
        interval: float = _DEFAULT_INTERVAL,
        guard: Callable[[], AbstractContextManager[object]] | None = None,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self._on_tick = on_tick
        self._interval = interval
        self._guard = guard if guard is not None else nullcontext
        self._lock = threading.Lock()
        self._stop_event: threading.Event | None = None
        self._thread: threading.Thread | None = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        with self._lock:
            return self._stop_event is not None

    def start(self) -> None:
        """Begin firing.  No-op if already started."""
        with self._lock:
            if self._stop_event is not None:
                return
            stop_event = threading.Event()
            thread = threading.Thread(
                target=self._run, args=(stop_event,), name="microwave-ticker", daemon=True
            )
            self._stop_event = stop_event
            self._thread = thread
        thread.start()

    def stop(self) -> None:
        """Stop firing.  No-op if already stopped.  Safe to call from *on_tick*."""
        with self._lock:
            if self._stop_event is None:
                return
            self._stop_event.set()
            self._stop_event = None

    def join(self, timeout: float | None = None) -> None:
        """Wait for the most recent worker thread to exit."""
        with self._lock:
            thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    # -- private helpers -----------------------------------------------------

    def _run(self, stop_event: threading.Event) -> None:
        try:
            while not stop_event.wait(self._interval):
                with self._guard():
                    if stop_event.is_set():
                        return
                    self._on_tick()
        finally:
            # on_tick may have raised; the schedule ends with its worker.
            with self._lock:
                if self._stop_event is stop_event:
                    self._stop_event = None
