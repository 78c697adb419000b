"""TimeRemaining — a positive count of seconds left on the countdown."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TimeRemaining:
    """A whole number of seconds, always greater than zero.

    Use :meth:`create` to build one from untrusted input; it returns ``None``
    instead of raising.  Calling the constructor directly with a non-positive
    value is a programming error and raises ``ValueError``.
    """

    seconds: int

    def __post_init__(self) -> None:
        if isinstance(self.seconds, bool) or not isinstance(self.seconds, int):
            raise TypeError(
                f"seconds must be an integer, got {type(self.seconds).__name__}"
            )
        if self.seconds <= 0:
            raise ValueError(f"seconds must be positive, got {self.seconds}")

    @classmethod
    def create(cls, seconds: int) -> TimeRemaining | None:
        """Return a ``TimeRemaining`` iff *seconds* is a positive integer."""
        if isinstance(seconds, bool) or not isinstance(seconds, int) or seconds <= 0:
            return None
        return cls(seconds)

    def decrement(self) -> TimeRemaining | None:
        """Return one second less, or ``None`` once the countdown is used up."""
        return TimeRemaining.create(self.seconds - 1)

    def __str__(self) -> str:
        return f"{self.seconds // 60}:{self.seconds % 60:02d}"
