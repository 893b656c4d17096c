"""
Injectable time source.

Session timestamps and streak days depend on "now". Everything that
needs the time takes a Clock so tests can pin it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timedelta


class Clock(ABC):
    """Abstract time source."""

    @abstractmethod
    def now(self) -> datetime:
        """Return the current timestamp."""
        pass


class SystemClock(Clock):
    """Wall-clock time in the local timezone."""

    def now(self) -> datetime:
        return datetime.now()


class FixedClock(Clock):
    """
    Manually driven clock for tests and replays.

    Usage:
        clock = FixedClock(datetime(2025, 12, 8, 9, 0))
        clock.advance(days=1)
    """

    def __init__(self, start: datetime):
        self._current = start

    def now(self) -> datetime:
        return self._current

    def set(self, moment: datetime) -> None:
        """Jump to a specific moment."""
        self._current = moment

    def advance(self, **delta: float) -> datetime:
        """Move forward by a timedelta given as keyword arguments."""
        self._current = self._current + timedelta(**delta)
        return self._current
