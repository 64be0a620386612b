"""Time sources for ``created_at`` / ``updated_at`` bookkeeping."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Protocol


class Clock(Protocol):
    """Injected into repositories instead of reading the wall clock."""

    def now(self) -> datetime: ...


class SystemClock(Clock):
    """UTC wall clock."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock(Clock):
    """
    Clock that returns whatever it was last set to.

    Usage::

        clock = FixedClock(datetime(2012, 11, 1, 12, tzinfo=timezone.utc))
        repo = MemoryRepository(User, clock=clock)
        repo.create()               # created_at == 2012-11-01 12:00
        clock.advance(days=1)
        repo.update(record)         # updated_at == 2012-11-02 12:00
    """

    def __init__(self, current: datetime | None = None) -> None:
        self.current = current or datetime.now(timezone.utc)

    def now(self) -> datetime:
        return self.current

    def set(self, current: datetime) -> None:
        self.current = current

    def advance(self, **delta: float) -> datetime:
        self.current = self.current + timedelta(**delta)
        return self.current
