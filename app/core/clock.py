"""
Clock abstraction.

"Now" and "today" are server-local. Services receive a clock instead of
calling datetime.now() directly so tests can pin time.
"""

from datetime import date, datetime, timedelta


class Clock:
    """Server-local wall clock."""

    def now(self) -> datetime:
        return datetime.now()

    def today(self) -> date:
        return self.now().date()


class FixedClock(Clock):
    """Clock frozen at a given instant; can be moved forward explicitly."""

    def __init__(self, current: datetime):
        self.current = current

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current

    def set(self, current: datetime) -> None:
        self.current = current


system_clock = Clock()
