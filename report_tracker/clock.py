# clock.py
from datetime import date, datetime, timezone


class Clock:
    """Source of the current time. All datetimes are timezone-aware UTC."""

    def now(self) -> datetime:
        raise NotImplementedError

    def today(self) -> date:
        return self.now().date()


class SystemClock(Clock):
    def now(self) -> datetime:
        return datetime.now(timezone.utc)
