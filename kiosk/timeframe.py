from datetime import date, datetime, time, timedelta, tzinfo
from enum import Enum
from typing import Iterable, Optional, Protocol, TypeVar

from . import settings, utils


class Timeframe(str, Enum):
    ALL = "all"
    MONTHLY = "monthly"
    WEEKLY = "weekly"
    DAILY = "daily"

    @classmethod
    def parse(cls, value: "str | Timeframe") -> "Timeframe":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(t.value for t in cls)
            raise ValueError(f"Unknown timeframe '{value}'. Expected one of: {choices}") from None


class Stamped(Protocol):
    timestamp: Optional[datetime]


T = TypeVar("T", bound=Stamped)


def _midnight(day: date, zone: Optional[tzinfo]) -> datetime:
    """Start of `day` in `zone`; a naive zone means system local time."""
    midnight = datetime.combine(day, time())
    if zone is None:
        # Resolves the offset in force on `day` itself.
        return midnight.astimezone()
    return midnight.replace(tzinfo=zone)


def window_start(timeframe: Timeframe, now: datetime) -> Optional[datetime]:
    """
    First instant of the reporting window: local midnight of the first day,
    in the zone of `now` (system local time when `now` is naive).
    None for `all`, which is unbounded.
    """
    if timeframe is Timeframe.ALL:
        return None

    today = now.date()
    if timeframe is Timeframe.DAILY:
        first_day = today
    elif timeframe is Timeframe.WEEKLY:
        # Weeks start on Monday; weekday() is 0 for Monday, 6 for Sunday.
        first_day = today - timedelta(days=today.weekday())
    else:
        first_day = today.replace(day=1)
    return _midnight(first_day, now.tzinfo)


def in_window(timestamp: Optional[datetime], timeframe: Timeframe, now: datetime) -> bool:
    """Undated transactions only count towards the unbounded `all` window."""
    if timeframe is Timeframe.ALL:
        return True
    if timestamp is None:
        return False
    return utils.as_aware(timestamp) >= window_start(timeframe, now)


def filter_transactions(transactions: Iterable[T], timeframe: Timeframe, now: datetime) -> list[T]:
    return [t for t in transactions if in_window(t.timestamp, timeframe, now)]


def proration_divisor(timeframe: Timeframe) -> int:
    return settings.PRORATION_DIVISORS[timeframe.value]


def prorate(amount: float, timeframe: Timeframe) -> float:
    """Scales a monthly fixed cost to the window (30-day month, 4-week month)."""
    return amount / proration_divisor(timeframe)
