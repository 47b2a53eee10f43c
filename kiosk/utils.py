import math
from datetime import date, datetime, timezone
from typing import Any


def get_date_suffix_for_filename(now: datetime | None = None) -> str:
    """Returns the date as a YYYY-MM-DD string for filenames."""
    return (now or datetime.now()).strftime("%Y-%m-%d")


def to_number(value: Any) -> float:
    """
    Parses a stored numeric value, treating anything unusable as 0.
    Persisted data may have been hand-edited or written by an older schema,
    so strings are parsed and None, NaN, infinities and garbage all become 0.
    """
    if isinstance(value, bool) or value is None:
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def local_now() -> datetime:
    """
    Wall-clock time in the system zone, left naive so window boundaries
    resolve their own UTC offset (a month start may sit on the other side
    of a DST change).
    """
    return datetime.now()


def as_aware(moment: datetime) -> datetime:
    """Naive datetimes are taken as system local time."""
    if moment.tzinfo is None:
        return moment.astimezone()
    return moment


def utc_day(moment: datetime) -> date:
    """Calendar day of an instant in UTC, used as the bucketing key."""
    return as_aware(moment).astimezone(timezone.utc).date()
