"""Epoch-millisecond <-> calendar conversions used on the wire and in date filters.

All conversions are in UTC. The arithmetic goes through timedelta rather than
datetime.fromtimestamp so that far-future production years (2800-3019) work on
every platform.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def ms_to_datetime(ms: int) -> datetime:
    return _EPOCH + timedelta(milliseconds=ms)


def ms_to_date(ms: int) -> date:
    return ms_to_datetime(ms).date()


def datetime_to_ms(dt: datetime) -> int:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return (dt - _EPOCH) // timedelta(milliseconds=1)


def date_to_ms(d: date) -> int:
    """Epoch milliseconds of UTC midnight on ``d``."""
    return datetime_to_ms(datetime(d.year, d.month, d.day, tzinfo=timezone.utc))


def year_start(ms: int) -> datetime:
    """Jan 1 00:00:00 UTC of the year containing ``ms``."""
    return datetime(ms_to_datetime(ms).year, 1, 1, tzinfo=timezone.utc)


def year_end(ms: int) -> datetime:
    """Dec 31 23:59:59 UTC of the year containing ``ms``."""
    return datetime(ms_to_datetime(ms).year, 12, 31, 23, 59, 59, tzinfo=timezone.utc)
