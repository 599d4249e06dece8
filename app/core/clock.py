"""
Timestamps are stored in UTC; calendar days are counted in REPORT_TIMEZONE.

SQLite drops tzinfo on the way back, so naive values read from the
database are taken as UTC.
"""
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from functools import lru_cache
from typing import Tuple
from zoneinfo import ZoneInfo

from app.core.config import settings


def utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


@lru_cache
def report_zone() -> tzinfo:
    if settings.REPORT_TIMEZONE.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(settings.REPORT_TIMEZONE)


def as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def local_date(moment: datetime) -> date:
    """The reporting day a stored timestamp falls on."""
    return as_utc(moment).astimezone(report_zone()).date()


def today() -> date:
    return local_date(utcnow())


def day_bounds(day: date) -> Tuple[datetime, datetime]:
    """UTC [start, end) of a reporting day."""
    start = datetime.combine(day, time.min, tzinfo=report_zone())
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=report_zone())
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)
