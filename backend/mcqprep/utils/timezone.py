"""
Time zone helpers.

Timestamps are persisted as naive UTC. Display and calendar grouping use the
configured local zone (India by default).
"""
from datetime import datetime
import pytz

from ..core.config import settings


LOCAL_TZ = pytz.timezone(settings.default_timezone)


def utc_now() -> datetime:
    """Current time as naive UTC, the form stored in the database"""
    return datetime.now(pytz.UTC).replace(tzinfo=None)


def to_naive_utc(dt: datetime) -> datetime:
    """Normalize a client-supplied datetime to naive UTC. Naive input is assumed to be UTC."""
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(pytz.UTC).replace(tzinfo=None)


def utc_to_local(utc_dt: datetime) -> datetime:
    if utc_dt.tzinfo is None:
        utc_dt = utc_dt.replace(tzinfo=pytz.UTC)
    return utc_dt.astimezone(LOCAL_TZ)


def format_local_time(dt: datetime, format_str: str = None) -> str:
    return utc_to_local(dt).strftime(format_str or settings.timezone_display_format)


def local_day_key(dt: datetime) -> str:
    """YYYY-MM-DD of the local calendar day a UTC timestamp falls on"""
    return utc_to_local(dt).strftime("%Y-%m-%d")


def local_week_key(dt: datetime) -> str:
    """YYYY-WW week bucket (weeks start on Sunday) of a UTC timestamp"""
    return utc_to_local(dt).strftime("%Y-%U")
