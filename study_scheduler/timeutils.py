# study_scheduler/timeutils.py
import logging
from typing import Optional

import pandas as pd

logger = logging.getLogger(__name__)


def to_timestamp(value, tz: Optional[str] = None) -> Optional[pd.Timestamp]:
    """
    Convert a date, datetime, ISO string or Timestamp to a pandas Timestamp.

    With ``tz`` set the result is tz-aware in that zone (naive inputs are
    taken as wall-clock time there). Without it the result is naive; aware
    inputs keep their own wall-clock time. Returns None for empty or
    unparseable values.
    """
    if value is None or value == "":
        return None
    try:
        ts = pd.Timestamp(value)
    except (TypeError, ValueError):
        logger.warning("to_timestamp: could not parse %r", value)
        return None
    if pd.isna(ts):
        return None

    if tz:
        return ts.tz_localize(tz) if ts.tzinfo is None else ts.tz_convert(tz)
    if ts.tzinfo is not None:
        return ts.tz_localize(None)
    return ts


def to_day(value, tz: Optional[str] = None) -> Optional[pd.Timestamp]:
    """Midnight of the calendar day ``value`` falls on."""
    ts = to_timestamp(value, tz)
    return ts.normalize() if ts is not None else None


def weekday_name(ts: pd.Timestamp) -> str:
    return ts.day_name().lower()


def is_weekend(ts: pd.Timestamp) -> bool:
    return ts.weekday() >= 5


def wall_clock(ts: pd.Timestamp) -> pd.Timestamp:
    """Naive local time of ``ts``."""
    return ts.tz_localize(None) if ts.tzinfo is not None else ts


def localize_like(naive: pd.Timestamp, ref: pd.Timestamp) -> pd.Timestamp:
    """Put a naive wall-clock time into ``ref``'s timezone, if it has one."""
    if ref.tzinfo is None:
        return naive
    return naive.tz_localize(ref.tz, ambiguous=False, nonexistent="shift_forward")


def shift_days(day: pd.Timestamp, days) -> pd.Timestamp:
    """Move by whole calendar days, keeping wall-clock time across DST changes."""
    return localize_like(wall_clock(day) + pd.Timedelta(days=days), day)


def at_hour(day: pd.Timestamp, hours) -> pd.Timestamp:
    """Wall-clock ``hours`` after local midnight of ``day``."""
    return localize_like(wall_clock(day).normalize() + pd.Timedelta(hours=hours), day)
