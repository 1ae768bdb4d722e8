"""Clock and formatting helpers shared by the reminder evaluators."""
from __future__ import annotations

import math
from datetime import date, datetime, time, timezone
from zoneinfo import ZoneInfo

from fast_track.config import settings


def local_now(tz_name: str | None = None) -> datetime:
    """Return an aware ``datetime`` in the reminder timezone."""

    return datetime.now(ZoneInfo(tz_name or settings.REMINDER_TIMEZONE))


def as_utc(value: datetime) -> datetime:
    """Normalise a stored timestamp; naive values (SQLite) are taken as UTC."""

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def local_date(value: datetime, tz_name: str | None = None) -> date:
    """Calendar date of a timestamp in the reminder timezone."""

    return as_utc(value).astimezone(ZoneInfo(tz_name or settings.REMINDER_TIMEZONE)).date()


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'}"


def format_time_remaining(hours: float) -> str:
    """Render remaining fasting time, e.g. ``"6 minutes"``, ``"1h 36m"``, ``"2 hours"``."""

    hours = max(0.0, hours)
    total_minutes = _round_half_up(hours * 60)
    if hours < 1 and total_minutes < 60:
        return _plural(total_minutes, "minute")

    whole_hours, minutes = divmod(total_minutes, 60)
    if minutes == 0:
        return _plural(whole_hours, "hour")
    return f"{whole_hours}h {minutes}m"


def minute_of_day(value: time | datetime) -> int:
    return value.hour * 60 + value.minute


def is_within_time_window(current: time | datetime, target: time, window_minutes: int) -> bool:
    """True when ``current`` is at most ``window_minutes`` from ``target``.

    Compares minutes since midnight, so windows do not wrap across midnight.
    """

    return abs(minute_of_day(current) - minute_of_day(target)) <= window_minutes
