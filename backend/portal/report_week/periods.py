"""Timezone-correct period boundaries for report weeks.

A period starts Monday 00:00:00 and ends Friday 23:59:59, both in the
tenant's local time, and is stored as a pair of UTC instants. The two
boundaries are resolved independently, so a daylight-saving change inside
the week gives them different UTC offsets.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from portal.report_week.dates import monday_from_friday

MINUTES_PER_DAY = 24 * 60

PERIOD_START_TIME = time(0, 0, 0)
PERIOD_END_TIME = time(23, 59, 59)


@dataclass(frozen=True)
class Period:
    start: datetime
    end: datetime
    start_offset_minutes: int = 0
    end_offset_minutes: int = 0

    @property
    def duration(self) -> timedelta:
        return self.end - self.start


@lru_cache(maxsize=256)
def get_zone(timezone_name: str) -> ZoneInfo:
    """Raises `ZoneInfoNotFoundError` for unknown names; validate at configuration time."""
    return ZoneInfo(timezone_name)


def is_valid_timezone(timezone_name: str | None) -> bool:
    if not isinstance(timezone_name, str) or not timezone_name.strip():
        return False
    try:
        get_zone(timezone_name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return False
    return True


def offset_minutes(timezone_name: str, instant: datetime) -> int:
    """UTC offset of the zone at `instant`, in minutes, positive when local time is behind UTC.

    America/New_York gives 300 in January and 240 in July.
    """
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    local = instant.astimezone(get_zone(timezone_name))
    utc_offset = local.utcoffset()
    if utc_offset is None:
        return 0
    minutes = -round(utc_offset.total_seconds() / 60)
    # Local and UTC wall clocks never differ by a full day or more.
    if abs(minutes) >= MINUTES_PER_DAY:
        raise ValueError(f"Offset out of range for {timezone_name}: {minutes} minutes")
    return minutes


def _as_date(value: date | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def _local_instant(day: date, at: time, timezone_name: str) -> datetime:
    local = datetime.combine(day, at, tzinfo=get_zone(timezone_name))
    return local.astimezone(timezone.utc)


def period_start(friday: date | str, timezone_name: str) -> datetime:
    return _local_instant(monday_from_friday(_as_date(friday)), PERIOD_START_TIME, timezone_name)


def period_end(friday: date | str, timezone_name: str) -> datetime:
    return _local_instant(_as_date(friday), PERIOD_END_TIME, timezone_name)


def calculate_period(friday: date | str, timezone_name: str) -> Period:
    start = period_start(friday, timezone_name)
    end = period_end(friday, timezone_name)
    return Period(
        start=start,
        end=end,
        start_offset_minutes=offset_minutes(timezone_name, start),
        end_offset_minutes=offset_minutes(timezone_name, end),
    )
