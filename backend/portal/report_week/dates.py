"""Calendar helpers for report weeks.

A report week is keyed by its Friday "week ending" date and covers Monday
through Friday of that week. Everything here works on plain calendar dates;
timezone-aware instants live in `portal.report_week.periods`.
"""

from __future__ import annotations

import re
from datetime import date, timedelta

from portal.common.exceptions import ValidationError

FRIDAY = 4
DAYS_MONDAY_TO_FRIDAY = 4

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def is_friday(value: date) -> bool:
    # Ordinal 1 is 0001-01-01, a Monday in the proleptic Gregorian calendar.
    return (value.toordinal() - 1) % 7 == FRIDAY


def parse_iso_date(value: str) -> date | None:
    if not isinstance(value, str) or not _ISO_DATE_RE.match(value.strip()):
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        return None


def is_valid_friday_date(value: str) -> bool:
    """True only for a well-formed `YYYY-MM-DD` string naming a Friday. Never raises."""
    parsed = parse_iso_date(value)
    return parsed is not None and is_friday(parsed)


def parse_week_ending_date(value: str | date) -> date:
    if isinstance(value, date):
        parsed: date | None = value
    else:
        parsed = parse_iso_date(value)
    if parsed is None or not is_friday(parsed):
        raise ValidationError("Selected date must be a Friday", details={"weekEndingDate": str(value)})
    return parsed


def monday_from_friday(friday: date) -> date:
    return friday - timedelta(days=DAYS_MONDAY_TO_FRIDAY)


def week_ending_date_string(value: date) -> str:
    return value.isoformat()


def format_date_display(value: date) -> str:
    """`Jan 24, 2025`"""
    return f"{value:%b} {value.day}, {value.year}"


def format_week_period(start: date, end: date) -> str:
    """`Jan 20 - Jan 24, 2025`; the year is taken from the end date."""
    return f"{start:%b} {start.day} - {end:%b} {end.day}, {end.year}"


def week_period_label(week_ending_date: date) -> str:
    return format_week_period(monday_from_friday(week_ending_date), week_ending_date)
