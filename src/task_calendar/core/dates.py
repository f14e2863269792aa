# src/task_calendar/core/dates.py

"""Day-granular date helpers. Weeks start on Monday."""

from __future__ import annotations

from datetime import date, datetime, timedelta

DAYS_PER_WEEK = 7

# Weekday index as stored with tasks: 0 = Sunday ... 6 = Saturday.
WEEKDAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


def to_day(value: date | datetime | str) -> date:
    """Normalize a datetime / ISO string / date to a plain calendar day."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        # Accept both "2024-05-01" and "2024-05-01T00:00:00".
        return date.fromisoformat(value.strip()[:10])
    raise TypeError(f"Cannot convert {type(value).__name__} to a calendar day")


def add_days(day: date, n: int) -> date:
    return day + timedelta(days=n)


def week_start(day: date) -> date:
    """Monday of the week containing `day`."""
    return day - timedelta(days=day.weekday())


def weeks_between(earlier: date, later: date) -> int:
    """Whole Monday-aligned weeks from the week of `earlier` to the week of `later`."""
    return (week_start(later) - week_start(earlier)).days // DAYS_PER_WEEK


def weekday_index(day: date) -> int:
    return day.isoweekday() % DAYS_PER_WEEK


def parse_weekday(raw: str) -> int:
    """Parse "mon" / "Monday" / "1" into the stored weekday index."""
    s = raw.strip().lower()
    if s.isdigit():
        idx = int(s)
        if 0 <= idx < DAYS_PER_WEEK:
            return idx
        raise ValueError(f"weekday index out of range: {raw}")
    for idx, name in enumerate(WEEKDAY_NAMES):
        if s[:3] == name.lower():
            return idx
    raise ValueError(f"unknown weekday: {raw}")
