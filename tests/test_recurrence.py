# tests/test_recurrence.py

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from task_calendar.core.errors import InvalidRecurrenceConfig
from task_calendar.core.models import RepeatType
from task_calendar.core.recurrence import due_tasks, first_occurrence, is_due, validate_recurrence

MON = date(2024, 5, 13)
SUNDAY, MONDAY, WEDNESDAY, FRIDAY = 0, 1, 3, 5


def _span(start: date, days: int) -> list[date]:
    return [start + timedelta(days=i) for i in range(days)]


def test_one_off_task_is_due_only_on_its_start_date(make_task) -> None:
    task = make_task(MON, RepeatType.NONE)
    due = [d for d in _span(MON - timedelta(days=30), 90) if is_due(task, d)]
    assert due == [MON]


def test_daily_task_starts_on_start_date(make_task) -> None:
    task = make_task(MON, RepeatType.DAILY)
    assert not is_due(task, MON - timedelta(days=1))
    assert all(is_due(task, d) for d in _span(MON, 60))


def test_daily_task_ignores_repeat_day(make_task) -> None:
    task = make_task(MON, RepeatType.DAILY, repeat_day=9)
    assert is_due(task, MON + timedelta(days=2))


def test_weekly_task_matches_weekday_from_start(make_task) -> None:
    task = make_task(MON, RepeatType.WEEKLY, WEDNESDAY)
    assert is_due(task, date(2024, 5, 15))
    assert is_due(task, date(2024, 5, 22))
    assert is_due(task, date(2024, 7, 3))
    assert not is_due(task, date(2024, 5, 14))
    assert not is_due(task, date(2024, 5, 16))
    # Matching weekday, but before the task started.
    assert not is_due(task, date(2024, 5, 8))


def test_fortnightly_monday_start_alternates(make_task) -> None:
    task = make_task(MON, RepeatType.FORTNIGHTLY, MONDAY)
    assert is_due(task, MON)
    assert not is_due(task, MON + timedelta(days=7))
    assert is_due(task, MON + timedelta(days=14))
    assert not is_due(task, MON + timedelta(days=21))
    assert is_due(task, MON + timedelta(days=28))


def test_fortnightly_first_occurrence_in_the_following_week(make_task) -> None:
    # Starts on a Wednesday, repeats on Mondays: first occurrence is the next Monday.
    task = make_task(date(2024, 5, 15), RepeatType.FORTNIGHTLY, MONDAY)
    assert not is_due(task, date(2024, 5, 13))
    assert is_due(task, date(2024, 5, 20))
    assert not is_due(task, date(2024, 5, 27))
    assert is_due(task, date(2024, 6, 3))


def test_fortnightly_first_occurrence_later_in_start_week(make_task) -> None:
    task = make_task(MON, RepeatType.FORTNIGHTLY, FRIDAY)
    assert is_due(task, date(2024, 5, 17))
    assert not is_due(task, date(2024, 5, 24))
    assert is_due(task, date(2024, 5, 31))


def test_fortnightly_sunday_belongs_to_the_monday_week(make_task) -> None:
    task = make_task(MON, RepeatType.FORTNIGHTLY, SUNDAY)
    assert is_due(task, date(2024, 5, 19))
    assert not is_due(task, date(2024, 5, 26))
    assert is_due(task, date(2024, 6, 2))


def test_fortnightly_parity_is_per_task(make_task) -> None:
    a = make_task(MON, RepeatType.FORTNIGHTLY, MONDAY)
    b = make_task(MON + timedelta(days=7), RepeatType.FORTNIGHTLY, MONDAY)
    day = MON + timedelta(days=14)
    assert is_due(a, day)
    assert not is_due(b, day)
    assert is_due(b, day + timedelta(days=7))


def test_first_occurrence() -> None:
    assert first_occurrence(MON, MONDAY) == MON
    assert first_occurrence(MON, SUNDAY) == date(2024, 5, 19)
    assert first_occurrence(date(2024, 5, 15), MONDAY) == date(2024, 5, 20)


def test_datetime_is_normalized_to_day(make_task) -> None:
    task = make_task(MON, RepeatType.NONE)
    assert is_due(task, datetime(2024, 5, 13, 23, 59))


@pytest.mark.parametrize(
    ("repeat_type", "repeat_day"),
    [
        (RepeatType.WEEKLY, None),
        (RepeatType.FORTNIGHTLY, None),
        (RepeatType.WEEKLY, 7),
        (RepeatType.FORTNIGHTLY, -1),
        (RepeatType.WEEKLY, True),
    ],
)
def test_invalid_weekday_config_is_reported(make_task, repeat_type, repeat_day) -> None:
    task = make_task(MON, repeat_type, repeat_day)
    with pytest.raises(InvalidRecurrenceConfig):
        is_due(task, MON)


def test_unknown_repeat_type_is_rejected() -> None:
    with pytest.raises(InvalidRecurrenceConfig):
        validate_recurrence("monthly", None)
    assert validate_recurrence("Weekly", 2) is RepeatType.WEEKLY


def test_due_tasks_are_sorted_by_order_key(make_task) -> None:
    late = make_task(MON, RepeatType.DAILY, sort_order=5, title="late")
    early = make_task(MON, RepeatType.DAILY, sort_order=1, title="early")
    other_day = make_task(MON + timedelta(days=1), RepeatType.NONE, sort_order=0)
    assert [t.title for t in due_tasks([late, other_day, early], MON)] == ["early", "late"]
