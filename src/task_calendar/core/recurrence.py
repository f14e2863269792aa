# src/task_calendar/core/recurrence.py

from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from .dates import DAYS_PER_WEEK, add_days, to_day, weekday_index, weeks_between
from .errors import InvalidRecurrenceConfig
from .models import RepeatType, Task


def validate_recurrence(repeat_type: RepeatType | str, repeat_day: int | None) -> RepeatType:
    """
    Check a (repeat_type, repeat_day) pair and return the parsed repeat type.

    repeat_day is ignored for none/daily; weekly/fortnightly require 0..6.
    """
    rt = RepeatType.parse(repeat_type)
    if not rt.needs_weekday:
        return rt
    if repeat_day is None or isinstance(repeat_day, bool):
        raise InvalidRecurrenceConfig(f"{rt.value} task requires repeat_day")
    if not isinstance(repeat_day, int) or not 0 <= repeat_day < DAYS_PER_WEEK:
        raise InvalidRecurrenceConfig(f"repeat_day out of range: {repeat_day!r}")
    return rt


def first_occurrence(start_date: date, repeat_day: int) -> date:
    """First date >= start_date that falls on repeat_day."""
    shift = (repeat_day - weekday_index(start_date)) % DAYS_PER_WEEK
    return add_days(start_date, shift)


def is_due(task: Task, day: date) -> bool:
    """
    Whether `task` has an occurrence on `day`.

    Fortnightly parity is anchored at the week of the task's first occurrence,
    not at a global epoch.
    """
    day = to_day(day)
    rt = validate_recurrence(task.repeat_type, task.repeat_day)

    if day < task.start_date:
        return False

    if rt is RepeatType.NONE:
        return day == task.start_date
    if rt is RepeatType.DAILY:
        return True

    assert task.repeat_day is not None
    if weekday_index(day) != task.repeat_day:
        return False
    if rt is RepeatType.WEEKLY:
        return True

    anchor = first_occurrence(task.start_date, task.repeat_day)
    return weeks_between(anchor, day) % 2 == 0


def due_tasks(tasks: Iterable[Task], day: date) -> list[Task]:
    """Tasks due on `day`, in display order."""
    out = [t for t in tasks if is_due(t, day)]
    out.sort(key=lambda t: (t.sort_order, t.id))
    return out
