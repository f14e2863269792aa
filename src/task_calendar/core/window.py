# src/task_calendar/core/window.py

"""
Scrollable 6-week calendar window.

The grid spans weeks [offset-3 .. offset+2] relative to the current week, so the
default view shows 3 weeks back and 2 weeks ahead. Scrolling forward past the
default view is not allowed; scrolling back is bounded by the earliest task.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date

from .dates import DAYS_PER_WEEK, add_days, to_day, week_start, weeks_between
from .models import DayProgress, Task, TaskCompletion, TaskSkip
from .progress import RecordIndex, summarize_day

GRID_WEEKS = 6
GRID_DAYS = GRID_WEEKS * DAYS_PER_WEEK
LOOKBACK_WEEKS = 3
DEFAULT_MIN_WEEK_OFFSET = -6
EARLIEST_TASK_BUFFER_WEEKS = 3


def visible_days(today: date, week_offset: int) -> list[date]:
    offset_week_start = add_days(week_start(to_day(today)), week_offset * DAYS_PER_WEEK)
    grid_start = add_days(offset_week_start, -LOOKBACK_WEEKS * DAYS_PER_WEEK)
    return [add_days(grid_start, i) for i in range(GRID_DAYS)]


def min_week_offset(tasks: Iterable[Task], today: date) -> int:
    earliest = min((t.start_date for t in tasks), default=None)
    if earliest is None:
        return DEFAULT_MIN_WEEK_OFFSET
    weeks_back = weeks_between(earliest, to_day(today))
    if weeks_back <= -DEFAULT_MIN_WEEK_OFFSET:
        return DEFAULT_MIN_WEEK_OFFSET
    return -(weeks_back + EARLIEST_TASK_BUFFER_WEEKS)


def max_week_offset() -> int:
    return 0


def can_scroll_back(week_offset: int, minimum: int) -> bool:
    return week_offset > minimum


def can_scroll_forward(week_offset: int) -> bool:
    return week_offset < max_week_offset()


def clamp_week_offset(week_offset: int, tasks: Iterable[Task], today: date) -> int:
    return max(min_week_offset(tasks, today), min(max_week_offset(), int(week_offset)))


def calendar_grid(
    tasks: Sequence[Task],
    completions: Iterable[TaskCompletion],
    skips: Iterable[TaskSkip],
    today: date,
    week_offset: int,
) -> list[tuple[date, DayProgress]]:
    """Visible days paired with their progress, for rendering day cells."""
    today = to_day(today)
    index = RecordIndex.build(completions, skips)
    return [(d, summarize_day(tasks, index, d, today)) for d in visible_days(today, week_offset)]
