# src/task_calendar/core/progress.py

"""
Per-task classification and day-level aggregation.

Everything here is a pure function of the snapshots passed in; callers may
memoize per (snapshot, day) but nothing is cached inside.
"""

from __future__ import annotations

import warnings
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from .dates import to_day
from .errors import InconsistentRecordWarning
from .models import DayProgress, DayStatus, Task, TaskCompletion, TaskDayState, TaskSkip
from .recurrence import is_due

RecordKey = tuple[str, date]


@dataclass(frozen=True, slots=True)
class RecordIndex:
    """(task_id, day) lookups over a completions/skips snapshot."""

    completed: dict[RecordKey, bool]
    skipped: frozenset[RecordKey]

    @classmethod
    def build(
        cls,
        completions: Iterable[TaskCompletion],
        skips: Iterable[TaskSkip],
    ) -> RecordIndex:
        completed: dict[RecordKey, bool] = {}
        for c in completions:
            key = (c.task_id, to_day(c.day))
            if key in completed:
                _warn_duplicate("completion", key)
            # Last supplied record wins.
            completed[key] = bool(c.completed)

        skipped: set[RecordKey] = set()
        for s in skips:
            key = (s.task_id, to_day(s.day))
            if key in skipped:
                _warn_duplicate("skip", key)
            skipped.add(key)

        return cls(completed=completed, skipped=frozenset(skipped))

    def is_skipped(self, task_id: str, day: date) -> bool:
        return (task_id, day) in self.skipped

    def is_completed(self, task_id: str, day: date) -> bool:
        return self.completed.get((task_id, day), False)


def _warn_duplicate(kind: str, key: RecordKey) -> None:
    task_id, day = key
    warnings.warn(
        f"duplicate {kind} records for task={task_id} day={day.isoformat()}; using the last one",
        InconsistentRecordWarning,
        stacklevel=4,
    )


def classify_task(task: Task, day: date, index: RecordIndex) -> TaskDayState:
    if not is_due(task, day):
        return TaskDayState.NOT_DUE
    if index.is_skipped(task.id, day):
        return TaskDayState.SKIPPED
    if index.is_completed(task.id, day):
        return TaskDayState.COMPLETED
    return TaskDayState.PENDING


def task_day_states(
    tasks: Iterable[Task],
    completions: Iterable[TaskCompletion],
    skips: Iterable[TaskSkip],
    day: date,
) -> list[tuple[Task, TaskDayState]]:
    """
    Classification of every task on `day`, in display order.

    Tasks that are not due are left out; skipped ones are kept so a task list
    can still show them greyed out.
    """
    day = to_day(day)
    index = RecordIndex.build(completions, skips)
    out: list[tuple[Task, TaskDayState]] = []
    for task in sorted(tasks, key=lambda t: (t.sort_order, t.id)):
        state = classify_task(task, day, index)
        if state is not TaskDayState.NOT_DUE:
            out.append((task, state))
    return out


def summarize_day(
    tasks: Iterable[Task],
    index: RecordIndex,
    day: date,
    today: date,
) -> DayProgress:
    """day_progress over a pre-built index (used when rendering many days)."""
    due = 0
    completed = 0
    for task in tasks:
        state = classify_task(task, day, index)
        if state is TaskDayState.COMPLETED:
            due += 1
            completed += 1
        elif state is TaskDayState.PENDING:
            due += 1

    if due == 0:
        return DayProgress(status=DayStatus.EMPTY, progress=0.0)

    progress = completed / due
    if completed == due:
        status = DayStatus.COMPLETE
    elif day > today:
        status = DayStatus.UPCOMING
    elif day < today:
        status = DayStatus.OVERDUE
    else:
        status = DayStatus.PARTIAL

    return DayProgress(status=status, progress=progress, completed=completed, due=due)


def day_progress(
    tasks: Iterable[Task],
    completions: Iterable[TaskCompletion],
    skips: Iterable[TaskSkip],
    day: date,
    today: date,
) -> DayProgress:
    index = RecordIndex.build(completions, skips)
    return summarize_day(tasks, index, to_day(day), to_day(today))
