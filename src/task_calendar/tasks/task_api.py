# src/task_calendar/tasks/task_api.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from ..core.models import DayProgress, Task, TaskCompletion, TaskDayState, TaskSkip
from ..core.ports import TaskRepo
from ..core.progress import task_day_states
from ..core.state import AppState
from ..core.window import calendar_grid, clamp_week_offset, min_week_offset

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Snapshot:
    """One consistent read of the store, handed to the engine as plain values."""

    tasks: list[Task]
    completions: list[TaskCompletion]
    skips: list[TaskSkip]


def load_snapshot(repo: TaskRepo) -> Snapshot:
    snap = Snapshot(
        tasks=repo.list_tasks(),
        completions=repo.list_completions(),
        skips=repo.list_skips(),
    )
    logger.debug(
        "Snapshot loaded tasks=%d completions=%d skips=%d",
        len(snap.tasks),
        len(snap.completions),
        len(snap.skips),
    )
    return snap


def resolve_task_id(tasks: list[Task], ref: str) -> Task | None:
    """
    Find a task by full id or unique id prefix.

    Returns None when nothing matches or the prefix is ambiguous.
    """
    ref = ref.strip()
    if not ref:
        return None
    for t in tasks:
        if t.id == ref:
            return t
    matches = [t for t in tasks if t.id.startswith(ref)]
    return matches[0] if len(matches) == 1 else None


def current_grid(state: AppState) -> list[tuple[date, DayProgress]]:
    snap = load_snapshot(state.task_store)
    return calendar_grid(snap.tasks, snap.completions, snap.skips, state.today, state.week_offset)


def selected_day_tasks(state: AppState) -> list[tuple[Task, TaskDayState]]:
    snap = load_snapshot(state.task_store)
    return task_day_states(snap.tasks, snap.completions, snap.skips, state.selected_date)


def scroll_floor(state: AppState) -> int:
    return min_week_offset(state.task_store.list_tasks(), state.today)


def set_week_offset(state: AppState, week_offset: int) -> int:
    """Move the grid, clamped to the allowed range; returns the offset applied."""
    state.week_offset = clamp_week_offset(week_offset, state.task_store.list_tasks(), state.today)
    return state.week_offset


def toggle_calendar_lock(state: AppState) -> bool:
    """Flip the lock; locking resets the grid to the default view. Returns the new lock state."""
    if not state.calendar_locked:
        state.week_offset = 0
    state.calendar_locked = not state.calendar_locked
    logger.debug("Calendar lock=%s offset=%s", state.calendar_locked, state.week_offset)
    return state.calendar_locked
