# src/task_calendar/cli/render.py

"""Plain-text rendering of the calendar grid and the per-day task list."""

from __future__ import annotations

from datetime import date

from ..core.dates import DAYS_PER_WEEK, WEEKDAY_NAMES
from ..core.models import DayProgress, DayStatus, Task, TaskDayState

HEADER = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

STATUS_GLYPH = {
    DayStatus.EMPTY: " ",
    DayStatus.COMPLETE: "+",
    DayStatus.PARTIAL: "~",
    DayStatus.UPCOMING: ".",
    DayStatus.OVERDUE: "!",
}

STATE_MARK = {
    TaskDayState.COMPLETED: "[x]",
    TaskDayState.PENDING: "[ ]",
    TaskDayState.SKIPPED: "[-]",
}

CELL_WIDTH = 8


def _cell(day: date, progress: DayProgress, *, today: date, selected: date) -> str:
    label = f"{day.day:>2}{STATUS_GLYPH[progress.status]}"
    if progress.due:
        label += f"{progress.completed}/{progress.due}"
    if day == selected:
        label = f">{label}"
    elif day == today:
        label = f"*{label}"
    return label.ljust(CELL_WIDTH)


def render_grid(
    cells: list[tuple[date, DayProgress]],
    *,
    today: date,
    selected: date,
) -> str:
    if not cells:
        return "(empty calendar)"
    first, last = cells[0][0], cells[-1][0]
    lines = [f"{first.isoformat()} .. {last.isoformat()}"]
    lines.append("".join(h.ljust(CELL_WIDTH) for h in HEADER).rstrip())
    for i in range(0, len(cells), DAYS_PER_WEEK):
        week = cells[i : i + DAYS_PER_WEEK]
        lines.append("".join(_cell(d, p, today=today, selected=selected) for d, p in week).rstrip())
    lines.append("legend: + complete  ~ partial  ! overdue  . upcoming  * today  > selected")
    return "\n".join(lines)


def describe_repeat(task: Task) -> str:
    if task.repeat_day is None or not task.repeat_type.needs_weekday:
        return task.repeat_type.value
    return f"{task.repeat_type.value} on {WEEKDAY_NAMES[task.repeat_day]}"


def render_task_list(day: date, rows: list[tuple[Task, TaskDayState]]) -> str:
    if not rows:
        return f"No tasks due on {day.isoformat()}."
    lines = [f"Tasks for {day.isoformat()}:"]
    for task, state in rows:
        lines.append(f"  {STATE_MARK[state]} {task.id[:8]}  {task.title}  ({describe_repeat(task)})")
    return "\n".join(lines)
