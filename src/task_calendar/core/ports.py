# src/task_calendar/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the front end.

The calendar engine itself only consumes plain snapshots; the console front end
talks to storage through this Protocol so the SQLite store stays swappable
(a remote CRUD service fits the same shape).
"""

from collections.abc import Sequence
from datetime import date
from typing import Protocol

from .models import RepeatType, Task, TaskCompletion, TaskSkip


class TaskRepo(Protocol):
    # Snapshots
    def list_tasks(self) -> list[Task]: ...
    def list_completions(self) -> list[TaskCompletion]: ...
    def list_skips(self) -> list[TaskSkip]: ...
    def get_task(self, task_id: str) -> Task | None: ...

    # Task mutations
    def add_task(
            self,
            *,
            title: str,
            start_date: date,
            repeat_type: RepeatType | str,
            repeat_day: int | None = None,
    ) -> str: ...

    def update_task(
            self,
            task_id: str,
            *,
            title: str,
            repeat_type: RepeatType | str,
            repeat_day: int | None = None,
    ) -> None: ...

    def delete_task(self, task_id: str) -> None: ...
    def reorder_tasks(self, ordered_ids: Sequence[str]) -> None: ...

    # Per-day records
    def toggle_completion(self, task_id: str, day: date, is_completed: bool) -> None: ...
    def skip_task_for_date(self, task_id: str, day: date) -> None: ...
