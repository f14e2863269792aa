# tests/conftest.py

from __future__ import annotations

from collections.abc import Callable
from datetime import date
from pathlib import Path
from types import SimpleNamespace

import pytest

from task_calendar.core.models import RepeatType, Task
from task_calendar.core.state import AppState
from task_calendar.tasks.task_store import TaskStore

# Wednesday; its week starts on Monday 2024-05-13.
TODAY = date(2024, 5, 15)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="task-calendar-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        tasks_db_path=tmp_path / "tasks.sqlite3",
        today_override=TODAY,
        start_locked=True,
    )


@pytest.fixture()
def store(settings: SimpleNamespace) -> TaskStore:
    return TaskStore(settings.tasks_db_path)


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore) -> AppState:
    """
    AppState wired with a real SQLite store in tmp_path.

    The store's correctness is part of what we want to test, so no fakes here.
    """
    return AppState(
        settings=settings,
        task_store=store,
        today=TODAY,
        selected_date=TODAY,
    )


@pytest.fixture()
def make_task() -> Callable[..., Task]:
    counter = {"n": 0}

    def _make(
        start_date: date,
        repeat_type: RepeatType | str = RepeatType.NONE,
        repeat_day: int | None = None,
        *,
        task_id: str | None = None,
        title: str = "task",
        sort_order: int | None = None,
    ) -> Task:
        counter["n"] += 1
        n = counter["n"]
        return Task(
            id=task_id or f"t{n}",
            title=title,
            start_date=start_date,
            repeat_type=RepeatType.parse(repeat_type),
            repeat_day=repeat_day,
            sort_order=n if sort_order is None else sort_order,
        )

    return _make


@pytest.fixture()
def today() -> date:
    return TODAY
