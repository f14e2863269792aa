# src/task_calendar/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the SQLite store into AppState and fixes "today" for the session.
"""

from __future__ import annotations

import logging
from datetime import date

from ..config import get_settings
from ..core.state import AppState
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)


def resolve_today(settings) -> date:
    pinned = getattr(settings, "today_override", None)
    if pinned is not None:
        logger.info("Using pinned today=%s", pinned)
        return pinned
    return date.today()


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    today = resolve_today(settings)
    return AppState(
        settings=settings,
        task_store=TaskStore(settings.tasks_db_path),
        today=today,
        selected_date=today,
        week_offset=0,
        calendar_locked=bool(getattr(settings, "start_locked", True)),
    )
