# src/task_calendar/core/state.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import date

from .ports import TaskRepo


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: object

    task_store: TaskRepo

    # "today" is fixed for the session and passed explicitly to the engine.
    today: date
    selected_date: date

    week_offset: int = 0
    calendar_locked: bool = True

    lock: threading.RLock = field(default_factory=threading.RLock)
