# src/task_calendar/core/models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import StrEnum

from .errors import InvalidRecurrenceConfig


class RepeatType(StrEnum):
    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    FORTNIGHTLY = "fortnightly"

    @classmethod
    def parse(cls, raw: str | RepeatType) -> RepeatType:
        if isinstance(raw, RepeatType):
            return raw
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            raise InvalidRecurrenceConfig(f"unknown repeat_type: {raw!r}") from None

    @property
    def needs_weekday(self) -> bool:
        return self in (RepeatType.WEEKLY, RepeatType.FORTNIGHTLY)


class DayStatus(StrEnum):
    """
    Day-level status shown on a calendar cell.

    Notes:
    - "upcoming" is only used for future days; they are never partial/overdue.
    - "overdue" wins over "partial" for past days with any pending occurrence.
    """

    EMPTY = "empty"
    COMPLETE = "complete"
    PARTIAL = "partial"
    UPCOMING = "upcoming"
    OVERDUE = "overdue"


class TaskDayState(StrEnum):
    NOT_DUE = "not_due"
    SKIPPED = "skipped"
    COMPLETED = "completed"
    PENDING = "pending"


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    title: str
    start_date: date
    repeat_type: RepeatType
    repeat_day: int | None = None
    sort_order: int = 0


@dataclass(frozen=True, slots=True)
class TaskCompletion:
    task_id: str
    day: date
    completed: bool = True


@dataclass(frozen=True, slots=True)
class TaskSkip:
    task_id: str
    day: date


@dataclass(frozen=True, slots=True)
class DayProgress:
    status: DayStatus
    progress: float
    completed: int = 0
    due: int = 0
