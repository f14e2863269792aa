# src/task_calendar/core/errors.py

from __future__ import annotations


class TaskCalendarError(Exception):
    """Base class for errors raised by task_calendar."""


class InvalidRecurrenceConfig(TaskCalendarError, ValueError):
    """Weekly/fortnightly task without a usable repeat_day, or an unknown repeat type."""


class TaskNotFound(TaskCalendarError, KeyError):
    """A store mutation referenced a task id that does not exist."""

    def __str__(self) -> str:
        return f"task not found: {self.args[0] if self.args else '?'}"


class InconsistentRecordWarning(UserWarning):
    """
    More than one completion or skip record for the same (task, day).

    This is data corruption on the caller side; the last record supplied wins.
    """
