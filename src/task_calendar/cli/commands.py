# src/task_calendar/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from datetime import date
from typing import cast

from ..core.dates import parse_weekday, to_day
from ..core.errors import TaskCalendarError
from ..core.models import RepeatType, Task
from ..core.state import AppState
from ..core.window import can_scroll_back, can_scroll_forward
from ..tasks.task_api import (
    current_grid,
    resolve_task_id,
    scroll_floor,
    selected_day_tasks,
    set_week_offset,
    toggle_calendar_lock,
)
from .render import describe_repeat, render_grid, render_task_list

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- argument helpers ----


class UsageError(ValueError):
    pass


def _parse_day(state: AppState, raw: str) -> date:
    s = raw.strip().lower()
    if s == "today":
        return state.today
    try:
        return to_day(s)
    except ValueError:
        raise UsageError(f"Bad date: {raw} (expected YYYY-MM-DD or 'today').") from None


def _parse_rule(args: list[str]) -> tuple[RepeatType, int | None, list[str]]:
    """Parse `<repeat> [weekday] <title...>`; returns the remaining words as the title."""
    if not args:
        raise UsageError("Missing repeat type (none|daily|weekly|fortnightly).")
    rt = RepeatType.parse(args[0])
    rest = args[1:]
    repeat_day: int | None = None
    if rt.needs_weekday:
        if not rest:
            raise UsageError(f"{rt.value} needs a weekday (mon..sun).")
        try:
            repeat_day = parse_weekday(rest[0])
        except ValueError as e:
            raise UsageError(str(e)) from None
        rest = rest[1:]
    if not rest:
        raise UsageError("Missing task title.")
    return rt, repeat_day, rest


def _find_task(state: AppState, ref: str) -> Task:
    task = resolve_task_id(state.task_store.list_tasks(), ref)
    if task is None:
        raise UsageError(f"No single task matches '{ref}'.")
    return task


def _run(action: str, fn: Callable[[], str]) -> str:
    """Run a store-touching command; turn failures into a short reply."""
    try:
        return fn()
    except (UsageError, TaskCalendarError, ValueError) as e:
        return f"Failed to {action}: {e}"
    except Exception:
        logger.exception("Command failed: %s", action)
        return f"Failed to {action}."


# ---- handlers ----


def cmd_help(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    lock = "LOCKED" if state.calendar_locked else "UNLOCKED"
    return (
        "Status:\n"
        f"  Today: {state.today.isoformat()}\n"
        f"  Selected: {state.selected_date.isoformat()}\n"
        f"  Calendar: {lock}, week offset {state.week_offset} (min {scroll_floor(state)})\n"
        f"  Tasks: {len(state.task_store.list_tasks())}"
    )


def cmd_calendar(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    def go() -> str:
        cells = current_grid(state)
        return render_grid(cells, today=state.today, selected=state.selected_date)

    return _run("render calendar", go)


def cmd_select(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not args:
        return "Usage: /select YYYY-MM-DD | today"
    try:
        state.selected_date = _parse_day(state, args[0])
    except UsageError as e:
        return str(e)
    return f"Selected {state.selected_date.isoformat()}."


def cmd_tasks(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return _run(
        "load tasks",
        lambda: render_task_list(state.selected_date, selected_day_tasks(state)),
    )


def cmd_add(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /add <start|today> <none|daily|weekly|fortnightly> [weekday] <title...>
    """
    if len(args) < 3:
        return "Usage: /add <YYYY-MM-DD|today> <none|daily|weekly|fortnightly> [weekday] <title>"

    def go() -> str:
        start = _parse_day(state, args[0])
        rt, repeat_day, title_words = _parse_rule(args[1:])
        task_id = state.task_store.add_task(
            title=" ".join(title_words),
            start_date=start,
            repeat_type=rt,
            repeat_day=repeat_day,
        )
        logger.info("Task added id=%s", task_id)
        return f"Task added ({task_id[:8]})."

    return _run("add task", go)


def cmd_edit(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /edit <id> <none|daily|weekly|fortnightly> [weekday] <title...>
    """
    if len(args) < 3:
        return "Usage: /edit <id> <none|daily|weekly|fortnightly> [weekday] <title>"

    def go() -> str:
        task = _find_task(state, args[0])
        rt, repeat_day, title_words = _parse_rule(args[1:])
        state.task_store.update_task(
            task.id,
            title=" ".join(title_words),
            repeat_type=rt,
            repeat_day=repeat_day,
        )
        return "Task updated."

    return _run("update task", go)


def cmd_delete(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not args:
        return "Usage: /delete <id>"

    def go() -> str:
        task = _find_task(state, args[0])
        state.task_store.delete_task(task.id)
        logger.info("Task deleted id=%s", task.id)
        return f"Task deleted ({task.title})."

    return _run("delete task", go)


def _set_completion(state: AppState, args: list[str], is_completed: bool) -> str:
    if not args:
        return f"Usage: /{'done' if is_completed else 'undone'} <id>"

    def go() -> str:
        task = _find_task(state, args[0])
        state.task_store.toggle_completion(task.id, state.selected_date, is_completed)
        mark = "done" if is_completed else "not done"
        return f"{task.title}: {mark} on {state.selected_date.isoformat()}."

    return _run("update task", go)


def cmd_done(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return _set_completion(state, args, True)


def cmd_undone(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return _set_completion(state, args, False)


def cmd_skip(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not args:
        return "Usage: /skip <id>"

    def go() -> str:
        task = _find_task(state, args[0])
        state.task_store.skip_task_for_date(task.id, state.selected_date)
        return f"Task skipped for {state.selected_date.isoformat()}."

    return _run("skip task", go)


def cmd_reorder(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not args:
        return "Usage: /reorder <id> <id> ..."

    def go() -> str:
        tasks = state.task_store.list_tasks()
        ordered: list[str] = []
        for ref in args:
            task = resolve_task_id(tasks, ref)
            if task is None:
                raise UsageError(f"No single task matches '{ref}'.")
            ordered.append(task.id)
        state.task_store.reorder_tasks(ordered)
        lines = ["Tasks reordered:"]
        for i, t in enumerate(state.task_store.list_tasks(), start=1):
            lines.append(f"  {i}. {t.title} ({describe_repeat(t)})")
        return "\n".join(lines)

    return _run("reorder tasks", go)


def cmd_lock(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    locked = toggle_calendar_lock(state)
    if locked:
        return "Calendar locked (back to the default view)."
    return "Calendar unlocked. Use /prev and /next to scroll."


def _scroll(state: AppState, delta: int) -> str:
    if state.calendar_locked:
        return "Calendar is locked. Use /lock to unlock scrolling."
    floor = scroll_floor(state)
    allowed = can_scroll_back(state.week_offset, floor) if delta < 0 else can_scroll_forward(state.week_offset)
    if not allowed:
        return "Can't scroll further that way."
    set_week_offset(state, state.week_offset + delta)
    return cmd_calendar(state, [])


def cmd_prev(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return _scroll(state, -1)


def cmd_next(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return _scroll(state, +1)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show today, selection and scroll position.")
registry.register("calendar", cmd_calendar, help_text="Show the 6-week calendar.", aliases=["cal"])
registry.register("select", cmd_select, help_text="Select a day: /select YYYY-MM-DD | today.")
registry.register("tasks", cmd_tasks, help_text="List tasks due on the selected day.", aliases=["ls"])
registry.register(
    "add",
    cmd_add,
    help_text="Add a task: /add <start|today> <none|daily|weekly|fortnightly> [weekday] <title>.",
)
registry.register(
    "edit",
    cmd_edit,
    help_text="Edit a task: /edit <id> <none|daily|weekly|fortnightly> [weekday] <title>.",
)
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <id>.", aliases=["rm"])
registry.register("done", cmd_done, help_text="Mark a task done on the selected day.")
registry.register("undone", cmd_undone, help_text="Mark a task not done on the selected day.")
registry.register("skip", cmd_skip, help_text="Skip a task on the selected day.")
registry.register("reorder", cmd_reorder, help_text="Reorder tasks: /reorder <id> <id> ...")
registry.register("lock", cmd_lock, help_text="Lock/unlock calendar scrolling.")
registry.register("prev", cmd_prev, help_text="Scroll the calendar one week back.")
registry.register("next", cmd_next, help_text="Scroll the calendar one week forward.")
