# tests/test_progress.py

from __future__ import annotations

from datetime import timedelta

import pytest

from task_calendar.core.errors import InconsistentRecordWarning, InvalidRecurrenceConfig
from task_calendar.core.models import DayStatus, RepeatType, TaskCompletion, TaskDayState, TaskSkip
from task_calendar.core.progress import day_progress, task_day_states


def test_half_done_today_is_partial(make_task, today) -> None:
    a = make_task(today, RepeatType.DAILY)
    b = make_task(today, RepeatType.DAILY)
    res = day_progress([a, b], [TaskCompletion(a.id, today)], [], today, today)
    assert res.status is DayStatus.PARTIAL
    assert res.progress == 0.5
    assert (res.completed, res.due) == (1, 2)


def test_skipped_task_leaves_day_empty(make_task, today) -> None:
    a = make_task(today, RepeatType.DAILY)
    res = day_progress([a], [], [TaskSkip(a.id, today)], today, today)
    assert res.status is DayStatus.EMPTY
    assert res.progress == 0


def test_pending_past_day_is_overdue(make_task, today) -> None:
    a = make_task(today - timedelta(days=5), RepeatType.DAILY)
    res = day_progress([a], [], [], today - timedelta(days=1), today)
    assert res.status is DayStatus.OVERDUE
    assert res.progress == 0


def test_pending_future_day_is_upcoming(make_task, today) -> None:
    a = make_task(today, RepeatType.DAILY)
    res = day_progress([a], [], [], today + timedelta(days=1), today)
    assert res.status is DayStatus.UPCOMING


def test_all_pending_today_is_partial(make_task, today) -> None:
    a = make_task(today, RepeatType.DAILY)
    res = day_progress([a], [], [], today, today)
    assert res.status is DayStatus.PARTIAL
    assert res.progress == 0


def test_overdue_wins_over_partial_on_past_days(make_task, today) -> None:
    yesterday = today - timedelta(days=1)
    a = make_task(yesterday, RepeatType.DAILY)
    b = make_task(yesterday, RepeatType.DAILY)
    res = day_progress([a, b], [TaskCompletion(a.id, yesterday)], [], yesterday, today)
    assert res.status is DayStatus.OVERDUE
    assert res.progress == 0.5


@pytest.mark.parametrize("delta", [-3, 0, 2])
def test_everything_done_is_complete(make_task, today, delta) -> None:
    day = today + timedelta(days=delta)
    a = make_task(day, RepeatType.NONE)
    res = day_progress([a], [TaskCompletion(a.id, day)], [], day, today)
    assert res.status is DayStatus.COMPLETE
    assert res.progress == 1.0


def test_no_tasks_is_empty(today) -> None:
    res = day_progress([], [], [], today, today)
    assert res.status is DayStatus.EMPTY
    assert res.progress == 0


def test_task_not_started_yet_is_ignored(make_task, today) -> None:
    a = make_task(today + timedelta(days=1), RepeatType.DAILY)
    assert day_progress([a], [], [], today, today).status is DayStatus.EMPTY


def test_unchecked_completion_counts_as_pending(make_task, today) -> None:
    a = make_task(today, RepeatType.DAILY)
    res = day_progress([a], [TaskCompletion(a.id, today, completed=False)], [], today, today)
    assert res.status is DayStatus.PARTIAL
    assert res.completed == 0


def test_completion_on_a_day_the_task_is_not_due_is_ignored(make_task, today) -> None:
    a = make_task(today, RepeatType.NONE)
    day = today + timedelta(days=1)
    res = day_progress([a], [TaskCompletion(a.id, day)], [], day, today)
    assert res.status is DayStatus.EMPTY


def test_skip_beats_completion(make_task, today) -> None:
    a = make_task(today, RepeatType.DAILY)
    b = make_task(today, RepeatType.DAILY)
    res = day_progress(
        [a, b],
        [TaskCompletion(a.id, today), TaskCompletion(b.id, today)],
        [TaskSkip(a.id, today)],
        today,
        today,
    )
    assert res.status is DayStatus.COMPLETE
    assert (res.completed, res.due) == (1, 1)


def test_duplicate_completions_warn_and_last_wins(make_task, today) -> None:
    a = make_task(today, RepeatType.DAILY)
    completions = [TaskCompletion(a.id, today, True), TaskCompletion(a.id, today, False)]
    with pytest.warns(InconsistentRecordWarning):
        res = day_progress([a], completions, [], today, today)
    assert res.completed == 0
    assert res.due == 1


def test_duplicate_skips_warn(make_task, today) -> None:
    a = make_task(today, RepeatType.DAILY)
    skips = [TaskSkip(a.id, today), TaskSkip(a.id, today)]
    with pytest.warns(InconsistentRecordWarning):
        res = day_progress([a], [], skips, today, today)
    assert res.status is DayStatus.EMPTY


def test_invalid_recurrence_propagates(make_task, today) -> None:
    bad = make_task(today, RepeatType.WEEKLY, None)
    with pytest.raises(InvalidRecurrenceConfig):
        day_progress([bad], [], [], today, today)


def test_task_day_states_lists_due_tasks_in_order(make_task, today) -> None:
    done = make_task(today, RepeatType.DAILY, sort_order=3, title="done")
    skipped = make_task(today, RepeatType.DAILY, sort_order=1, title="skipped")
    pending = make_task(today, RepeatType.DAILY, sort_order=2, title="pending")
    later = make_task(today + timedelta(days=3), RepeatType.NONE, sort_order=0, title="later")

    rows = task_day_states(
        [done, skipped, pending, later],
        [TaskCompletion(done.id, today)],
        [TaskSkip(skipped.id, today)],
        today,
    )
    assert [(t.title, s) for t, s in rows] == [
        ("skipped", TaskDayState.SKIPPED),
        ("pending", TaskDayState.PENDING),
        ("done", TaskDayState.COMPLETED),
    ]
