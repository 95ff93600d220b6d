# backend/tests/test_time_reconstruction.py

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from app.core.exceptions import TaskNotFound
from app.models.task import TaskStatus
from app.models.task_log import LogType, TaskLog
from app.services.time_reconstruction_service import (
    calculate_elapsed_seconds,
    get_reconstructed_time,
)
from app.services.work_items import TaskRef

T0 = datetime(2026, 5, 4, 12, 0, 0, tzinfo=timezone.utc)


def entry(log_type: LogType, seconds_after_t0: float) -> SimpleNamespace:
    return SimpleNamespace(log_type=log_type.value, created_at=T0 + timedelta(seconds=seconds_after_t0))


def test_single_session_of_ninety_seconds() -> None:
    entries = [entry(LogType.STARTED_TIMER, 0), entry(LogType.COMPLETED_TASK, 90)]

    assert calculate_elapsed_seconds(entries, TaskStatus.COMPLETED.value) == 90


def test_multiple_sessions_are_summed() -> None:
    entries = [
        entry(LogType.STARTED_TIMER, 0),
        entry(LogType.PAUSED_TIMER, 300),
        entry(LogType.STARTED_TIMER, 1000),
        entry(LogType.COMPLETED_TASK, 1120),
    ]

    assert calculate_elapsed_seconds(entries, TaskStatus.COMPLETED.value) == 420


def test_partial_seconds_are_floored_per_session() -> None:
    entries = [
        entry(LogType.STARTED_TIMER, 0),
        entry(LogType.PAUSED_TIMER, 10.9),
        entry(LogType.STARTED_TIMER, 20),
        entry(LogType.PAUSED_TIMER, 30.9),
    ]

    assert calculate_elapsed_seconds(entries, TaskStatus.PAUSED.value) == 20


def test_open_session_counts_until_now_when_in_progress() -> None:
    entries = [
        entry(LogType.STARTED_TIMER, 0),
        entry(LogType.PAUSED_TIMER, 60),
        entry(LogType.STARTED_TIMER, 100),
    ]
    now = T0 + timedelta(seconds=130)

    assert calculate_elapsed_seconds(entries, TaskStatus.IN_PROGRESS.value, now=now) == 90


def test_open_session_ignored_when_not_in_progress() -> None:
    entries = [entry(LogType.STARTED_TIMER, 0)]
    now = T0 + timedelta(hours=1)

    assert calculate_elapsed_seconds(entries, TaskStatus.PAUSED.value, now=now) == 0


def test_close_without_start_and_other_log_types_are_ignored() -> None:
    entries = [
        entry(LogType.PAUSED_TIMER, 5),
        entry(LogType.UNCOMPLETED_TASK, 6),
        entry(LogType.CHANGED_STATUS, 7),
        entry(LogType.STARTED_TIMER, 10),
        entry(LogType.COMPLETED_TASK, 40),
        entry(LogType.COMPLETED_TASK, 90),
    ]

    assert calculate_elapsed_seconds(entries, TaskStatus.COMPLETED.value) == 30


def test_restart_while_open_restarts_the_session() -> None:
    entries = [
        entry(LogType.STARTED_TIMER, 0),
        entry(LogType.STARTED_TIMER, 50),
        entry(LogType.PAUSED_TIMER, 80),
    ]

    assert calculate_elapsed_seconds(entries, TaskStatus.PAUSED.value) == 30


def test_naive_timestamps_are_read_as_utc() -> None:
    naive_start = SimpleNamespace(log_type="STARTED_TIMER", created_at=T0.replace(tzinfo=None))
    aware_end = entry(LogType.PAUSED_TIMER, 45)

    assert calculate_elapsed_seconds([naive_start, aware_end], TaskStatus.PAUSED.value) == 45


def test_reconstruction_reports_stored_and_calculated(db, make_user, make_task) -> None:
    user = make_user()
    task = make_task(user, status=TaskStatus.COMPLETED, time_sum=95)
    db.add_all([
        TaskLog(user_id=user.id, task_id=task.id, task_type="REGULAR_TASK",
                log_type=LogType.COMPLETED_TASK.value, created_at=T0 + timedelta(seconds=90)),
        TaskLog(user_id=user.id, task_id=task.id, task_type="REGULAR_TASK",
                log_type=LogType.STARTED_TIMER.value, created_at=T0),
    ])
    db.commit()

    result = get_reconstructed_time(db, TaskRef.personal(task.id))

    assert result.calculated_seconds == 90
    assert result.stored_seconds == 95
    assert result.diverged
    assert [log.log_type for log in result.log_entries] == ["STARTED_TIMER", "COMPLETED_TASK"]


def test_reconstruction_for_group_task_spans_members(db, make_user, make_group, make_group_task) -> None:
    alice = make_user("Alice")
    bob = make_user("Bob")
    group = make_group(alice, bob)
    group_task = make_group_task(group, status=TaskStatus.IN_PROGRESS, time_sum=60)
    db.add_all([
        TaskLog(user_id=alice.id, group_task_id=group_task.id, task_type="GROUP_TASK",
                log_type=LogType.STARTED_TIMER.value, created_at=T0),
        TaskLog(user_id=alice.id, group_task_id=group_task.id, task_type="GROUP_TASK",
                log_type=LogType.PAUSED_TIMER.value, created_at=T0 + timedelta(seconds=60)),
        TaskLog(user_id=bob.id, group_task_id=group_task.id, task_type="GROUP_TASK",
                log_type=LogType.STARTED_TIMER.value, created_at=T0 + timedelta(seconds=200)),
    ])
    db.commit()

    result = get_reconstructed_time(
        db, TaskRef.group(group_task.id), now=T0 + timedelta(seconds=230)
    )

    assert result.calculated_seconds == 90
    assert result.stored_seconds == 60


def test_reconstruction_of_missing_task(db) -> None:
    with pytest.raises(TaskNotFound):
        get_reconstructed_time(db, TaskRef.personal(1))
