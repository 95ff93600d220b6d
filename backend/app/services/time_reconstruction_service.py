import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from app.core.logger import get_logger
from app.models.task import TaskStatus
from app.models.task_log import LogType, TaskLog
from app.services.activity_log_service import list_task_logs
from app.services.work_items import TaskRef, load_work_item

logger = get_logger("time_reconstruction")

SESSION_CLOSING = {LogType.COMPLETED_TASK.value, LogType.PAUSED_TIMER.value}


@dataclass
class TimeReconstruction:
    calculated_seconds: int
    stored_seconds: int
    log_entries: List[TaskLog] = field(default_factory=list)

    @property
    def diverged(self) -> bool:
        return self.calculated_seconds != self.stored_seconds


def _ensure_aware_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _whole_seconds(start: datetime, end: datetime) -> int:
    return math.floor((end - start).total_seconds())


def calculate_elapsed_seconds(
    entries: Iterable[TaskLog],
    status: str,
    now: Optional[datetime] = None
) -> int:
    """
    Replay log entries (oldest first) and sum the timer sessions.

    A STARTED_TIMER opens a session, the next PAUSED_TIMER or COMPLETED_TASK
    closes it. A session still open at the end only counts, up to ``now``,
    when the task is IN_PROGRESS.
    """
    total = 0
    session_start: Optional[datetime] = None

    for entry in entries:
        created_at = _ensure_aware_utc(entry.created_at)
        if entry.log_type == LogType.STARTED_TIMER.value:
            session_start = created_at
        elif entry.log_type in SESSION_CLOSING and session_start is not None:
            total += _whole_seconds(session_start, created_at)
            session_start = None

    if session_start is not None and status == TaskStatus.IN_PROGRESS.value:
        current = _ensure_aware_utc(now or datetime.now(timezone.utc))
        total += _whole_seconds(session_start, current)

    return total


def get_reconstructed_time(
    db: Session,
    ref: TaskRef,
    now: Optional[datetime] = None
) -> TimeReconstruction:
    item = load_work_item(db, ref, lock=False)
    entries = list_task_logs(db, ref, newest_first=False)

    result = TimeReconstruction(
        calculated_seconds=calculate_elapsed_seconds(entries, item.model.status, now),
        stored_seconds=item.time_sum,
        log_entries=entries,
    )

    if result.diverged:
        logger.info(
            "Logged time differs from stored time_sum: %ss calculated, %ss stored",
            result.calculated_seconds,
            result.stored_seconds,
            extra={"task_ref": str(ref)},
        )
    return result
