from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.logger import get_logger
from app.models.task_log import LogType, TaskLog
from app.services.work_items import TaskKind, TaskRef, WorkItem

logger = get_logger("activity_log")


def _new_entry(actor_id: int, item: WorkItem, log_type: LogType, details: str) -> TaskLog:
    return TaskLog(
        user_id=actor_id,
        log_type=log_type.value,
        details=details,
        **item.log_fields()
    )


def record_timer_event(
    db: Session,
    *,
    actor_id: int,
    item: WorkItem,
    log_type: LogType,
    details: str
) -> Optional[TaskLog]:
    """
    Append one activity log row for ``item``.

    Written inside a SAVEPOINT so a failed insert only discards the log row;
    the caller's state change stays in the outer transaction. Returns None
    when the row could not be written.
    """
    try:
        with db.begin_nested():
            entry = _new_entry(actor_id, item, log_type, details)
            db.add(entry)
            db.flush()
        return entry
    except SQLAlchemyError:
        logger.warning(
            "Failed to write task log",
            exc_info=True,
            extra={"user_id": actor_id, "task_ref": str(item.ref), "action": log_type.value},
        )
        return None


def _filter_for(query, ref: TaskRef):
    if ref.kind is TaskKind.PERSONAL:
        return query.filter(TaskLog.task_id == ref.id)
    return query.filter(TaskLog.group_task_id == ref.id)


def list_task_logs(db: Session, ref: TaskRef, newest_first: bool = True) -> List[TaskLog]:
    query = _filter_for(db.query(TaskLog), ref)
    if newest_first:
        query = query.order_by(TaskLog.created_at.desc(), TaskLog.id.desc())
    else:
        query = query.order_by(TaskLog.created_at.asc(), TaskLog.id.asc())
    return query.all()
