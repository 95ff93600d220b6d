from typing import List

from sqlalchemy.orm import Session

from app.core.logger import get_logger
from app.models.task import TaskStatus
from app.models.task_log import LogType
from app.services.activity_log_service import record_timer_event
from app.services.work_items import WorkItem, running_work_items

logger = get_logger("exclusivity")


def pause_other_running_items(
    db: Session,
    actor_id: int,
    started: WorkItem,
    time_spent: int = 0
) -> List[WorkItem]:
    """
    Pause every other task or group task the actor has running so that
    ``started`` ends up as their only IN_PROGRESS item.

    Each paused item is credited with ``time_spent`` from the start request
    as-is (normally 0); group tasks also get the actor's per-member row
    updated. Must run inside the caller's unit of work: nothing is committed
    here.
    """
    paused = running_work_items(db, actor_id, exclude=started.ref)

    for item in paused:
        item.set_status(TaskStatus.PAUSED)
        item.add_time(db, actor_id, time_spent)
        db.flush()

        record_timer_event(
            db,
            actor_id=actor_id,
            item=item,
            log_type=LogType.PAUSED_TIMER,
            details=f"Auto-paused when starting {started.label}: {started.title}",
        )

        logger.info(
            "Auto-paused running %s %s",
            item.label,
            item.id,
            extra={"user_id": actor_id, "task_ref": str(item.ref)},
        )

    return paused
