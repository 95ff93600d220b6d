from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional

from app.database.session import get_db
from app.schemas.task import TaskOut, TimerActionRequest, ActiveWorkItemOut
from app.schemas.task_log import TaskLogOut, TimeCalculatedResponse
from app.core.dependencies import get_current_user
from app.core.logger import get_logger
from app.models.user import User
from app.services.activity_log_service import list_task_logs
from app.services.time_reconstruction_service import get_reconstructed_time
from app.services.timer_service import apply_timer_action
from app.services.work_items import (
    TaskRef, ensure_can_view, load_work_item, running_work_items
)

router = APIRouter(prefix="/tasks", tags=["Tasks"])
logger = get_logger("routes.tasks")


# =====================================
# GET ACTIVE TASK (personal or group)
# =====================================
@router.get("/active", response_model=Optional[ActiveWorkItemOut])
def get_active_task(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    running = running_work_items(db, current_user.id, lock=False)
    if not running:
        return None

    if len(running) > 1:
        logger.warning(
            "More than one running task",
            extra={"user_id": current_user.id, "task_ref": ",".join(str(r.ref) for r in running)},
        )

    item = running[0]
    return {
        "kind": item.kind.value,
        "id": item.id,
        "title": item.title,
        "status": item.status.value,
        "time_sum": item.time_sum,
    }


# =====================================
# TIMER ACTION (start / pause / complete / uncomplete)
# =====================================
@router.post("/{task_id}/timer", response_model=TaskOut)
def task_timer(
    task_id: int,
    payload: TimerActionRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return apply_timer_action(
        db,
        current_user.id,
        TaskRef.personal(task_id),
        payload.action,
        payload.time_spent,
    )


# =====================================
# TASK LOGS (newest first)
# =====================================
@router.get("/{task_id}/logs", response_model=List[TaskLogOut])
def get_task_logs(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    ref = TaskRef.personal(task_id)
    ensure_can_view(db, current_user, load_work_item(db, ref, lock=False))
    return list_task_logs(db, ref)


# =====================================
# TIME CALCULATED FROM LOGS
# =====================================
@router.get("/{task_id}/time-calculated", response_model=TimeCalculatedResponse)
def get_task_time_calculated(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    ref = TaskRef.personal(task_id)
    ensure_can_view(db, current_user, load_work_item(db, ref, lock=False))

    result = get_reconstructed_time(db, ref)
    return {
        "calculated_time_seconds": result.calculated_seconds,
        "stored_time_sum": result.stored_seconds,
        "logs": result.log_entries,
    }
