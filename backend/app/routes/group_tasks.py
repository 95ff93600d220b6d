from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from app.database.session import get_db
from app.schemas.task import GroupTaskOut, TimerActionRequest
from app.schemas.task_log import TaskLogOut, TimeCalculatedResponse
from app.core.dependencies import get_current_user
from app.models.user import User
from app.services.activity_log_service import list_task_logs
from app.services.time_reconstruction_service import get_reconstructed_time
from app.services.timer_service import apply_timer_action
from app.services.work_items import TaskRef, ensure_can_view, load_work_item

router = APIRouter(prefix="/group-tasks", tags=["Group Tasks"])


# =====================================
# TIMER ACTION (members only, admins included)
# =====================================
@router.post("/{group_task_id}/timer", response_model=GroupTaskOut)
def group_task_timer(
    group_task_id: int,
    payload: TimerActionRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return apply_timer_action(
        db,
        current_user.id,
        TaskRef.group(group_task_id),
        payload.action,
        payload.time_spent,
    )


@router.get("/{group_task_id}/logs", response_model=List[TaskLogOut])
def get_group_task_logs(
    group_task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    ref = TaskRef.group(group_task_id)
    ensure_can_view(db, current_user, load_work_item(db, ref, lock=False))
    return list_task_logs(db, ref)


@router.get("/{group_task_id}/time-calculated", response_model=TimeCalculatedResponse)
def get_group_task_time_calculated(
    group_task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    ref = TaskRef.group(group_task_id)
    ensure_can_view(db, current_user, load_work_item(db, ref, lock=False))

    result = get_reconstructed_time(db, ref)
    return {
        "calculated_time_seconds": result.calculated_seconds,
        "stored_time_sum": result.stored_seconds,
        "logs": result.log_entries,
    }
