"""
Timer state machine for tasks and group tasks.

    WAITING ──start──▶ IN_PROGRESS ──pause──▶ PAUSED
       ▲                   │  ▲                 │
       │                   │  └─────start───────┘
       │               complete              complete
       │                   ▼                    │
       └──uncomplete── COMPLETED ◀──────────────┘

Every action runs as one unit of work: the permission check, the automatic
pause of the actor's other running items, the state change and the log rows
are committed together or not at all.
"""
from typing import Dict, FrozenSet, NamedTuple, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import InvalidTimerAction, TimerError, TimerForbidden
from app.core.logger import get_logger
from app.database.session import unit_of_work
from app.models.task import TaskStatus
from app.models.task_log import LogType
from app.services.activity_log_service import record_timer_event
from app.services.exclusivity_service import pause_other_running_items
from app.services.work_items import TaskKind, TaskRef, WorkItem, load_work_item, lock_actor

logger = get_logger("timer")


class Transition(NamedTuple):
    sources: FrozenSet[TaskStatus]
    target: TaskStatus
    log_type: LogType
    adds_time: bool


TIMER_TRANSITIONS: Dict[str, Transition] = {
    "start": Transition(
        frozenset({TaskStatus.WAITING, TaskStatus.PAUSED}),
        TaskStatus.IN_PROGRESS,
        LogType.STARTED_TIMER,
        False,
    ),
    "pause": Transition(
        frozenset({TaskStatus.IN_PROGRESS}),
        TaskStatus.PAUSED,
        LogType.PAUSED_TIMER,
        True,
    ),
    "complete": Transition(
        frozenset({TaskStatus.IN_PROGRESS, TaskStatus.PAUSED}),
        TaskStatus.COMPLETED,
        LogType.COMPLETED_TASK,
        True,
    ),
    "uncomplete": Transition(
        frozenset({TaskStatus.COMPLETED}),
        TaskStatus.WAITING,
        LogType.UNCOMPLETED_TASK,
        False,
    ),
}


def _forbidden_detail(item: WorkItem) -> str:
    if item.kind is TaskKind.PERSONAL:
        return "Only the assigned user can perform timer actions on this task"
    return "Only group members can perform timer actions on this group task"


def _resolve_transition(item: WorkItem, action: str) -> Transition:
    transition = TIMER_TRANSITIONS.get(action)
    if transition is None:
        raise InvalidTimerAction("Invalid action")

    if item.status not in transition.sources:
        raise InvalidTimerAction(
            f"Cannot {action} a {item.label} that is {item.status.value}"
        )
    return transition


def _apply(db: Session, actor_id: int, ref: TaskRef, action: str, seconds: int) -> WorkItem:
    # the actor row is always locked before any task row
    lock_actor(db, actor_id)
    item = load_work_item(db, ref)

    if not item.can_run_timer(db, actor_id):
        raise TimerForbidden(_forbidden_detail(item))

    transition = _resolve_transition(item, action)

    if action == "start":
        pause_other_running_items(db, actor_id, item, seconds)

    item.set_status(transition.target)
    if transition.adds_time:
        item.add_time(db, actor_id, seconds)
    db.flush()

    record_timer_event(
        db,
        actor_id=actor_id,
        item=item,
        log_type=transition.log_type,
        details=f"{action} {item.label}: {item.title}",
    )
    return item


def apply_timer_action(
    db: Session,
    actor_id: int,
    ref: TaskRef,
    action: str,
    time_spent: Optional[int] = None
):
    """
    Run ``action`` on the task behind ``ref`` for ``actor_id`` and return the
    updated ORM row.

    ``time_spent`` is the client-measured length of the session that just
    ended, in seconds; it is credited on pause/complete and missing means 0.

    Raises TaskNotFound, TimerForbidden or InvalidTimerAction; any failure
    rolls back every change made by this call.
    """
    seconds = time_spent or 0

    try:
        if seconds < 0:
            raise InvalidTimerAction("time_spent cannot be negative")

        with unit_of_work(db):
            item = _apply(db, actor_id, ref, action, seconds)
    except TimerError as exc:
        logger.warning(
            "Timer action rejected: %s",
            exc.detail,
            extra={"user_id": actor_id, "task_ref": str(ref), "action": action},
        )
        raise

    logger.info(
        "Timer action applied",
        extra={"user_id": actor_id, "task_ref": str(ref), "action": action},
    )
    db.refresh(item.model)
    return item.model


def start_timer(db: Session, actor_id: int, ref: TaskRef, time_spent: Optional[int] = None):
    return apply_timer_action(db, actor_id, ref, "start", time_spent)


def pause_timer(db: Session, actor_id: int, ref: TaskRef, time_spent: Optional[int] = None):
    return apply_timer_action(db, actor_id, ref, "pause", time_spent)


def complete_timer(db: Session, actor_id: int, ref: TaskRef, time_spent: Optional[int] = None):
    return apply_timer_action(db, actor_id, ref, "complete", time_spent)


def uncomplete_timer(db: Session, actor_id: int, ref: TaskRef):
    return apply_timer_action(db, actor_id, ref, "uncomplete")
