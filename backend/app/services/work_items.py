"""
Common view over personal tasks and group tasks.

Timer actions, exclusivity and time reconstruction all operate on a
``WorkItem``; the subclasses only differ in who may run the timer, how time
is credited and which columns identify the item in the activity log.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.exceptions import TaskNotFound, TimerForbidden
from app.models.group import user_groups
from app.models.group_task import GroupTask, GroupTaskTime
from app.models.task import Task, TaskStatus, TaskType
from app.models.user import User


class TaskKind(str, enum.Enum):
    PERSONAL = "task"
    GROUP = "group_task"


@dataclass(frozen=True)
class TaskRef:
    kind: TaskKind
    id: int

    @classmethod
    def personal(cls, task_id: int) -> "TaskRef":
        return cls(TaskKind.PERSONAL, task_id)

    @classmethod
    def group(cls, group_task_id: int) -> "TaskRef":
        return cls(TaskKind.GROUP, group_task_id)

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.id}"


class WorkItem:
    kind: TaskKind
    label: str

    def __init__(self, model):
        self.model = model

    @property
    def ref(self) -> TaskRef:
        return TaskRef(self.kind, self.model.id)

    @property
    def id(self) -> int:
        return self.model.id

    @property
    def title(self) -> str:
        return self.model.title

    @property
    def status(self) -> TaskStatus:
        return TaskStatus(self.model.status)

    @property
    def time_sum(self) -> int:
        return self.model.time_sum or 0

    def set_status(self, status: TaskStatus) -> None:
        self.model.status = status.value

    def can_run_timer(self, db: Session, user_id: int) -> bool:
        raise NotImplementedError

    def add_time(self, db: Session, user_id: int, seconds: int) -> None:
        raise NotImplementedError

    def log_fields(self) -> dict:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.ref} status={self.model.status}>"


class PersonalWorkItem(WorkItem):
    kind = TaskKind.PERSONAL
    label = "task"

    def can_run_timer(self, db: Session, user_id: int) -> bool:
        # admins are not exempt: only the assignee runs the timer
        return self.model.assigned_user_id == user_id

    def add_time(self, db: Session, user_id: int, seconds: int) -> None:
        self.model.time_sum = self.time_sum + seconds

    def log_fields(self) -> dict:
        return {
            "task_id": self.model.id,
            "group_task_id": None,
            "task_type": self.model.type or TaskType.REGULAR_TASK.value,
        }


class GroupWorkItem(WorkItem):
    kind = TaskKind.GROUP
    label = "group task"

    def can_run_timer(self, db: Session, user_id: int) -> bool:
        return is_group_member(db, user_id, self.model.group_id)

    def add_time(self, db: Session, user_id: int, seconds: int) -> None:
        self.model.time_sum = self.time_sum + seconds

        entry = next(
            (row for row in self.model.time_per_user if row.user_id == user_id),
            None
        )

        if entry:
            entry.time_spent = (entry.time_spent or 0) + seconds
        else:
            self.model.time_per_user.append(
                GroupTaskTime(user_id=user_id, time_spent=seconds)
            )

    def log_fields(self) -> dict:
        return {
            "task_id": None,
            "group_task_id": self.model.id,
            "task_type": TaskType.GROUP_TASK.value,
        }


def is_group_member(db: Session, user_id: int, group_id: int) -> bool:
    row = db.execute(
        select(user_groups.c.user_id).where(
            user_groups.c.user_id == user_id,
            user_groups.c.group_id == group_id,
        )
    ).first()
    return row is not None


def lock_actor(db: Session, user_id: int) -> None:
    """Hold the user's row FOR UPDATE so timer actions of one user run one at a time."""
    db.query(User).filter(User.id == user_id).with_for_update().first()


def wrap(model) -> WorkItem:
    if isinstance(model, Task):
        return PersonalWorkItem(model)
    if isinstance(model, GroupTask):
        return GroupWorkItem(model)
    raise TypeError(f"Not a work item: {model!r}")


def load_work_item(db: Session, ref: TaskRef, lock: bool = True) -> WorkItem:
    """Fetch the task behind ``ref``; rows are locked for the running transaction."""
    model_cls = Task if ref.kind is TaskKind.PERSONAL else GroupTask
    query = db.query(model_cls).filter(model_cls.id == ref.id)
    if lock:
        query = query.with_for_update()

    model = query.first()
    if not model:
        raise TaskNotFound(
            "Task not found" if ref.kind is TaskKind.PERSONAL else "Group task not found"
        )
    return wrap(model)


def running_work_items(
    db: Session,
    user_id: int,
    exclude: Optional[TaskRef] = None,
    lock: bool = True
) -> List[WorkItem]:
    """
    Every task the user currently has IN_PROGRESS: personal tasks assigned to
    them plus group tasks of any group they belong to.
    """
    tasks = db.query(Task).filter(
        Task.assigned_user_id == user_id,
        Task.status == TaskStatus.IN_PROGRESS.value
    )
    if exclude is not None and exclude.kind is TaskKind.PERSONAL:
        tasks = tasks.filter(Task.id != exclude.id)

    member_of = select(user_groups.c.group_id).where(user_groups.c.user_id == user_id)
    group_tasks = db.query(GroupTask).filter(
        GroupTask.status == TaskStatus.IN_PROGRESS.value,
        GroupTask.group_id.in_(member_of)
    )
    if exclude is not None and exclude.kind is TaskKind.GROUP:
        group_tasks = group_tasks.filter(GroupTask.id != exclude.id)

    if lock:
        tasks = tasks.with_for_update()
        group_tasks = group_tasks.with_for_update()

    items: List[WorkItem] = [PersonalWorkItem(t) for t in tasks.order_by(Task.id).all()]
    items.extend(GroupWorkItem(g) for g in group_tasks.order_by(GroupTask.id).all())
    return items


def ensure_can_view(db: Session, user, item: WorkItem) -> None:
    """Read access: admins see every item, other users only their own."""
    if user.is_admin or item.can_run_timer(db, user.id):
        return
    raise TimerForbidden()
