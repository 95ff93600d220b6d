from sqlalchemy import (
    Column, Integer, String, Text, Date, DateTime,
    ForeignKey
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum

from app.database.base import Base


class TaskStatus(str, enum.Enum):
    WAITING = "WAITING"
    IN_PROGRESS = "IN_PROGRESS"
    PAUSED = "PAUSED"
    COMPLETED = "COMPLETED"


class TaskType(str, enum.Enum):
    ADMIN_TASK = "ADMIN_TASK"
    REGULAR_TASK = "REGULAR_TASK"
    GROUP_TASK = "GROUP_TASK"


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    deadline = Column(Date, nullable=True)
    status = Column(String(20), default=TaskStatus.WAITING.value, nullable=False, index=True)

    # accumulated seconds, only grows through pause/complete
    time_sum = Column(Integer, default=0, nullable=False)
    type = Column(String(20), default=TaskType.REGULAR_TASK.value, nullable=False)

    # Relations
    assigned_user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    creator_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    assigned_user = relationship("User", foreign_keys=[assigned_user_id])
    creator = relationship("User", foreign_keys=[creator_id])

    @property
    def assignee_name(self):
        return self.assigned_user.full_name if self.assigned_user else None

    @property
    def creator_name(self):
        return self.creator.full_name if self.creator else None
