import enum
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from app.database.base import Base


class LogType(str, enum.Enum):
    STARTED_TIMER = "STARTED_TIMER"
    PAUSED_TIMER = "PAUSED_TIMER"
    COMPLETED_TASK = "COMPLETED_TASK"
    UNCOMPLETED_TASK = "UNCOMPLETED_TASK"
    CHANGED_STATUS = "CHANGED_STATUS"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TaskLog(Base):
    """Append-only activity log row; never updated once written."""

    __tablename__ = "task_logs"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    # exactly one of task_id / group_task_id is set
    task_id = Column(Integer, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=True, index=True)
    group_task_id = Column(Integer, ForeignKey("group_tasks.id", ondelete="CASCADE"), nullable=True, index=True)

    task_type = Column(String(20), nullable=False)
    log_type = Column(String(30), nullable=False)
    details = Column(Text, nullable=True)

    # set client side: server now() is frozen per transaction on PostgreSQL
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False, index=True)

    user = relationship("User", lazy="selectin")

    @property
    def user_name(self):
        return self.user.full_name if self.user else None
