from sqlalchemy import (
    Column, Integer, String, Text, Date, DateTime,
    ForeignKey, UniqueConstraint
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from app.database.base import Base
from app.models.task import TaskStatus


class GroupTask(Base):
    __tablename__ = "group_tasks"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    deadline = Column(Date, nullable=True)
    status = Column(String(20), default=TaskStatus.WAITING.value, nullable=False, index=True)

    # sum of every member's contribution
    time_sum = Column(Integer, default=0, nullable=False)

    group_id = Column(
        Integer,
        ForeignKey("groups.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    group = relationship("Group", back_populates="group_tasks", lazy="selectin")
    time_per_user = relationship(
        "GroupTaskTime",
        back_populates="group_task",
        cascade="all, delete-orphan",
        lazy="selectin"
    )

    @property
    def group_name(self):
        return self.group.name if self.group else None


class GroupTaskTime(Base):
    __tablename__ = "group_task_times"
    __table_args__ = (
        UniqueConstraint("user_id", "group_task_id", name="uq_group_task_time_user"),
    )

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    group_task_id = Column(Integer, ForeignKey("group_tasks.id", ondelete="CASCADE"), nullable=False)
    time_spent = Column(Integer, default=0, nullable=False)

    group_task = relationship("GroupTask", back_populates="time_per_user")
    user = relationship("User", lazy="selectin")

    @property
    def user_name(self):
        return self.user.full_name if self.user else None
