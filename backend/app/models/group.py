from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    DateTime,
    ForeignKey,
    Table
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from app.database.base import Base


# ===============================
# Association table (Group ↔ Members)
# ===============================
user_groups = Table(
    "user_groups",
    Base.metadata,
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("group_id", Integer, ForeignKey("groups.id", ondelete="CASCADE"), primary_key=True),
)


class Group(Base):
    __tablename__ = "groups"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(Text)
    color = Column(String(20), default="#3B82F6")

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # ===============================
    # Relationships
    # ===============================
    users = relationship(
        "User",
        secondary=user_groups,
        back_populates="groups",
        lazy="selectin"
    )

    group_tasks = relationship(
        "GroupTask",
        back_populates="group",
        cascade="all, delete-orphan"
    )