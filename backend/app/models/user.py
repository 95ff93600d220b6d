import enum

from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from app.database.base import Base


class UserType(str, enum.Enum):
    ADMIN = "ADMIN"
    REGULAR_USER = "REGULAR_USER"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String, nullable=False)
    surname = Column(String, nullable=True)
    username = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=True)

    password_hash = Column(String, nullable=False)

    user_type = Column(String, default=UserType.REGULAR_USER.value, nullable=False)  # ADMIN | REGULAR_USER

    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    groups = relationship(
        "Group",
        secondary="user_groups",
        back_populates="users",
        lazy="selectin"
    )

    @property
    def is_admin(self) -> bool:
        return self.user_type == UserType.ADMIN.value

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.name, self.surname) if part)
