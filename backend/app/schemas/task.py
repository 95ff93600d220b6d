from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import Optional, List


# ---------- TIMER ACTION ----------
class TimerActionRequest(BaseModel):
    # validated by the timer service so unknown actions map to 400, not 422
    action: str
    time_spent: Optional[int] = Field(default=None, ge=0)


# ---------- OUT ----------
class TaskOut(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    deadline: Optional[date] = None
    status: str
    time_sum: int = 0
    type: str
    assigned_user_id: int
    assignee_name: Optional[str] = None
    creator_id: Optional[int] = None
    creator_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class GroupTaskTimeOut(BaseModel):
    user_id: int
    user_name: Optional[str] = None
    time_spent: int = 0

    class Config:
        from_attributes = True


class GroupTaskOut(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    deadline: Optional[date] = None
    status: str
    time_sum: int = 0
    group_id: int
    group_name: Optional[str] = None
    time_per_user: List[GroupTaskTimeOut] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ---------- ACTIVE WORK ITEM ----------
class ActiveWorkItemOut(BaseModel):
    kind: str
    id: int
    title: str
    status: str
    time_sum: int
