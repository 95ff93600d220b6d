from pydantic import BaseModel
from datetime import datetime
from typing import Optional, List


class TaskLogOut(BaseModel):
    id: int
    user_id: int
    user_name: Optional[str] = None
    task_id: Optional[int] = None
    group_task_id: Optional[int] = None
    task_type: str
    log_type: str
    details: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class TimeLogEntryOut(BaseModel):
    id: int
    log_type: str
    created_at: datetime
    details: Optional[str] = None

    class Config:
        from_attributes = True


class TimeCalculatedResponse(BaseModel):
    calculated_time_seconds: int
    stored_time_sum: int
    logs: List[TimeLogEntryOut]
