from fastapi import status


class TimerError(Exception):
    """Base error for timer actions; carries the HTTP status the API maps it to."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Timer action failed"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class TaskNotFound(TimerError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Task not found"


class TimerForbidden(TimerError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Forbidden"


class InvalidTimerAction(TimerError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid action"
