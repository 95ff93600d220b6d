from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.config import settings
from app.database.session import engine
from app.database.base import Base
from app.models.user import User
from app.models.group import Group
from app.models.task import Task
from app.models.group_task import GroupTask, GroupTaskTime
from app.models.task_log import TaskLog
from app.routes import tasks, group_tasks
from app.core.exceptions import TimerError
from app.core.request_middleware import RequestLoggingMiddleware

app = FastAPI(title="Task Timer API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)


@app.on_event("startup")
def create_tables():
    Base.metadata.create_all(bind=engine)


def _format_validation_messages(exc: RequestValidationError) -> list[str]:
    messages: list[str] = []
    for err in exc.errors():
        loc = [str(v) for v in err.get("loc", []) if str(v) not in {"body", "query", "path"}]
        field = ".".join(loc) if loc else "field"
        err_type = str(err.get("type", ""))
        message = str(err.get("msg", "Invalid value"))

        if err_type in {"missing", "value_error.missing"}:
            messages.append(f"{field} is required")
        elif field:
            messages.append(f"{field}: {message}")
        else:
            messages.append(message)

    # Preserve order while de-duplicating.
    return list(dict.fromkeys(messages))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    messages = _format_validation_messages(exc)
    detail = messages[0] if len(messages) == 1 else "Validation failed"
    return JSONResponse(
        status_code=422,
        content={
            "detail": detail,
            "errors": messages,
        },
    )


@app.exception_handler(TimerError)
async def timer_exception_handler(request: Request, exc: TimerError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )


@app.get("/health")
def health():
    return {"status": "ok"}


app.include_router(tasks.router)
app.include_router(group_tasks.router)
