from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from app.config import settings


def build_engine(database_url: str, **kwargs) -> Engine:
    connect_args = kwargs.pop("connect_args", {})
    # SQLite connections are shared with the FastAPI threadpool
    if database_url.startswith("sqlite"):
        connect_args.setdefault("check_same_thread", False)
    return create_engine(
        database_url,
        connect_args=connect_args,
        pool_pre_ping=True,
        **kwargs
    )


engine = build_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def unit_of_work(db: Session) -> Iterator[Session]:
    """
    Commit everything done inside the block as one transaction.

    Any exception rolls the whole block back (including staged log rows)
    and is re-raised to the caller.
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
