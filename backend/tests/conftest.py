# backend/tests/conftest.py

from __future__ import annotations

import os

# Settings are read at import time.
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.security import create_access_token
from app.database.base import Base
from app.database.session import build_engine, get_db
from app.main import app
from app.models.group import Group
from app.models.group_task import GroupTask
from app.models.task import Task, TaskStatus, TaskType
from app.models.user import User, UserType


@pytest.fixture()
def engine():
    """
    One in-memory SQLite database per test.

    StaticPool keeps a single connection so the test session and the
    sessions opened by the API see the same data.
    """
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def auth_headers():
    def _headers(user: User) -> dict:
        token = create_access_token({"sub": str(user.id)})
        return {"Authorization": f"Bearer {token}"}

    return _headers


# ---------- factories ----------

@pytest.fixture()
def make_user(db):
    counter = {"n": 0}

    def _make(name: str = "User", user_type: UserType = UserType.REGULAR_USER) -> User:
        counter["n"] += 1
        user = User(
            name=name,
            surname="Test",
            username=f"{name.lower()}{counter['n']}",
            password_hash="not-a-real-hash",
            user_type=user_type.value,
        )
        db.add(user)
        db.commit()
        return user

    return _make


@pytest.fixture()
def make_group(db):
    def _make(*members: User, name: str = "Team") -> Group:
        group = Group(name=name, users=list(members))
        db.add(group)
        db.commit()
        return group

    return _make


@pytest.fixture()
def make_task(db):
    def _make(
        assignee: User,
        title: str = "Write report",
        status: TaskStatus = TaskStatus.WAITING,
        time_sum: int = 0,
        task_type: TaskType = TaskType.REGULAR_TASK,
        creator: User | None = None,
    ) -> Task:
        task = Task(
            title=title,
            status=status.value,
            time_sum=time_sum,
            type=task_type.value,
            assigned_user_id=assignee.id,
            creator_id=(creator or assignee).id,
        )
        db.add(task)
        db.commit()
        return task

    return _make


@pytest.fixture()
def make_group_task(db):
    def _make(
        group: Group,
        title: str = "Sprint review",
        status: TaskStatus = TaskStatus.WAITING,
        time_sum: int = 0,
    ) -> GroupTask:
        group_task = GroupTask(
            title=title,
            status=status.value,
            time_sum=time_sum,
            group_id=group.id,
        )
        db.add(group_task)
        db.commit()
        return group_task

    return _make
