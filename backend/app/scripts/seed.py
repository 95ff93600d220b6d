from app.database.base import Base
from app.database.session import SessionLocal, engine
from app.models.user import User, UserType
from app.models.group import Group
from app.models.task import Task, TaskType
from app.models.group_task import GroupTask
from app.models.task_log import TaskLog
from app.core.security import create_access_token, hash_password


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()

    try:
        existing_admin = db.query(User).filter(User.user_type == UserType.ADMIN.value).first()
        if existing_admin:
            print("Database already seeded")
            return

        admin = User(
            name="System",
            surname="Admin",
            username="admin",
            email="admin@example.com",
            password_hash=hash_password("admin123"),
            user_type=UserType.ADMIN.value,
        )
        john = User(
            name="John",
            surname="Doe",
            username="john",
            email="john@example.com",
            password_hash=hash_password("user123"),
        )
        jane = User(
            name="Jane",
            surname="Smith",
            username="jane",
            email="jane@example.com",
            password_hash=hash_password("user123"),
        )

        team = Group(
            name="Development Team",
            description="Software development group",
            color="#3B82F6",
            users=[john, jane],
        )

        db.add_all([admin, john, jane, team])
        db.flush()

        db.add_all([
            Task(
                title="Review quarterly report",
                description="Assigned by admin",
                type=TaskType.ADMIN_TASK.value,
                assigned_user_id=john.id,
                creator_id=admin.id,
            ),
            Task(
                title="Update personal notes",
                type=TaskType.REGULAR_TASK.value,
                assigned_user_id=john.id,
                creator_id=john.id,
            ),
            Task(
                title="Prepare onboarding checklist",
                type=TaskType.REGULAR_TASK.value,
                assigned_user_id=jane.id,
                creator_id=jane.id,
            ),
            GroupTask(
                title="Sprint planning",
                description="Plan the next sprint",
                group_id=team.id,
            ),
        ])
        db.commit()

        print("Seed data created")
        for user in (admin, john, jane):
            token = create_access_token({"sub": str(user.id)})
            print(f"{user.username}: {token}")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
