import os

# Must be set before taskberry.config.settings is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret")

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from taskberry.database import Base, SessionLocal, engine
from taskberry.models.user import User
from taskberry.utils.auth import create_access_token
from taskberry.utils.directory import Directory


def make_user(user_id, name, role, supervisor_id=None, manager_id=None, status="active"):
    return {
        "id": user_id,
        "name": name,
        "email": f"{user_id}@example.com",
        "role": role,
        "status": status,
        "supervisor_id": supervisor_id,
        "manager_id": manager_id,
    }


def make_task(task_id="t1", created_by="a1", assignee_id="x1", status="not_started"):
    return SimpleNamespace(id=task_id, created_by=created_by, assignee_id=assignee_id, status=status)


# a1 super admin
# m1 manager: s1, s2 supervisors; x1, x2 (s1), x3 (s2); x6 suspended (s1)
# m2 manager: s3 supervisor; x4 (s3); x5 reports to s1 but to manager m2
ORG = [
    make_user("a1", "Ada Admin", "super_admin"),
    make_user("m1", "Maya Manager", "manager"),
    make_user("m2", "Noah Manager", "manager"),
    make_user("s1", "Sam Supervisor", "supervisor", manager_id="m1"),
    make_user("s2", "Sara Supervisor", "supervisor", manager_id="m1"),
    make_user("s3", "Omar Supervisor", "supervisor", manager_id="m2"),
    make_user("x1", "Alex Member", "member", supervisor_id="s1", manager_id="m1"),
    make_user("x2", "Bea Member", "member", supervisor_id="s1", manager_id="m1"),
    make_user("x3", "Cy Member", "member", supervisor_id="s2", manager_id="m1"),
    make_user("x4", "Dee Member", "member", supervisor_id="s3", manager_id="m2"),
    make_user("x5", "Eli Member", "member", supervisor_id="s1", manager_id="m2"),
    make_user("x6", "Fay Member", "member", supervisor_id="s1", manager_id="m1", status="suspended"),
    make_user("p1", "Pat Pending", None, status="pending_approval"),
]


@pytest.fixture
def directory():
    return Directory.from_records(ORG)


@pytest.fixture
def user(directory):
    """Look up a user of the sample organisation by id"""
    return directory.get_user_by_id


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    from main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def seeded_db(db):
    """The sample organisation stored in the database"""
    for record in ORG:
        db.add(User(**record))
    db.commit()
    return db


@pytest.fixture
def headers():
    """Bearer headers for a user of the sample organisation"""
    def _headers(user_id):
        token = create_access_token({"sub": f"{user_id}@example.com"})
        return {"Authorization": f"Bearer {token}"}
    return _headers
