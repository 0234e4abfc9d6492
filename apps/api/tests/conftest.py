from __future__ import annotations

import os

# Settings are read at import time; point them at an in-memory database first
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from shiftplan.core.database import Base, enable_sqlite_foreign_keys, get_db  # noqa: E402
from shiftplan.core.exceptions import NotificationDispatchError  # noqa: E402
from shiftplan.main import app  # noqa: E402
from shiftplan.models.employee_role import EmployeeRole  # noqa: F401,E402
from shiftplan.models.manager import Manager  # noqa: E402
from shiftplan.models.restaurant import Restaurant  # noqa: E402
from shiftplan.models.schedule import Schedule  # noqa: F401,E402
from shiftplan.models.scheduled_shifts import ScheduledShift  # noqa: F401,E402
from shiftplan.models.shift_template import ShiftTemplateRole  # noqa: F401,E402
from shiftplan.routers.auth import create_access_token  # noqa: E402
from shiftplan.services.notifications import ScheduleDigest, get_notifier  # noqa: E402


class RecordingNotifier:
    """Collects digests; employees listed in ``fail_for`` raise like a relay outage would."""

    def __init__(self, fail_for: set[int] | None = None):
        self.sent: list[ScheduleDigest] = []
        self.fail_for = fail_for or set()

    def notify_employee_of_schedule(self, digest: ScheduleDigest) -> None:
        if digest.employee_id in self.fail_for:
            raise NotificationDispatchError("mail relay returned 503")
        self.sent.append(digest)


@pytest.fixture()
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(eng)
    Base.metadata.create_all(eng)
    yield eng
    Base.metadata.drop_all(eng)
    eng.dispose()


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
def notifier():
    return RecordingNotifier()


@pytest.fixture()
def client(session_factory, notifier):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_notifier] = lambda: notifier
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------- records ----------
@pytest.fixture()
def manager(db):
    m = Manager(name="Dana Owner", email="dana@example.com", is_active=True)
    db.add(m)
    db.commit()
    db.refresh(m)
    return m


@pytest.fixture()
def auth_headers(manager):
    token = create_access_token({"sub": str(manager.manager_id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def restaurant(db, manager):
    r = Restaurant(manager_id=manager.manager_id, name="Corner Bistro")
    db.add(r)
    db.commit()
    db.refresh(r)
    return r
