"""Pytest fixtures for API and reminder tests."""

import os
from collections.abc import Callable, Generator
from contextlib import ExitStack
from unittest.mock import MagicMock, patch

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("VAPID_PUBLIC_KEY", "test-public-key")
os.environ.setdefault("VAPID_PRIVATE_KEY", "test-private-key")
os.environ.setdefault("REMINDER_SCHEDULER_ENABLED", "false")

import pytest
from fastapi.testclient import TestClient
from pywebpush import WebPushException
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from fast_track.api.deps import get_db
from fast_track.core.security import create_access_token
from fast_track.db.base import Base
from fast_track.db.models import PushSubscription, User
from fast_track.main import create_app
from fast_track.schemas.notification import NotificationPreferences

REMINDER_MODULES = (
    "fast_track.reminders.fasting",
    "fast_track.reminders.meals",
    "fast_track.reminders.daily_goals",
)


@pytest.fixture(scope="session")
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session(db_engine) -> Generator[Session, None, None]:
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        for table in reversed(Base.metadata.sorted_tables):
            db.execute(table.delete())
        db.commit()
        db.close()


@pytest.fixture()
def task_session_factory(db_session):
    factory = sessionmaker(autocommit=False, autoflush=False, bind=db_session.bind)
    sessions: list = []

    def create_session():
        session = factory()
        sessions.append(session)
        return session

    try:
        yield create_session
    finally:
        for session in sessions:
            session.close()


@pytest.fixture()
def reminder_sessions(task_session_factory):
    """Point every evaluator's ``SessionLocal`` at the test database."""

    with ExitStack() as stack:
        mocks = [
            stack.enter_context(
                patch(f"{module}.SessionLocal", side_effect=task_session_factory)
            )
            for module in REMINDER_MODULES
        ]
        yield mocks


@pytest.fixture()
def webpush_mock() -> Generator[MagicMock, None, None]:
    with patch("fast_track.services.push.webpush") as mocked:
        yield mocked


@pytest.fixture()
def webpush_error() -> Callable[[int], WebPushException]:
    """Build the exception ``webpush`` raises for a push service response."""

    def build(status_code: int) -> WebPushException:
        return WebPushException("Push failed", response=MagicMock(status_code=status_code))

    return build


@pytest.fixture()
def make_user(db_session) -> Callable[..., User]:
    counter = {"value": 0}

    def factory(preferences: dict | None = None, email: str | None = None) -> User:
        counter["value"] += 1
        user = User(
            email=email or f"user{counter['value']}@example.com",
            notification_preferences=(
                NotificationPreferences.model_validate(preferences).model_dump(mode="json")
                if preferences is not None
                else None
            ),
        )
        db_session.add(user)
        db_session.commit()
        return user

    return factory


@pytest.fixture()
def add_subscription(db_session) -> Callable[..., PushSubscription]:
    counter = {"value": 0}

    def factory(user: User, endpoint: str | None = None) -> PushSubscription:
        counter["value"] += 1
        sub = PushSubscription(
            user_id=user.id,
            endpoint=endpoint or f"https://push.example.com/send/{counter['value']}",
            keys={"p256dh": "p256dh-key", "auth": "auth-key"},
        )
        db_session.add(sub)
        db_session.commit()
        return sub

    return factory


@pytest.fixture()
def auth_headers() -> Callable[[User], dict[str, str]]:
    def build(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(str(user.id))}"}

    return build


@pytest.fixture()
def client(db_session: Session) -> Generator[TestClient, None, None]:
    app = create_app()

    def override_get_db() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
