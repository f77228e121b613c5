from __future__ import annotations

import base64
import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Ensure the project root (which exposes the ``backend`` package) is on ``sys.path``
PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ.setdefault("JWT_SECRET", base64.urlsafe_b64encode(b"\x07" * 32).decode())
os.environ.setdefault("JWT_REFRESH_SECRET", base64.urlsafe_b64encode(b"\x08" * 32).decode())
os.environ["ENABLE_STARTUP_MIGRATIONS"] = "0"
os.environ["EMAIL_TRANSPORT"] = "console"
os.environ.pop("ADMIN_EMAIL", None)
os.environ.pop("ADMIN_PASSWORD", None)

from backend.app import models  # noqa: E402
from backend.app.database import Base, get_db  # noqa: E402
from backend.app.enums import ProjectCategory, UserRole  # noqa: E402
from backend.app.main import app, limiter  # noqa: E402
from backend.app.routers.dependencies import get_notifier  # noqa: E402
from backend.app.security import create_access_token, generate_password_hash  # noqa: E402
from backend.app.services import ConsoleNotificationClient, MessageNotifier  # noqa: E402

ADMIN_PASSWORD = "Adm1nSecret"
USER_PASSWORD = "Us3rSecret"

SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)

BASE_TIME = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="session", autouse=True)
def setup_database() -> Generator[None, None, None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def reset_rate_limits() -> None:
    limiter.reset()


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    connection = engine.connect()
    transaction = connection.begin()
    session = TestingSessionLocal(bind=connection)
    try:
        yield session
    finally:
        session.close()
        transaction.rollback()
        connection.close()


@pytest.fixture
def mailbox() -> ConsoleNotificationClient:
    return ConsoleNotificationClient()


@pytest.fixture
def app_overrides(db_session: Session, mailbox: ConsoleNotificationClient) -> Generator[None, None, None]:
    def override_get_db() -> Generator[Session, None, None]:
        try:
            yield db_session
        finally:
            db_session.expire_all()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: MessageNotifier(mailbox)
    yield
    app.dependency_overrides.clear()


def _create_user(db_session: Session, *, email: str, password: str, role: UserRole) -> models.User:
    user = models.User(
        name=email.split("@")[0].title(),
        email=email,
        password_hash=generate_password_hash(password, iterations=1_000),
        role=role,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def admin_user(db_session: Session) -> models.User:
    return _create_user(db_session, email="admin@example.com", password=ADMIN_PASSWORD, role=UserRole.ADMIN)


@pytest.fixture
def regular_user(db_session: Session) -> models.User:
    return _create_user(db_session, email="user@example.com", password=USER_PASSWORD, role=UserRole.USER)


@pytest.fixture
def client(app_overrides) -> TestClient:
    """Anonymous client."""
    return TestClient(app)


@pytest.fixture
def admin_client(app_overrides, admin_user: models.User) -> TestClient:
    test_client = TestClient(app)
    test_client.headers.update({"Authorization": f"Bearer {create_access_token(admin_user)}"})
    return test_client


@pytest.fixture
def user_client(app_overrides, regular_user: models.User) -> TestClient:
    test_client = TestClient(app)
    test_client.headers.update({"Authorization": f"Bearer {create_access_token(regular_user)}"})
    return test_client


@pytest.fixture
def make_project(db_session: Session) -> Callable[..., models.Project]:
    """Insert a project; each call is one minute newer than the previous one."""

    counter = {"value": 0}

    def _make(**overrides: Any) -> models.Project:
        counter["value"] += 1
        payload: dict[str, Any] = {
            "title": f"Project {counter['value']:02d}",
            "description": "Portfolio project used in tests",
            "thumbnail": "https://example.com/thumb.png",
            "technologies": ["Python"],
            "category": ProjectCategory.WEB_DEVELOPMENT,
            "created_at": BASE_TIME + timedelta(minutes=counter["value"]),
        }
        payload.update(overrides)
        project = models.Project(**payload)
        db_session.add(project)
        db_session.commit()
        db_session.refresh(project)
        return project

    return _make
