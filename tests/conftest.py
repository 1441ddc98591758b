"""Pytest fixtures for API tests."""

import os
from collections.abc import Generator

os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from lwl.api import deps
from lwl.api.deps import get_db
from lwl.db import models  # noqa: F401  # Imported for side effects
from lwl.db.base import Base
from lwl.db.models import User, UserRole
from lwl.main import create_app
from lwl.services.session_tracker import session_word_tracker
from lwl.tasks.emails import send_feedback_notification, send_template_email
from lwl.utils.cache import api_cache, cache_backend


@pytest.fixture()
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
        engine.dispose()


@pytest.fixture()
def db_session(db_engine) -> Generator[Session, None, None]:
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, expire_on_commit=False, bind=db_engine
    )
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def clear_cache() -> Generator[None, None, None]:
    cache_backend.clear()
    api_cache.clear()
    session_word_tracker.reset()
    try:
        yield
    finally:
        cache_backend.clear()
        api_cache.clear()
        session_word_tracker.reset()


@pytest.fixture(autouse=True)
def queued_emails(monkeypatch) -> list[tuple]:
    """Capture Celery email dispatches instead of publishing them."""

    calls: list[tuple] = []

    def fake_template_delay(*args, **kwargs):
        calls.append(("template", *args))

    def fake_feedback_delay(*args, **kwargs):
        calls.append(("feedback", *args))

    monkeypatch.setattr(send_template_email, "delay", fake_template_delay)
    monkeypatch.setattr(send_feedback_notification, "delay", fake_feedback_delay)
    return calls


@pytest.fixture(autouse=True)
def reset_llm_singleton(monkeypatch) -> None:
    monkeypatch.setattr(deps, "_llm_service_singleton", None)


@pytest.fixture()
def app(db_session: Session):
    application = create_app()

    def override_get_db() -> Generator[Session, None, None]:
        yield db_session

    application.dependency_overrides[get_db] = override_get_db
    return application


@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client


def register_and_login(client: TestClient, email: str, password: str = "supersecure") -> dict[str, str]:
    client.post(
        "/api/v1/auth/register",
        json={"email": email, "password": password, "target_language": "spanish"},
    )
    response = client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture()
def login(client: TestClient):
    """Register a learner with the given email and return bearer headers."""

    def _login(email: str) -> dict[str, str]:
        return register_and_login(client, email)

    return _login


@pytest.fixture()
def auth_headers(client: TestClient) -> dict[str, str]:
    return register_and_login(client, "learner@example.com")


@pytest.fixture()
def current_user(auth_headers, db_session: Session) -> User:
    return db_session.query(User).filter(User.email == "learner@example.com").one()


@pytest.fixture()
def admin_headers(client: TestClient, db_session: Session) -> dict[str, str]:
    headers = register_and_login(client, "admin@example.com")
    admin = db_session.query(User).filter(User.email == "admin@example.com").one()
    admin.roles.append(UserRole(role="admin"))
    db_session.commit()
    return headers


@pytest.fixture()
def user(db_session: Session) -> User:
    """A learner created directly in the database for service-level tests."""

    learner = User(email="service@example.com", hashed_password="x", native_language="english")
    learner.roles.append(UserRole(role="user"))
    db_session.add(learner)
    db_session.commit()
    return learner
