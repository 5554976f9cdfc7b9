"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown (in-memory SQLite)
- FastAPI test client
- Admin accounts, logins, directory data and scheduled candidates
"""

import os

# Must be set before the application settings are imported
os.environ["SQLALCHEMY_DATABASE_URI"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.clock import utcnow
from app.core.database import Base, enable_sqlite_foreign_keys, get_db
from app.core.security import get_password_hash
from app.models.user import AdminRole, User, UserType
from main import app

API = "/api"

# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
enable_sqlite_foreign_keys(engine)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session():
    """
    Create a fresh database for each test.
    Tables are dropped after the test completes.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    """
    FastAPI test client with overridden database dependency.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def create_admin(db_session):
    """Factory inserting an admin User directly into the database."""
    def _create(email="admin@example.com", password="adminpass", name="Admin User",
                admin_role=AdminRole.ADMIN):
        user = User(
            email=email,
            password=get_password_hash(password),
            name=name,
            user_type=UserType.ADMIN,
            admin_role=admin_role,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _create


@pytest.fixture
def login(client):
    """
    Factory logging in through the API and returning Bearer headers.

    The session cookie is cleared afterwards so each request is authenticated
    only by the headers it is given.
    """
    def _login(email, password):
        response = client.post(f"{API}/auth/session", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        client.cookies.clear()
        return {"Authorization": f"Bearer {response.json()['accessToken']}"}

    return _login


@pytest.fixture
def admin_user(create_admin):
    return create_admin()


@pytest.fixture
def admin_headers(admin_user, login):
    """Headers for a super-admin (adminRole ADMIN)."""
    return login("admin@example.com", "adminpass")


@pytest.fixture
def panel_user(create_admin):
    return create_admin(email="panel@example.com", password="panelpass", name="Panel Member",
                        admin_role=AdminRole.USER)


@pytest.fixture
def panel_headers(panel_user, login):
    """Headers for a plain admin (adminRole USER)."""
    return login("panel@example.com", "panelpass")


@pytest.fixture
def directory(client, admin_headers):
    """
    Engineering department, Backend position, Node stack and a problem tagged
    with that stack, all created through the API.
    """
    department = client.post(
        f"{API}/admin/departments", json={"name": "Engineering"}, headers=admin_headers
    ).json()
    position = client.post(
        f"{API}/admin/positions",
        json={"name": "Backend", "departmentId": department["id"]},
        headers=admin_headers,
    ).json()
    stack = client.post(
        f"{API}/admin/stacks", json={"name": "Node"}, headers=admin_headers
    ).json()
    problem = client.post(
        f"{API}/admin/problems",
        json={
            "title": "Reverse a string",
            "description": "Return the input string reversed.",
            "difficulty": "EASY",
            "departmentId": department["id"],
            "positionId": position["id"],
            "stackIds": [stack["id"]],
        },
        headers=admin_headers,
    ).json()
    return {
        "department": department,
        "position": position,
        "stack": stack,
        "problem": problem,
    }


@pytest.fixture
def schedule_candidate(client, admin_headers, directory):
    """
    Factory scheduling a candidate through the API.

    `starts_in` is an offset from now (negative = already available).
    Returns the create response body: {"candidate": ..., "generatedPassword": ...}.
    """
    def _schedule(name="Jane Doe", email="jane@example.com", starts_in=timedelta(minutes=-1),
                  end_time=None):
        scheduled_time = utcnow() + starts_in
        body = {
            "name": name,
            "email": email,
            "departmentId": directory["department"]["id"],
            "positionId": directory["position"]["id"],
            "problemId": directory["problem"]["id"],
            "scheduledTime": scheduled_time.isoformat(),
        }
        if end_time is not None:
            body["endTime"] = end_time.isoformat()
        response = client.post(f"{API}/admin/candidates", json=body, headers=admin_headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _schedule


@pytest.fixture
def candidate_login(login):
    """Log in as a scheduled candidate using the password generated at creation."""
    def _login(created):
        return login(created["candidate"]["email"], created["generatedPassword"])

    return _login
