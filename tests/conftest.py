"""
Shared fixtures.

Each test gets a fresh application backed by an in-memory SQLite database
and a temporary photo upload directory.
"""

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from hr_service.core.config import Settings
from hr_service.core.security import hash_password
from hr_service.main import create_app
from hr_service.models import Operator

TEST_SECRET = "test-secret-key-that-is-long-enough-for-hs256"
OPERATOR_EMAIL = "admin@hr.com"
OPERATOR_PASSWORD = "password123"

ADA = {
    "name": "Ada",
    "age": 30,
    "designation": "Engineer",
    "hiring_date": "2024-01-01",
    "date_of_birth": "1994-01-01",
    "salary": 50000,
}


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at an in-memory database and a temp upload dir."""
    return Settings(
        DATABASE_URL="sqlite://",
        JWT_SECRET=TEST_SECRET,
        JWT_EXPIRES_IN="8h",
        STORAGE_BACKEND="local",
        UPLOAD_PATH=str(tmp_path / "uploads"),
        UPLOAD_URL_PREFIX="/uploads",
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    """Test client; entering it runs the lifespan, which creates the tables."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db_session(app, client):
    """Create a database session for testing."""
    with Session(app.state.engine) as session:
        yield session


@pytest.fixture
def operator(db_session):
    """An operator account that can log in."""
    account = Operator(
        email=OPERATOR_EMAIL,
        password_hash=hash_password(OPERATOR_PASSWORD, rounds=4),
        name="HR Admin",
    )
    db_session.add(account)
    db_session.commit()
    db_session.refresh(account)
    return account


@pytest.fixture
def auth_headers(client, operator):
    """Bearer headers for the seeded operator."""
    response = client.post(
        "/auth/login", json={"email": OPERATOR_EMAIL, "password": OPERATOR_PASSWORD}
    )
    assert response.status_code == 200
    token = response.json()["data"]["token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def create_employee(client, auth_headers):
    """Factory creating an employee through the API and returning its data."""

    def _create(**overrides):
        payload = {**ADA, **overrides}
        response = client.post("/employees", json=payload, headers=auth_headers)
        assert response.status_code == 201, response.json()
        return response.json()["data"]

    return _create


@pytest.fixture
def check_in(client, auth_headers):
    """Factory recording a check-in through the API and returning the response."""

    def _check_in(employee_id, date, check_in_time):
        return client.post(
            "/attendance",
            json={
                "employee_id": employee_id,
                "date": date,
                "check_in_time": check_in_time,
            },
            headers=auth_headers,
        )

    return _check_in
