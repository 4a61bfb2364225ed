"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown
- FastAPI test client
- Registered shop owners and job seekers with profiles
- Seeded categories and job postings
"""

import os

# Must be set before the application modules read their settings
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "4")
os.environ.setdefault("JSON_LOGS", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import Settings
from app.core.database import Base, get_db
from app.core.security import PasswordHasher
from app.models.job import Category
from app.models.user import Role
from main import app, create_app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

API = "/api/v1"


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def db_session():
    """
    Create a fresh database session for each test.
    Drops all tables after the test completes.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


def _client_for(application, db_session):
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    application.dependency_overrides[get_db] = override_get_db
    return TestClient(application)


@pytest.fixture
def client(db_session):
    """
    FastAPI test client with overridden database dependency.
    """
    with _client_for(app, db_session) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def revocation_client(db_session):
    """Test client for an app built with token revocation enabled."""
    revocation_app = create_app(Settings(TOKEN_REVOCATION_ENABLED=True))
    with _client_for(revocation_app, db_session) as test_client:
        yield test_client

    revocation_app.dependency_overrides.clear()


@pytest.fixture
def hasher():
    return PasswordHasher(rounds=4)


@pytest.fixture
def token_service():
    """The token service the test app verifies against."""
    return app.state.token_service


@pytest.fixture
def category(db_session):
    cat = Category(name="Restaurant")
    db_session.add(cat)
    db_session.commit()
    db_session.refresh(cat)
    return cat


@pytest.fixture
def make_user(client):
    """
    Factory registering a user through the API.

    Returns a dict with the token, auth headers, user payload and (when
    requested) the created profile.
    """
    def _make(email: str, role: Role, password: str = "secret1", with_profile: bool = True) -> dict:
        response = client.post(
            f"{API}/auth/register",
            json={"email": email, "password": password, "role": role.value}
        )
        assert response.status_code == 201, response.text
        data = response.json()
        headers = auth_headers(data["access_token"])
        result = {"token": data["access_token"], "headers": headers, "user": data["user"], "profile": None}

        if with_profile:
            if role == Role.SHOP_OWNER:
                profile = client.post(f"{API}/shops", headers=headers, json={"shop_name": f"Shop of {email}"})
            else:
                profile = client.post(f"{API}/job-seekers", headers=headers, json={"full_name": email})
            assert profile.status_code == 201, profile.text
            result["profile"] = profile.json()

        return result

    return _make


@pytest.fixture
def shop_owner(make_user):
    return make_user("owner@example.com", Role.SHOP_OWNER)


@pytest.fixture
def other_shop_owner(make_user):
    return make_user("rival@example.com", Role.SHOP_OWNER)


@pytest.fixture
def seeker(make_user):
    return make_user("seeker@example.com", Role.JOB_SEEKER)


@pytest.fixture
def sample_job_data(category):
    """Sample job data for testing"""
    return {
        "category_id": category.id,
        "job_name": "Weekend barista",
        "description": "Espresso bar, Saturday and Sunday mornings",
        "address": "12 Market Street",
        "work_date": "2026-11-07T08:00:00Z",
        "required_people": 2,
        "wage": 15.5
    }


@pytest.fixture
def make_job(client, sample_job_data):
    """Factory creating a job posting as the given shop owner."""
    def _make(owner: dict, **overrides) -> dict:
        payload = {**sample_job_data, **overrides}
        response = client.post(f"{API}/jobs", headers=owner["headers"], json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _make


@pytest.fixture
def open_job(make_job, shop_owner):
    return make_job(shop_owner)
