"""
Shared fixtures for the Job Copilot test suite.

Environment variables are set before any application import so the
cached ServiceSettings instance picks them up. Every test gets a fresh
in-memory mongomock database, injected into the app through the get_db
dependency override.
"""

import os

os.environ["ENVIRONMENT"] = "test"
os.environ["JWT_SECRET"] = "test-jwt-secret"
os.environ["MONGODB_URI"] = "mongodb://localhost:27017"
os.environ["MONGO_DB_NAME"] = "job_copilot_test"
os.environ["SERVE_STATIC"] = "false"
os.environ["ADMIN_ID"] = ""
os.environ["ADMIN_PASSWORD"] = ""
# Empty keys make any unpatched provider call fail fast instead of going out
os.environ["OPENAI_API_KEY"] = ""
os.environ["ANTHROPIC_API_KEY"] = ""

from typing import Callable, Dict
from unittest.mock import AsyncMock, MagicMock

import mongomock
import pytest
from fastapi.testclient import TestClient
from langchain_core.messages import AIMessage

from api_service.app import app
from api_service.dependencies import get_db
from src.common.database import ensure_indexes
from src.services.auth_service import AuthService

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin-secret"


@pytest.fixture
def db():
    """Fresh mongomock database with the production indexes."""
    mongo = mongomock.MongoClient()
    database = mongo["job_copilot_test"]
    ensure_indexes(database)
    yield database
    mongo.close()


@pytest.fixture
def client(db):
    """TestClient wired to the in-memory database."""
    app.dependency_overrides[get_db] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def register(client) -> Callable[..., Dict[str, str]]:
    """Factory that registers a user and returns its auth headers."""

    def _register(
        name: str = "Ada Lovelace",
        email: str = "ada@example.com",
        password: str = "secret1",
    ) -> Dict[str, str]:
        response = client.post("/api/users", json={"name": name, "email": email, "password": password})
        assert response.status_code == 200, response.text
        return {"x-auth-token": response.json()["token"]}

    return _register


@pytest.fixture
def auth_headers(register) -> Dict[str, str]:
    return register()


@pytest.fixture
def other_headers(register) -> Dict[str, str]:
    """Headers for a second, unrelated user."""
    return register(name="Grace Hopper", email="grace@example.com", password="secret2")


@pytest.fixture
def user_id(client, auth_headers) -> str:
    return client.get("/api/auth", headers=auth_headers).json()["_id"]


@pytest.fixture
def admin_headers(client, db) -> Dict[str, str]:
    """Bootstrap the admin account and log in through the admin route."""
    AuthService(db, jwt_secret="test-jwt-secret").ensure_admin(ADMIN_EMAIL, ADMIN_PASSWORD)
    response = client.post("/api/admin/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert response.status_code == 200, response.text
    return {"x-auth-token": response.json()["token"]}


@pytest.fixture
def create_job(client, auth_headers) -> Callable[..., Dict]:
    """Factory that posts a job and returns the stored document."""

    def _create_job(**overrides) -> Dict:
        body = {
            "title": "Backend Engineer",
            "company": "Acme",
            "location": "Berlin",
            "description": "Build APIs in Python",
            "requirements": "3+ years of Python",
            "skills": ["Python", "MongoDB"],
            "industry": "Software",
        }
        body.update(overrides)
        response = client.post("/api/jobs", json=body, headers=auth_headers)
        assert response.status_code == 200, response.text
        return response.json()

    return _create_job


@pytest.fixture
def job_id(create_job) -> str:
    return create_job()["_id"]


@pytest.fixture
def create_resume(client) -> Callable[..., Dict]:
    """Factory that posts a resume for the given headers."""

    def _create_resume(headers: Dict[str, str], **overrides) -> Dict:
        body = {
            "template": "modern",
            "personalInfo": {"name": "Ada Lovelace", "email": "ada@example.com", "summary": "Engineer"},
            "workExperience": [
                {"company": "Analytical Engines", "position": "Programmer", "description": "Wrote programs"},
            ],
            "education": [{"institution": "Home", "degree": "Mathematics"}],
            "skills": [{"name": "Python", "level": "Advanced"}],
        }
        body.update(overrides)
        response = client.post("/api/resumes", json=body, headers=headers)
        assert response.status_code == 200, response.text
        return response.json()

    return _create_resume


@pytest.fixture
def resume_id(create_resume, auth_headers) -> str:
    return create_resume(auth_headers)["_id"]


def fake_llm(output):
    """Chat model stand-in; an Exception output makes ainvoke raise it."""
    llm = MagicMock()
    if isinstance(output, Exception):
        llm.ainvoke = AsyncMock(side_effect=output)
    else:
        llm.ainvoke = AsyncMock(return_value=AIMessage(content=output))
    return llm


@pytest.fixture
def llm_responses(mocker):
    """
    Patch both provider factories.

    Returns a function taking the primary and secondary outputs; each may
    be response text or an Exception to simulate a failed provider.
    """

    def _configure(primary, secondary=RuntimeError("secondary unavailable")):
        primary_factory = mocker.patch(
            "src.common.unified_llm.create_primary_llm", return_value=fake_llm(primary)
        )
        secondary_factory = mocker.patch(
            "src.common.unified_llm.create_secondary_llm", return_value=fake_llm(secondary)
        )
        return primary_factory, secondary_factory

    return _configure
