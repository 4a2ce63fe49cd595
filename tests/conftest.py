"""Shared fixtures: SQLite database, test client, fake Stripe, API helpers."""

import asyncio
import itertools
import json
import os
import tempfile
import time

# Settings are cached on first use, so the environment must be set before
# anything under src/ is imported.
_TEST_DIR = tempfile.mkdtemp(prefix="lms-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR}/lms.db"
os.environ["ENVIRONMENT"] = "test"
os.environ["REDIS_URL"] = ""
os.environ["JWT_SECRET"] = "test-secret"
os.environ["STRIPE_SECRET_KEY"] = "sk_test_123"
os.environ["STRIPE_WEBHOOK_SECRET"] = "whsec_test"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy import update

from src.clients.stripe_client import StripeClient, compute_signature
from src.config import get_settings
from src.db.session import AsyncSessionLocal, engine
from src.dependencies.services import get_email_task, get_stripe_client
from src.main import app
from src.model import Base, User
from src.model.enums import UserRole
from src.services.task_service import EmailTask

WEBHOOK_SECRET = "whsec_test"


async def _reset_schema():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


async def _set_role(user_id: int, role: UserRole):
    async with AsyncSessionLocal() as db_session:
        await db_session.execute(update(User).where(User.id == user_id).values(role=role))
        await db_session.commit()


@pytest.fixture(autouse=True)
def reset_database():
    """Every test starts from empty tables."""
    asyncio.run(_reset_schema())
    yield


@pytest_asyncio.fixture
async def session():
    async with AsyncSessionLocal() as db_session:
        yield db_session


class FakeStripeClient(StripeClient):
    """Real signature checks, canned checkout sessions."""

    def __init__(self):
        super().__init__(get_settings())
        self.sessions = []
        self.fail_with = None

    async def create_checkout_session(self, **kwargs):
        if self.fail_with is not None:
            raise self.fail_with
        session_id = f"cs_test_{len(self.sessions) + 1}"
        self.sessions.append({"id": session_id, **kwargs})
        return {"id": session_id, "url": f"https://checkout.stripe.test/pay/{session_id}"}


class RecordingEmailTask(EmailTask):
    """Keeps queued email jobs in memory instead of pushing them to Redis."""

    def __init__(self):
        super().__init__(redis_client=None)
        self.jobs = []

    async def _enqueue(self, template: str, to: str, context: dict):
        self.jobs.append({"template": template, "to": to, "context": context})


@pytest.fixture
def fake_stripe():
    return FakeStripeClient()


@pytest.fixture
def email_task():
    return RecordingEmailTask()


@pytest.fixture
def client(fake_stripe, email_task):
    app.dependency_overrides[get_stripe_client] = lambda: fake_stripe
    app.dependency_overrides[get_email_task] = lambda: email_task
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def signed_webhook(event: dict, secret: str = WEBHOOK_SECRET, timestamp: int = None):
    """Body and headers for a webhook request signed the way Stripe signs it."""
    body = json.dumps(event).encode("utf-8")
    ts = str(timestamp if timestamp is not None else int(time.time()))
    signature = compute_signature(secret, ts, body)
    return body, {"Stripe-Signature": f"t={ts},v1={signature}", "Content-Type": "application/json"}


class ApiHelper:
    """Thin wrappers over the HTTP API for arranging test state."""

    _ids = itertools.count(1)

    def __init__(self, client: TestClient):
        self.client = client

    def register(self, role="STUDENT", email=None, password="password123", full_name=None):
        n = next(self._ids)
        email = email or f"user{n}@example.com"
        response = self.client.post(
            "/api/v1/auth/register",
            json={
                "email": email,
                "password": password,
                "full_name": full_name or f"User {n}",
                "role": role,
            },
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]

    def login(self, email, password="password123"):
        response = self.client.post(
            "/api/v1/auth/login", json={"email": email, "password": password}
        )
        assert response.status_code == 200, response.text
        token = response.json()["data"]["access_token"]
        return {"Authorization": f"Bearer {token}"}

    def user(self, role="STUDENT"):
        """Register and log in; returns (user, auth headers)."""
        user = self.register(role=role)
        return user, self.login(user["email"])

    def admin(self):
        """Admins cannot self-register, so promote a student in the database."""
        user = self.register()
        asyncio.run(_set_role(user["id"], UserRole.ADMIN))
        return user, self.login(user["email"])

    def create_course(self, headers, **fields):
        payload = {"title": "Intro to Python", "price": 0, **fields}
        response = self.client.post("/api/v1/instructor/courses", json=payload, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    def add_lesson(self, headers, course_id, **fields):
        payload = {"title": "Lesson", "content": "Body", **fields}
        response = self.client.post(
            f"/api/v1/instructor/courses/{course_id}/lessons", json=payload, headers=headers
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]

    def publish(self, headers, course_id):
        response = self.client.post(
            f"/api/v1/instructor/courses/{course_id}/publish", headers=headers
        )
        assert response.status_code == 200, response.text
        return response.json()["data"]

    def published_course(self, headers=None, lessons=3, free_lessons=(0,), **fields):
        """Publish a course with `lessons` lessons; indexes in free_lessons are previews."""
        if headers is None:
            _, headers = self.user(role="INSTRUCTOR")
        course = self.create_course(headers, **fields)
        created = [
            self.add_lesson(headers, course["id"], title=f"Lesson {i + 1}", is_free=i in free_lessons)
            for i in range(lessons)
        ]
        course = self.publish(headers, course["id"])
        return headers, course, created

    def enroll(self, headers, course_id):
        response = self.client.post(f"/api/v1/courses/{course_id}/enroll", headers=headers)
        assert response.status_code == 200, response.text
        return response.json()["data"]


@pytest.fixture
def api(client):
    return ApiHelper(client)
