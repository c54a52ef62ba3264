"""Shared fixtures: a fresh SQLite database per test and a TestClient bound to it."""

import asyncio
import os

# Must be set before app modules read settings
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["DB_CREATE_TABLES"] = "false"
os.environ["CACHE_ENABLED"] = "false"
os.environ["RAPIDAPI_KEY"] = ""
os.environ["SENTRY_DSN"] = ""
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["LOG_FORMAT"] = "console"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

from app.core.cache import cache_manager  # noqa: E402
from app.db.session import build_engine, create_tables, get_db  # noqa: E402
from app.main import app  # noqa: E402


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    asyncio.run(create_tables(engine))
    yield engine
    asyncio.run(engine.dispose())


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
def run_db(session_factory):
    """Run ``await fn(session)`` against the test database outside of a request."""

    def runner(fn):
        async def _run():
            async with session_factory() as session:
                result = await fn(session)
                await session.commit()
                return result

        return asyncio.run(_run())

    return runner


@pytest.fixture
def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    cache_manager.clear_all()
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    cache_manager.clear_all()


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register(client):
    """Register a user and return ``{"token", "user", "headers"}``."""

    def _register(role="candidate", email=None, name=None, company_name=None, password="secret1"):
        payload = {
            "name": name or f"Test {role.title()}",
            "email": email or f"{role}@example.com",
            "password": password,
            "role": role,
        }
        if company_name is not None:
            payload["companyName"] = company_name
        elif role == "employer":
            payload["companyName"] = "Acme Inc"

        response = client.post("/api/auth/register", json=payload)
        assert response.status_code == 201, response.json()
        body = response.json()
        return {"token": body["token"], "user": body["user"], "headers": auth_headers(body["token"])}

    return _register


@pytest.fixture
def employer(register):
    return register("employer", email="a@acme.com", name="Acme", company_name="Acme Inc")


@pytest.fixture
def other_employer(register):
    return register("employer", email="boss@globex.com", name="Globex", company_name="Globex Corp")


@pytest.fixture
def candidate(register):
    return register("candidate", email="jane@example.com", name="Jane Doe")


@pytest.fixture
def other_candidate(register):
    return register("candidate", email="john@example.com", name="John Roe")


@pytest.fixture
def create_job(client, employer):
    """Post a job as ``owner`` (default: the ``employer`` fixture) and return its JSON."""

    def _create_job(owner=None, **overrides):
        payload = {
            "title": "Eng",
            "description": "Build things",
            "location": "Remote",
            "jobType": "Full-time",
        }
        payload.update(overrides)
        response = client.post("/api/jobs", json=payload, headers=(owner or employer)["headers"])
        assert response.status_code == 201, response.json()
        return response.json()

    return _create_job
