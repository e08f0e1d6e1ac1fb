"""
Realty CRM API - Test Configuration (conftest.py)
===================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.
Who:   Used by all test files in the tests/ directory.
When:  Fixtures are created per-test.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_db_session: Mock database session (no real DB needed)
    ├── make_token:      Mints HS256 bearer tokens for any subject/roles
    ├── agent_headers / admin_headers / viewer_headers: ready-made auth headers
    ├── database:        Real SQLite schema (create_all / drop_all around the test)
    └── test_client:     HTTPX AsyncClient for API endpoint testing
"""

import os
import tempfile
from datetime import datetime, timezone
from typing import Dict, Sequence
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from jose import jwt


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Must run BEFORE any app import: settings and the engine are built at import time
TEST_JWT_SECRET = "test-secret-not-for-production"
_test_db_dir = tempfile.mkdtemp(prefix="realty_crm_test_")

os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_test_db_dir}/test.db"
os.environ["AUTH_JWT_SECRET"] = TEST_JWT_SECRET
os.environ["AUTH_JWT_ALGORITHMS"] = "HS256"
os.environ["PAGINATION_DEFAULT_LIMIT"] = "25"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests


# ══════════════════════════════════════════════════════════════════════════
# Token Helpers
# ══════════════════════════════════════════════════════════════════════════

def mint_token(sub: str = "agent-1", roles: Sequence[str] = ("agent",), **claims) -> str:
    """Sign a token the application will accept (same secret and algorithm)."""
    payload = {"sub": sub, "roles": list(roles), **claims}
    return jwt.encode(payload, TEST_JWT_SECRET, algorithm="HS256")


def bearer(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_token():
    return mint_token


@pytest.fixture
def agent_headers():
    return bearer(mint_token(sub="agent-1", roles=["agent"]))


@pytest.fixture
def admin_headers():
    return bearer(mint_token(sub="admin-1", roles=["admin"]))


@pytest.fixture
def viewer_headers():
    """Authenticated, but holds no write role."""
    return bearer(mint_token(sub="viewer-1", roles=["viewer"]))


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures (created fresh for each test)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    What:    An AsyncMock that simulates AsyncSession behavior.
    How:     Mocks execute, flush, refresh, delete, commit, rollback, and close.
             refresh() fills in the columns the database would generate.

    Usage:
        async def test_get_client(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = client
            result = await client_service.get_record(mock_db_session, "agent-1", str(client.id))
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()

    async def fake_refresh(record):
        now = datetime.now(timezone.utc)
        if getattr(record, "id", None) is None:
            record.id = uuid4()
        if getattr(record, "created_at", None) is None:
            record.created_at = now
        record.updated_at = now

    session.refresh = AsyncMock(side_effect=fake_refresh)
    return session


@pytest_asyncio.fixture
async def database():
    """
    Provides a real, empty SQLite schema for end-to-end tests.

    What:    Creates every table before the test and drops them afterwards.
    How:     Uses the application's own engine (NullPool for SQLite), so
             requests made through test_client hit the same file.
    """
    from app.database import Base, engine
    from app.models.client import Client  # noqa: F401
    from app.models.transaction import Transaction  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def test_client():
    """
    Provides an async HTTP test client for endpoint testing.

    What:    HTTPX AsyncClient configured to talk to our FastAPI app.
    How:     Uses ASGITransport to route requests directly to the app.
             raise_app_exceptions=False lets the catch-all 500 handler's
             response reach the test instead of the exception.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/api/v1/health")
            assert response.status_code == 200
    """
    from app.main import app
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
