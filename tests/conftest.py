"""Pytest configuration and fixtures for hse-workflows.

Uses app.main:app for HTTP tests and app.infrastructure.persistence.database
for DB-dependent fixtures. All imports use app.*.
"""

import os

# Settings are validated on first get_settings(); provide a signing key before app import.
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.limiter import limiter
from app.infrastructure.persistence import database
from app.infrastructure.security.jwt import create_access_token
from app.main import app

RESPONSIBLE_ID = "user-responsible"
VALIDATOR_ID = "user-validator"


def bearer(actor_id: str) -> dict[str, str]:
    """Authorization header for actor_id."""
    return {"Authorization": f"Bearer {create_access_token(actor_id)}"}


@pytest.fixture(autouse=True)
def _reset_rate_limits():
    """Clear in-memory SlowAPI counters so tests do not share write budgets."""
    limiter.reset()
    yield


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def db_session() -> AsyncSession:
    """Database session for repository/integration tests. Rolls back after test.

    Requires DATABASE_URL and a migrated schema (alembic upgrade head). Skips
    when Postgres is not configured. Use @pytest.mark.requires_db to mark
    tests that need this fixture; run without DB via: pytest -m 'not requires_db'.
    """
    database._ensure_engine()
    if database.AsyncSessionLocal is None:
        pytest.skip(
            "Postgres not configured: set DATABASE_URL, then run: alembic upgrade head"
        )
    async with database.AsyncSessionLocal() as session:
        yield session
        await session.rollback()
    # Pooled connections are bound to this test's event loop.
    await database.dispose_engine()
