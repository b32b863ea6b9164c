"""
Pytest configuration and shared fixtures for Elevion tests.
"""

import os

# Settings are read at import time; point them at SQLite before elevion loads
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SEED_SAMPLE_DATA", "false")

from datetime import datetime, timedelta
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlmodel import SQLModel


# ============================================================================
# Clock
# ============================================================================

class FakeClock:
    """Controllable clock for timestamp and "active" window tests."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 6, 1, 12, 0, 0))


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture
async def engine(tmp_path):
    """File-backed SQLite engine with every table created."""
    import elevion.infrastructure.db.models  # noqa: F401

    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'elevion-test.db'}",
        connect_args={"timeout": 30},
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    from elevion.infrastructure.db.database import create_session_factory
    return create_session_factory(engine)


@pytest.fixture
def storage(session_factory, clock):
    """Storage gateway over the test database."""
    from elevion.infrastructure.db.storage import DatabaseStorage
    return DatabaseStorage(session_factory=session_factory, clock=clock)


# ============================================================================
# Application Fixtures
# ============================================================================

@pytest.fixture
def mock_storage():
    """Storage gateway double; its async methods are AsyncMocks."""
    from elevion.infrastructure.db.storage import DatabaseStorage
    storage = MagicMock(spec=DatabaseStorage)
    storage.now.return_value = datetime(2024, 6, 1, 12, 0, 0)
    return storage


@pytest.fixture
def mock_stripe_service():
    """Unconfigured payment service by default."""
    from elevion.infrastructure.payments.stripe_service import StripeService
    service = MagicMock(spec=StripeService)
    service.is_configured = False
    return service


@pytest.fixture
def app(mock_storage, mock_stripe_service):
    """FastAPI application with the storage and payments overridden."""
    from elevion.main import app
    from elevion.infrastructure.db.storage import get_storage
    from elevion.infrastructure.payments.stripe_service import get_stripe_service

    app.dependency_overrides[get_storage] = lambda: mock_storage
    app.dependency_overrides[get_stripe_service] = lambda: mock_stripe_service
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    """Synchronous test client; the lifespan does not run."""
    return TestClient(app)
