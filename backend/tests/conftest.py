"""
Centralized Test Configuration.
"""

import os

# Point the application engine at SQLite before the app is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from backend.app.main import app
from backend.app.db.session import get_db, Base

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


@pytest.fixture(scope="session", autouse=True)
def apply_overrides():
    """Route every request's database session to the test engine."""

    async def override_get_db():
        async with TestingSessionLocal() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield

    app.dependency_overrides = {}


@pytest.fixture(autouse=True)
async def setup_database():
    """Create tables before each test function and drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# Shared session for fixture data creation
@pytest.fixture
async def db_session():
    async with TestingSessionLocal() as session:
        yield session


def driver_payload(suffix: str = "1", **overrides) -> dict:
    payload = {
        "fullName": f"Driver {suffix}",
        "contactNumber": f"555-01{suffix}",
        "licenseNumber": f"DL-{suffix}",
        "address": f"{suffix} Main Street",
    }
    payload.update(overrides)
    return payload


def vehicle_payload(owner_id: str, registration: str = "ABC1", **overrides) -> dict:
    payload = {
        "registrationNumber": registration,
        "owner": owner_id,
        "vehicleType": "Car",
        "make": "Toyota",
        "model": "Corolla",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_driver(client):
    """Register a driver through the API and return its JSON."""

    async def _make(suffix: str = "1", **overrides) -> dict:
        response = await client.post("/api/drivers", json=driver_payload(suffix, **overrides))
        assert response.status_code == 201, response.text
        return response.json()

    return _make


@pytest.fixture
def make_vehicle(client):
    """Register a vehicle through the API and return its JSON."""

    async def _make(owner_id: str, registration: str = "ABC1", **overrides) -> dict:
        response = await client.post("/api/vehicles", json=vehicle_payload(owner_id, registration, **overrides))
        assert response.status_code == 201, response.text
        return response.json()

    return _make
