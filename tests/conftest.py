"""Pytest configuration and fixtures for API tests."""

import os
from collections.abc import AsyncGenerator
from uuid import UUID

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool

from travelin_api.database import Base, get_db
from travelin_api.main import app
from travelin_api.models.poi import POICategory
from travelin_api.repositories import poi as poi_repo
from travelin_api.schemas import POICreate
from travelin_api.services.locks import poi_locks

# Test user IDs (must match the ones used in test files)
TEST_USER_ID = UUID("00000000-0000-0000-0000-000000000001")
OTHER_USER_ID = UUID("00000000-0000-0000-0000-000000000002")

# Use SQLite for local tests, PostgreSQL in CI (when TEST_DATABASE_URL is set)
TEST_DATABASE_URL = os.environ.get(
    "TEST_DATABASE_URL",
    "sqlite+aiosqlite:///:memory:",
)

# Detect database type
is_sqlite = TEST_DATABASE_URL.startswith("sqlite")

# Lazy initialization for engine and session factory
# This avoids creating the engine at module import time, which would
# bind it to the wrong event loop when running tests in CI
_test_engine = None
_test_session_factory = None


def get_test_engine():
    """Get or create the test database engine lazily."""
    global _test_engine, _test_session_factory

    if _test_engine is None:
        if is_sqlite:
            # SQLite in-memory requires StaticPool to keep connection alive
            _test_engine = create_async_engine(
                TEST_DATABASE_URL,
                echo=False,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            # PostgreSQL settings - use NullPool to avoid event loop issues
            _test_engine = create_async_engine(
                TEST_DATABASE_URL,
                echo=False,
                poolclass=NullPool,
            )

        _test_session_factory = async_sessionmaker(
            _test_engine, class_=AsyncSession, expire_on_commit=False
        )

    return _test_engine, _test_session_factory


# Note: Foreign key constraints are NOT enforced in SQLite tests.
# The PostgreSQL run in CI enforces them, so tests only reference
# users and POIs that exist.


async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
    """Override database dependency for tests."""
    _, session_factory = get_test_engine()
    async with session_factory() as session:
        yield session


def _db_uuid(value: UUID) -> str:
    # SQLite stores UUIDs without hyphens, Postgres stores with hyphens
    return value.hex if is_sqlite else str(value)


@pytest.fixture(scope="session", autouse=True)
async def setup_test_db():
    """Create test database tables once per session."""
    engine, _ = get_test_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture(autouse=True)
async def clear_tables():
    """Clear all tables and create test users before each test."""
    engine, _ = get_test_engine()
    # Use a raw connection to avoid session state issues
    async with engine.connect() as conn:
        if "postgresql" in TEST_DATABASE_URL:
            await conn.execute(
                text(
                    "TRUNCATE bookings, user_favorites, sessions, points_of_interest, users "
                    "RESTART IDENTITY CASCADE"
                )
            )
        else:
            await conn.execute(text("DELETE FROM bookings"))
            await conn.execute(text("DELETE FROM user_favorites"))
            await conn.execute(text("DELETE FROM sessions"))
            await conn.execute(text("DELETE FROM points_of_interest"))
            await conn.execute(text("DELETE FROM users"))

        # Users behind the X-User-Id headers used in dev mode testing
        for user_id, email in (
            (TEST_USER_ID, "test@example.com"),
            (OTHER_USER_ID, "other@example.com"),
        ):
            await conn.execute(
                text("INSERT INTO users (id, email, password_hash) VALUES (:id, :email, :hash)"),
                {
                    "id": _db_uuid(user_id),
                    "email": email,
                    "hash": "$2b$12$placeholder",  # Fake hash, not used in tests
                },
            )
        await conn.commit()

    poi_locks.clear()
    yield
    poi_locks.clear()


@pytest_asyncio.fixture
async def client(setup_test_db):
    """Async test client for FastAPI app."""
    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def db_session(setup_test_db) -> AsyncGenerator[AsyncSession, None]:
    """Provide a database session for tests that need direct DB access."""
    _, session_factory = get_test_engine()
    async with session_factory() as session:
        yield session


@pytest.fixture
def session_factory(setup_test_db):
    """The test session factory, for tests that need several independent sessions."""
    _, factory = get_test_engine()
    return factory


def _make_poi(
    poi_id: str,
    name: str,
    latitude: float,
    longitude: float,
    category: POICategory = POICategory.SIGHTS,
    rank: int = 100,
) -> POICreate:
    return POICreate(
        id=poi_id,
        name=name,
        latitude=latitude,
        longitude=longitude,
        category=category,
        rank=rank,
    )


@pytest.fixture
def make_poi():
    """Build a POICreate with sensible defaults."""
    return _make_poi


@pytest_asyncio.fixture
async def barcelona_pois(db_session):
    """A handful of POIs around Passeig de Gràcia."""
    pois = [
        _make_poi("9CB40CB5D0", "Casa Batlló", 41.39165, 2.164772, POICategory.SIGHTS, 5),
        _make_poi("AF57D529B2", "Casa Milà", 41.395316, 2.161764, POICategory.SIGHTS, 5),
        _make_poi("E4F1C2B7A0", "Tapas 24", 41.392185, 2.165286, POICategory.RESTAURANT, 20),
        _make_poi("C1AA6D8F3E", "La Sagrada Família", 41.403604, 2.174363, POICategory.SIGHTS, 1),
        _make_poi("5B8D2E61C4", "Parc de la Ciutadella", 41.388163, 2.186573, POICategory.BEACH_PARK, 10),
    ]
    return await poi_repo.create_pois_bulk(db_session, pois)
