"""
Pytest configuration and fixtures for Bookstore API tests.
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from bookstore.api.main import create_app
from bookstore.api.dependencies import Settings, get_settings, get_db, enable_sqlite_foreign_keys
from bookstore.storage.models import Base

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_JWT_SECRET = "test-secret"


# =============================================================================
# Test Settings
# =============================================================================

def get_test_settings() -> Settings:
    """Return settings configured for testing."""
    return Settings(
        database_url=TEST_DATABASE_URL,
        database_echo=False,
        create_schema=False,
        jwt_secret=TEST_JWT_SECRET,
        environment="test",
        debug=True,
    )


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest_asyncio.fixture(scope="function")
async def async_engine():
    """In-memory database shared by every session of one test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    enable_sqlite_foreign_keys(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def session_factory(async_engine):
    """Session factory bound to the test engine."""
    return async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Provide database session for tests."""
    async with session_factory() as session:
        yield session


# =============================================================================
# Application Fixtures
# =============================================================================

@pytest_asyncio.fixture(scope="function")
async def app(session_factory):
    """Create FastAPI application backed by the in-memory database."""
    application = create_app(get_test_settings())

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_db] = override_get_db
    application.dependency_overrides[get_settings] = get_test_settings

    yield application

    application.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Provide async HTTP client for API tests."""
    # Unhandled errors must come back as 500 responses, not test exceptions
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# =============================================================================
# Data Fixtures
# =============================================================================

@pytest.fixture
def sample_user_data() -> dict:
    """Sample signup payload."""
    return {
        "name": "Ana",
        "email": "ana@example.com",
        "password": "12345678",
    }


@pytest.fixture
def sample_book_data() -> dict:
    """Sample book payload."""
    return {
        "title": "The Hobbit",
        "author": "J.R.R. Tolkien",
        "price": 19.99,
    }


@pytest.fixture
def sample_books_batch() -> list[dict]:
    """Multiple sample books for listing and lookup tests."""
    return [
        {"title": "The Hobbit", "author": "Tolkien", "price": 19.99},
        {"title": "The Silmarillion", "author": "TOLKIEN", "price": 24.5},
        {"title": "1984", "author": "George Orwell", "price": 12.0},
        {"title": "Animal Farm", "author": "George Orwell", "price": 9.75},
    ]
