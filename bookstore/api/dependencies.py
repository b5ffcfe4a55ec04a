"""
Dependency injection for FastAPI routes.

Provides injectable dependencies for:
- Configuration
- Database sessions
- Service instances (users, books)
- Authentication
"""

import os
from typing import AsyncGenerator, Optional
from functools import lru_cache
from dataclasses import dataclass

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker

from bookstore.exceptions import AuthenticationError
from bookstore.security import decode_access_token
from bookstore.services import UserService, BookService
from bookstore.storage.models import User


# =============================================================================
# Configuration
# =============================================================================

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./bookstore.db"


def _database_url_from_env() -> str:
    """
    Resolve the database URL.

    ``DATABASE_URL`` wins. Otherwise, when ``DB_HOST`` is set, a PostgreSQL
    URL is assembled from the ``DB_*`` variables; the fallbacks are only
    meant for local practice.
    """
    explicit = os.getenv("DATABASE_URL")
    if explicit:
        return explicit

    host = os.getenv("DB_HOST")
    if not host:
        return DEFAULT_DATABASE_URL

    port = os.getenv("DB_PORT", "5432")
    user = os.getenv("DB_USER", "postgres")
    password = os.getenv("DB_PASS", "postgres")
    name = os.getenv("DB_NAME", "testdb")
    return f"postgresql+asyncpg://{user}:{password}@{host}:{port}/{name}"


@dataclass
class Settings:
    """Application settings loaded from environment."""

    # Database
    database_url: str = DEFAULT_DATABASE_URL
    database_echo: bool = False
    # Auto-create tables at startup. Practice only, never in production.
    create_schema: bool = True

    # Auth
    jwt_secret: str = "dev"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 10

    # Environment
    environment: str = "development"
    debug: bool = True

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables."""
        return cls(
            database_url=_database_url_from_env(),
            database_echo=os.getenv("DATABASE_ECHO", "false").lower() == "true",
            create_schema=os.getenv("DB_SYNCHRONIZE", "true").lower() == "true",
            jwt_secret=os.getenv("JWT_SECRET", cls.jwt_secret),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", cls.jwt_algorithm),
            access_token_expire_minutes=int(
                os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", cls.access_token_expire_minutes)
            ),
            environment=os.getenv("BOOKSTORE_ENV", cls.environment),
            debug=os.getenv("DEBUG", "true").lower() == "true",
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings.from_env()


# =============================================================================
# Database
# =============================================================================

# Global engine and session factory (initialized in lifespan)
_engine = None
_async_session_factory = None


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """
    Turn on foreign key enforcement for every new SQLite connection.

    SQLite ignores REFERENCES clauses unless the pragma is set per
    connection. Other backends are left untouched.
    """
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def init_database(settings: Settings) -> None:
    """Initialize database engine and session factory."""
    global _engine, _async_session_factory

    _engine = create_async_engine(
        settings.database_url,
        echo=settings.database_echo,
        pool_pre_ping=True,
    )
    enable_sqlite_foreign_keys(_engine)

    _async_session_factory = async_sessionmaker(
        _engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def dispose_database() -> None:
    """Close all pooled connections."""
    global _engine, _async_session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _async_session_factory = None


async def create_tables() -> None:
    """Create database tables."""
    from ..storage.models import Base
    if _engine is None:
        raise RuntimeError("Database not initialized.")

    async with _engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency that provides a database session.

    Services commit their own work; anything left pending when a request
    fails is rolled back here.

    Yields:
        AsyncSession for database operations.
    """
    if _async_session_factory is None:
        raise RuntimeError("Database not initialized. Call init_database first.")

    async with _async_session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


# =============================================================================
# Service Dependencies
# =============================================================================

def get_user_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> UserService:
    """Dependency for the user service."""
    return UserService(
        db,
        secret_key=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        token_expire_minutes=settings.access_token_expire_minutes,
    )


def get_book_service(db: AsyncSession = Depends(get_db)) -> BookService:
    """Dependency for the book service."""
    return BookService(db)


# =============================================================================
# Authentication Dependencies
# =============================================================================

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    users: UserService = Depends(get_user_service),
    settings: Settings = Depends(get_settings),
) -> User:
    """
    Resolve the bearer token to a stored user.

    Raises:
        AuthenticationError: If the token is missing, invalid, expired, or
            names a user that no longer exists.
    """
    if credentials is None:
        raise AuthenticationError("Not authenticated")

    payload = decode_access_token(
        credentials.credentials,
        secret_key=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )
    if not payload:
        raise AuthenticationError()

    claim = payload.get("user")
    email = claim.get("email") if isinstance(claim, dict) else None
    if not email:
        raise AuthenticationError()

    user = await users.get_user_by_email(email)
    if user is None:
        raise AuthenticationError()
    return user
