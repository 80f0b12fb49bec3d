"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator, Callable, Generator
from pathlib import Path
from typing import Any
from uuid import uuid4

# Disable rate limiting in tests
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.pool import StaticPool

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser
from infrastructure.database.models import Base


# Compile JSONB as JSON for SQLite (used in tests)
@compiles(JSONB, "sqlite")
def _compile_jsonb_sqlite(type_: Any, compiler: Any, **kw: Any) -> str:
    return "JSON"


# Test database URL (SQLite in memory, one shared connection)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
def test_user() -> TokenUser:
    """The signed-in user; signs up asking for the username "jane"."""
    return TokenUser(
        id=uuid4(),
        email="jane@example.com",
        display_name="Jane",
        username="jane",
    )


@pytest.fixture
def other_user() -> TokenUser:
    """A second account."""
    return TokenUser(id=uuid4(), email="joe@example.com", display_name="Joe", username="joe")


@pytest.fixture
def auth_provider() -> JWTAuthProvider:
    """Create auth provider for testing."""
    return JWTAuthProvider(
        secret_key="test-secret-key",
        algorithm="HS256",
        expire_minutes=30,
    )


@pytest.fixture
def auth_headers(auth_provider: JWTAuthProvider) -> Callable[[TokenUser], dict[str, str]]:
    """Build authorization headers for any user."""

    def _headers(user: TokenUser) -> dict[str, str]:
        return {"Authorization": f"Bearer {auth_provider.create_token(user)}"}

    return _headers


@pytest.fixture
def app(
    session_factory: async_sessionmaker[AsyncSession],
    auth_provider: JWTAuthProvider,
) -> Generator[FastAPI, None, None]:
    """
    Create the application with services bound to the in-memory database.

    Auth runs for real against locally signed HS256 tokens.
    """
    from api.dependencies.auth import get_auth_provider
    from api.v1.dependencies import (
        get_category_service,
        get_profile_service,
        get_recommendation_service,
        get_username_service,
    )
    from domain.services.category_service import CategoryService
    from domain.services.profile_service import ProfileService
    from domain.services.recommendation_service import RecommendationService
    from domain.services.username_service import UsernameService
    from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
    from main import create_app

    app = create_app()

    def test_uow_factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    app.dependency_overrides[get_auth_provider] = lambda: auth_provider
    app.dependency_overrides[get_username_service] = lambda: UsernameService(test_uow_factory)
    app.dependency_overrides[get_profile_service] = lambda: ProfileService(test_uow_factory)
    app.dependency_overrides[get_category_service] = lambda: CategoryService(test_uow_factory)
    app.dependency_overrides[get_recommendation_service] = lambda: RecommendationService(
        test_uow_factory
    )

    yield app

    app.dependency_overrides.clear()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client; pass ``auth_headers(user)`` to act as a user."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def authenticated_client(
    client: AsyncClient,
    test_user: TokenUser,
    auth_headers: Callable[[TokenUser], dict[str, str]],
) -> AsyncClient:
    """Client that sends the test user's token; the profile is created on first call."""
    client.headers.update(auth_headers(test_user))
    response = await client.get("/api/v1/profiles/me")
    assert response.status_code == 200, response.text
    return client
