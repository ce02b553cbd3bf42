"""Integration test fixtures for database and HTTP client operations.

The platform database is an in-memory SQLite database shared through a
StaticPool; tenant databases are SQLite files under ``tmp_path``.
Uses polyfactory for type-safe test data generation.
"""

from collections.abc import AsyncGenerator, Callable
from pathlib import Path

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from src.provisioner import models  # noqa: F401 - registers platform tables
from src.provisioner.api.dependencies import get_db_session
from src.provisioner.core.config import Settings
from src.provisioner.core.db import get_session
from src.provisioner.core.health import reset_health_cache
from src.provisioner.main import create_app
from src.provisioner.models.tenant import tenant_metadata
from src.provisioner.repositories import (
    OnboardingSessionRepository,
    PendingInviteRepository,
    TenantRepository,
)
from src.provisioner.services import OnboardingService, ProvisioningService


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine]:
    """Fresh in-memory platform database with all platform tables."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Provide an async session for database operations.

    The session does NOT auto-commit. Tests must call ``await session.commit()``
    to persist setup data.
    """
    async with get_session(engine) as session:
        yield session


@pytest.fixture
def tenant_db_url(tmp_path: Path) -> str:
    """URL of an empty SQLite file standing in for a provisioned tenant database."""
    return f"sqlite:///{tmp_path / 'tenant.db'}"


@pytest.fixture
def migrated_tenant_db_url(tenant_db_url: str) -> str:
    """Tenant database with the tenant schema already applied."""
    engine = create_engine(tenant_db_url)
    try:
        tenant_metadata.create_all(engine)
    finally:
        engine.dispose()
    return tenant_db_url


@pytest.fixture
def make_service(
    db_session: AsyncSession, settings: Settings
) -> Callable[..., ProvisioningService]:
    """Build a ProvisioningService on the test session; keyword args override collaborators."""

    def _make(**kwargs) -> ProvisioningService:
        kwargs.setdefault("settings", settings)
        tenant_repo = TenantRepository(db_session)
        onboarding = OnboardingService(
            db_session, OnboardingSessionRepository(db_session), tenant_repo
        )
        return ProvisioningService(
            db_session, tenant_repo, PendingInviteRepository(db_session), onboarding, **kwargs
        )

    return _make


@pytest.fixture
def app(engine: AsyncEngine) -> FastAPI:
    """Application with the platform session bound to the test engine."""
    application = create_app()

    async def _get_test_session() -> AsyncGenerator[AsyncSession]:
        async with get_session(engine) as session:
            yield session

    application.dependency_overrides[get_db_session] = _get_test_session
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """HTTP client for the test application."""
    reset_health_cache()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    reset_health_cache()
