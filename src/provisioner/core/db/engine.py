"""Database engine management."""

import ssl
from typing import Any

from sqlalchemy import Engine, create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool

from src.provisioner.core.config import get_settings

_engine: AsyncEngine | None = None


def _get_connect_args(database_url: str) -> dict[str, Any]:
    """Get connection arguments including SSL configuration (asyncpg only)."""
    if make_url(database_url).get_driver_name() != "asyncpg":
        return {}

    settings = get_settings()
    connect_args: dict[str, Any] = {}

    ssl_mode = settings.database_ssl_mode
    if ssl_mode != "disable":
        ssl_context = ssl.create_default_context()
        if ssl_mode == "prefer" or ssl_mode == "require":
            ssl_context.check_hostname = False
            ssl_context.verify_mode = ssl.CERT_NONE
        elif ssl_mode in ("verify-ca", "verify-full"):
            ssl_context.check_hostname = ssl_mode == "verify-full"
            ssl_context.verify_mode = ssl.CERT_REQUIRED
        connect_args["ssl"] = ssl_context

    return connect_args


def get_engine() -> AsyncEngine:
    """Get or create the platform database engine singleton."""
    global _engine
    if _engine is None:
        settings = get_settings()
        url = make_url(settings.database_url)
        kwargs: dict[str, Any] = {
            "pool_pre_ping": True,
            "connect_args": _get_connect_args(settings.database_url),
        }
        if url.get_backend_name() != "sqlite":
            kwargs["pool_size"] = settings.database_pool_size
            kwargs["max_overflow"] = settings.database_max_overflow
        _engine = create_async_engine(settings.database_url, **kwargs)
    return _engine


async def dispose_engine() -> None:
    """Dispose the database engine. Call during shutdown."""
    global _engine
    if _engine is not None:
        await _engine.dispose()
        _engine = None


def create_tenant_engine(database_url: str) -> Engine:
    """Create a throwaway synchronous engine for one tenant database.

    Tenant databases are touched a handful of times during provisioning, so
    connections are not pooled. Callers must dispose the engine when done.
    """
    return create_engine(database_url, poolclass=NullPool)
