"""Database utilities - engine, session."""

from src.provisioner.core.db.engine import (
    create_tenant_engine,
    dispose_engine,
    get_engine,
)
from src.provisioner.core.db.session import get_session

__all__ = [
    # Engine (async, platform database)
    "dispose_engine",
    "get_engine",
    # Engine (sync, tenant databases)
    "create_tenant_engine",
    # Session
    "get_session",
]
