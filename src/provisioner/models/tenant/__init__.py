"""Tenant-database models.

These tables live in each tenant's dedicated database and are created by the
tagged tenant revisions in src/alembic, not the platform revisions.
"""

from src.provisioner.models.tenant.account import (
    DEFAULT_USE_CASE,
    Dataroom,
    DataroomMember,
    TenantAccount,
    TenantUser,
)
from src.provisioner.models.tenant.base import TenantSQLModel, tenant_metadata
from src.provisioner.models.tenant.document import DocumentEmbedding

__all__ = [
    "DEFAULT_USE_CASE",
    "Dataroom",
    "DataroomMember",
    "DocumentEmbedding",
    "TenantAccount",
    "TenantSQLModel",
    "TenantUser",
    "tenant_metadata",
]
