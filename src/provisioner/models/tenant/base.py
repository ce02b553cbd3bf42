"""Declarative base for tables inside a tenant database.

Tenant tables get their own registry so their metadata never mixes with the
platform schema (both have a ``tenants`` table).
"""

from sqlalchemy.orm import registry
from sqlmodel import SQLModel

tenant_registry = registry()


class TenantSQLModel(SQLModel, registry=tenant_registry):
    pass


tenant_metadata = TenantSQLModel.metadata
