"""Tenant model - registry in the platform database."""

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from src.provisioner.core.security.validators import MAX_TENANT_SLUG_LENGTH
from src.provisioner.models.base import utc_now
from src.provisioner.models.enums import ProvisioningProvider, TenantStatus

# Columns that identify provider-side resources; any one of them marks a
# tenant as backed by real infrastructure.
RESOURCE_ID_FIELDS: tuple[str, ...] = (
    "external_project_id",
    "external_project_ref",
    "cloud_sql_instance_name",
    "cloud_sql_connection_name",
    "storage_bucket_name",
    "service_account_email",
    "pulumi_stack_name",
    "gcp_project_id",
    "gcp_region",
)


class Tenant(SQLModel, table=True):
    """Tenant registry. Provisioning fields are written by the provisioning service only."""

    __tablename__ = "tenants"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    slug: str = Field(max_length=MAX_TENANT_SLUG_LENGTH, unique=True, index=True)
    name: str = Field(max_length=255)
    email: str = Field(max_length=255, index=True)
    owner_full_name: str | None = Field(default=None, max_length=255)
    use_case: str | None = Field(default=None, max_length=50)

    status: str = Field(default=TenantStatus.PENDING.value, max_length=20, index=True)
    provisioning_provider: str | None = Field(default=None, max_length=20)

    # Managed platform references
    external_project_id: str | None = Field(default=None, max_length=100)
    external_project_ref: str | None = Field(default=None, max_length=100)

    # Infrastructure-as-code references
    cloud_sql_instance_name: str | None = Field(default=None, max_length=255)
    cloud_sql_connection_name: str | None = Field(default=None, max_length=255)
    storage_bucket_name: str | None = Field(default=None, max_length=255)
    service_account_email: str | None = Field(default=None, max_length=255)
    pulumi_stack_name: str | None = Field(default=None, max_length=255)
    gcp_project_id: str | None = Field(default=None, max_length=100)
    gcp_region: str | None = Field(default=None, max_length=50)

    # Sealed by the credential vault, never plaintext
    database_url_encrypted: str | None = Field(default=None)
    credentials_encrypted: str | None = Field(default=None)

    settings: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))

    provisioning_started_at: datetime | None = Field(default=None)
    provisioned_at: datetime | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def has_resource_marker(self) -> bool:
        """True when provider resources (or the mock marker) are recorded."""
        if self.provisioning_provider == ProvisioningProvider.MOCK.value:
            return True
        return any(getattr(self, name) for name in RESOURCE_ID_FIELDS)

    @property
    def is_provisioned(self) -> bool:
        """Active with resources recorded - provisioning must not run again."""
        return self.status == TenantStatus.ACTIVE.value and self.has_resource_marker
