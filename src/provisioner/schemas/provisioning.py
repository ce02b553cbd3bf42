from uuid import UUID

from pydantic import BaseModel

from src.provisioner.models.enums import ProvisioningProvider


class ProvisionRequest(BaseModel):
    tenant_id: UUID


class ProvisionResponse(BaseModel):
    success: bool
    message: str
    tenant_slug: str
    provider: ProvisioningProvider
    warning: str | None = None
    degraded: bool = False

    model_config = {"from_attributes": True}


class ProvisionAcceptedResponse(BaseModel):
    workflow_id: str
    tenant_id: UUID
    status: str = "provisioning"
