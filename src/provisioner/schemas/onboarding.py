from uuid import UUID

from pydantic import BaseModel

from src.provisioner.models.enums import OnboardingStage


class OnboardingStatusResponse(BaseModel):
    tenant_id: UUID
    tenant_slug: str
    current_stage: OnboardingStage
    next_stage: OnboardingStage | None
    redirect: str
    workspace_setup_step: int

    model_config = {"from_attributes": True}
