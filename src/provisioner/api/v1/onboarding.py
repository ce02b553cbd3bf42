"""Onboarding progress endpoints."""

from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from src.provisioner.api.dependencies import OnboardingServiceDep
from src.provisioner.core.errors import TenantNotFoundError
from src.provisioner.schemas.onboarding import OnboardingStatusResponse

router = APIRouter(prefix="/platform/onboarding", tags=["onboarding"])


@router.get("/{tenant_id}/status", response_model=OnboardingStatusResponse)
async def get_onboarding_status(
    tenant_id: UUID,
    service: OnboardingServiceDep,
) -> OnboardingStatusResponse:
    """Current stage, the stage after it, and where the UI should send the user."""
    try:
        onboarding_status = await service.get_status(tenant_id)
    except TenantNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return OnboardingStatusResponse.model_validate(onboarding_status)
