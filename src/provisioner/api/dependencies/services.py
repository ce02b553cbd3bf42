"""Service factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.provisioner.api.dependencies.db import DBSession
from src.provisioner.api.dependencies.repositories import InviteRepo, OnboardingRepo, TenantRepo
from src.provisioner.services.onboarding import OnboardingService
from src.provisioner.services.provisioning_service import ProvisioningService


def get_onboarding_service(
    session: DBSession,
    onboarding_repo: OnboardingRepo,
    tenant_repo: TenantRepo,
) -> OnboardingService:
    """Get onboarding service."""
    return OnboardingService(session, onboarding_repo, tenant_repo)


OnboardingServiceDep = Annotated[OnboardingService, Depends(get_onboarding_service)]


def get_provisioning_service(
    session: DBSession,
    tenant_repo: TenantRepo,
    invite_repo: InviteRepo,
    onboarding_service: OnboardingServiceDep,
) -> ProvisioningService:
    """Get provisioning service with the configured provider."""
    return ProvisioningService(session, tenant_repo, invite_repo, onboarding_service)


ProvisioningServiceDep = Annotated[ProvisioningService, Depends(get_provisioning_service)]
