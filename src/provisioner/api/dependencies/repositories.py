"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.provisioner.api.dependencies.db import DBSession
from src.provisioner.repositories import (
    OnboardingSessionRepository,
    PendingInviteRepository,
    TenantRepository,
)


def get_tenant_repository(session: DBSession) -> TenantRepository:
    """Get tenant repository with platform session."""
    return TenantRepository(session)


def get_onboarding_repository(session: DBSession) -> OnboardingSessionRepository:
    """Get onboarding session repository with platform session."""
    return OnboardingSessionRepository(session)


def get_invite_repository(session: DBSession) -> PendingInviteRepository:
    """Get pending invite repository with platform session."""
    return PendingInviteRepository(session)


TenantRepo = Annotated[TenantRepository, Depends(get_tenant_repository)]
OnboardingRepo = Annotated[OnboardingSessionRepository, Depends(get_onboarding_repository)]
InviteRepo = Annotated[PendingInviteRepository, Depends(get_invite_repository)]
