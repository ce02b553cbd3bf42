"""Provisioning activity - runs the orchestrator inside a Temporal worker."""

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from temporalio import activity
from temporalio.exceptions import ApplicationError

from src.provisioner.core.db import get_session
from src.provisioner.core.errors import TenantNotFoundError, TenantStateError
from src.provisioner.repositories import (
    OnboardingSessionRepository,
    PendingInviteRepository,
    TenantRepository,
)
from src.provisioner.services.onboarding import OnboardingService
from src.provisioner.services.provisioning_service import ProvisioningService


@dataclass
class ProvisionTenantInput:
    tenant_id: str


@dataclass
class ProvisionTenantOutput:
    success: bool
    message: str
    tenant_slug: str
    provider: str
    warning: str | None = None
    degraded: bool = False


def build_provisioning_service(session: AsyncSession) -> ProvisioningService:
    tenant_repo = TenantRepository(session)
    onboarding = OnboardingService(session, OnboardingSessionRepository(session), tenant_repo)
    return ProvisioningService(session, tenant_repo, PendingInviteRepository(session), onboarding)


@activity.defn
async def provision_tenant(input: ProvisionTenantInput) -> ProvisionTenantOutput:
    """
    Provision one tenant end to end.

    Idempotency: an already active tenant returns success without touching
    any provider. A concurrent run is rejected by the provisioning claim.

    Unknown tenants and tenants that may not be provisioned fail without
    retry; everything else is handled by the orchestrator's mock fallback.
    """
    async with get_session() as session:
        service = build_provisioning_service(session)
        try:
            outcome = await service.provision(UUID(input.tenant_id))
        except (TenantNotFoundError, TenantStateError) as e:
            raise ApplicationError(str(e), type=type(e).__name__, non_retryable=True) from e

    activity.logger.info(f"Provisioned tenant {outcome.tenant_slug} with {outcome.provider.value}")
    return ProvisionTenantOutput(
        success=outcome.success,
        message=outcome.message,
        tenant_slug=outcome.tenant_slug,
        provider=outcome.provider.value,
        warning=outcome.warning,
        degraded=outcome.degraded,
    )
