"""Onboarding stage machine.

The module-level functions are pure and shared by the UI router and the
provisioning service. ``OnboardingService`` persists forward-only progress.
"""

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.provisioner.core.errors import TenantNotFoundError
from src.provisioner.core.logging import get_logger
from src.provisioner.models.base import utc_now
from src.provisioner.models.enums import OnboardingStage
from src.provisioner.models.platform import OnboardingSession, stage_timestamp_field
from src.provisioner.repositories import OnboardingSessionRepository, TenantRepository

logger = get_logger(__name__)

STAGE_ORDER: tuple[OnboardingStage, ...] = tuple(OnboardingStage)

WORKSPACE_SETUP_PATH = "/workspace-setup"

_REDIRECTS: dict[OnboardingStage, str] = {
    OnboardingStage.SIGNUP_STARTED: "/verify-email",
    OnboardingStage.EMAIL_VERIFIED: WORKSPACE_SETUP_PATH,
    OnboardingStage.DATAROOM_CREATED: WORKSPACE_SETUP_PATH,
    OnboardingStage.USE_CASE_SELECTED: WORKSPACE_SETUP_PATH,
    OnboardingStage.WORKFLOW_SETUP: WORKSPACE_SETUP_PATH,
    OnboardingStage.USERS_INVITED: "/pricing",
    OnboardingStage.PLAN_SELECTED: "/pricing",
    OnboardingStage.PAYMENT_PENDING: "/pricing",
    OnboardingStage.PAYMENT_COMPLETED: "/provisioning",
    OnboardingStage.PROVISIONING: "/provisioning",
}

_WORKSPACE_SETUP_STEPS: dict[OnboardingStage, int] = {
    OnboardingStage.EMAIL_VERIFIED: 1,
    OnboardingStage.DATAROOM_CREATED: 2,
    OnboardingStage.USE_CASE_SELECTED: 3,
    OnboardingStage.WORKFLOW_SETUP: 4,
    OnboardingStage.USERS_INVITED: 5,
}


def _coerce(stage: OnboardingStage | str | None) -> OnboardingStage | None:
    if isinstance(stage, OnboardingStage):
        return stage
    try:
        return OnboardingStage(stage)
    except ValueError:
        return None


def stage_index(stage: OnboardingStage | str | None) -> int | None:
    """Position of ``stage`` in the flow, or None for an unknown stage."""
    value = _coerce(stage)
    return STAGE_ORDER.index(value) if value is not None else None


def next_stage(stage: OnboardingStage | str | None) -> OnboardingStage | None:
    """Stage after ``stage``; None for the last stage or an unknown one."""
    index = stage_index(stage)
    if index is None or index + 1 >= len(STAGE_ORDER):
        return None
    return STAGE_ORDER[index + 1]


def is_at_or_before(stage: OnboardingStage | str | None, target: OnboardingStage | str) -> bool:
    """True if ``stage`` is ``target`` or comes earlier in the flow.

    An unknown stage sorts before every known one.
    """
    index = stage_index(stage)
    target_index = stage_index(target)
    return (-1 if index is None else index) <= (-1 if target_index is None else target_index)


def redirect_for(stage: OnboardingStage | str | None, slug: str | None = None) -> str:
    """Path a user at ``stage`` should be sent to."""
    value = _coerce(stage)
    if value == OnboardingStage.ACTIVE:
        return f"/{slug}/Dashboard/Library" if slug else WORKSPACE_SETUP_PATH
    if value is None:
        return WORKSPACE_SETUP_PATH
    return _REDIRECTS[value]


def workspace_setup_step(stage: OnboardingStage | str | None) -> int:
    """Step of the workspace-setup wizard to resume at (1-based)."""
    value = _coerce(stage)
    if value is None:
        return 1
    return _WORKSPACE_SETUP_STEPS.get(value, 1)


@dataclass(frozen=True)
class OnboardingStatus:
    tenant_id: UUID
    tenant_slug: str
    current_stage: OnboardingStage
    next_stage: OnboardingStage | None
    redirect: str
    workspace_setup_step: int


class OnboardingService:
    """Persists onboarding progress. Transaction control stays with the caller."""

    def __init__(
        self,
        session: AsyncSession,
        onboarding_repo: OnboardingSessionRepository,
        tenant_repo: TenantRepository,
    ):
        self.session = session
        self.onboarding_repo = onboarding_repo
        self.tenant_repo = tenant_repo

    async def get_or_create(self, tenant_id: UUID) -> OnboardingSession:
        onboarding = await self.onboarding_repo.get_by_tenant_id(tenant_id)
        if onboarding is None:
            now = utc_now()
            onboarding = OnboardingSession(
                tenant_id=tenant_id,
                current_stage=OnboardingStage.SIGNUP_STARTED.value,
                signup_started_at=now,
            )
            await self.onboarding_repo.save(onboarding)
        return onboarding

    async def advance(self, tenant_id: UUID, stage: OnboardingStage) -> OnboardingSession:
        """Record that ``stage`` was reached.

        The stage timestamp is written only the first time. ``current_stage``
        never moves backwards.
        """
        onboarding = await self.get_or_create(tenant_id)
        now = utc_now()

        field = stage_timestamp_field(stage)
        if getattr(onboarding, field) is None:
            setattr(onboarding, field, now)

        previous = onboarding.current_stage
        if not is_at_or_before(stage, previous):
            onboarding.current_stage = stage.value
            logger.info(
                "onboarding.stage_advanced",
                tenant_id=str(tenant_id),
                from_stage=previous,
                to_stage=stage.value,
            )

        onboarding.updated_at = now
        await self.onboarding_repo.save(onboarding)
        return onboarding

    async def get_status(self, tenant_id: UUID) -> OnboardingStatus:
        tenant = await self.tenant_repo.get_by_id(tenant_id)
        if tenant is None:
            raise TenantNotFoundError(f"Tenant {tenant_id} not found")

        onboarding = await self.onboarding_repo.get_by_tenant_id(tenant_id)
        current = (
            _coerce(onboarding.current_stage) if onboarding else None
        ) or OnboardingStage.SIGNUP_STARTED

        return OnboardingStatus(
            tenant_id=tenant.id,
            tenant_slug=tenant.slug,
            current_stage=current,
            next_stage=next_stage(current),
            redirect=redirect_for(current, tenant.slug),
            workspace_setup_step=workspace_setup_step(current),
        )
