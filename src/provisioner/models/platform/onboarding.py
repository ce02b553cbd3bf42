"""Onboarding session model - resumable signup progress."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.provisioner.models.base import utc_now
from src.provisioner.models.enums import OnboardingStage


def stage_timestamp_field(stage: OnboardingStage) -> str:
    """Column holding the first-reached time of ``stage``."""
    return f"{stage.value}_at"


class OnboardingSession(SQLModel, table=True):
    """One row per tenant. Stage timestamps are written once and never cleared."""

    __tablename__ = "onboarding_sessions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", unique=True, index=True)
    current_stage: str = Field(default=OnboardingStage.SIGNUP_STARTED.value, max_length=30)

    signup_started_at: datetime | None = Field(default=None)
    email_verified_at: datetime | None = Field(default=None)
    dataroom_created_at: datetime | None = Field(default=None)
    use_case_selected_at: datetime | None = Field(default=None)
    workflow_setup_at: datetime | None = Field(default=None)
    users_invited_at: datetime | None = Field(default=None)
    plan_selected_at: datetime | None = Field(default=None)
    payment_pending_at: datetime | None = Field(default=None)
    payment_completed_at: datetime | None = Field(default=None)
    provisioning_at: datetime | None = Field(default=None)
    active_at: datetime | None = Field(default=None)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
