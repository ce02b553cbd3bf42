"""Pending invite model - teammates invited before the tenant database exists."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.provisioner.models.base import utc_now
from src.provisioner.models.enums import InviteStatus, MembershipRole


class PendingInvite(SQLModel, table=True):
    """Invite captured during onboarding, migrated once the tenant is active."""

    __tablename__ = "pending_invites"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", index=True)
    email: str = Field(max_length=255, index=True)
    role: str = Field(default=MembershipRole.MEMBER.value, max_length=50)
    status: str = Field(default=InviteStatus.PENDING.value, max_length=20)
    created_at: datetime = Field(default_factory=utc_now)
    migrated_at: datetime | None = Field(default=None)
