"""Identity, user and dataroom models stored in a tenant database."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field

from src.provisioner.models.base import utc_now
from src.provisioner.models.enums import MembershipRole
from src.provisioner.models.tenant.base import TenantSQLModel

DEFAULT_USE_CASE = "single-firm"


class TenantAccount(TenantSQLModel, table=True):
    """Identity record of the tenant inside its own database."""

    __tablename__ = "tenants"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    slug: str = Field(max_length=63, unique=True, index=True)
    name: str = Field(max_length=255)
    email: str = Field(max_length=255)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now)


class TenantUser(TenantSQLModel, table=True):
    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_slug: str = Field(max_length=63, index=True)
    email: str = Field(max_length=255, unique=True, index=True)
    full_name: str | None = Field(default=None, max_length=255)
    role: str = Field(default=MembershipRole.MEMBER.value, max_length=50)
    is_active: bool = Field(default=True)
    email_verified: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now)


class Dataroom(TenantSQLModel, table=True):
    __tablename__ = "datarooms"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_slug: str = Field(max_length=63, index=True)
    name: str = Field(max_length=255)
    description: str | None = Field(default=None, max_length=1000)
    owner_id: UUID = Field(foreign_key="users.id", index=True)
    use_case: str = Field(default=DEFAULT_USE_CASE, max_length=50)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now)


class DataroomMember(TenantSQLModel, table=True):
    __tablename__ = "dataroom_members"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    dataroom_id: UUID = Field(foreign_key="datarooms.id", index=True)
    user_id: UUID = Field(foreign_key="users.id", index=True)
    role: str = Field(default=MembershipRole.MEMBER.value, max_length=50)
    status: str = Field(default="active", max_length=20)
    joined_at: datetime | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
