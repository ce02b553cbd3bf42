"""Seed owner data into a freshly migrated tenant database."""

import asyncio
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from src.provisioner.core.db import create_tenant_engine
from src.provisioner.core.errors import TenantInitializationError
from src.provisioner.core.logging import get_logger
from src.provisioner.models.base import utc_now
from src.provisioner.models.enums import MembershipRole
from src.provisioner.models.platform import Tenant
from src.provisioner.models.tenant import (
    DEFAULT_USE_CASE,
    Dataroom,
    DataroomMember,
    TenantAccount,
    TenantUser,
)

logger = get_logger(__name__)

DEFAULT_DATAROOM_NAME = "My Dataroom"


@dataclass(frozen=True)
class TenantSeed:
    """Plain copy of the tenant fields the initializer needs."""

    slug: str
    name: str
    email: str
    owner_full_name: str | None
    use_case: str | None

    @classmethod
    def from_tenant(cls, tenant: Tenant) -> "TenantSeed":
        return cls(
            slug=tenant.slug,
            name=tenant.name,
            email=tenant.email,
            owner_full_name=tenant.owner_full_name,
            use_case=tenant.use_case,
        )


@dataclass(frozen=True)
class TenantInitResult:
    owner_id: UUID
    dataroom_id: UUID


def _upsert_identity(session: Session, seed: TenantSeed) -> TenantAccount:
    account = session.scalars(select(TenantAccount).where(TenantAccount.slug == seed.slug)).first()
    if account is None:
        account = TenantAccount(
            slug=seed.slug,
            name=seed.name or "Workspace",
            email=seed.email,
            is_active=True,
        )
        session.add(account)
        session.flush()
    return account


def _get_or_create_owner(session: Session, seed: TenantSeed) -> TenantUser:
    owner = session.scalars(select(TenantUser).where(TenantUser.email == seed.email)).first()
    if owner is None:
        owner = TenantUser(
            tenant_slug=seed.slug,
            email=seed.email,
            full_name=seed.owner_full_name,
            role=MembershipRole.OWNER.value,
            is_active=True,
            email_verified=True,
        )
        session.add(owner)
        session.flush()
    return owner


def _create_dataroom(session: Session, seed: TenantSeed, owner: TenantUser) -> Dataroom:
    name = seed.name or DEFAULT_DATAROOM_NAME
    dataroom = Dataroom(
        tenant_slug=seed.slug,
        name=name,
        description=f"Dataroom for {seed.name or seed.slug}",
        owner_id=owner.id,
        use_case=seed.use_case or DEFAULT_USE_CASE,
        is_active=True,
    )
    session.add(dataroom)
    session.flush()
    return dataroom


def _add_owner_membership(session: Session, dataroom: Dataroom, owner: TenantUser) -> None:
    session.add(
        DataroomMember(
            dataroom_id=dataroom.id,
            user_id=owner.id,
            role=MembershipRole.OWNER.value,
            status="active",
            joined_at=utc_now(),
        )
    )
    session.flush()


def _sync_initialize(seed: TenantSeed, database_url: str) -> TenantInitResult:
    """Run every seeding step in one transaction on the tenant database."""
    engine = create_tenant_engine(database_url)
    step = "connect"
    try:
        with Session(engine) as session:
            step = "tenant_record"
            _upsert_identity(session, seed)

            step = "owner_user"
            owner = _get_or_create_owner(session, seed)

            step = "dataroom"
            dataroom = _create_dataroom(session, seed, owner)

            step = "owner_membership"
            _add_owner_membership(session, dataroom, owner)

            step = "commit"
            session.commit()
            return TenantInitResult(owner_id=owner.id, dataroom_id=dataroom.id)
    except (SQLAlchemyError, OSError) as e:
        raise TenantInitializationError(f"Tenant initialization failed at {step}: {e}", step) from e
    finally:
        engine.dispose()


class TenantInitializer:
    """Creates the identity record, owner, first dataroom and owner membership."""

    async def initialize_tenant(self, tenant: Tenant, database_url: str) -> TenantInitResult:
        seed = TenantSeed.from_tenant(tenant)
        result = await asyncio.to_thread(_sync_initialize, seed, database_url)
        logger.info(
            "tenant.initialized",
            tenant_slug=seed.slug,
            owner_id=str(result.owner_id),
            dataroom_id=str(result.dataroom_id),
        )
        return result
