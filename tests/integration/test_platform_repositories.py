"""Tests for platform repositories, including the provisioning claim."""

from datetime import timedelta
from uuid import UUID

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession
from sqlmodel import select

from src.provisioner.core.db import get_session
from src.provisioner.models.base import utc_ago, utc_now
from src.provisioner.models.enums import InviteStatus, TenantStatus
from src.provisioner.models.platform import PendingInvite
from src.provisioner.repositories import (
    OnboardingSessionRepository,
    PendingInviteRepository,
    TenantRepository,
)
from tests.factories import OnboardingSessionFactory, PendingInviteFactory, TenantFactory
from tests.helpers import persist, reload_tenant

pytestmark = [pytest.mark.integration, pytest.mark.asyncio]


def stale_cutoff():
    return utc_ago(15 * 60)


async def pending_invite_count(session: AsyncSession, tenant_id: UUID) -> int:
    result = await session.execute(
        select(PendingInvite).where(
            PendingInvite.tenant_id == tenant_id,
            PendingInvite.status == InviteStatus.PENDING.value,
        )
    )
    return len(result.scalars().all())


class TestTenantRepository:
    async def test_claim_pending_tenant(self, db_session: AsyncSession, engine: AsyncEngine):
        tenant = TenantFactory.build()
        await persist(db_session, tenant)

        claimed = await TenantRepository(db_session).claim_for_provisioning(
            tenant.id, stale_cutoff()
        )
        await db_session.commit()

        assert claimed is True
        stored = await reload_tenant(engine, tenant.id)
        assert stored.status == TenantStatus.PROVISIONING.value
        assert stored.provisioning_started_at is not None

    async def test_second_claim_loses(self, db_session: AsyncSession, engine: AsyncEngine):
        tenant = TenantFactory.build()
        await persist(db_session, tenant)

        async with get_session(engine) as first:
            assert await TenantRepository(first).claim_for_provisioning(tenant.id, stale_cutoff())
            await first.commit()

        async with get_session(engine) as second:
            assert not await TenantRepository(second).claim_for_provisioning(
                tenant.id, stale_cutoff()
            )

    async def test_stale_claim_can_be_reclaimed(self, db_session: AsyncSession):
        tenant = TenantFactory.provisioning(started_ago=timedelta(hours=2))
        await persist(db_session, tenant)

        assert await TenantRepository(db_session).claim_for_provisioning(tenant.id, stale_cutoff())

    async def test_claim_without_start_time_can_be_reclaimed(self, db_session: AsyncSession):
        tenant = TenantFactory.build(status=TenantStatus.PROVISIONING.value)
        await persist(db_session, tenant)

        assert await TenantRepository(db_session).claim_for_provisioning(tenant.id, stale_cutoff())

    @pytest.mark.parametrize(
        "status", [TenantStatus.ACTIVE, TenantStatus.SUSPENDED, TenantStatus.DELETED]
    )
    async def test_other_statuses_cannot_be_claimed(
        self, db_session: AsyncSession, status: TenantStatus
    ):
        tenant = TenantFactory.build(status=status.value)
        await persist(db_session, tenant)

        assert not await TenantRepository(db_session).claim_for_provisioning(
            tenant.id, stale_cutoff()
        )

    async def test_unknown_tenant_cannot_be_claimed(self, db_session: AsyncSession):
        assert not await TenantRepository(db_session).claim_for_provisioning(
            TenantFactory.build().id, stale_cutoff()
        )


class TestPendingInviteRepository:
    async def test_mark_migrated(self, db_session: AsyncSession):
        tenant = TenantFactory.build()
        other = TenantFactory.build()
        await persist(db_session, tenant, other)
        await persist(
            db_session,
            PendingInviteFactory.build(tenant_id=tenant.id),
            PendingInviteFactory.build(tenant_id=tenant.id),
            PendingInviteFactory.build(tenant_id=other.id),
        )
        repo = PendingInviteRepository(db_session)

        migrated = await repo.mark_migrated(tenant.id)
        await db_session.commit()

        assert migrated == 2
        assert await pending_invite_count(db_session, tenant.id) == 0
        assert await pending_invite_count(db_session, other.id) == 1

    async def test_already_migrated_invites_are_skipped(self, db_session: AsyncSession):
        tenant = TenantFactory.build()
        await persist(db_session, tenant)
        await persist(
            db_session,
            PendingInviteFactory.build(
                tenant_id=tenant.id, status=InviteStatus.MIGRATED.value, migrated_at=utc_now()
            ),
        )

        assert await PendingInviteRepository(db_session).mark_migrated(tenant.id) == 0


class TestOnboardingSessionRepository:
    async def test_get_by_tenant_id(self, db_session: AsyncSession):
        tenant = TenantFactory.build()
        await persist(db_session, tenant)
        onboarding = OnboardingSessionFactory.build(tenant_id=tenant.id)
        await persist(db_session, onboarding)

        repo = OnboardingSessionRepository(db_session)

        assert (await repo.get_by_tenant_id(tenant.id)).id == onboarding.id
        assert await repo.get_by_tenant_id(TenantFactory.build().id) is None
