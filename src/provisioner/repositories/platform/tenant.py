"""Repository for Tenant entity."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import and_, or_
from sqlmodel import update

from src.provisioner.models.base import utc_now
from src.provisioner.models.enums import TenantStatus
from src.provisioner.models.platform import Tenant
from src.provisioner.repositories.base import BaseRepository


class TenantRepository(BaseRepository[Tenant]):
    """Repository for Tenant entity in the platform database."""

    model = Tenant

    async def claim_for_provisioning(self, tenant_id: UUID, stale_before: datetime) -> bool:
        """Atomically move a tenant from ``pending`` to ``provisioning``.

        A ``provisioning`` row whose claim started before ``stale_before`` is
        treated as abandoned and may be reclaimed. The conditional UPDATE is
        the lock: exactly one concurrent caller sees a row count of 1.

        Returns:
            True if this caller now owns the provisioning run.
        """
        now = utc_now()
        stmt = (
            update(Tenant)
            .where(Tenant.id == tenant_id)  # type: ignore[arg-type]
            .where(
                or_(
                    Tenant.status == TenantStatus.PENDING.value,  # type: ignore[arg-type]
                    and_(
                        Tenant.status == TenantStatus.PROVISIONING.value,  # type: ignore[arg-type]
                        or_(
                            Tenant.provisioning_started_at.is_(None),  # type: ignore[union-attr]
                            Tenant.provisioning_started_at < stale_before,  # type: ignore[operator]
                        ),
                    ),
                )
            )
            .values(
                status=TenantStatus.PROVISIONING.value,
                provisioning_started_at=now,
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return (result.rowcount or 0) == 1  # type: ignore[attr-defined]
