"""Repository for PendingInvite entity."""

from uuid import UUID

from sqlmodel import update

from src.provisioner.models.base import utc_now
from src.provisioner.models.enums import InviteStatus
from src.provisioner.models.platform import PendingInvite
from src.provisioner.repositories.base import BaseRepository


class PendingInviteRepository(BaseRepository[PendingInvite]):
    """Repository for invites captured before the tenant database existed."""

    model = PendingInvite

    async def mark_migrated(self, tenant_id: UUID) -> int:
        """Mark every pending invite of a tenant as migrated.

        Returns:
            Number of invites updated
        """
        result = await self.session.execute(
            update(PendingInvite)
            .where(PendingInvite.tenant_id == tenant_id)  # type: ignore[arg-type]
            .where(PendingInvite.status == InviteStatus.PENDING.value)  # type: ignore[arg-type]
            .values(status=InviteStatus.MIGRATED.value, migrated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0  # type: ignore[attr-defined]
