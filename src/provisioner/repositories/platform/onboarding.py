"""Repository for OnboardingSession entity."""

from uuid import UUID

from sqlmodel import select

from src.provisioner.models.platform import OnboardingSession
from src.provisioner.repositories.base import BaseRepository


class OnboardingSessionRepository(BaseRepository[OnboardingSession]):
    model = OnboardingSession

    async def get_by_tenant_id(self, tenant_id: UUID) -> OnboardingSession | None:
        result = await self.session.execute(
            select(OnboardingSession).where(OnboardingSession.tenant_id == tenant_id)
        )
        return result.scalar_one_or_none()
