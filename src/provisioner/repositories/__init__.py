"""Repository layer - data access abstraction."""

from src.provisioner.repositories.base import BaseRepository
from src.provisioner.repositories.platform import (
    OnboardingSessionRepository,
    PendingInviteRepository,
    TenantRepository,
)

__all__ = [
    # Base
    "BaseRepository",
    # Platform database
    "OnboardingSessionRepository",
    "PendingInviteRepository",
    "TenantRepository",
]
