"""Platform database repositories."""

from src.provisioner.repositories.platform.invite import PendingInviteRepository
from src.provisioner.repositories.platform.onboarding import OnboardingSessionRepository
from src.provisioner.repositories.platform.tenant import TenantRepository

__all__ = [
    "OnboardingSessionRepository",
    "PendingInviteRepository",
    "TenantRepository",
]
