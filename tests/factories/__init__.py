"""Test factories for generating test data.

Re-exports all factories for convenient imports:
    from tests.factories import TenantFactory, OnboardingSessionFactory, ...
"""

from tests.factories.base import BaseFactory, generate_uuid, utc_now
from tests.factories.onboarding import OnboardingSessionFactory, PendingInviteFactory
from tests.factories.tenant import TenantFactory

__all__ = [
    # Base
    "BaseFactory",
    "generate_uuid",
    "utc_now",
    # Tenant
    "TenantFactory",
    # Onboarding
    "OnboardingSessionFactory",
    "PendingInviteFactory",
]
