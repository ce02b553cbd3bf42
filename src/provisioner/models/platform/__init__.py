"""Platform database models.

The tenant registry, onboarding progress and pending invites live here.
Tables that exist inside each tenant's own database go in models/tenant/.
"""

from src.provisioner.models.platform.invite import PendingInvite
from src.provisioner.models.platform.onboarding import OnboardingSession, stage_timestamp_field
from src.provisioner.models.platform.tenant import RESOURCE_ID_FIELDS, Tenant

__all__ = [
    "RESOURCE_ID_FIELDS",
    "OnboardingSession",
    "PendingInvite",
    "Tenant",
    "stage_timestamp_field",
]
