"""Model exports.

Import from here: `from src.provisioner.models import Tenant, OnboardingSession`
"""

# Enums
from src.provisioner.models.enums import (
    InviteStatus,
    MembershipRole,
    OnboardingStage,
    ProvisioningProvider,
    TenantStatus,
)

# Platform database models
from src.provisioner.models.platform import OnboardingSession, PendingInvite, Tenant

# Tenant database models
from src.provisioner.models.tenant import (
    Dataroom,
    DataroomMember,
    DocumentEmbedding,
    TenantAccount,
    TenantUser,
)

__all__ = [
    # Enums
    "InviteStatus",
    "MembershipRole",
    "OnboardingStage",
    "ProvisioningProvider",
    "TenantStatus",
    # Platform database models
    "OnboardingSession",
    "PendingInvite",
    "Tenant",
    # Tenant database models
    "Dataroom",
    "DataroomMember",
    "DocumentEmbedding",
    "TenantAccount",
    "TenantUser",
]
