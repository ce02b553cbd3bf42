"""FastAPI dependency injection definitions."""

# Database
from src.provisioner.api.dependencies.db import DBSession, get_db_session

# Repositories
from src.provisioner.api.dependencies.repositories import (
    InviteRepo,
    OnboardingRepo,
    TenantRepo,
    get_invite_repository,
    get_onboarding_repository,
    get_tenant_repository,
)

# Services
from src.provisioner.api.dependencies.services import (
    OnboardingServiceDep,
    ProvisioningServiceDep,
    get_onboarding_service,
    get_provisioning_service,
)

__all__ = [
    # Database
    "DBSession",
    "get_db_session",
    # Repositories
    "InviteRepo",
    "OnboardingRepo",
    "TenantRepo",
    "get_invite_repository",
    "get_onboarding_repository",
    "get_tenant_repository",
    # Services
    "OnboardingServiceDep",
    "ProvisioningServiceDep",
    "get_onboarding_service",
    "get_provisioning_service",
]
