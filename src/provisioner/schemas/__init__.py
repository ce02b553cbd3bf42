from src.provisioner.schemas.onboarding import OnboardingStatusResponse
from src.provisioner.schemas.provisioning import (
    ProvisionAcceptedResponse,
    ProvisionRequest,
    ProvisionResponse,
)

__all__ = [
    "OnboardingStatusResponse",
    "ProvisionAcceptedResponse",
    "ProvisionRequest",
    "ProvisionResponse",
]
