from src.provisioner.services.onboarding import OnboardingService
from src.provisioner.services.provisioning_service import ProvisioningService, ProvisionOutcome
from src.provisioner.services.tenant_initializer import TenantInitializer

__all__ = ["OnboardingService", "ProvisionOutcome", "ProvisioningService", "TenantInitializer"]
