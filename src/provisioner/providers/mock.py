"""Mock adapter - marks a tenant provisioned without creating anything."""

from src.provisioner.models.enums import ProvisioningProvider
from src.provisioner.models.platform import Tenant
from src.provisioner.providers.base import ProvisioningProviderAdapter, ProvisioningResult

MOCK_URL_SCHEME = "mock"


def mock_database_url(slug: str) -> str:
    return f"{MOCK_URL_SCHEME}://mock-tenant-db/{slug}"


class MockAdapter(ProvisioningProviderAdapter):
    """No I/O. Used when no real provider is configured and as the fallback."""

    name = ProvisioningProvider.MOCK
    has_tenant_database = False

    async def provision(self, tenant: Tenant) -> ProvisioningResult:
        return ProvisioningResult(
            success=True,
            provider=self.name,
            database_url=mock_database_url(tenant.slug),
            resource_ids={
                "external_project_id": f"mock_{tenant.slug}",
                "external_project_ref": f"mock_ref_{tenant.slug}",
            },
            metadata={"mock": True},
        )
