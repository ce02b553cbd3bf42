"""Provider adapter contract and the transient provisioning result."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar

from src.provisioner.core.errors import ProviderError
from src.provisioner.core.logging import redact_url
from src.provisioner.core.security import MAX_TENANT_SLUG_LENGTH, validate_tenant_slug_format
from src.provisioner.models.enums import ProvisioningProvider
from src.provisioner.models.platform import Tenant


@dataclass(slots=True)
class ProvisioningResult:
    """Outcome of one adapter dispatch.

    Never persisted as-is: URLs are sealed by the credential vault and only
    ``resource_ids`` and ``metadata`` reach the tenant row in plaintext.
    """

    success: bool
    provider: ProvisioningProvider
    database_url: str | None = None
    migration_database_url: str | None = None
    direct_database_url: str | None = None
    resource_ids: dict[str, str] = field(default_factory=dict)
    credentials: dict[str, Any] = field(default_factory=dict)
    metadata: dict[str, Any] = field(default_factory=dict)
    error: str | None = None

    def __repr__(self) -> str:
        return (
            f"ProvisioningResult(success={self.success!r}, provider={self.provider.value!r}, "
            f"database_url={redact_url(self.database_url)!r}, "
            f"migration_database_url={redact_url(self.migration_database_url)!r}, "
            f"direct_database_url={redact_url(self.direct_database_url)!r}, "
            f"resource_ids={self.resource_ids!r}, "
            f"credentials=<{len(self.credentials)} redacted>, "
            f"metadata={self.metadata!r}, error={self.error!r})"
        )

    __str__ = __repr__


class ProvisioningProviderAdapter(ABC):
    """Pluggable provisioning strategy.

    Adapters raise ``ProviderError`` on failure and never swallow it. The
    orchestrator only looks at ``name`` and ``has_tenant_database``.
    """

    name: ClassVar[ProvisioningProvider]
    has_tenant_database: ClassVar[bool] = True

    @abstractmethod
    async def provision(self, tenant: Tenant) -> ProvisioningResult:
        """Create the tenant's backing resources and return their coordinates."""

    def require_valid_slug(self, slug: str) -> str:
        """Reject slugs that cannot name external resources."""
        if len(slug) > MAX_TENANT_SLUG_LENGTH:
            raise ProviderError(
                f"Tenant slug is longer than {MAX_TENANT_SLUG_LENGTH} characters", self.name.value
            )
        try:
            return validate_tenant_slug_format(slug)
        except ValueError as e:
            raise ProviderError(f"Invalid tenant slug {slug!r}: {e}", self.name.value) from e
