"""Provisioning error taxonomy.

Provider, migration and initialization errors propagate untouched to the
provisioning service, which is the only place that catches them.
"""


class ProvisioningError(Exception):
    """Base class for provisioning failures."""


class TenantNotFoundError(ProvisioningError):
    """The tenant id does not exist in the platform database."""


class TenantStateError(ProvisioningError):
    """The tenant is in a status that cannot be provisioned."""


class ProvisioningInProgressError(TenantStateError):
    """Another run holds the provisioning claim for this tenant."""


class ProviderError(ProvisioningError):
    """A backing provider failed to create, ready or describe resources."""

    def __init__(
        self,
        message: str,
        provider: str,
        *,
        status_code: int | None = None,
        resource_ids: dict[str, str] | None = None,
    ):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
        # Resources that exist even though the call failed
        self.resource_ids = dict(resource_ids or {})


class SchemaMigrationError(ProvisioningError):
    """The tenant schema could not be applied."""

    def __init__(self, message: str, attempts: int):
        super().__init__(message)
        self.attempts = attempts


class TenantInitializationError(ProvisioningError):
    """Seeding the tenant database failed."""

    def __init__(self, message: str, step: str):
        super().__init__(message)
        self.step = step


class DecryptionError(Exception):
    """Ciphertext is malformed or failed authentication."""
