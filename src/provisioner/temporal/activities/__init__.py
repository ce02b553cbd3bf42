"""Temporal Activities."""

from src.provisioner.temporal.activities.provisioning import (
    ProvisionTenantInput,
    ProvisionTenantOutput,
    build_provisioning_service,
    provision_tenant,
)

__all__ = [
    "ProvisionTenantInput",
    "ProvisionTenantOutput",
    "build_provisioning_service",
    "provision_tenant",
]
