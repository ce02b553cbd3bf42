"""Temporal Workflows - Re-exports for worker registration."""

from src.provisioner.temporal.workflows.tenant_provisioning import (
    TenantProvisioningInput,
    TenantProvisioningWorkflow,
)

__all__ = ["TenantProvisioningInput", "TenantProvisioningWorkflow"]
