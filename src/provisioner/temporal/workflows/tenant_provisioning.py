"""
Tenant Provisioning Workflow.

Durable trigger for the provisioning orchestrator. The whole run is one
activity: the orchestrator already falls back to the mock provider, and a
second attempt while the first still holds the claim would only be rejected.
"""

from dataclasses import dataclass
from datetime import timedelta

from temporalio import workflow
from temporalio.common import RetryPolicy

with workflow.unsafe.imports_passed_through():
    from src.provisioner.temporal.activities import (
        ProvisionTenantInput,
        ProvisionTenantOutput,
        provision_tenant,
    )


@dataclass
class TenantProvisioningInput:
    tenant_id: str
    activity_timeout_minutes: int = 30


@workflow.defn
class TenantProvisioningWorkflow:
    @staticmethod
    def workflow_id(tenant_id: str) -> str:
        """Deterministic workflow ID - one live run per tenant."""
        return f"tenant-provision-{tenant_id}"

    @workflow.run
    async def run(self, input: TenantProvisioningInput) -> ProvisionTenantOutput:
        workflow.logger.info(f"Provisioning tenant: {input.tenant_id}")
        result: ProvisionTenantOutput = await workflow.execute_activity(
            provision_tenant,
            ProvisionTenantInput(tenant_id=input.tenant_id),
            start_to_close_timeout=timedelta(minutes=input.activity_timeout_minutes),
            retry_policy=RetryPolicy(maximum_attempts=1),
        )
        if result.warning:
            workflow.logger.warning(f"Tenant {result.tenant_slug} fell back: {result.warning}")
        return result
