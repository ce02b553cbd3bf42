"""Tests for the provisioning workflow definition."""

import pytest

from src.provisioner.temporal.workflows import TenantProvisioningInput, TenantProvisioningWorkflow

pytestmark = pytest.mark.unit


def test_workflow_id_is_deterministic():
    tenant_id = "550e8400-e29b-41d4-a716-446655440000"
    assert TenantProvisioningWorkflow.workflow_id(tenant_id) == f"tenant-provision-{tenant_id}"


def test_input_default_timeout():
    assert TenantProvisioningInput(tenant_id="t").activity_timeout_minutes == 30
