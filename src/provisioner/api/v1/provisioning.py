"""Tenant provisioning endpoints."""

from fastapi import APIRouter, HTTPException, status
from temporalio.exceptions import WorkflowAlreadyStartedError

from src.provisioner.api.dependencies import ProvisioningServiceDep, TenantRepo
from src.provisioner.core.config import get_settings
from src.provisioner.core.errors import (
    ProvisioningError,
    TenantNotFoundError,
    TenantStateError,
)
from src.provisioner.schemas.provisioning import (
    ProvisionAcceptedResponse,
    ProvisionRequest,
    ProvisionResponse,
)
from src.provisioner.temporal.client import get_temporal_client
from src.provisioner.temporal.workflows import (
    TenantProvisioningInput,
    TenantProvisioningWorkflow,
)

router = APIRouter(prefix="/platform", tags=["provisioning"])


@router.post(
    "/provision",
    response_model=ProvisionResponse,
    responses={
        200: {
            "description": "Tenant is active (possibly via the mock fallback)",
            "content": {
                "application/json": {
                    "example": {
                        "success": True,
                        "message": "Tenant provisioned with mock provider",
                        "tenant_slug": "acme-corp",
                        "provider": "mock",
                        "warning": "managed provisioning failed (...)",
                        "degraded": False,
                    }
                }
            },
        },
        400: {"description": "Missing or malformed tenant_id"},
        404: {"description": "Tenant not found"},
        409: {"description": "Tenant is being provisioned or cannot be provisioned"},
        500: {"description": "Provisioning failed, including the mock fallback"},
    },
)
async def provision_tenant(
    request: ProvisionRequest,
    service: ProvisioningServiceDep,
) -> ProvisionResponse:
    """
    Provision a tenant synchronously.

    Idempotent: calling again for an active tenant returns success without
    creating anything.
    """
    try:
        outcome = await service.provision(request.tenant_id)
    except TenantNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except TenantStateError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    except ProvisioningError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Provisioning failed: {e}",
        ) from e

    return ProvisionResponse.model_validate(outcome)


@router.post(
    "/provision/async",
    response_model=ProvisionAcceptedResponse,
    status_code=status.HTTP_202_ACCEPTED,
    responses={
        404: {"description": "Tenant not found"},
        409: {"description": "A provisioning workflow is already running for this tenant"},
    },
)
async def provision_tenant_async(
    request: ProvisionRequest,
    tenant_repo: TenantRepo,
) -> ProvisionAcceptedResponse:
    """
    Start provisioning as a Temporal workflow.

    Returns immediately with the workflow ID. Poll the onboarding status
    endpoint for progress.
    """
    tenant = await tenant_repo.get_by_id(request.tenant_id)
    if tenant is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Tenant {request.tenant_id} not found",
        )

    settings = get_settings()
    client = await get_temporal_client()
    workflow_id = TenantProvisioningWorkflow.workflow_id(str(tenant.id))
    try:
        await client.start_workflow(
            TenantProvisioningWorkflow.run,
            TenantProvisioningInput(
                tenant_id=str(tenant.id),
                activity_timeout_minutes=settings.provisioning_activity_timeout_minutes,
            ),
            id=workflow_id,
            task_queue=settings.temporal_task_queue,
        )
    except WorkflowAlreadyStartedError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Provisioning already running for tenant {tenant.slug}",
        ) from e

    return ProvisionAcceptedResponse(workflow_id=workflow_id, tenant_id=tenant.id)
