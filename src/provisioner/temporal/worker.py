"""
Temporal Worker - Separate process from API.

Run with:
    python -m src.provisioner.temporal.worker
"""

import asyncio

import uvicorn
from fastapi import FastAPI
from temporalio.client import Client
from temporalio.worker import Worker

from src.provisioner.core.config import get_settings
from src.provisioner.core.db import dispose_engine
from src.provisioner.core.logging import get_logger, setup_logging
from src.provisioner.temporal.activities import provision_tenant
from src.provisioner.temporal.workflows import TenantProvisioningWorkflow

logger = get_logger(__name__)

WORKER_HEALTH_PORT = 8001


def create_worker(
    client: Client, task_queue: str, *, max_concurrent_activities: int = 20
) -> Worker:
    """Create the provisioning worker.

    Provisioning activities are long (cloud resource creation), so
    concurrency is kept low.
    """
    return Worker(
        client,
        task_queue=task_queue,
        workflows=[TenantProvisioningWorkflow],
        activities=[provision_tenant],
        max_concurrent_activities=max_concurrent_activities,
    )


async def run_health_server(task_queue: str, port: int = WORKER_HEALTH_PORT) -> None:
    """Run a lightweight health server for K8s liveness and readiness checks."""
    health_app = FastAPI(title="Provisioning Worker Health")

    @health_app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "healthy", "service": "provisioning-worker", "task_queue": task_queue}

    config = uvicorn.Config(health_app, host="0.0.0.0", port=port, log_level="warning")
    server = uvicorn.Server(config)
    logger.info("worker.health_server_started", port=port)
    await server.serve()


async def main() -> None:
    settings = get_settings()
    setup_logging(settings.debug)

    client = await Client.connect(settings.temporal_host, namespace=settings.temporal_namespace)
    worker = create_worker(client, settings.temporal_task_queue)
    logger.info("worker.started", task_queue=settings.temporal_task_queue)

    try:
        await asyncio.gather(worker.run(), run_health_server(settings.temporal_task_queue))
    finally:
        await dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())
