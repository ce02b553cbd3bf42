"""Temporal client shared by the API for starting provisioning workflows."""

from temporalio.client import Client

from src.provisioner.core.config import get_settings
from src.provisioner.core.logging import get_logger

logger = get_logger(__name__)

_client: Client | None = None


async def get_temporal_client() -> Client:
    """Connect on first use and reuse the connection afterwards.

    Only the async trigger and the health check need Temporal; synchronous
    provisioning works without it.
    """
    global _client
    if _client is None:
        settings = get_settings()
        _client = await Client.connect(
            settings.temporal_host, namespace=settings.temporal_namespace
        )
        logger.info(
            "temporal.connected",
            host=settings.temporal_host,
            namespace=settings.temporal_namespace,
        )
    return _client


async def close_temporal_client() -> None:
    """Drop the shared client. Call during shutdown."""
    global _client
    _client = None
