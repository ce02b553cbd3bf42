import secrets
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, status
from fastapi.security import APIKeyHeader
from prometheus_fastapi_instrumentator import Instrumentator

from src.provisioner.api.middlewares import setup_middlewares
from src.provisioner.api.v1.router import api_router
from src.provisioner.core.config import get_settings
from src.provisioner.core.db import dispose_engine
from src.provisioner.core.exceptions import setup_exception_handlers
from src.provisioner.core.health import setup_health_endpoint
from src.provisioner.core.logging import get_logger, setup_logging
from src.provisioner.providers import effective_provider
from src.provisioner.temporal.client import close_temporal_client

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan - startup and shutdown."""
    settings = get_settings()
    setup_logging(settings.debug)
    logger.info(
        "app.starting",
        app_name=settings.app_name,
        environment=settings.environment,
        provider=effective_provider(settings).value,
    )

    yield

    logger.info("app.shutting_down")
    await close_temporal_client()
    await dispose_engine()
    logger.info("app.shutdown_complete")


OPENAPI_TAGS = [
    {"name": "provisioning", "description": "Tenant provisioning triggers"},
    {"name": "onboarding", "description": "Resumable onboarding progress"},
]


def setup_metrics(app: FastAPI, metrics_api_key: str | None) -> None:
    """Prometheus metrics, optionally protected by an API key."""
    instrumentator = Instrumentator().instrument(app)

    if metrics_api_key:
        api_key_header = APIKeyHeader(name="X-Metrics-Key", auto_error=False)

        async def verify_metrics_key(api_key: str | None = Depends(api_key_header)) -> None:
            if api_key is None or not secrets.compare_digest(api_key, metrics_api_key):
                raise HTTPException(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    detail="Invalid or missing metrics API key",
                )

        instrumentator.expose(app, endpoint="/metrics", dependencies=[Depends(verify_metrics_key)])
    else:
        instrumentator.expose(app, endpoint="/metrics")


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Tenant provisioning orchestrator",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
    )

    setup_exception_handlers(app)
    setup_middlewares(app, settings)
    app.include_router(api_router)
    setup_metrics(app, settings.metrics_api_key)
    setup_health_endpoint(app)

    return app


app = create_app()
