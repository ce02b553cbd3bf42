"""Shared test doubles for provider adapters and provisioning steps."""

import json
from collections.abc import Awaitable, Callable
from typing import Any
from uuid import UUID, uuid4

import httpx
from sqlalchemy import create_engine
from sqlalchemy.exc import ProgrammingError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession
from structlog.testing import CapturingLogger

from src.provisioner.core.config import Settings
from src.provisioner.core.db import get_session
from src.provisioner.core.errors import ProviderError
from src.provisioner.models.enums import ProvisioningProvider
from src.provisioner.models.platform import Tenant
from src.provisioner.models.tenant import tenant_metadata
from src.provisioner.providers import ProvisioningProviderAdapter, ProvisioningResult
from src.provisioner.services.tenant_initializer import TenantInitializer, TenantInitResult


def logged_events(capturing_logger: CapturingLogger) -> list[str]:
    """Event names in the order they were logged."""
    return [call.kwargs.get("event") for call in capturing_logger.calls]


def find_events(capturing_logger: CapturingLogger, event: str) -> list[dict[str, Any]]:
    return [call.kwargs for call in capturing_logger.calls if call.kwargs.get("event") == event]


class StaticAdapter(ProvisioningProviderAdapter):
    """Adapter returning a canned result, or raising a canned error."""

    has_tenant_database = True

    def __init__(
        self,
        result: ProvisioningResult | None = None,
        *,
        error: Exception | None = None,
        name: ProvisioningProvider = ProvisioningProvider.MANAGED,
    ):
        self.result = result
        self.error = error
        self.name = name  # type: ignore[misc]
        self.calls: list[str] = []

    async def provision(self, tenant: Tenant) -> ProvisioningResult:
        self.calls.append(tenant.slug)
        if self.error is not None:
            raise self.error
        assert self.result is not None
        return self.result


def failing_adapter(message: str = "project creation failed") -> StaticAdapter:
    return StaticAdapter(error=ProviderError(message, ProvisioningProvider.MANAGED.value))


class CountingResolver:
    """Provider resolver that records how often it was asked for an adapter."""

    def __init__(self, adapter: ProvisioningProviderAdapter):
        self.adapter = adapter
        self.calls = 0

    def __call__(self, settings: Settings) -> ProvisioningProviderAdapter:
        self.calls += 1
        return self.adapter


class RedirectingInitializer(TenantInitializer):
    """Seeds a local SQLite database in place of the provisioned one.

    Records the URL it was asked to use so tests can assert which URL the
    orchestrator chose.
    """

    def __init__(self, local_url: str):
        self.local_url = local_url
        self.requested_urls: list[str] = []

    async def initialize_tenant(self, tenant: Tenant, database_url: str) -> TenantInitResult:
        self.requested_urls.append(database_url)
        return await super().initialize_tenant(tenant, self.local_url)


class RecordingInitializer(TenantInitializer):
    """Initializer that only records calls."""

    def __init__(self, error: Exception | None = None):
        self.error = error
        self.requested_urls: list[str] = []

    async def initialize_tenant(self, tenant: Tenant, database_url: str) -> TenantInitResult:
        self.requested_urls.append(database_url)
        if self.error is not None:
            raise self.error
        return TenantInitResult(owner_id=uuid4(), dataroom_id=uuid4())


class FakeManagementAPI:
    """In-memory Supabase Management API served through ``httpx.MockTransport``.

    ``statuses`` are returned by successive project polls; the last one
    repeats once the list is exhausted.
    """

    def __init__(
        self,
        *,
        ref: str = "abcdefghijklmnopqrst",
        statuses: tuple[str, ...] = ("COMING_UP", "ACTIVE_HEALTHY"),
        keys: list[dict[str, str]] | None = None,
        region: str = "ap-southeast-1",
        create_status: int = 201,
    ):
        self.ref = ref
        self.region = region
        self.create_status = create_status
        self.keys = (
            keys
            if keys is not None
            else [
                {"name": "anon", "api_key": "anon-key-value"},
                {"name": "service_role", "api_key": "service-role-key-value"},
            ]
        )
        self._statuses = list(statuses)
        self.requests: list[httpx.Request] = []
        self.created_payload: dict[str, Any] | None = None
        self.status_polls = 0

    def _project(self, status: str) -> dict[str, Any]:
        return {"id": self.ref, "ref": self.ref, "status": status, "region": self.region}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if request.method == "POST" and path.endswith("/projects"):
            if self.create_status >= 400:
                return httpx.Response(self.create_status, json={"message": "quota exceeded"})
            self.created_payload = json.loads(request.content)
            return httpx.Response(201, json=self._project("COMING_UP"))
        if path.endswith(f"/projects/{self.ref}/api-keys"):
            return httpx.Response(200, json=self.keys)
        if path.endswith(f"/projects/{self.ref}"):
            self.status_polls += 1
            status = self._statuses.pop(0) if len(self._statuses) > 1 else self._statuses[0]
            return httpx.Response(200, json=self._project(status))
        return httpx.Response(404, json={"message": "not found"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def secret(self) -> str:
        assert self.created_payload is not None
        return self.created_payload["db_pass"]


def managed_settings(settings: Settings, **overrides: Any) -> Settings:
    return settings.model_copy(
        update={
            "provisioning_provider": "managed",
            "supabase_access_token": "sbp_test_token",
            "supabase_org_id": "org-test",
            "supabase_ready_poll_attempts": 3,
            "supabase_ready_poll_interval_seconds": 0.0,
            **overrides,
        }
    )


def iac_settings(settings: Settings, **overrides: Any) -> Settings:
    return settings.model_copy(
        update={
            "provisioning_provider": "iac",
            "pulumi_config_passphrase": "passphrase",
            "gcp_project_id": "acme-platform",
            "google_application_credentials": "/secrets/gcp.json",
            **overrides,
        }
    )


async def no_sleep(seconds: float) -> None:
    return None


def local_schema_upgrade(
    local_url: str, calls: list[tuple[str, str]]
) -> Callable[[str, str], Awaitable[None]]:
    """Upgrade callable that records its arguments and creates tenant tables locally."""

    async def upgrade(database_url: str, tenant_slug: str) -> None:
        calls.append((database_url, tenant_slug))
        engine = create_engine(local_url)
        try:
            tenant_metadata.create_all(engine)
        finally:
            engine.dispose()

    return upgrade


def vector_unavailable(database_url: str, dimensions: int) -> None:
    raise ProgrammingError(
        "CREATE EXTENSION IF NOT EXISTS vector",
        {},
        Exception('extension "vector" is not available'),
    )


def vector_ok(database_url: str, dimensions: int) -> None:
    return None


async def persist(session: AsyncSession, *objects: Any) -> None:
    for obj in objects:
        session.add(obj)
    await session.commit()


async def reload_tenant(engine: AsyncEngine, tenant_id: UUID) -> Tenant:
    """Read the tenant row through a separate session."""
    async with get_session(engine) as session:
        tenant = await session.get(Tenant, tenant_id)
        assert tenant is not None
        return tenant
