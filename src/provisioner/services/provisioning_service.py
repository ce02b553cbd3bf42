"""Provisioning orchestrator.

Takes a paid-up tenant from ``pending`` to ``active``: claims the tenant,
dispatches the configured provider, seals and persists credentials, applies
the tenant schema, seeds owner data and flips the status. Provider,
migration and initialization failures are caught here and only here; the
tenant is then provisioned with the mock provider and a warning is returned.
"""

import json
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from src.provisioner.core.config import Settings, get_settings
from src.provisioner.core.errors import (
    ProviderError,
    ProvisioningError,
    ProvisioningInProgressError,
    TenantNotFoundError,
    TenantStateError,
)
from src.provisioner.core.logging import (
    bind_provisioning_context,
    clear_provisioning_context,
    get_logger,
    redact_url,
)
from src.provisioner.core.migrations import TenantMigrationRunner
from src.provisioner.core.security import (
    CredentialVault,
    get_vault,
    is_usable_migration_url,
    is_usable_storage_url,
)
from src.provisioner.models.base import utc_ago, utc_now
from src.provisioner.models.enums import OnboardingStage, ProvisioningProvider, TenantStatus
from src.provisioner.models.platform import RESOURCE_ID_FIELDS, Tenant
from src.provisioner.providers import (
    MockAdapter,
    ProvisioningProviderAdapter,
    ProvisioningResult,
    resolve_provider,
)
from src.provisioner.repositories import PendingInviteRepository, TenantRepository
from src.provisioner.services.onboarding import OnboardingService
from src.provisioner.services.tenant_initializer import TenantInitializer

logger = get_logger(__name__)

UNPROVISIONABLE_STATUSES = frozenset({TenantStatus.SUSPENDED.value, TenantStatus.DELETED.value})


@dataclass(frozen=True)
class ProvisionOutcome:
    success: bool
    message: str
    tenant_slug: str
    provider: ProvisioningProvider
    warning: str | None = None
    degraded: bool = False


@dataclass(frozen=True)
class ConnectionUrls:
    storage_url: str
    migration_url: str


def select_connection_urls(result: ProvisioningResult) -> ConnectionUrls:
    """Pick the URL to persist and the URL to migrate through.

    Migrations need a plain TCP connection: the first usable of direct,
    session-pooled and runtime wins. The stored URL is the direct one when
    usable, otherwise the runtime URL. Placeholder values never qualify.
    """
    candidates = (
        result.direct_database_url,
        result.migration_database_url,
        result.database_url,
    )
    migration_url = next((url for url in candidates if is_usable_migration_url(url)), None)
    if migration_url is None:
        raise ProviderError("Provider returned no usable TCP connection URL", result.provider.value)

    if is_usable_storage_url(result.direct_database_url):
        storage_url = result.direct_database_url
    elif is_usable_storage_url(result.database_url):
        storage_url = result.database_url
    else:
        raise ProviderError("Provider returned no storable connection URL", result.provider.value)

    return ConnectionUrls(
        storage_url=storage_url, migration_url=migration_url  # type: ignore[arg-type]
    )


class ProvisioningService:
    """Provisioning orchestrator - one run per call, sequential steps."""

    def __init__(
        self,
        session: AsyncSession,
        tenant_repo: TenantRepository,
        invite_repo: PendingInviteRepository,
        onboarding_service: OnboardingService,
        *,
        settings: Settings | None = None,
        provider_resolver: Callable[[Settings], ProvisioningProviderAdapter] = resolve_provider,
        migration_runner: TenantMigrationRunner | None = None,
        initializer: TenantInitializer | None = None,
        vault: CredentialVault | None = None,
    ):
        self.session = session
        self.tenant_repo = tenant_repo
        self.invite_repo = invite_repo
        self.onboarding_service = onboarding_service
        self.settings = settings or get_settings()
        self.provider_resolver = provider_resolver
        self.migration_runner = migration_runner or TenantMigrationRunner(self.settings)
        self.initializer = initializer or TenantInitializer()
        self.vault = vault or get_vault()

    async def provision(self, tenant_id: UUID) -> ProvisionOutcome:
        """Provision a tenant. Safe to call again for an already active tenant.

        Raises:
            TenantNotFoundError: Unknown tenant id
            TenantStateError: Tenant is suspended or deleted
            ProvisioningInProgressError: Another run holds the claim
            ProvisioningError: Even the mock fallback failed
        """
        run_id = uuid4().hex
        bind_provisioning_context(tenant_id, run_id)
        try:
            return await self._provision(tenant_id)
        finally:
            clear_provisioning_context()

    async def _provision(self, tenant_id: UUID) -> ProvisionOutcome:
        started = time.monotonic()

        tenant = await self.tenant_repo.get_by_id(tenant_id)
        if tenant is None:
            raise TenantNotFoundError(f"Tenant {tenant_id} not found")

        if tenant.is_provisioned:
            logger.info("provisioning.already_provisioned", tenant_slug=tenant.slug)
            return ProvisionOutcome(
                success=True,
                message="Tenant already provisioned",
                tenant_slug=tenant.slug,
                provider=ProvisioningProvider(
                    tenant.provisioning_provider or ProvisioningProvider.MOCK.value
                ),
            )

        if tenant.status in UNPROVISIONABLE_STATUSES:
            raise TenantStateError(
                f"Tenant {tenant.slug} is {tenant.status} and cannot be provisioned"
            )
        if tenant.status == TenantStatus.ACTIVE.value:
            raise TenantStateError(f"Tenant {tenant.slug} is active but has no recorded resources")

        await self._claim(tenant, started)

        adapter = self.provider_resolver(self.settings)
        logger.info("provisioning.dispatch", tenant_slug=tenant.slug, provider=adapter.name.value)

        warning: str | None = None
        baseline_settings = dict(tenant.settings)
        try:
            degraded = await self._run_adapter(adapter, tenant, started)
        except Exception as e:
            if not adapter.has_tenant_database:
                raise ProvisioningError(f"Mock provisioning failed: {e}") from e
            logger.exception(
                "provisioning.provider_failed",
                tenant_slug=tenant.slug,
                provider=adapter.name.value,
                error=str(e),
            )
            warning = (
                f"{adapter.name.value} provisioning failed ({e}); "
                "tenant was provisioned with the mock provider"
            )
            await self._reset_after_failure(tenant, adapter.name, e, baseline_settings)
            try:
                degraded = await self._run_adapter(MockAdapter(), tenant, started)
            except Exception as fallback_error:
                logger.exception("provisioning.fallback_failed", tenant_slug=tenant.slug)
                raise ProvisioningError(
                    f"Mock fallback failed after {adapter.name.value} error: {fallback_error}"
                ) from fallback_error

        migrated = await self.invite_repo.mark_migrated(tenant.id)
        await self.onboarding_service.advance(tenant.id, OnboardingStage.ACTIVE)
        await self.session.commit()

        provider = ProvisioningProvider(tenant.provisioning_provider)
        logger.info(
            "provisioning.completed",
            tenant_slug=tenant.slug,
            provider=provider.value,
            invites_migrated=migrated,
            degraded=degraded,
            fallback=warning is not None,
            duration_ms=self._elapsed_ms(started),
        )
        return ProvisionOutcome(
            success=True,
            message=(
                "Tenant provisioned successfully"
                if warning is None
                else "Tenant provisioned with mock provider"
            ),
            tenant_slug=tenant.slug,
            provider=provider,
            warning=warning,
            degraded=degraded,
        )

    async def _claim(self, tenant: Tenant, started: float) -> None:
        """Win the pending -> provisioning compare-and-swap or raise."""
        previous = tenant.status
        stale_before = utc_ago(self.settings.provisioning_stale_after_seconds)
        claimed = await self.tenant_repo.claim_for_provisioning(tenant.id, stale_before)
        if not claimed:
            await self.session.rollback()
            logger.warning("provisioning.claim_rejected", tenant_slug=tenant.slug, status=previous)
            raise ProvisioningInProgressError(f"Tenant {tenant.slug} is already being provisioned")

        await self.onboarding_service.advance(tenant.id, OnboardingStage.PROVISIONING)
        await self.session.commit()
        await self.session.refresh(tenant)
        self._log_transition(tenant, previous, TenantStatus.PROVISIONING, started)

    async def _run_adapter(
        self, adapter: ProvisioningProviderAdapter, tenant: Tenant, started: float
    ) -> bool:
        """Dispatch one adapter and carry the tenant to ``active``.

        Returns:
            True if an optional feature could not be enabled
        """
        result = await adapter.provision(tenant)
        logger.info("provisioning.provider_succeeded", tenant_slug=tenant.slug, result=repr(result))

        if not adapter.has_tenant_database:
            await self._persist_mock(tenant, result)
            self._log_transition(
                tenant, TenantStatus.PROVISIONING.value, TenantStatus.ACTIVE, started
            )
            return False

        urls = select_connection_urls(result)
        await self._persist_credentials(tenant, result, urls)

        migration = await self.migration_runner.apply_schema(urls.migration_url, tenant.slug)
        await self.initializer.initialize_tenant(tenant, urls.migration_url)

        await self._activate(tenant, {"vector_search_enabled": migration.vector_search_enabled})
        self._log_transition(tenant, TenantStatus.PROVISIONING.value, TenantStatus.ACTIVE, started)
        return migration.degraded

    async def _persist_credentials(
        self, tenant: Tenant, result: ProvisioningResult, urls: ConnectionUrls
    ) -> None:
        """Seal and commit credentials while the tenant is still ``provisioning``."""
        tenant.provisioning_provider = result.provider.value
        self._apply_resource_ids(tenant, result.resource_ids)
        tenant.database_url_encrypted = self.vault.encrypt(urls.storage_url)
        bundle = {
            **result.credentials,
            "database_url": urls.storage_url,
            "migration_database_url": urls.migration_url,
        }
        tenant.credentials_encrypted = self.vault.encrypt(json.dumps(bundle))
        tenant.settings = {**tenant.settings, **result.metadata}
        tenant.updated_at = utc_now()
        await self.tenant_repo.save(tenant)
        await self.session.commit()
        logger.info(
            "provisioning.credentials_persisted",
            tenant_slug=tenant.slug,
            storage_url=redact_url(urls.storage_url),
            migration_url=redact_url(urls.migration_url),
        )

    async def _persist_mock(self, tenant: Tenant, result: ProvisioningResult) -> None:
        tenant.provisioning_provider = ProvisioningProvider.MOCK.value
        self._apply_resource_ids(tenant, result.resource_ids)
        tenant.database_url_encrypted = self.vault.encrypt(result.database_url or "")
        tenant.credentials_encrypted = None
        await self._activate(tenant, result.metadata)

    async def _activate(self, tenant: Tenant, settings: dict[str, Any]) -> None:
        now = utc_now()
        tenant.settings = {**tenant.settings, **settings}
        tenant.status = TenantStatus.ACTIVE.value
        tenant.provisioned_at = now
        tenant.updated_at = now
        await self.tenant_repo.save(tenant)
        await self.session.commit()

    async def _reset_after_failure(
        self,
        tenant: Tenant,
        provider: ProvisioningProvider,
        error: Exception,
        baseline_settings: dict[str, Any],
    ) -> None:
        """Discard uncommitted state and record what the failed run left behind.

        Resources created before the failure are not deleted; their ids, and
        any settings the failed provider wrote, are kept under
        ``settings["fallback"]`` for manual cleanup.
        """
        await self.session.rollback()
        await self.session.refresh(tenant)

        orphaned = {
            name: getattr(tenant, name) for name in RESOURCE_ID_FIELDS if getattr(tenant, name)
        }
        orphaned.update(getattr(error, "resource_ids", {}))
        for name in RESOURCE_ID_FIELDS:
            setattr(tenant, name, None)

        provider_settings = {
            key: value
            for key, value in tenant.settings.items()
            if key not in baseline_settings or baseline_settings[key] != value
        }
        tenant.settings = {
            **baseline_settings,
            "fallback": {
                "from_provider": provider.value,
                "error": str(error),
                "orphaned_resource_ids": orphaned,
                "provider_settings": provider_settings,
                "at": utc_now().isoformat(),
            },
        }

    @staticmethod
    def _apply_resource_ids(tenant: Tenant, resource_ids: dict[str, str]) -> None:
        for name, value in resource_ids.items():
            if name in RESOURCE_ID_FIELDS:
                setattr(tenant, name, value)

    @staticmethod
    def _elapsed_ms(started: float) -> int:
        return int((time.monotonic() - started) * 1000)

    def _log_transition(
        self, tenant: Tenant, from_status: str, to_status: TenantStatus, started: float
    ) -> None:
        logger.info(
            "provisioning.transition",
            tenant_slug=tenant.slug,
            from_status=from_status,
            to_status=to_status.value,
            provider=tenant.provisioning_provider,
            duration_ms=self._elapsed_ms(started),
        )
