"""Provider selection from configuration.

A provider whose credentials are missing is downgraded to Mock before any
work starts. Configuration problems are never surfaced as provisioning
failures.
"""

from typing import Any

from src.provisioner.core.config import Settings, get_settings
from src.provisioner.core.logging import get_logger
from src.provisioner.models.enums import ProvisioningProvider
from src.provisioner.providers.base import ProvisioningProviderAdapter
from src.provisioner.providers.iac import IacAdapter
from src.provisioner.providers.managed import ManagedPlatformAdapter
from src.provisioner.providers.mock import MockAdapter

logger = get_logger(__name__)


def _has_gcp_credentials(settings: Settings) -> bool:
    # Workload Identity (GKE) and Cloud Run provide ambient credentials.
    return bool(
        settings.google_application_credentials
        or settings.google_cloud_project
        or settings.k_service
        or settings.kubernetes_service_host
    )


def missing_credentials(provider: ProvisioningProvider, settings: Settings) -> list[str]:
    """Names of the settings a provider needs but does not have."""
    missing: list[str] = []
    if provider == ProvisioningProvider.MANAGED:
        if not settings.supabase_access_token:
            missing.append("SUPABASE_ACCESS_TOKEN")
        if not settings.supabase_org_id:
            missing.append("SUPABASE_ORG_ID")
    elif provider == ProvisioningProvider.IAC:
        if not (settings.pulumi_access_token or settings.pulumi_config_passphrase):
            missing.append("PULUMI_ACCESS_TOKEN or PULUMI_CONFIG_PASSPHRASE")
        if not settings.gcp_project_id:
            missing.append("GCP_PROJECT_ID")
        if not _has_gcp_credentials(settings):
            missing.append("GOOGLE_APPLICATION_CREDENTIALS")
    return missing


def requested_provider(settings: Settings) -> ProvisioningProvider | None:
    """The configured provider, or None when the name is not recognised."""
    try:
        return ProvisioningProvider(settings.provisioning_provider)
    except ValueError:
        return None


def effective_provider(settings: Settings | None = None) -> ProvisioningProvider:
    """The provider that will actually run, after any downgrade to Mock."""
    settings = settings or get_settings()
    requested = requested_provider(settings)
    if requested is None:
        logger.warning(
            "provider.downgraded_to_mock",
            requested_provider=settings.provisioning_provider,
            reason="unknown provider",
        )
        return ProvisioningProvider.MOCK
    if requested == ProvisioningProvider.MOCK:
        return requested

    missing = missing_credentials(requested, settings)
    if missing:
        logger.warning(
            "provider.downgraded_to_mock",
            requested_provider=requested.value,
            reason="missing credentials",
            missing=missing,
        )
        return ProvisioningProvider.MOCK
    return requested


def build_adapter(
    provider: ProvisioningProvider, settings: Settings | None = None
) -> ProvisioningProviderAdapter:
    settings = settings or get_settings()
    if provider == ProvisioningProvider.MANAGED:
        return ManagedPlatformAdapter(settings)
    if provider == ProvisioningProvider.IAC:
        return IacAdapter(settings)
    return MockAdapter()


def resolve_provider(settings: Settings | None = None) -> ProvisioningProviderAdapter:
    """Build the adapter for the configured provider."""
    settings = settings or get_settings()
    return build_adapter(effective_provider(settings), settings)


def describe_provider_configuration(settings: Settings | None = None) -> dict[str, Any]:
    """Redacted provider summary for health checks. Never includes secret values."""
    settings = settings or get_settings()
    requested = requested_provider(settings)
    if requested is None:
        missing = ["PROVISIONING_PROVIDER"]
    else:
        missing = missing_credentials(requested, settings)
    return {
        "requested": settings.provisioning_provider,
        "effective": ProvisioningProvider.MOCK.value if missing else settings.provisioning_provider,
        "missing": missing,
        "environment": settings.environment,
        "managed": {
            "access_token_set": bool(settings.supabase_access_token),
            "org_id_set": bool(settings.supabase_org_id),
            "region": settings.supabase_region,
        },
        "iac": {
            "pulumi_credentials_set": bool(
                settings.pulumi_access_token or settings.pulumi_config_passphrase
            ),
            "gcp_project_id_set": bool(settings.gcp_project_id),
            "gcp_credentials_available": _has_gcp_credentials(settings),
            "gcp_region": settings.gcp_region,
            "use_shared_instance": settings.use_shared_instance,
        },
    }
