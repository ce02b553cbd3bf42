"""Provisioning provider adapters."""

from src.provisioner.providers.base import ProvisioningProviderAdapter, ProvisioningResult
from src.provisioner.providers.factory import (
    build_adapter,
    describe_provider_configuration,
    effective_provider,
    missing_credentials,
    resolve_provider,
)
from src.provisioner.providers.iac import IacAdapter
from src.provisioner.providers.managed import ManagedPlatformAdapter
from src.provisioner.providers.mock import MockAdapter

__all__ = [
    "IacAdapter",
    "ManagedPlatformAdapter",
    "MockAdapter",
    "ProvisioningProviderAdapter",
    "ProvisioningResult",
    "build_adapter",
    "describe_provider_configuration",
    "effective_provider",
    "missing_credentials",
    "resolve_provider",
]
