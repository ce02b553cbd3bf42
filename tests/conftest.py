"""Root test fixtures shared across all test types.

This conftest contains fixtures that can be used by both unit and integration tests.
Database-specific fixtures are in tests/integration/conftest.py.
"""

import os

# Point settings at an in-memory platform database before any app imports
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENCRYPTION_KEY", "test-encryption-key-0123456789abcdef0123456789")
os.environ.setdefault("PROVISIONING_PROVIDER", "mock")

# ruff: noqa: E402 - Imports must be after env var setup
from collections.abc import Generator

import pytest
import structlog
from structlog.testing import CapturingLogger

from src.provisioner.core.config import Settings, get_settings
from src.provisioner.core.logging import clear_request_context
from src.provisioner.core.security import CredentialVault, get_vault

# Clear settings cache to ensure test environment variables are picked up
get_settings.cache_clear()
get_vault.cache_clear()


@pytest.fixture
def settings() -> Settings:
    """Test settings with no provider credentials and fast retries.

    Ambient cloud identity (GKE, Cloud Run) is cleared so provider selection
    does not depend on where the tests run.
    """
    return get_settings().model_copy(
        update={
            "deploy_env": None,
            "provisioning_provider": "mock",
            "supabase_access_token": None,
            "supabase_org_id": None,
            "pulumi_access_token": None,
            "pulumi_config_passphrase": None,
            "gcp_project_id": None,
            "google_application_credentials": None,
            "google_cloud_project": None,
            "k_service": None,
            "kubernetes_service_host": None,
            "migration_retry_delay_seconds": 0.0,
            "migration_attempt_timeout_seconds": 5.0,
            "supabase_ready_poll_interval_seconds": 0.0,
        }
    )


@pytest.fixture
def vault() -> CredentialVault:
    return get_vault()


@pytest.fixture
def capturing_logger() -> Generator[CapturingLogger]:
    """Route every structlog call into a CapturingLogger.

    Context variables are merged so bound keys show up in ``calls[i].kwargs``.
    """
    cap_logger = CapturingLogger()
    old_config = structlog.get_config()

    structlog.configure(
        processors=[structlog.contextvars.merge_contextvars],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=lambda *args, **kwargs: cap_logger,
        cache_logger_on_first_use=False,
    )

    clear_request_context()
    yield cap_logger
    clear_request_context()
    structlog.configure(**old_config)
