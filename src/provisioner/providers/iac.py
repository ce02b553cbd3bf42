"""Infrastructure-as-code adapter using the Pulumi Automation API on GCP."""

import asyncio
from collections.abc import Callable
from typing import Any

from pulumi import automation as auto

from src.provisioner.core.config import Settings
from src.provisioner.core.errors import ProviderError
from src.provisioner.core.logging import get_logger
from src.provisioner.models.enums import ProvisioningProvider
from src.provisioner.models.platform import Tenant
from src.provisioner.providers.base import ProvisioningProviderAdapter, ProvisioningResult

logger = get_logger(__name__)

PRODUCTION_DATABASE_TIER = "db-custom-1-3840"
DEFAULT_DATABASE_TIER = "db-f1-micro"

# Runs `pulumi up` for (stack_name, work_dir, config, env_vars); returns plain output values.
StackRunner = Callable[[str, str, dict[str, str], dict[str, str]], dict[str, Any]]


def run_pulumi_up(
    stack_name: str,
    work_dir: str,
    config: dict[str, str],
    env_vars: dict[str, str],
) -> dict[str, Any]:
    """Create or select the stack, apply config and run ``up``. Blocking."""
    stack = auto.create_or_select_stack(
        stack_name=stack_name,
        work_dir=work_dir,
        opts=auto.LocalWorkspaceOptions(env_vars=env_vars),
    )
    stack.set_all_config({key: auto.ConfigValue(value=value) for key, value in config.items()})
    up_result = stack.up(on_output=lambda message: logger.debug("pulumi.output", message=message))
    logger.info("pulumi.up_completed", stack_name=stack_name, result=up_result.summary.result)
    return {key: output.value for key, output in up_result.outputs.items()}


class IacAdapter(ProvisioningProviderAdapter):
    """One Pulumi stack per tenant and environment.

    The stack's ``databaseUrlOutput`` is a Cloud SQL socket URL usable only
    from inside GCP, so the TCP ``directDatabaseUrlOutput`` is returned as the
    direct URL for migrations and storage.
    """

    name = ProvisioningProvider.IAC
    has_tenant_database = True

    def __init__(self, settings: Settings, *, stack_runner: StackRunner = run_pulumi_up):
        self.settings = settings
        self._stack_runner = stack_runner

    def stack_name(self, slug: str) -> str:
        return f"tenant-{slug}-{self.settings.environment}"

    def stack_config(self, tenant: Tenant) -> dict[str, str]:
        s = self.settings
        ns = s.pulumi_config_namespace
        production = s.environment == "production"
        config = {
            "gcp:project": s.gcp_project_id or "",
            "gcp:region": s.gcp_region,
            f"{ns}:tenantId": str(tenant.id),
            f"{ns}:environment": s.environment,
            f"{ns}:databaseTier": PRODUCTION_DATABASE_TIER if production else DEFAULT_DATABASE_TIER,
            f"{ns}:enableBackups": "true" if production else "false",
            f"{ns}:deletionProtection": "true" if production else "false",
            f"{ns}:skipServiceAccountKey": "true" if s.skip_service_account_key else "false",
            f"{ns}:useSharedInstance": "true" if s.use_shared_instance else "false",
        }
        if s.use_shared_instance:
            config[f"{ns}:sharedInstanceName"] = s.shared_sql_instance_name or ""
            config[f"{ns}:sharedInstanceConnectionName"] = s.shared_sql_connection_name or ""
            config[f"{ns}:sharedInstanceIp"] = s.shared_sql_ip or ""
        return config

    def _env_vars(self) -> dict[str, str]:
        s = self.settings
        env = {
            "PULUMI_ACCESS_TOKEN": s.pulumi_access_token,
            "PULUMI_CONFIG_PASSPHRASE": s.pulumi_config_passphrase,
            "GOOGLE_APPLICATION_CREDENTIALS": s.google_application_credentials,
        }
        return {key: value for key, value in env.items() if value}

    async def provision(self, tenant: Tenant) -> ProvisioningResult:
        self.require_valid_slug(tenant.slug)
        stack_name = self.stack_name(tenant.slug)
        logger.info(
            "pulumi.up_started",
            stack_name=stack_name,
            environment=self.settings.environment,
            shared_instance=self.settings.use_shared_instance,
        )
        try:
            outputs = await asyncio.to_thread(
                self._stack_runner,
                stack_name,
                self.settings.pulumi_project_dir,
                self.stack_config(tenant),
                self._env_vars(),
            )
        except (auto.CommandError, OSError) as e:
            raise ProviderError(
                f"pulumi up failed for {stack_name}: {e}",
                self.name.value,
                resource_ids=self._stack_ids(stack_name),
            ) from e

        return self._to_result(outputs, stack_name)

    def _stack_ids(self, stack_name: str) -> dict[str, str]:
        """Ids that locate a stack, including one whose update failed part way."""
        ids = {
            "pulumi_stack_name": stack_name,
            "gcp_project_id": self.settings.gcp_project_id,
            "gcp_region": self.settings.gcp_region,
        }
        return {k: v for k, v in ids.items() if v}

    def _to_result(self, outputs: dict[str, Any], stack_name: str) -> ProvisioningResult:
        database_url = outputs.get("databaseUrlOutput")
        direct_url = outputs.get("directDatabaseUrlOutput")
        resource_ids = {
            "cloud_sql_instance_name": outputs.get("cloudSqlInstanceName"),
            "cloud_sql_connection_name": outputs.get("cloudSqlConnectionName"),
            "storage_bucket_name": outputs.get("storageBucketName"),
            "service_account_email": outputs.get("serviceAccountEmail"),
            **self._stack_ids(stack_name),
        }
        resource_ids = {k: v for k, v in resource_ids.items() if v}
        if not database_url and not direct_url:
            raise ProviderError(
                f"Stack {stack_name} exported no database URL",
                self.name.value,
                resource_ids=resource_ids,
            )

        credentials = {
            "database_password": outputs.get("databasePassword"),
            "database_url": database_url,
            "direct_database_url": direct_url,
            "service_account_key_json": outputs.get("serviceAccountKeyJson"),
        }

        return ProvisioningResult(
            success=True,
            provider=self.name,
            database_url=database_url,
            direct_database_url=direct_url,
            resource_ids=resource_ids,
            credentials={k: v for k, v in credentials.items() if v},
            metadata={
                "environment": self.settings.environment,
                "tenant_id_output": outputs.get("tenantIdOutput"),
                "shared_instance": self.settings.use_shared_instance,
            },
        )
