from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Names used by earlier deployments
PROVISIONING_PROVIDER_ALIASES = {"supabase": "managed", "pulumi": "iac"}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "Tenant Provisioner"
    app_env: str = "development"  # development, staging, production, testing
    debug: bool = False
    deploy_env: str | None = None  # Overrides app_env when picking provider tiers

    # Platform database (tenant registry, onboarding, invites)
    database_url: str
    database_pool_size: int = 5
    database_max_overflow: int = 10
    database_ssl_mode: str = "prefer"  # disable, prefer, require, verify-ca, verify-full

    # Credential vault
    encryption_key: str

    # Provisioning
    provisioning_provider: str = "mock"  # mock, managed, iac
    provisioning_stale_after_seconds: int = 900  # Reclaim a stuck "provisioning" claim after this

    # Managed platform (Supabase Management API)
    supabase_access_token: str | None = None
    supabase_org_id: str | None = None
    supabase_region: str = "ap-southeast-1"
    supabase_plan: str = "free"
    supabase_api_url: str = "https://api.supabase.com/v1"
    supabase_project_prefix: str = "tenant"
    supabase_ready_poll_attempts: int = 30
    supabase_ready_poll_interval_seconds: float = 10.0
    supabase_request_timeout_seconds: float = 30.0
    supabase_pooler_check_timeout_seconds: int = 5

    # Infrastructure-as-code (Pulumi Automation API on GCP)
    pulumi_access_token: str | None = None
    pulumi_config_passphrase: str | None = None
    pulumi_project_dir: str = "infrastructure/tenant-provisioner"
    pulumi_config_namespace: str = "tenant"
    gcp_project_id: str | None = None
    gcp_region: str = "us-central1"
    google_application_credentials: str | None = None
    google_cloud_project: str | None = None  # Set under Workload Identity
    k_service: str | None = None  # Set on Cloud Run
    kubernetes_service_host: str | None = None  # Set inside GKE pods
    skip_service_account_key: bool = True
    use_shared_instance: bool = False
    shared_sql_instance_name: str | None = None
    shared_sql_connection_name: str | None = None
    shared_sql_ip: str | None = None

    # Tenant schema migrations
    migration_max_attempts: int = 5
    migration_retry_delay_seconds: float = 15.0
    migration_attempt_timeout_seconds: float = 120.0
    vector_dimensions: int = 1536

    # Temporal
    temporal_host: str = "localhost:7233"
    temporal_namespace: str = "default"
    temporal_task_queue: str = "provisioning-queue"
    provisioning_activity_timeout_minutes: int = 30

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Metrics
    metrics_api_key: str | None = None  # If set, /metrics requires this key

    @field_validator("encryption_key")
    @classmethod
    def validate_encryption_key(cls, v: str) -> str:
        if v == "change-this-to-a-secure-random-string":
            raise ValueError(
                "ENCRYPTION_KEY must be changed from default value. "
                "Generate a secure secret with: openssl rand -hex 32"
            )
        if len(v) < 32:
            raise ValueError("ENCRYPTION_KEY must be at least 32 characters")
        return v

    @field_validator("provisioning_provider", mode="before")
    @classmethod
    def normalize_provisioning_provider(cls, v: str | None) -> str:
        """Normalize provider names.

        Empty means mock. Legacy names are mapped to their current ones.
        Unknown names are kept so provider selection can downgrade them to
        mock with a warning instead of failing at startup.
        """
        value = (v or "").strip().lower()
        if not value:
            return "mock"
        return PROVISIONING_PROVIDER_ALIASES.get(value, value)

    @property
    def environment(self) -> str:
        """Deployment tier used for stack names and resource sizing."""
        env = self.deploy_env or self.app_env
        if env in ("production", "staging"):
            return env
        return "development"


@lru_cache
def get_settings() -> Settings:
    return Settings()
