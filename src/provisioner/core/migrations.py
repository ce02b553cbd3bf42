"""Migration runner for the platform database and tenant databases."""

import asyncio
import os
import re
import sys
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from alembic.config import Config
from sqlalchemy import text
from sqlalchemy.engine import make_url

from alembic import command
from src.provisioner.core.config import Settings, get_settings
from src.provisioner.core.db import create_tenant_engine
from src.provisioner.core.errors import SchemaMigrationError
from src.provisioner.core.logging import get_logger, redact_url

logger = get_logger(__name__)

ALEMBIC_DIR = Path(__file__).resolve().parents[2] / "alembic"
PROJECT_ROOT = ALEMBIC_DIR.parents[1]

# Read by the child process; kept out of argv so the password is not visible in ps.
TENANT_DATABASE_URL_ENV = "TENANT_DATABASE_URL"
UPGRADE_MODULE = "src.provisioner.core.migrations"
STDERR_TAIL_LINES = 20

# Pooled connections reject a freshly created database role until it has
# propagated to the pooler; those errors clear up on their own.
PROPAGATION_ERROR_PATTERNS = (
    re.compile(r"tenant or user not found", re.IGNORECASE),
    re.compile(r"role \S+ does not exist", re.IGNORECASE),
)


def is_propagation_error(exc: BaseException) -> bool:
    """True if ``exc`` (or anything it wraps) is a role-propagation error."""
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        message = str(current)
        if any(pattern.search(message) for pattern in PROPAGATION_ERROR_PATTERNS):
            return True
        orig = getattr(current, "orig", None)
        if isinstance(orig, BaseException) and orig is not current:
            if is_propagation_error(orig):
                return True
        current = current.__cause__ or current.__context__
    return False


@dataclass(frozen=True, slots=True)
class MigrationResult:
    """Schema applied. ``degraded`` means an optional feature is unavailable."""

    attempts: int
    vector_search_enabled: bool
    degraded: bool = False
    detail: str | None = None


def _alembic_config(database_url: str | None = None) -> Config:
    cfg = Config()
    cfg.set_main_option("script_location", str(ALEMBIC_DIR))
    if database_url:
        # Kept out of the ini options so "%" in passwords is not interpolated.
        cfg.attributes["database_url"] = database_url
    return cfg


def run_migrations_sync(
    database_url: str | None = None, tenant_slug: str | None = None
) -> None:
    """Run Alembic migrations synchronously.

    Args:
        database_url: Tenant database to migrate. Defaults to the platform database.
        tenant_slug: If provided, runs tenant migrations (tagged with the slug).
    """
    cfg = _alembic_config(database_url)
    if tenant_slug:
        command.upgrade(cfg, "head", tag=tenant_slug)
    else:
        command.upgrade(cfg, "head")


class UpgradeProcessError(Exception):
    """The tenant upgrade subprocess exited with a nonzero status."""

    def __init__(self, message: str, returncode: int):
        super().__init__(message)
        self.returncode = returncode


def _scrub_password(message: str, database_url: str) -> str:
    password = make_url(database_url).password
    if password:
        message = message.replace(password, "***")
    return message


async def run_tenant_upgrade(
    database_url: str,
    tenant_slug: str,
    *,
    command_prefix: Sequence[str] | None = None,
) -> None:
    """Apply tenant revisions in a child process.

    The child is killed when the awaiting task is cancelled, so an attempt
    that hits its deadline does not keep running against the tenant database.
    ``command_prefix`` replaces ``python -m`` of this module; the tenant slug
    is always appended as the last argument.
    """
    prefix = list(command_prefix or (sys.executable, "-m", UPGRADE_MODULE))
    process = await asyncio.create_subprocess_exec(
        *prefix,
        tenant_slug,
        cwd=str(PROJECT_ROOT),
        env={**os.environ, TENANT_DATABASE_URL_ENV: database_url},
        stdout=asyncio.subprocess.DEVNULL,
        stderr=asyncio.subprocess.PIPE,
    )
    try:
        _, stderr = await process.communicate()
    finally:
        if process.returncode is None:
            process.kill()
            await process.wait()
            logger.warning("migration.process_killed", tenant_slug=tenant_slug, pid=process.pid)

    if process.returncode != 0:
        lines = stderr.decode(errors="replace").strip().splitlines()
        detail = "\n".join(lines[-STDERR_TAIL_LINES:]) or f"exit status {process.returncode}"
        raise UpgradeProcessError(_scrub_password(detail, database_url), process.returncode)


def enable_vector_search_sync(database_url: str, dimensions: int) -> None:
    """Install pgvector and the embedding column and index. Blocking."""
    engine = create_tenant_engine(database_url)
    try:
        with engine.begin() as conn:
            conn.execute(text("CREATE EXTENSION IF NOT EXISTS vector"))
            conn.execute(
                text(
                    "ALTER TABLE document_embeddings "
                    f"ADD COLUMN IF NOT EXISTS embedding vector({int(dimensions)})"
                )
            )
            conn.execute(
                text(
                    "CREATE INDEX IF NOT EXISTS document_embeddings_vector_idx "
                    "ON document_embeddings USING ivfflat (embedding vector_cosine_ops) "
                    "WITH (lists = 100)"
                )
            )
    finally:
        engine.dispose()


class TenantMigrationRunner:
    """Applies the tenant schema to a freshly provisioned database.

    Only role-propagation errors are retried; anything else fails the run on
    the first attempt. Waits between attempts are awaited, not slept, so the
    event loop keeps serving other tenants.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        upgrade: Callable[[str, str], Awaitable[None]] = run_tenant_upgrade,
        enable_vector: Callable[[str, int], None] = enable_vector_search_sync,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.settings = settings or get_settings()
        self._upgrade = upgrade
        self._enable_vector = enable_vector
        self._sleep = sleep

    async def apply_schema(self, database_url: str, tenant_slug: str) -> MigrationResult:
        attempts = await self._upgrade_with_retry(database_url, tenant_slug)
        vector_error = await self._enable_vector_search(database_url, tenant_slug)
        if vector_error:
            return MigrationResult(
                attempts=attempts,
                vector_search_enabled=False,
                degraded=True,
                detail=f"Vector search unavailable: {vector_error}",
            )
        return MigrationResult(attempts=attempts, vector_search_enabled=True)

    async def _upgrade_with_retry(self, database_url: str, tenant_slug: str) -> int:
        max_attempts = self.settings.migration_max_attempts
        delay = self.settings.migration_retry_delay_seconds
        timeout = self.settings.migration_attempt_timeout_seconds

        for attempt in range(1, max_attempts + 1):
            logger.info(
                "migration.attempt_started",
                tenant_slug=tenant_slug,
                attempt=attempt,
                max_attempts=max_attempts,
                database_url=redact_url(database_url),
            )
            try:
                await asyncio.wait_for(self._upgrade(database_url, tenant_slug), timeout=timeout)
            except TimeoutError as e:
                raise SchemaMigrationError(
                    f"Migration attempt {attempt} timed out after {timeout}s", attempt
                ) from e
            except Exception as e:
                if not is_propagation_error(e):
                    raise SchemaMigrationError(f"Migration failed: {e}", attempt) from e
                if attempt == max_attempts:
                    raise SchemaMigrationError(
                        f"Database role did not propagate after {attempt} attempts", attempt
                    ) from e
                logger.warning(
                    "migration.propagation_retry",
                    tenant_slug=tenant_slug,
                    attempt=attempt,
                    retry_in_seconds=delay,
                    error=str(e),
                )
                await self._sleep(delay)
            else:
                logger.info("migration.completed", tenant_slug=tenant_slug, attempts=attempt)
                return attempt

        raise SchemaMigrationError("Migration was not attempted", 0)

    async def _enable_vector_search(self, database_url: str, tenant_slug: str) -> str | None:
        """Run the optional vector step. Returns the error text on failure."""
        try:
            await asyncio.to_thread(
                self._enable_vector, database_url, self.settings.vector_dimensions
            )
        except Exception as e:
            logger.warning(
                "migration.vector_search_degraded", tenant_slug=tenant_slug, error=str(e)
            )
            return str(e)
        logger.info("migration.vector_search_enabled", tenant_slug=tenant_slug)
        return None


def main() -> None:
    """Child entry point: ``python -m src.provisioner.core.migrations <tenant_slug>``."""
    run_migrations_sync(os.environ[TENANT_DATABASE_URL_ENV], sys.argv[1])


if __name__ == "__main__":
    main()
