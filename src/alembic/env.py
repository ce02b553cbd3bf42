import os
from logging.config import fileConfig

from sqlalchemy import create_engine, pool
from sqlalchemy.engine import make_url
from sqlmodel import SQLModel

from alembic import context
from src.alembic.migration_utils import is_tenant_migration
from src.provisioner.core.config import get_settings

# Import all models for metadata
from src.provisioner.models import OnboardingSession, PendingInvite, Tenant  # noqa: F401
from src.provisioner.models.tenant import tenant_metadata

config = context.config

if config.config_file_name is not None and os.path.exists(config.config_file_name):
    fileConfig(config.config_file_name)

# Async drivers are swapped for their sync counterparts
SYNC_DRIVERS = {"asyncpg": "psycopg2", "aiosqlite": "pysqlite"}


def get_database_url() -> str:
    """Database to migrate.

    Tenant runs pass the URL in ``config.attributes`` so it never goes through
    ini interpolation. Platform runs use the configured platform database.
    """
    return config.attributes.get("database_url") or get_settings().database_url


def get_url() -> str:
    """Get sync database URL."""
    url = make_url(get_database_url())
    driver = url.get_driver_name()
    if driver in SYNC_DRIVERS:
        url = url.set(drivername=f"{url.get_backend_name()}+{SYNC_DRIVERS[driver]}")
    return url.render_as_string(hide_password=False)


def get_target_metadata():
    if is_tenant_migration():
        return tenant_metadata
    return SQLModel.metadata


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode."""
    context.configure(
        url=get_url(),
        target_metadata=get_target_metadata(),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=get_target_metadata(),
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode with sync engine."""
    connectable = create_engine(get_url(), poolclass=pool.NullPool)

    with connectable.connect() as connection:
        do_run_migrations(connection)

    connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
