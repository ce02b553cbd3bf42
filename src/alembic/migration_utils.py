from __future__ import annotations

from alembic import context


def is_tenant_migration() -> bool:
    """True when Alembic was invoked with `--tag=<tenant_slug>`.

    Tags mark migrations that target a tenant's dedicated database.
    Platform revisions must no-op in that mode, and tenant revisions must
    no-op against the platform database.
    """
    return bool(context.get_tag_argument())
