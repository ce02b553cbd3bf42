"""Platform registry: tenants, onboarding sessions, pending invites

Revision ID: 001
Revises:
Create Date: 2026-09-01 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
import sqlmodel

from alembic import op
from src.alembic.migration_utils import is_tenant_migration

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

STAGES = (
    "signup_started",
    "email_verified",
    "dataroom_created",
    "use_case_selected",
    "workflow_setup",
    "users_invited",
    "plan_selected",
    "payment_pending",
    "payment_completed",
    "provisioning",
    "active",
)


def upgrade() -> None:
    if is_tenant_migration():
        return

    # 1. Tenants table
    op.create_table(
        "tenants",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("slug", sqlmodel.sql.sqltypes.AutoString(length=63), nullable=False),
        sa.Column("name", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column("email", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column("owner_full_name", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=True),
        sa.Column("use_case", sqlmodel.sql.sqltypes.AutoString(length=50), nullable=True),
        sa.Column(
            "status",
            sqlmodel.sql.sqltypes.AutoString(length=20),
            nullable=False,
            server_default="pending",
        ),
        sa.Column("provisioning_provider", sqlmodel.sql.sqltypes.AutoString(length=20), nullable=True),
        sa.Column("external_project_id", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=True),
        sa.Column("external_project_ref", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=True),
        sa.Column("cloud_sql_instance_name", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=True),
        sa.Column(
            "cloud_sql_connection_name", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=True
        ),
        sa.Column("storage_bucket_name", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=True),
        sa.Column("service_account_email", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=True),
        sa.Column("pulumi_stack_name", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=True),
        sa.Column("gcp_project_id", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=True),
        sa.Column("gcp_region", sqlmodel.sql.sqltypes.AutoString(length=50), nullable=True),
        sa.Column("database_url_encrypted", sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column("credentials_encrypted", sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column("settings", sa.JSON(), nullable=False, server_default="{}"),
        sa.Column("provisioning_started_at", sa.DateTime(), nullable=True),
        sa.Column("provisioned_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "status IN ('pending', 'provisioning', 'active', 'suspended', 'deleted')",
            name="ck_tenants_status",
        ),
    )
    op.create_index("ix_tenants_slug", "tenants", ["slug"], unique=True)
    op.create_index("ix_tenants_email", "tenants", ["email"], unique=False)
    op.create_index("ix_tenants_status", "tenants", ["status"], unique=False)

    # 2. Onboarding sessions (one per tenant)
    op.create_table(
        "onboarding_sessions",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("tenant_id", sa.Uuid(), nullable=False),
        sa.Column(
            "current_stage",
            sqlmodel.sql.sqltypes.AutoString(length=30),
            nullable=False,
            server_default="signup_started",
        ),
        *[sa.Column(f"{stage}_at", sa.DateTime(), nullable=True) for stage in STAGES],
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenants.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_onboarding_sessions_tenant_id", "onboarding_sessions", ["tenant_id"], unique=True
    )

    # 3. Pending invites
    op.create_table(
        "pending_invites",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("tenant_id", sa.Uuid(), nullable=False),
        sa.Column("email", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column(
            "role",
            sqlmodel.sql.sqltypes.AutoString(length=50),
            nullable=False,
            server_default="member",
        ),
        sa.Column(
            "status",
            sqlmodel.sql.sqltypes.AutoString(length=20),
            nullable=False,
            server_default="pending",
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("migrated_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenants.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_pending_invites_tenant_id", "pending_invites", ["tenant_id"], unique=False)
    op.create_index("ix_pending_invites_email", "pending_invites", ["email"], unique=False)


def downgrade() -> None:
    if is_tenant_migration():
        return

    op.drop_index("ix_pending_invites_email", table_name="pending_invites")
    op.drop_index("ix_pending_invites_tenant_id", table_name="pending_invites")
    op.drop_table("pending_invites")
    op.drop_index("ix_onboarding_sessions_tenant_id", table_name="onboarding_sessions")
    op.drop_table("onboarding_sessions")
    op.drop_index("ix_tenants_status", table_name="tenants")
    op.drop_index("ix_tenants_email", table_name="tenants")
    op.drop_index("ix_tenants_slug", table_name="tenants")
    op.drop_table("tenants")
