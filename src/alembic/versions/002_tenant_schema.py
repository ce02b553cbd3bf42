"""Tenant database schema: identity, users, datarooms, embeddings

Revision ID: 002
Revises: 001
Create Date: 2026-09-01 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
import sqlmodel

from alembic import op
from src.alembic.migration_utils import is_tenant_migration

revision: str = "002"
down_revision: str | None = "001"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    if not is_tenant_migration():
        return  # Skip for platform migrations

    # 1. Tenant identity record
    op.create_table(
        "tenants",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("slug", sqlmodel.sql.sqltypes.AutoString(length=63), nullable=False),
        sa.Column("name", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column("email", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_tenants_slug", "tenants", ["slug"], unique=True)

    # 2. Users
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("tenant_slug", sqlmodel.sql.sqltypes.AutoString(length=63), nullable=False),
        sa.Column("email", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column("full_name", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=True),
        sa.Column(
            "role",
            sqlmodel.sql.sqltypes.AutoString(length=50),
            nullable=False,
            server_default="member",
        ),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("email_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_tenant_slug", "users", ["tenant_slug"], unique=False)

    # 3. Datarooms
    op.create_table(
        "datarooms",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("tenant_slug", sqlmodel.sql.sqltypes.AutoString(length=63), nullable=False),
        sa.Column("name", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column("description", sqlmodel.sql.sqltypes.AutoString(length=1000), nullable=True),
        sa.Column("owner_id", sa.Uuid(), nullable=False),
        sa.Column(
            "use_case",
            sqlmodel.sql.sqltypes.AutoString(length=50),
            nullable=False,
            server_default="single-firm",
        ),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["owner_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_datarooms_owner_id", "datarooms", ["owner_id"], unique=False)
    op.create_index("ix_datarooms_tenant_slug", "datarooms", ["tenant_slug"], unique=False)

    # 4. Dataroom members
    op.create_table(
        "dataroom_members",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("dataroom_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
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
            server_default="active",
        ),
        sa.Column("joined_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["dataroom_id"], ["datarooms.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("dataroom_id", "user_id", name="uq_dataroom_members_dataroom_user"),
    )
    op.create_index(
        "ix_dataroom_members_dataroom_id", "dataroom_members", ["dataroom_id"], unique=False
    )
    op.create_index("ix_dataroom_members_user_id", "dataroom_members", ["user_id"], unique=False)

    # 5. Document embeddings (vector column is added by the optional vector step)
    op.create_table(
        "document_embeddings",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("dataroom_id", sa.Uuid(), nullable=False),
        sa.Column("document_id", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column("chunk_index", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("content", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["dataroom_id"], ["datarooms.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_document_embeddings_dataroom_id", "document_embeddings", ["dataroom_id"], unique=False
    )
    op.create_index(
        "ix_document_embeddings_document_id", "document_embeddings", ["document_id"], unique=False
    )


def downgrade() -> None:
    if not is_tenant_migration():
        return

    op.drop_table("document_embeddings")
    op.drop_table("dataroom_members")
    op.drop_table("datarooms")
    op.drop_table("users")
    op.drop_table("tenants")
