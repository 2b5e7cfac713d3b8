"""Initial schema - notification endpoints, secrets, labels and ownership.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _audit_columns() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    """Create all domain tables."""

    # 1. notification_endpoints (no FKs)
    op.create_table(
        "notification_endpoints",
        sa.Column("id", sa.String(16), primary_key=True),
        sa.Column("org_id", sa.String(16), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text, server_default="", nullable=False),
        sa.Column("status", sa.String(20), server_default="active", nullable=False),
        sa.Column("endpoint_type", sa.String(50), nullable=False),
        sa.Column("config", sa.Text, nullable=False),
        *_audit_columns(),
        sa.UniqueConstraint("org_id", "name", name="uq_notification_endpoint_org_name"),
    )
    op.create_index(
        "ix_notification_endpoints_org_id", "notification_endpoints", ["org_id"]
    )

    # 2. secrets (no FKs)
    op.create_table(
        "secrets",
        sa.Column("id", sa.String(16), primary_key=True),
        sa.Column("key", sa.String(255), nullable=False, unique=True),
        sa.Column("value", sa.Text, nullable=False),
        *_audit_columns(),
    )

    # 3. labels (no FKs)
    op.create_table(
        "labels",
        sa.Column("id", sa.String(16), primary_key=True),
        sa.Column("org_id", sa.String(16), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("properties", sa.Text, server_default="{}", nullable=False),
        *_audit_columns(),
    )

    # 4. label_mappings (FK -> labels)
    op.create_table(
        "label_mappings",
        sa.Column("id", sa.String(16), primary_key=True),
        sa.Column("label_id", sa.String(16), sa.ForeignKey("labels.id"), nullable=False),
        sa.Column("resource_id", sa.String(16), nullable=False),
        sa.Column("resource_type", sa.String(50), nullable=False),
        *_audit_columns(),
        sa.UniqueConstraint("label_id", "resource_id", name="uq_label_mapping_label_resource"),
    )
    op.create_index(
        "ix_label_mappings_resource_id", "label_mappings", ["resource_id"]
    )

    # 5. resource_mappings (no FKs)
    op.create_table(
        "resource_mappings",
        sa.Column("id", sa.String(16), primary_key=True),
        sa.Column("resource_id", sa.String(16), nullable=False),
        sa.Column("resource_type", sa.String(50), nullable=False),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("user_type", sa.String(20), server_default="owner", nullable=False),
        *_audit_columns(),
        sa.UniqueConstraint("resource_id", "user_id", name="uq_resource_mapping_resource_user"),
    )
    op.create_index(
        "ix_resource_mappings_resource_id", "resource_mappings", ["resource_id"]
    )
    op.create_index(
        "ix_resource_mappings_user_id", "resource_mappings", ["user_id"]
    )


def downgrade() -> None:
    """Drop all domain tables in reverse dependency order."""
    op.drop_table("resource_mappings")
    op.drop_table("label_mappings")
    op.drop_table("labels")
    op.drop_table("secrets")
    op.drop_table("notification_endpoints")
