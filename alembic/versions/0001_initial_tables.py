"""Create secrets, secret_fragments, secret_mappings and access_grants tables

Revision ID: 0001
Revises:
Create Date: 2026-10-17

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "secrets",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("password_hash", sa.String(128), nullable=True),
        sa.Column("created_at", sa.DateTime, nullable=False),
        sa.Column("expires_at", sa.DateTime, nullable=False),
        sa.Column("fragment_count", sa.Integer, nullable=False),
        sa.Column("extendable", sa.Boolean, default=False, nullable=False),
        sa.Column("email", sa.Text, nullable=True),
    )
    op.create_index("ix_secrets_expires_at", "secrets", ["expires_at"])

    op.create_table(
        "secret_fragments",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "secret_id",
            sa.String(36),
            sa.ForeignKey("secrets.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("order_index", sa.Integer, nullable=False),
        sa.Column("content", sa.Text, nullable=False),
        sa.UniqueConstraint("secret_id", "order_index", name="uq_fragment_order"),
    )
    op.create_index("ix_secret_fragments_secret_id", "secret_fragments", ["secret_id"])

    op.create_table(
        "secret_mappings",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("short_id", sa.String(16), unique=True, nullable=False),
        sa.Column(
            "secret_id",
            sa.String(36),
            sa.ForeignKey("secrets.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime, nullable=False),
        sa.Column("expires_at", sa.DateTime, nullable=False),
    )
    op.create_index("ix_secret_mappings_secret_id", "secret_mappings", ["secret_id"])

    # No foreign key: grants may outlive the secret they refer to
    op.create_table(
        "access_grants",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("secret_id", sa.String(36), nullable=False),
        sa.Column("email", sa.Text, nullable=False),
        sa.Column("expires_at", sa.DateTime, nullable=False),
        sa.Column("created_at", sa.DateTime, nullable=False),
        sa.Column("updated_at", sa.DateTime, nullable=False),
    )
    op.create_index("ix_access_grants_secret_id", "access_grants", ["secret_id"])
    op.create_index("ix_access_grants_expires_at", "access_grants", ["expires_at"])


def downgrade() -> None:
    op.drop_index("ix_access_grants_expires_at", table_name="access_grants")
    op.drop_index("ix_access_grants_secret_id", table_name="access_grants")
    op.drop_table("access_grants")

    op.drop_index("ix_secret_mappings_secret_id", table_name="secret_mappings")
    op.drop_table("secret_mappings")

    op.drop_index("ix_secret_fragments_secret_id", table_name="secret_fragments")
    op.drop_table("secret_fragments")

    op.drop_index("ix_secrets_expires_at", table_name="secrets")
    op.drop_table("secrets")
