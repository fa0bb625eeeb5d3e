"""Add company lifetime access and connected social accounts."""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = "003_add_lifetime_access_and_social_accounts"
down_revision = "002_add_properties_and_subscriptions"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.add_column(
        "tenants",
        sa.Column(
            "lifetime_access",
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
        ),
    )

    op.create_table(
        "social_accounts",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column(
            "tenant_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("tenants.id"),
            nullable=False,
        ),
        sa.Column("platform", sa.String(), nullable=False),
        sa.Column("handle", sa.String(), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default=sa.text("'active'")),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.UniqueConstraint("tenant_id", "platform", "handle", name="uq_social_accounts_handle"),
    )
    op.create_index("ix_social_accounts_tenant_id", "social_accounts", ["tenant_id"])


def downgrade() -> None:
    op.drop_index("ix_social_accounts_tenant_id", table_name="social_accounts")
    op.drop_table("social_accounts")
    op.drop_column("tenants", "lifetime_access")
