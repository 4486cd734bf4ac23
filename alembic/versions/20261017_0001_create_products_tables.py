"""create products_v1 and products_v2 tables

Revision ID: 20261017_0001
Revises:
Create Date: 2026-10-17 09:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261017_0001"
down_revision = None
branch_labels = None
depends_on = None

_TABLES = ("products_v1", "products_v2")


def _create_products_table(name: str) -> None:
    op.create_table(
        name,
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", sa.Text(), nullable=False),
        sa.Column("external_id", sa.String(length=64), nullable=False,
                  comment="Marketplace identifier, e.g. an ASIN"),
        sa.Column("source_url", sa.Text(), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("images", postgresql.ARRAY(sa.Text()), server_default="{}", nullable=False),
        sa.Column("variants", postgresql.JSONB(astext_type=sa.Text()), nullable=True,
                  comment='{"options": [...]} or null'),
        sa.Column("sourcing_type", sa.String(length=8), server_default="US", nullable=False),
        sa.Column("cost_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("margin_rate", sa.Numeric(5, 2), server_default="40.00", nullable=False),
        sa.Column("sale_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("status", sa.String(length=16), server_default="draft", nullable=False),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("category", sa.Text(), server_default="General", nullable=False),
        sa.Column("review_count", sa.Integer(), nullable=True),
        sa.Column("rating", sa.Numeric(3, 2), nullable=True),
        sa.Column("brand", sa.Text(), nullable=True),
        sa.Column("weight", sa.Numeric(10, 3), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id", name=f"pk_{name}"),
        sa.UniqueConstraint("external_id", name=f"uq_{name}_external_id"),
        sa.CheckConstraint("status IN ('draft', 'uploaded', 'error')", name=f"ck_{name}_valid_status"),
        sa.CheckConstraint("cost_price > 0", name=f"ck_{name}_positive_cost_price"),
        sa.CheckConstraint("sale_price > 0", name=f"ck_{name}_positive_sale_price"),
        sa.CheckConstraint(
            "margin_rate >= 0 AND margin_rate <= 100",
            name=f"ck_{name}_valid_margin_rate",
        ),
        sa.CheckConstraint(
            "rating IS NULL OR (rating >= 0 AND rating <= 5)",
            name=f"ck_{name}_valid_rating",
        ),
    )
    op.create_index(f"ix_{name}_user_id", name, ["user_id"], unique=False)
    op.create_index(f"ix_{name}_status", name, ["status"], unique=False)


def upgrade() -> None:
    for name in _TABLES:
        _create_products_table(name)


def downgrade() -> None:
    for name in reversed(_TABLES):
        op.drop_index(f"ix_{name}_status", table_name=name)
        op.drop_index(f"ix_{name}_user_id", table_name=name)
        op.drop_table(name)
