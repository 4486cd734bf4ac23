"""create scraping_jobs table

Revision ID: 20261017_0002
Revises: 20261017_0001
Create Date: 2026-10-17 09:15:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261017_0002"
down_revision = "20261017_0001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "scraping_jobs",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", sa.Text(), nullable=False),
        sa.Column("search_input", sa.Text(), nullable=False,
                  comment="Keyword or URL the job was started with"),
        sa.Column("status", sa.String(length=32), server_default="pending", nullable=False),
        sa.Column("total_target", sa.Integer(), server_default="1000", nullable=False),
        sa.Column("current_count", sa.Integer(), server_default="0", nullable=False),
        sa.Column("success_count", sa.Integer(), server_default="0", nullable=False),
        sa.Column("failed_count", sa.Integer(), server_default="0", nullable=False),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_scraping_jobs"),
    )
    op.create_index("ix_scraping_jobs_user_id", "scraping_jobs", ["user_id"], unique=False)
    op.create_index("ix_scraping_jobs_status", "scraping_jobs", ["status"], unique=False)
    op.create_index("ix_scraping_jobs_created_at", "scraping_jobs", ["created_at"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_scraping_jobs_created_at", table_name="scraping_jobs")
    op.drop_index("ix_scraping_jobs_status", table_name="scraping_jobs")
    op.drop_index("ix_scraping_jobs_user_id", table_name="scraping_jobs")
    op.drop_table("scraping_jobs")
