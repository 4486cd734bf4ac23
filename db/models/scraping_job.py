"""
db/models/scraping_job.py

Scraping job rows. Written by the scraper process; this service only reads them.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin


class ScrapingJobStatus:
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    PAUSED = "paused"
    CANCELLED = "cancelled"


class ScrapingJob(Base, TimestampMixin):
    __tablename__ = "scraping_jobs"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    user_id: Mapped[str] = mapped_column(Text, nullable=False)
    search_input: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Keyword or URL the job was started with",
    )
    status: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=ScrapingJobStatus.PENDING,
    )
    total_target: Mapped[int] = mapped_column(Integer, nullable=False, default=1000)
    current_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    success_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    failed_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    started_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index("ix_scraping_jobs_user_id", "user_id"),
        Index("ix_scraping_jobs_status", "status"),
        Index("ix_scraping_jobs_created_at", "created_at"),
    )
