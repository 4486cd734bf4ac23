"""
app/domain/stats.py

Value objects produced by the statistics aggregation.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date, datetime


@dataclass(frozen=True)
class DailyBucket:
    """
    Number of products created on one UTC calendar day.
    """

    date: date
    count: int


@dataclass(frozen=True)
class StatusBreakdown:
    draft: int = 0
    uploaded: int = 0
    error: int = 0

    @property
    def tallied(self) -> int:
        return self.draft + self.uploaded + self.error


@dataclass(frozen=True)
class RecentJobSummary:
    id: uuid.UUID | str | None
    status: str
    success_count: int
    failed_count: int
    created_at: datetime | None


@dataclass(frozen=True)
class StatsSnapshot:
    """
    Dashboard statistics for one user.

    Attributes
    ----------
    product_total:
        Count of product rows owned by the user.
    status_breakdown:
        draft / uploaded / error tallies. Rows with any other status are
        counted in ``product_total`` but in none of the three buckets.
    daily_collection:
        One bucket per day of the trailing window, oldest first, gaps
        filled with zero.
    job_total:
        Count of scraping jobs owned by the user.
    recent_jobs:
        Jobs from the trailing week, newest first, bounded.
    """

    product_total: int
    status_breakdown: StatusBreakdown
    daily_collection: tuple[DailyBucket, ...]
    job_total: int
    recent_jobs: tuple[RecentJobSummary, ...]


@dataclass(frozen=True)
class JobDigest:
    """
    Totals across every user's jobs created on one UTC day.
    """

    report_date: date
    total_success: int
    total_failed: int
    running_jobs: int
    completed_jobs: int
    failed_jobs: int
