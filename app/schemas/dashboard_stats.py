"""
Schemas for the dashboard statistics endpoint.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from app.domain.stats import StatsSnapshot
from app.schemas.common import CamelModel


class StatusCounts(CamelModel):
    draft: int = Field(..., ge=0)
    uploaded: int = Field(..., ge=0)
    error: int = Field(..., ge=0)


class ProductStats(CamelModel):
    total: int = Field(..., ge=0)
    by_status: StatusCounts


class DailyCollectionEntry(CamelModel):
    date: str = Field(..., description="UTC calendar date, YYYY-MM-DD")
    count: int = Field(..., ge=0)


class RecentJob(CamelModel):
    id: str | None = None
    status: str
    success_count: int = 0
    failed_count: int = 0
    created_at: datetime | None = None


class JobStats(CamelModel):
    total: int = Field(..., ge=0)
    recent: list[RecentJob] = Field(default_factory=list)


class DashboardStats(CamelModel):
    products: ProductStats
    daily_collection: list[DailyCollectionEntry]
    jobs: JobStats

    @classmethod
    def from_snapshot(cls, snapshot: StatsSnapshot) -> DashboardStats:
        breakdown = snapshot.status_breakdown
        return cls(
            products=ProductStats(
                total=snapshot.product_total,
                by_status=StatusCounts(
                    draft=breakdown.draft,
                    uploaded=breakdown.uploaded,
                    error=breakdown.error,
                ),
            ),
            daily_collection=[
                DailyCollectionEntry(date=bucket.date.isoformat(), count=bucket.count)
                for bucket in snapshot.daily_collection
            ],
            jobs=JobStats(
                total=snapshot.job_total,
                recent=[
                    RecentJob(
                        id=str(job.id) if job.id is not None else None,
                        status=job.status,
                        success_count=job.success_count,
                        failed_count=job.failed_count,
                        created_at=job.created_at,
                    )
                    for job in snapshot.recent_jobs
                ],
            ),
        )


class DashboardStatsResponse(CamelModel):
    success: bool = True
    data: DashboardStats
