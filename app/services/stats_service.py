"""
app/services/stats_service.py

Statistics aggregation over product and scraping-job rows.

Produces the dashboard snapshot for one user (product totals, status
breakdown, gap-filled daily collection series, recent jobs) and the
cross-user daily job digest pushed to the operator channel.

Time handling
-------------
All windows use UTC calendar days. The daily series always covers the
trailing ``daily_window_days`` days ending today (inclusive) and always has
exactly that many buckets; days without products get a zero bucket.

Row reading lives in the repositories. Everything that turns rows into
numbers is a module-level function so it can be exercised without a store.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Callable, Iterable, Sequence
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Protocol

from sqlalchemy.orm import Session

from app.config import StatsSettings, get_stats_settings
from app.domain.product_ingestion import TableTarget
from app.domain.stats import (
    DailyBucket,
    JobDigest,
    RecentJobSummary,
    StatsSnapshot,
    StatusBreakdown,
)
from db.models.product import ProductStatus
from db.models.scraping_job import ScrapingJobStatus
from db.repositories.product_repository import ProductRepository
from db.repositories.scraping_job_repository import ScrapingJobRepository

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Store boundary
# ---------------------------------------------------------------------------


class ProductStatsReader(Protocol):
    def count_for_user(self, table_target: TableTarget, user_id: str) -> int: ...

    def list_statuses_for_user(self, table_target: TableTarget, user_id: str) -> list[str]: ...

    def list_created_since(
        self, table_target: TableTarget, user_id: str, since: datetime
    ) -> list[datetime]: ...


class JobStatsReader(Protocol):
    def count_for_user(self, user_id: str) -> int: ...

    def list_recent_for_user(
        self, user_id: str, *, since: datetime, limit: int = 10
    ) -> Sequence[Any]: ...

    def list_created_between(self, start: datetime, end: datetime) -> Sequence[Any]: ...


# ---------------------------------------------------------------------------
# Pure aggregation helpers
# ---------------------------------------------------------------------------


def utc_day_start(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def to_utc_date(moment: datetime) -> date:
    """Calendar date of *moment* in UTC. Naive datetimes are taken as UTC."""
    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone(timezone.utc).date()


def tally_statuses(statuses: Iterable[str | None]) -> StatusBreakdown:
    """
    Count draft / uploaded / error statuses.

    Any other value is left out of all three tallies rather than bucketed
    as "other", so the breakdown can sum to less than the product total.
    """

    counts = Counter(statuses)
    return StatusBreakdown(
        draft=counts.get(ProductStatus.DRAFT, 0),
        uploaded=counts.get(ProductStatus.UPLOADED, 0),
        error=counts.get(ProductStatus.ERROR, 0),
    )


def build_daily_buckets(
    created_at: Iterable[datetime],
    *,
    today: date,
    days: int = 30,
) -> tuple[DailyBucket, ...]:
    """
    Group creation timestamps by UTC date and gap-fill the window.

    Returns exactly *days* buckets, one per date from ``today - (days - 1)``
    to ``today`` inclusive, oldest first. Timestamps outside the window are
    ignored.
    """

    first_day = today - timedelta(days=days - 1)
    per_day = Counter(to_utc_date(moment) for moment in created_at)
    return tuple(
        DailyBucket(date=day, count=per_day.get(day, 0))
        for day in (first_day + timedelta(days=offset) for offset in range(days))
    )


def summarize_recent_jobs(jobs: Iterable[Any]) -> tuple[RecentJobSummary, ...]:
    """Reduce job rows to dashboard summaries; missing counts become 0."""
    return tuple(
        RecentJobSummary(
            id=getattr(job, "id", None),
            status=job.status,
            success_count=job.success_count or 0,
            failed_count=job.failed_count or 0,
            created_at=getattr(job, "created_at", None),
        )
        for job in jobs
    )


def summarize_jobs_for_digest(jobs: Iterable[Any], *, report_date: date) -> JobDigest:
    total_success = 0
    total_failed = 0
    statuses: Counter[str] = Counter()
    for job in jobs:
        total_success += job.success_count or 0
        total_failed += job.failed_count or 0
        statuses[job.status] += 1

    return JobDigest(
        report_date=report_date,
        total_success=total_success,
        total_failed=total_failed,
        running_jobs=statuses.get(ScrapingJobStatus.RUNNING, 0),
        completed_jobs=statuses.get(ScrapingJobStatus.COMPLETED, 0),
        failed_jobs=statuses.get(ScrapingJobStatus.FAILED, 0),
    )


def format_digest_text(digest: JobDigest) -> str:
    return (
        f"📊 **Scraping summary for {digest.report_date.isoformat()}**\n"
        "\n"
        f"✅ Succeeded: {digest.total_success}\n"
        f"❌ Failed: {digest.total_failed}\n"
        "\n"
        "📋 Job status:\n"
        f"- Running: {digest.running_jobs}\n"
        f"- Completed: {digest.completed_jobs}\n"
        f"- Failed: {digest.failed_jobs}"
    )


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class StatsService:
    """
    Read-only aggregation over the product and job stores.

    Store failures propagate as ``StoreReadError``; callers decide whether
    that becomes an HTTP 500 or a logged, abandoned digest tick.

    Parameters
    ----------
    product_reader / job_reader:
        Row sources, normally :class:`ProductRepository` and
        :class:`ScrapingJobRepository` bound to one session.
    settings:
        Window sizes, recent-job limit and the product table to report on.
    clock:
        Returns the current UTC time; injectable for tests.
    """

    def __init__(
        self,
        *,
        product_reader: ProductStatsReader,
        job_reader: JobStatsReader,
        settings: StatsSettings | None = None,
        clock: Clock = _utc_now,
    ) -> None:
        self._products = product_reader
        self._jobs = job_reader
        self._settings = settings or StatsSettings()
        self._clock = clock
        self._table = TableTarget(self._settings.products_table)

    def compute_snapshot(self, user_id: str) -> StatsSnapshot:
        now = self._clock()
        today = to_utc_date(now)
        days = self._settings.daily_window_days

        product_total = self._products.count_for_user(self._table, user_id)
        breakdown = tally_statuses(self._products.list_statuses_for_user(self._table, user_id))
        if breakdown.tallied != product_total:
            logger.debug(
                "Status breakdown covers %d of %d products for user_id=%s",
                breakdown.tallied,
                product_total,
                user_id,
            )

        window_start = utc_day_start(today - timedelta(days=days - 1))
        created = self._products.list_created_since(self._table, user_id, window_start)
        daily = build_daily_buckets(created, today=today, days=days)

        job_total = self._jobs.count_for_user(user_id)
        recent = self._jobs.list_recent_for_user(
            user_id,
            since=now - timedelta(days=self._settings.recent_job_days),
            limit=self._settings.recent_job_limit,
        )

        return StatsSnapshot(
            product_total=product_total,
            status_breakdown=breakdown,
            daily_collection=daily,
            job_total=job_total,
            recent_jobs=summarize_recent_jobs(recent[: self._settings.recent_job_limit]),
        )

    def compute_daily_digest(self) -> JobDigest:
        """Totals for every user's jobs created during the current UTC day."""
        today = to_utc_date(self._clock())
        start = utc_day_start(today)
        jobs = self._jobs.list_created_between(start, start + timedelta(days=1))
        return summarize_jobs_for_digest(jobs, report_date=today)


def build_stats_service(db: Session, *, settings: StatsSettings | None = None) -> StatsService:
    """
    Wire a :class:`StatsService` to repositories bound to *db*.
    """

    return StatsService(
        product_reader=ProductRepository(db),
        job_reader=ScrapingJobRepository(db),
        settings=settings or get_stats_settings(),
    )
