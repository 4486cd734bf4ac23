"""
tests/test_stats_service.py

Pytest unit tests for StatsService and its aggregation helpers.

Readers are in-memory fakes and the clock is pinned, so every window is
deterministic. No database.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Any

import pytest

from app.config import StatsSettings
from app.domain.product_ingestion import TableTarget
from app.domain.stats import JobDigest
from app.services.stats_service import (
    StatsService,
    build_daily_buckets,
    format_digest_text,
    summarize_jobs_for_digest,
    summarize_recent_jobs,
    tally_statuses,
    to_utc_date,
)

NOW = datetime(2026, 10, 17, 12, 30, tzinfo=timezone.utc)
TODAY = date(2026, 10, 17)


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakeProductReader:
    def __init__(
        self,
        *,
        statuses: list[str] | None = None,
        created: list[datetime] | None = None,
        total: int | None = None,
    ) -> None:
        self.statuses = statuses or []
        self.created = created or []
        self.total = len(self.statuses) if total is None else total
        self.created_since: list[tuple[TableTarget, str, datetime]] = []

    def count_for_user(self, table_target: TableTarget, user_id: str) -> int:
        return self.total

    def list_statuses_for_user(self, table_target: TableTarget, user_id: str) -> list[str]:
        return list(self.statuses)

    def list_created_since(
        self, table_target: TableTarget, user_id: str, since: datetime
    ) -> list[datetime]:
        self.created_since.append((table_target, user_id, since))
        return [moment for moment in self.created if moment >= since]


class FakeJobReader:
    def __init__(self, jobs: list[Any] | None = None, total: int = 0) -> None:
        self.jobs = jobs or []
        self.total = total
        self.recent_calls: list[dict[str, Any]] = []
        self.between_calls: list[tuple[datetime, datetime]] = []

    def count_for_user(self, user_id: str) -> int:
        return self.total

    def list_recent_for_user(self, user_id: str, *, since: datetime, limit: int = 10) -> list[Any]:
        self.recent_calls.append({"user_id": user_id, "since": since, "limit": limit})
        return list(self.jobs)

    def list_created_between(self, start: datetime, end: datetime) -> list[Any]:
        self.between_calls.append((start, end))
        return list(self.jobs)


def _job(status: str, success: int | None = 0, failed: int | None = 0, **extra: Any) -> Any:
    return SimpleNamespace(status=status, success_count=success, failed_count=failed, **extra)


def _service(products: FakeProductReader, jobs: FakeJobReader, **settings: Any) -> StatsService:
    return StatsService(
        product_reader=products,
        job_reader=jobs,
        settings=StatsSettings(**settings),
        clock=lambda: NOW,
    )


# ---------------------------------------------------------------------------
# Daily buckets
# ---------------------------------------------------------------------------


class TestBuildDailyBuckets:
    def test_empty_input_gives_thirty_zero_buckets(self) -> None:
        buckets = build_daily_buckets([], today=TODAY)

        assert len(buckets) == 30
        assert all(bucket.count == 0 for bucket in buckets)

    def test_window_ends_today_and_is_contiguous(self) -> None:
        buckets = build_daily_buckets([], today=TODAY)

        assert buckets[0].date == date(2026, 9, 18)
        assert buckets[-1].date == TODAY
        for previous, current in zip(buckets, buckets[1:]):
            assert current.date - previous.date == timedelta(days=1)

    def test_sparse_days_are_gap_filled(self) -> None:
        created = [
            datetime(2026, 10, 17, 1, tzinfo=timezone.utc),
            datetime(2026, 10, 17, 23, 59, tzinfo=timezone.utc),
            datetime(2026, 10, 1, 8, tzinfo=timezone.utc),
        ]

        buckets = build_daily_buckets(created, today=TODAY)
        by_date = {bucket.date: bucket.count for bucket in buckets}

        assert len(buckets) == 30
        assert by_date[TODAY] == 2
        assert by_date[date(2026, 10, 1)] == 1
        assert sum(by_date.values()) == 3

    def test_dense_window_counts_every_day(self) -> None:
        created = [
            datetime.combine(TODAY - timedelta(days=offset), datetime.min.time(), tzinfo=timezone.utc)
            for offset in range(30)
        ]

        buckets = build_daily_buckets(created, today=TODAY)

        assert [bucket.count for bucket in buckets] == [1] * 30

    def test_timestamps_outside_window_are_ignored(self) -> None:
        created = [datetime(2026, 9, 17, 23, tzinfo=timezone.utc)]

        buckets = build_daily_buckets(created, today=TODAY)

        assert sum(bucket.count for bucket in buckets) == 0

    def test_non_utc_timestamps_are_bucketed_by_utc_date(self) -> None:
        # 2026-10-17 01:00 at UTC+9 is 2026-10-16 16:00 UTC.
        moment = datetime(2026, 10, 17, 1, tzinfo=timezone(timedelta(hours=9)))

        assert to_utc_date(moment) == date(2026, 10, 16)

    def test_custom_window_size(self) -> None:
        assert len(build_daily_buckets([], today=TODAY, days=7)) == 7


# ---------------------------------------------------------------------------
# Status tally
# ---------------------------------------------------------------------------


class TestTallyStatuses:
    def test_counts_known_statuses(self) -> None:
        breakdown = tally_statuses(["draft", "draft", "uploaded", "error"])

        assert (breakdown.draft, breakdown.uploaded, breakdown.error) == (2, 1, 1)
        assert breakdown.tallied == 4

    def test_unknown_statuses_are_excluded(self) -> None:
        breakdown = tally_statuses(["draft", "archived", None])

        assert breakdown.draft == 1
        assert breakdown.tallied == 1


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------


class TestComputeSnapshot:
    def test_user_with_no_data(self) -> None:
        snapshot = _service(FakeProductReader(), FakeJobReader()).compute_snapshot("user-1")

        assert snapshot.product_total == 0
        assert snapshot.status_breakdown.tallied == 0
        assert len(snapshot.daily_collection) == 30
        assert snapshot.job_total == 0
        assert snapshot.recent_jobs == ()

    def test_total_can_exceed_tallied_statuses(self) -> None:
        products = FakeProductReader(statuses=["draft", "uploaded", "archived"])

        snapshot = _service(products, FakeJobReader()).compute_snapshot("user-1")

        assert snapshot.product_total == 3
        assert snapshot.status_breakdown.tallied == 2

    def test_daily_window_starts_at_utc_midnight(self) -> None:
        products = FakeProductReader()

        _service(products, FakeJobReader()).compute_snapshot("user-1")

        table, user_id, since = products.created_since[0]
        assert table is TableTarget.V1
        assert user_id == "user-1"
        assert since == datetime(2026, 9, 18, tzinfo=timezone.utc)

    def test_products_table_setting_is_honoured(self) -> None:
        products = FakeProductReader()

        _service(products, FakeJobReader(), products_table="v2").compute_snapshot("user-1")

        assert products.created_since[0][0] is TableTarget.V2

    def test_recent_jobs_query_window_and_limit(self) -> None:
        jobs = FakeJobReader(total=4)

        snapshot = _service(FakeProductReader(), jobs).compute_snapshot("user-1")

        assert snapshot.job_total == 4
        call = jobs.recent_calls[0]
        assert call["since"] == NOW - timedelta(days=7)
        assert call["limit"] == 10

    def test_recent_jobs_are_bounded(self) -> None:
        jobs = FakeJobReader(jobs=[_job("completed", 1, 0) for _ in range(12)], total=12)

        snapshot = _service(FakeProductReader(), jobs).compute_snapshot("user-1")

        assert len(snapshot.recent_jobs) == 10


class TestSummarizeRecentJobs:
    def test_missing_counts_default_to_zero(self) -> None:
        (summary,) = summarize_recent_jobs([_job("running", None, None, id="job-1")])

        assert summary.id == "job-1"
        assert summary.success_count == 0
        assert summary.failed_count == 0
        assert summary.created_at is None


# ---------------------------------------------------------------------------
# Digest
# ---------------------------------------------------------------------------


class TestDailyDigest:
    @pytest.fixture()
    def jobs(self) -> FakeJobReader:
        return FakeJobReader(
            jobs=[
                _job("completed", 10, 1),
                _job("completed", 8, 2),
                _job("running", 5, 0),
            ]
        )

    def test_totals_and_status_counts(self, jobs: FakeJobReader) -> None:
        digest = _service(FakeProductReader(), jobs).compute_daily_digest()

        assert digest == JobDigest(
            report_date=TODAY,
            total_success=23,
            total_failed=3,
            running_jobs=1,
            completed_jobs=2,
            failed_jobs=0,
        )

    def test_window_is_the_current_utc_day(self, jobs: FakeJobReader) -> None:
        _service(FakeProductReader(), jobs).compute_daily_digest()

        start, end = jobs.between_calls[0]
        assert start == datetime(2026, 10, 17, tzinfo=timezone.utc)
        assert end == datetime(2026, 10, 18, tzinfo=timezone.utc)

    def test_no_jobs_gives_zero_digest(self) -> None:
        digest = summarize_jobs_for_digest([], report_date=TODAY)

        assert digest.total_success == 0
        assert digest.running_jobs == digest.completed_jobs == digest.failed_jobs == 0

    def test_format_digest_text(self) -> None:
        digest = JobDigest(
            report_date=TODAY,
            total_success=23,
            total_failed=3,
            running_jobs=1,
            completed_jobs=2,
            failed_jobs=0,
        )

        text = format_digest_text(digest)

        assert "2026-10-17" in text
        assert "Succeeded: 23" in text
        assert "Failed: 3" in text
        assert "- Running: 1" in text
        assert "- Completed: 2" in text
        assert text.endswith("- Failed: 0")
