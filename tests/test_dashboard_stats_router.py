"""
tests/test_dashboard_stats_router.py

HTTP contract tests for GET /api/dashboard/stats.

The router is mounted on a bare FastAPI app and the stats service is
replaced through dependency overrides; nothing touches a database.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.api.dependencies import (
    AUTH_REQUIRED_MESSAGE,
    SERVER_ERROR_MESSAGE,
    USER_ID_HEADER,
    get_stats_service,
)
from app.api.routers import dashboard_stats_router
from app.domain.stats import DailyBucket, RecentJobSummary, StatsSnapshot, StatusBreakdown
from db.repositories.errors import StoreReadError

SNAPSHOT = StatsSnapshot(
    product_total=5,
    status_breakdown=StatusBreakdown(draft=3, uploaded=1, error=1),
    daily_collection=(
        DailyBucket(date=date(2026, 10, 16), count=0),
        DailyBucket(date=date(2026, 10, 17), count=5),
    ),
    job_total=1,
    recent_jobs=(
        RecentJobSummary(
            id="job-1",
            status="completed",
            success_count=5,
            failed_count=0,
            created_at=datetime(2026, 10, 17, 9, tzinfo=timezone.utc),
        ),
    ),
)


@pytest.fixture()
def stats_service() -> MagicMock:
    service = MagicMock()
    service.compute_snapshot.return_value = SNAPSHOT
    return service


@pytest.fixture()
def client(stats_service: MagicMock) -> TestClient:
    app = FastAPI()
    app.include_router(dashboard_stats_router)
    app.dependency_overrides[get_stats_service] = lambda: stats_service
    return TestClient(app)


class TestDashboardStatsEndpoint:
    def test_requires_user(self, client: TestClient, stats_service: MagicMock) -> None:
        response = client.get("/api/dashboard/stats")

        assert response.status_code == 401
        assert response.json() == {"success": False, "error": AUTH_REQUIRED_MESSAGE}
        stats_service.compute_snapshot.assert_not_called()

    def test_returns_camel_case_envelope(self, client: TestClient, stats_service: MagicMock) -> None:
        response = client.get("/api/dashboard/stats", headers={USER_ID_HEADER: "user-1"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        data = body["data"]
        assert data["products"] == {
            "total": 5,
            "byStatus": {"draft": 3, "uploaded": 1, "error": 1},
        }
        assert data["dailyCollection"] == [
            {"date": "2026-10-16", "count": 0},
            {"date": "2026-10-17", "count": 5},
        ]
        assert data["jobs"]["total"] == 1
        recent = data["jobs"]["recent"][0]
        assert recent["id"] == "job-1"
        assert recent["successCount"] == 5
        assert recent["failedCount"] == 0
        stats_service.compute_snapshot.assert_called_once_with("user-1")

    def test_store_error_returns_generic_500(
        self, client: TestClient, stats_service: MagicMock
    ) -> None:
        stats_service.compute_snapshot.side_effect = StoreReadError(
            'relation "products_v1" does not exist'
        )

        response = client.get("/api/dashboard/stats", headers={USER_ID_HEADER: "user-1"})

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": SERVER_ERROR_MESSAGE}
        assert "products_v1" not in response.text
