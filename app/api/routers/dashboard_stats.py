"""
app/api/routers/dashboard_stats.py

Dashboard statistics endpoint.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.api.dependencies import (
    AUTH_REQUIRED_MESSAGE,
    SERVER_ERROR_MESSAGE,
    error_response,
    get_current_user_id,
    get_stats_service,
)
from app.schemas.common import ApiErrorResponse
from app.schemas.dashboard_stats import DashboardStats, DashboardStatsResponse
from app.services.stats_service import StatsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get(
    "/stats",
    response_model=DashboardStatsResponse,
    responses={
        status.HTTP_401_UNAUTHORIZED: {"model": ApiErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ApiErrorResponse},
    },
)
def get_dashboard_stats(
    user_id: str | None = Depends(get_current_user_id),
    stats_service: StatsService = Depends(get_stats_service),
) -> DashboardStatsResponse | JSONResponse:
    """
    Product totals, status breakdown, 30-day collection series and recent
    jobs for the calling user.

    Failures return a fixed message; store error text is only logged.
    """

    if user_id is None:
        return error_response(status.HTTP_401_UNAUTHORIZED, AUTH_REQUIRED_MESSAGE)

    try:
        snapshot = stats_service.compute_snapshot(user_id)
    except Exception:
        logger.exception("Dashboard stats failed user_id=%s", user_id)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, SERVER_ERROR_MESSAGE)

    return DashboardStatsResponse(data=DashboardStats.from_snapshot(snapshot))
