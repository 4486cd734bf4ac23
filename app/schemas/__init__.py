"""
app/schemas package marker.
"""

from app.schemas.common import ApiErrorResponse, ApiMessageResponse, CamelModel
from app.schemas.dashboard_stats import DashboardStats, DashboardStatsResponse
from app.schemas.product_ingestion import (
    IngestRequest,
    IngestResponse,
    IngestionResultData,
    ScrapedRecordPayload,
)
from app.schemas.products import (
    ProductItem,
    ProductListData,
    ProductListResponse,
    ProductResponse,
    ProductUpdateRequest,
)

__all__ = [
    "ApiErrorResponse",
    "ApiMessageResponse",
    "CamelModel",
    "DashboardStats",
    "DashboardStatsResponse",
    "IngestRequest",
    "IngestResponse",
    "IngestionResultData",
    "ScrapedRecordPayload",
    "ProductItem",
    "ProductListData",
    "ProductListResponse",
    "ProductResponse",
    "ProductUpdateRequest",
]
