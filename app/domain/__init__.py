"""
Domain models package.
"""

from app.domain.product_ingestion import (
    IngestionFailure,
    IngestionResult,
    ScrapedRecord,
    TableTarget,
)
from app.domain.products import ProductPage
from app.domain.stats import (
    DailyBucket,
    JobDigest,
    RecentJobSummary,
    StatsSnapshot,
    StatusBreakdown,
)

__all__ = [
    "DailyBucket",
    "IngestionFailure",
    "IngestionResult",
    "JobDigest",
    "ProductPage",
    "RecentJobSummary",
    "ScrapedRecord",
    "StatsSnapshot",
    "StatusBreakdown",
    "TableTarget",
]
