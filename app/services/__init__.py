"""
app/services package marker.
"""

from app.services.product_ingestion_service import (
    InvalidRecordError,
    ProductIngestionService,
    UnauthenticatedError,
    get_product_ingestion_service,
)
from app.services.product_service import ProductNotFoundError, ProductService
from app.services.stats_service import StatsService, build_stats_service

__all__ = [
    "InvalidRecordError",
    "ProductIngestionService",
    "UnauthenticatedError",
    "get_product_ingestion_service",
    "ProductNotFoundError",
    "ProductService",
    "StatsService",
    "build_stats_service",
]
