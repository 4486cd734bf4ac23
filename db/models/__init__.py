"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.product import (
    ProductStatus,
    ProductV1,
    ProductV2,
    TableTarget,
    product_model_for,
)
from db.models.scraping_job import ScrapingJob, ScrapingJobStatus

__all__ = [
    "ProductStatus",
    "ProductV1",
    "ProductV2",
    "ScrapingJob",
    "ScrapingJobStatus",
    "TableTarget",
    "product_model_for",
]
