"""
Repository layer exports.
"""

from db.repositories.errors import StoreError, StoreReadError, StoreWriteError
from db.repositories.product_repository import ProductRepository
from db.repositories.scraping_job_repository import ScrapingJobRepository

__all__ = [
    "ProductRepository",
    "ScrapingJobRepository",
    "StoreError",
    "StoreReadError",
    "StoreWriteError",
]
