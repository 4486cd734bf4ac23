"""
Repository-layer exceptions for the product and job stores.
"""

from __future__ import annotations


class StoreError(Exception):
    """Base exception for persistence failures."""


class StoreWriteError(StoreError):
    """Raised when the store rejects an insert, upsert, or update."""


class StoreReadError(StoreError):
    """Raised when a count or select against the store fails."""
