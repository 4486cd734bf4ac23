"""
app/domain/products.py

Read models for the product catalogue endpoints.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ProductPage:
    """
    One page of a user's products, newest first.

    ``total`` counts every row matching the filter, not just this page.
    """

    items: Sequence[Any]
    total: int
    limit: int
    offset: int
