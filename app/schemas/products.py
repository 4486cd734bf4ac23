"""
Schemas for the product catalogue endpoints.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Literal

from pydantic import Field

from app.domain.products import ProductPage
from app.schemas.common import CamelModel


class ProductItem(CamelModel):
    id: uuid.UUID
    user_id: str
    external_id: str
    source_url: str
    title: str
    description: str | None = None
    images: list[str] = Field(default_factory=list)
    variants: dict[str, Any] | None = None
    sourcing_type: str
    cost_price: float
    margin_rate: float
    sale_price: float
    status: str
    error_message: str | None = None
    category: str
    review_count: int | None = None
    rating: float | None = None
    brand: str | None = None
    weight: float | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_row(cls, row: Any) -> ProductItem:
        return cls(
            id=row.id,
            user_id=row.user_id,
            external_id=row.external_id,
            source_url=row.source_url,
            title=row.title,
            description=row.description,
            images=list(row.images or []),
            variants=row.variants,
            sourcing_type=row.sourcing_type,
            cost_price=float(row.cost_price),
            margin_rate=float(row.margin_rate),
            sale_price=float(row.sale_price),
            status=row.status,
            error_message=row.error_message,
            category=row.category,
            review_count=row.review_count,
            rating=row.rating,
            brand=row.brand,
            weight=row.weight,
            created_at=getattr(row, "created_at", None),
            updated_at=getattr(row, "updated_at", None),
        )


class ProductResponse(CamelModel):
    success: bool = True
    data: ProductItem


class ProductListData(CamelModel):
    products: list[ProductItem]
    total: int = Field(..., ge=0)
    limit: int = Field(..., ge=1)
    offset: int = Field(..., ge=0)

    @classmethod
    def from_page(cls, page: ProductPage) -> ProductListData:
        return cls(
            products=[ProductItem.from_row(row) for row in page.items],
            total=page.total,
            limit=page.limit,
            offset=page.offset,
        )


class ProductListResponse(CamelModel):
    success: bool = True
    data: ProductListData


class ProductUpdateRequest(CamelModel):
    """Partial edit. Omitted fields are left unchanged."""

    margin_rate: float | None = Field(default=None, ge=0, le=100)
    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    status: Literal["draft", "uploaded", "error"] | None = None
