"""
db/models/product.py

Persisted marketplace products.

The same column layout is stored in two table variants, ``products_v1``
(legacy catalogue) and ``products_v2``. Each table enforces uniqueness of
``external_id`` on its own, which is what the ingestion upsert keys on.
"""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Any

from sqlalchemy import CheckConstraint, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import ARRAY, JSONB, UUID
from sqlalchemy.orm import Mapped, declared_attr, mapped_column

from db.base import Base, TimestampMixin

DEFAULT_CATEGORY = "General"
DEFAULT_MARGIN_RATE = 40.0
DEFAULT_SOURCING_TYPE = "US"


class ProductStatus:
    DRAFT = "draft"
    UPLOADED = "uploaded"
    ERROR = "error"

    ALL = (DRAFT, UPLOADED, ERROR)


class ProductColumns(TimestampMixin):
    """
    Columns shared by every product table variant.
    """

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    user_id: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    external_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        comment="Marketplace identifier, e.g. an ASIN",
    )
    source_url: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    images: Mapped[list[str]] = mapped_column(
        ARRAY(Text),
        nullable=False,
        default=list,
    )
    variants: Mapped[dict[str, Any] | None] = mapped_column(
        JSONB,
        nullable=True,
        comment='{"options": [...]} or null',
    )
    sourcing_type: Mapped[str] = mapped_column(
        String(8),
        nullable=False,
        default=DEFAULT_SOURCING_TYPE,
    )
    cost_price: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False)
    margin_rate: Mapped[float] = mapped_column(
        Numeric(5, 2, asdecimal=False),
        nullable=False,
        default=DEFAULT_MARGIN_RATE,
    )
    sale_price: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False)
    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=ProductStatus.DRAFT,
        index=True,
    )
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default=DEFAULT_CATEGORY,
    )
    review_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    rating: Mapped[float | None] = mapped_column(Numeric(3, 2, asdecimal=False), nullable=True)
    brand: Mapped[str | None] = mapped_column(Text, nullable=True)
    weight: Mapped[float | None] = mapped_column(Numeric(10, 3, asdecimal=False), nullable=True)

    @declared_attr.directive
    def __table_args__(cls) -> tuple[Any, ...]:
        return (
            UniqueConstraint("external_id"),
            CheckConstraint("status IN ('draft', 'uploaded', 'error')", name="valid_status"),
            CheckConstraint("cost_price > 0", name="positive_cost_price"),
            CheckConstraint("sale_price > 0", name="positive_sale_price"),
            CheckConstraint("margin_rate >= 0 AND margin_rate <= 100", name="valid_margin_rate"),
            CheckConstraint("rating IS NULL OR (rating >= 0 AND rating <= 5)", name="valid_rating"),
        )


class ProductV1(Base, ProductColumns):
    __tablename__ = "products_v1"


class ProductV2(Base, ProductColumns):
    __tablename__ = "products_v2"


class TableTarget(str, Enum):
    """Selects which product table variant an operation reads or writes."""

    V1 = "v1"
    V2 = "v2"


ProductModel = type[ProductV1] | type[ProductV2]

_MODELS_BY_TARGET: dict[TableTarget, ProductModel] = {
    TableTarget.V1: ProductV1,
    TableTarget.V2: ProductV2,
}


def product_model_for(target: TableTarget | str) -> ProductModel:
    """Return the ORM model backing *target*."""
    return _MODELS_BY_TARGET[TableTarget(target)]
