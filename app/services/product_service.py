"""
app/services/product_service.py

Per-user product catalogue operations: listing, lookup, edits and deletion.

Every operation is scoped to the owning user; a product owned by someone
else behaves exactly like a missing one. Changing the margin rate always
recomputes and stores the sale price in the same write.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any

from sqlalchemy.orm import Session

from app.domain.product_ingestion import TableTarget
from app.domain.products import ProductPage
from app.services.pricing import compute_sale_price, validate_margin_rate
from db.models.product import ProductStatus, ProductV1, ProductV2
from db.repositories.errors import StoreWriteError
from db.repositories.product_repository import ProductRepository

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 200


class ProductNotFoundError(LookupError):
    """
    Raised when the product does not exist or belongs to another user.
    """


def validate_status(status: str) -> str:
    if status not in ProductStatus.ALL:
        raise ValueError(
            f"Status must be one of {', '.join(ProductStatus.ALL)}, got {status!r}."
        )
    return status


class ProductService:
    """
    Reads and edits persisted products for one caller at a time.

    The service commits on success and rolls back when a write is rejected.
    """

    def list_products(
        self,
        *,
        db: Session,
        user_id: str,
        table_target: TableTarget = TableTarget.V2,
        status: str | None = None,
        limit: int = DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> ProductPage:
        """
        Raises
        ------
        ValueError
            For an unknown status filter or an out-of-range page.
        """

        if status is not None:
            validate_status(status)
        if not 1 <= limit <= MAX_PAGE_SIZE:
            raise ValueError(f"limit must be between 1 and {MAX_PAGE_SIZE}, got {limit}.")
        if offset < 0:
            raise ValueError(f"offset must not be negative, got {offset}.")

        repository = ProductRepository(db)
        total = repository.count_for_user(table_target, user_id, status=status)
        items = repository.list_for_user(
            table_target,
            user_id,
            status=status,
            limit=limit,
            offset=offset,
        )
        logger.info(
            "Products listed user_id=%s table=%s status=%s returned=%d total=%d",
            user_id,
            TableTarget(table_target).value,
            status or "all",
            len(items),
            total,
        )
        return ProductPage(items=items, total=total, limit=limit, offset=offset)

    def get_product(
        self,
        *,
        db: Session,
        user_id: str,
        product_id: uuid.UUID,
        table_target: TableTarget = TableTarget.V2,
    ) -> ProductV1 | ProductV2:
        product = ProductRepository(db).get_for_user(
            table_target, product_id=product_id, user_id=user_id
        )
        if product is None:
            raise ProductNotFoundError(f"Product {product_id} not found.")
        return product

    def update_product(
        self,
        *,
        db: Session,
        user_id: str,
        product_id: uuid.UUID,
        table_target: TableTarget = TableTarget.V2,
        margin_rate: float | None = None,
        title: str | None = None,
        description: str | None = None,
        status: str | None = None,
    ) -> ProductV1 | ProductV2:
        """
        Apply the given edits. Fields left as ``None`` are not touched.

        Raises
        ------
        ValueError
            When *margin_rate* is outside ``[0, 100]`` or *status* is unknown.
        ProductNotFoundError
            When no row with *product_id* is owned by *user_id*.
        StoreWriteError
            When the update is rejected; the session is rolled back.
        """

        changes: dict[str, Any] = {}
        if margin_rate is not None:
            changes["margin_rate"] = validate_margin_rate(margin_rate)
        if status is not None:
            changes["status"] = validate_status(status)
        if title is not None:
            changes["title"] = title
        if description is not None:
            changes["description"] = description

        repository = ProductRepository(db)
        product = repository.get_for_user(table_target, product_id=product_id, user_id=user_id)
        if product is None:
            raise ProductNotFoundError(f"Product {product_id} not found.")

        if "margin_rate" in changes:
            changes["sale_price"] = compute_sale_price(product.cost_price, changes["margin_rate"])

        if not changes:
            return product

        try:
            repository.update_fields(product, changes)
            db.commit()
        except StoreWriteError:
            db.rollback()
            raise

        logger.info(
            "Product updated product_id=%s table=%s fields=%s",
            product_id,
            TableTarget(table_target).value,
            ",".join(sorted(changes)),
        )
        return product

    def update_margin_rate(
        self,
        *,
        db: Session,
        user_id: str,
        product_id: uuid.UUID,
        margin_rate: float,
        table_target: TableTarget = TableTarget.V2,
    ) -> ProductV1 | ProductV2:
        """Store a new margin rate and the sale price recomputed from it."""
        return self.update_product(
            db=db,
            user_id=user_id,
            product_id=product_id,
            table_target=table_target,
            margin_rate=margin_rate,
        )

    def delete_product(
        self,
        *,
        db: Session,
        user_id: str,
        product_id: uuid.UUID,
        table_target: TableTarget = TableTarget.V2,
    ) -> None:
        try:
            deleted = ProductRepository(db).delete_for_user(
                table_target, product_id=product_id, user_id=user_id
            )
            if not deleted:
                db.rollback()
                raise ProductNotFoundError(f"Product {product_id} not found.")
            db.commit()
        except StoreWriteError:
            db.rollback()
            raise

        logger.info(
            "Product deleted product_id=%s table=%s",
            product_id,
            TableTarget(table_target).value,
        )
