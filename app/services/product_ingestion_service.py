"""
app/services/product_ingestion_service.py

Validates, prices and upserts batches of scraped product records.

Records are written one at a time, each in its own transaction, so a bad
record or a rejected write only costs that record. The batch result lists
every failed record with the reason it was not saved.
"""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable, Sequence
from functools import lru_cache
from typing import Any, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import get_ingestion_settings
from app.domain.product_ingestion import IngestionResult, ScrapedRecord, TableTarget
from app.logging_utils import log_event
from app.services.pricing import compute_sale_price, round_half_up_cents, validate_margin_rate
from db.models.product import DEFAULT_CATEGORY, DEFAULT_SOURCING_TYPE, ProductStatus
from db.repositories.errors import StoreWriteError
from db.repositories.product_repository import ProductRepository, store_error_message

logger = logging.getLogger(__name__)

IdentityProvider = Callable[[], str | None]


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class UnauthenticatedError(RuntimeError):
    """
    Raised before any record is processed when no user identity resolves.
    """


class InvalidRecordError(ValueError):
    """
    Raised for a record that cannot be persisted as-is (e.g. non-positive
    cost price). Local to that record; the batch continues.
    """


# ---------------------------------------------------------------------------
# Store boundary
# ---------------------------------------------------------------------------


class ProductStore(Protocol):
    def upsert_product(self, table_target: TableTarget, row: dict[str, Any]) -> None:
        ...


def _default_store_factory(session: Session) -> ProductStore:
    return ProductRepository(session)


# ---------------------------------------------------------------------------
# Row mapping
# ---------------------------------------------------------------------------


def validate_record(record: ScrapedRecord) -> None:
    if not record.external_id or not record.external_id.strip():
        raise InvalidRecordError("Missing external id")
    price = record.cost_price
    # Prices are stored to the cent; anything that rounds to 0.00 is not a price.
    if price is None or not math.isfinite(price) or round_half_up_cents(price) <= 0:
        raise InvalidRecordError(f"Invalid price: {price}")


def build_product_row(
    record: ScrapedRecord,
    *,
    user_id: str,
    margin_rate: float,
) -> dict[str, Any]:
    """
    Map a validated record onto the product table columns.

    Every column is written on conflict too, which resets ``status`` to
    draft and clears ``error_message`` for re-ingested listings.
    """

    variants = {"options": list(record.variants)} if record.variants is not None else None
    # Price from the cent-rounded cost so the stored pair satisfies the sale price formula.
    cost_price = round_half_up_cents(record.cost_price)
    return {
        "user_id": user_id,
        "external_id": record.external_id,
        "source_url": record.source_url,
        "title": record.title,
        "description": record.description or None,
        "images": list(record.images),
        "variants": variants,
        "sourcing_type": DEFAULT_SOURCING_TYPE,
        "cost_price": cost_price,
        "margin_rate": margin_rate,
        "sale_price": compute_sale_price(cost_price, margin_rate),
        "status": ProductStatus.DRAFT,
        "error_message": None,
        "category": record.category or DEFAULT_CATEGORY,
        "review_count": record.review_count,
        "rating": record.rating,
        "brand": record.brand,
        "weight": record.weight,
    }


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class ProductIngestionService:
    """
    Turns scraped records into product rows.

    Parameters
    ----------
    margin_rate:
        Margin applied when a call does not pass its own. Defaults to 40.
    identity_provider:
        Fallback used when ``ingest`` is called without ``user_id``, e.g. a
        session lookup. Returning ``None`` means unauthenticated.
    store_factory:
        Builds the product store from the session. Defaults to
        :class:`ProductRepository`.
    """

    def __init__(
        self,
        *,
        margin_rate: float = 40.0,
        identity_provider: IdentityProvider | None = None,
        store_factory: Callable[[Session], ProductStore] = _default_store_factory,
    ) -> None:
        self._margin_rate = validate_margin_rate(margin_rate)
        self._identity_provider = identity_provider
        self._store_factory = store_factory

    def ingest(
        self,
        records: Sequence[ScrapedRecord],
        *,
        db: Session,
        user_id: str | None = None,
        table_target: TableTarget = TableTarget.V1,
        margin_rate: float | None = None,
    ) -> IngestionResult:
        """
        Persist *records* into *table_target* and return the batch tally.

        Raises
        ------
        UnauthenticatedError
            When no user id is passed and the identity provider yields none.
        ValueError
            When *margin_rate* is outside ``[0, 100]``.
        """

        owner = self._resolve_user_id(user_id)
        rate = self._margin_rate if margin_rate is None else validate_margin_rate(margin_rate)
        target = TableTarget(table_target)
        store = self._store_factory(db)
        result = IngestionResult(total=len(records))
        started = time.monotonic()

        logger.info(
            "Ingestion started user_id=%s table=%s records=%d",
            owner,
            target.value,
            len(records),
        )

        for record in records:
            try:
                validate_record(record)
                store.upsert_product(
                    target,
                    build_product_row(record, user_id=owner, margin_rate=rate),
                )
                db.commit()
            except InvalidRecordError as exc:
                logger.warning(
                    "Skipping record external_id=%s title=%r: %s",
                    record.external_id,
                    record.title,
                    exc,
                )
                result.record_failure(record, str(exc))
            except StoreWriteError as exc:
                db.rollback()
                logger.error(
                    "Store rejected record external_id=%s title=%r: %s",
                    record.external_id,
                    record.title,
                    exc,
                )
                result.record_failure(record, str(exc))
            except SQLAlchemyError as exc:
                db.rollback()
                reason = store_error_message(exc)
                logger.error(
                    "Commit failed for record external_id=%s: %s",
                    record.external_id,
                    reason,
                )
                result.record_failure(record, reason)
            except Exception as exc:  # noqa: BLE001
                db.rollback()
                logger.exception(
                    "Unexpected failure for record external_id=%s",
                    record.external_id,
                )
                result.record_failure(record, str(exc) or "Unknown error")
            else:
                result.record_saved()

        log_event(
            logger,
            logging.INFO,
            "product_ingestion_completed",
            user_id=owner,
            table=target.value,
            total=result.total,
            saved=result.saved,
            failed=result.failed,
            duration_ms=round((time.monotonic() - started) * 1000),
        )
        for index, failure in enumerate(result.errors, start=1):
            logger.info(
                "Failed record %d: external_id=%s title=%r reason=%s",
                index,
                failure.external_id,
                failure.title,
                failure.error_reason,
            )
        return result

    def _resolve_user_id(self, user_id: str | None) -> str:
        resolved = user_id.strip() if user_id else None
        if not resolved and self._identity_provider is not None:
            provided = self._identity_provider()
            resolved = provided.strip() if provided else None
        if not resolved:
            logger.error("Ingestion rejected: no authenticated user")
            raise UnauthenticatedError("User not authenticated")
        return resolved


@lru_cache(maxsize=1)
def get_product_ingestion_service() -> ProductIngestionService:
    """
    Build and cache the ingestion service from settings.
    """

    settings = get_ingestion_settings()
    return ProductIngestionService(margin_rate=settings.default_margin_rate)
