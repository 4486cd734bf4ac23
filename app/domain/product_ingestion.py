"""
app/domain/product_ingestion.py

Domain models for scraped product ingestion.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from db.models.product import TableTarget

__all__ = [
    "IngestionFailure",
    "IngestionResult",
    "ScrapedRecord",
    "TableTarget",
]


def _optional_tuple(value: Sequence[str] | None) -> tuple[str, ...] | None:
    return tuple(value) if value is not None else None


def _optional_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class ScrapedRecord:
    """
    One product listing as harvested from the marketplace.

    ``external_id`` is the only identity a record has; two records with the
    same id describe the same listing.
    """

    external_id: str
    source_url: str
    title: str
    cost_price: float | None
    description: str | None = None
    images: tuple[str, ...] = ()
    variants: tuple[str, ...] | None = None
    category: str | None = None
    review_count: int | None = None
    rating: float | None = None
    brand: str | None = None
    weight: float | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ScrapedRecord:
        """
        Build a record from a scraper payload using either camelCase
        (``externalId``, ``costPrice``) or snake_case keys.
        """

        def pick(snake: str, camel: str, default: Any = None) -> Any:
            if snake in data:
                return data[snake]
            return data.get(camel, default)

        return cls(
            external_id=str(pick("external_id", "externalId", "")),
            source_url=str(pick("source_url", "sourceUrl", "")),
            title=str(pick("title", "title", "")),
            cost_price=_optional_float(pick("cost_price", "costPrice")),
            description=pick("description", "description"),
            images=tuple(pick("images", "images", ()) or ()),
            variants=_optional_tuple(pick("variants", "variants")),
            category=pick("category", "category"),
            review_count=pick("review_count", "reviewCount"),
            rating=pick("rating", "rating"),
            brand=pick("brand", "brand"),
            weight=pick("weight", "weight"),
        )


@dataclass(frozen=True)
class IngestionFailure:
    """
    Why one record of a batch was not persisted.
    """

    external_id: str
    title: str
    error_reason: str


@dataclass
class IngestionResult:
    """
    Running tally for one ingestion batch.

    Once the batch loop finishes, ``saved + failed == total``.
    """

    total: int
    saved: int = 0
    failed: int = 0
    errors: list[IngestionFailure] = field(default_factory=list)

    def record_saved(self) -> None:
        self.saved += 1

    def record_failure(self, record: ScrapedRecord, reason: str) -> None:
        self.failed += 1
        self.errors.append(
            IngestionFailure(
                external_id=record.external_id,
                title=record.title,
                error_reason=reason,
            )
        )

    @property
    def is_complete(self) -> bool:
        return self.saved + self.failed == self.total
