"""
Schemas for the product ingestion endpoint.
"""

from __future__ import annotations

from pydantic import Field

from app.domain.product_ingestion import IngestionResult, ScrapedRecord
from app.schemas.common import CamelModel


class ScrapedRecordPayload(CamelModel):
    """
    One scraped listing. Only the shape is checked here; missing ids and
    unusable prices are reported per record by the ingestion service.
    """

    external_id: str = ""
    source_url: str = ""
    title: str = ""
    description: str | None = None
    images: list[str] = Field(default_factory=list)
    variants: list[str] | None = None
    cost_price: float | str | None = None
    category: str | None = None
    review_count: int | None = None
    rating: float | None = None
    brand: str | None = None
    weight: float | None = None

    def to_domain(self) -> ScrapedRecord:
        # Same coercion as scraper files: unparseable prices become None.
        return ScrapedRecord.from_mapping(self.model_dump())


class IngestRequest(CamelModel):
    records: list[ScrapedRecordPayload] = Field(default_factory=list)
    user_id: str | None = None
    margin_rate: float | None = Field(default=None, ge=0, le=100)


class IngestionFailureItem(CamelModel):
    external_id: str
    title: str
    error_reason: str


class IngestionResultData(CamelModel):
    total: int = Field(..., ge=0)
    saved: int = Field(..., ge=0)
    failed: int = Field(..., ge=0)
    errors: list[IngestionFailureItem] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: IngestionResult) -> IngestionResultData:
        return cls(
            total=result.total,
            saved=result.saved,
            failed=result.failed,
            errors=[
                IngestionFailureItem(
                    external_id=failure.external_id,
                    title=failure.title,
                    error_reason=failure.error_reason,
                )
                for failure in result.errors
            ],
        )


class IngestResponse(CamelModel):
    success: bool = True
    data: IngestionResultData
