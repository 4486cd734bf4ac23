"""
app/api/routers/products.py

Product ingestion and catalogue endpoints.
"""

from __future__ import annotations

import logging
import uuid
from typing import Literal

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.api.dependencies import (
    AUTH_REQUIRED_MESSAGE,
    PRODUCT_NOT_FOUND_MESSAGE,
    SERVER_ERROR_MESSAGE,
    error_response,
    get_current_user_id,
    get_product_service,
)
from app.config import get_ingestion_settings
from app.domain.product_ingestion import TableTarget
from app.schemas.common import ApiErrorResponse, ApiMessageResponse
from app.schemas.product_ingestion import IngestRequest, IngestResponse, IngestionResultData
from app.schemas.products import (
    ProductItem,
    ProductListData,
    ProductListResponse,
    ProductResponse,
    ProductUpdateRequest,
)
from app.services.product_ingestion_service import (
    ProductIngestionService,
    UnauthenticatedError,
    get_product_ingestion_service,
)
from app.services.product_service import MAX_PAGE_SIZE, ProductNotFoundError, ProductService
from db.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/products", tags=["products"])

_ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ApiErrorResponse},
    status.HTTP_401_UNAUTHORIZED: {"model": ApiErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ApiErrorResponse},
}
_ITEM_ERROR_RESPONSES = {
    **_ERROR_RESPONSES,
    status.HTTP_404_NOT_FOUND: {"model": ApiErrorResponse},
}


@router.post("/ingest", response_model=IngestResponse, responses=_ERROR_RESPONSES)
def ingest_products(
    body: IngestRequest,
    version: TableTarget | None = Query(default=None, description="Target table, v1 or v2"),
    current_user_id: str | None = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    ingestion_service: ProductIngestionService = Depends(get_product_ingestion_service),
) -> IngestResponse | JSONResponse:
    """
    Upsert a batch of scraped records.

    Per-record failures are reported inside the result and never fail the
    request. ``userId`` in the body takes precedence over the caller identity.
    """

    table_target = version or TableTarget(get_ingestion_settings().default_table)
    try:
        result = ingestion_service.ingest(
            [record.to_domain() for record in body.records],
            db=db,
            user_id=body.user_id or current_user_id,
            table_target=table_target,
            margin_rate=body.margin_rate,
        )
    except UnauthenticatedError:
        return error_response(status.HTTP_401_UNAUTHORIZED, AUTH_REQUIRED_MESSAGE)
    except ValueError as exc:
        return error_response(status.HTTP_400_BAD_REQUEST, str(exc))
    except Exception:
        logger.exception("Product ingestion failed")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, SERVER_ERROR_MESSAGE)

    return IngestResponse(data=IngestionResultData.from_result(result))


@router.get("", response_model=ProductListResponse, responses=_ERROR_RESPONSES)
def list_products(
    limit: int = Query(default=50, ge=1, le=MAX_PAGE_SIZE),
    offset: int = Query(default=0, ge=0),
    status_filter: Literal["draft", "uploaded", "error"] | None = Query(default=None, alias="status"),
    version: TableTarget = Query(default=TableTarget.V2, description="Product table, v1 or v2"),
    user_id: str | None = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    product_service: ProductService = Depends(get_product_service),
) -> ProductListResponse | JSONResponse:
    """
    The caller's products, newest first, with the total for pagination.
    """

    if user_id is None:
        return error_response(status.HTTP_401_UNAUTHORIZED, AUTH_REQUIRED_MESSAGE)

    try:
        page = product_service.list_products(
            db=db,
            user_id=user_id,
            table_target=version,
            status=status_filter,
            limit=limit,
            offset=offset,
        )
    except ValueError as exc:
        return error_response(status.HTTP_400_BAD_REQUEST, str(exc))
    except Exception:
        logger.exception("Product listing failed user_id=%s", user_id)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, SERVER_ERROR_MESSAGE)

    return ProductListResponse(data=ProductListData.from_page(page))


@router.get("/{product_id}", response_model=ProductResponse, responses=_ITEM_ERROR_RESPONSES)
def get_product(
    product_id: uuid.UUID,
    version: TableTarget = Query(default=TableTarget.V2, description="Product table, v1 or v2"),
    user_id: str | None = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    product_service: ProductService = Depends(get_product_service),
) -> ProductResponse | JSONResponse:
    if user_id is None:
        return error_response(status.HTTP_401_UNAUTHORIZED, AUTH_REQUIRED_MESSAGE)

    try:
        product = product_service.get_product(
            db=db,
            user_id=user_id,
            product_id=product_id,
            table_target=version,
        )
    except ProductNotFoundError:
        return error_response(status.HTTP_404_NOT_FOUND, PRODUCT_NOT_FOUND_MESSAGE)
    except Exception:
        logger.exception("Product lookup failed product_id=%s", product_id)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, SERVER_ERROR_MESSAGE)

    return ProductResponse(data=ProductItem.from_row(product))


@router.patch("/{product_id}", response_model=ProductResponse, responses=_ITEM_ERROR_RESPONSES)
def update_product(
    product_id: uuid.UUID,
    body: ProductUpdateRequest,
    version: TableTarget = Query(default=TableTarget.V2, description="Product table, v1 or v2"),
    user_id: str | None = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    product_service: ProductService = Depends(get_product_service),
) -> ProductResponse | JSONResponse:
    """
    Edit margin rate, title, description or status.

    A new margin rate recomputes and stores the sale price.
    """

    if user_id is None:
        return error_response(status.HTTP_401_UNAUTHORIZED, AUTH_REQUIRED_MESSAGE)

    try:
        product = product_service.update_product(
            db=db,
            user_id=user_id,
            product_id=product_id,
            table_target=version,
            margin_rate=body.margin_rate,
            title=body.title,
            description=body.description,
            status=body.status,
        )
    except ProductNotFoundError:
        return error_response(status.HTTP_404_NOT_FOUND, PRODUCT_NOT_FOUND_MESSAGE)
    except ValueError as exc:
        return error_response(status.HTTP_400_BAD_REQUEST, str(exc))
    except Exception:
        logger.exception("Product update failed product_id=%s", product_id)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, SERVER_ERROR_MESSAGE)

    return ProductResponse(data=ProductItem.from_row(product))


@router.delete("/{product_id}", response_model=ApiMessageResponse, responses=_ITEM_ERROR_RESPONSES)
def delete_product(
    product_id: uuid.UUID,
    version: TableTarget = Query(default=TableTarget.V2, description="Product table, v1 or v2"),
    user_id: str | None = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    product_service: ProductService = Depends(get_product_service),
) -> ApiMessageResponse | JSONResponse:
    if user_id is None:
        return error_response(status.HTTP_401_UNAUTHORIZED, AUTH_REQUIRED_MESSAGE)

    try:
        product_service.delete_product(
            db=db,
            user_id=user_id,
            product_id=product_id,
            table_target=version,
        )
    except ProductNotFoundError:
        return error_response(status.HTTP_404_NOT_FOUND, PRODUCT_NOT_FOUND_MESSAGE)
    except Exception:
        logger.exception("Product delete failed product_id=%s", product_id)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, SERVER_ERROR_MESSAGE)

    return ApiMessageResponse(message="Product deleted.")
