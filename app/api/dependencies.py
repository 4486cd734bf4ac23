"""
app/api/dependencies.py

Shared FastAPI dependencies.
"""

from __future__ import annotations

from fastapi import Depends, Header
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.schemas.common import ApiErrorResponse
from app.services.product_service import ProductService
from app.services.stats_service import StatsService, build_stats_service
from db.session import get_db

USER_ID_HEADER = "X-User-Id"

AUTH_REQUIRED_MESSAGE = "Authentication required."
SERVER_ERROR_MESSAGE = "An internal server error occurred."
PRODUCT_NOT_FOUND_MESSAGE = "Product not found."


def get_current_user_id(
    user_id: str | None = Header(default=None, alias=USER_ID_HEADER),
) -> str | None:
    """
    Return the caller's user id as resolved by the authentication layer in
    front of this service, or ``None`` for anonymous requests.
    """

    if user_id is None:
        return None
    stripped = user_id.strip()
    return stripped or None


def get_stats_service(db: Session = Depends(get_db)) -> StatsService:
    return build_stats_service(db)


def error_response(status_code: int, message: str) -> JSONResponse:
    """Build the ``{success: false, error}`` envelope."""
    return JSONResponse(
        status_code=status_code,
        content=ApiErrorResponse(error=message).model_dump(),
    )


def get_product_service() -> ProductService:
    return ProductService()
