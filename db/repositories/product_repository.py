"""
db/repositories/product_repository.py

Persistence for product rows across both table variants.

The caller controls commit/rollback; this repository never commits.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from db.models.product import ProductV1, ProductV2, TableTarget, product_model_for
from db.repositories.errors import StoreReadError, StoreWriteError


def store_error_message(exc: SQLAlchemyError) -> str:
    """
    Return the driver's message for *exc*, without SQLAlchemy's statement dump.
    """

    original = getattr(exc, "orig", None)
    message = str(original) if original is not None else str(exc)
    return message.strip().splitlines()[0] if message.strip() else exc.__class__.__name__


class ProductRepository:
    """
    Reads and writes ``products_v1`` / ``products_v2`` rows.

    Upsert semantics: writing a row whose ``external_id`` already exists in
    the target table overwrites every supplied column in place, so repeated
    ingestion of the same listing never creates a second row.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def upsert_product(self, table_target: TableTarget, row: dict[str, Any]) -> None:
        """
        Insert *row* or update the existing row with the same ``external_id``.

        Raises
        ------
        StoreWriteError
            When the database rejects the statement.
        """
        model = product_model_for(table_target)
        stmt = insert(model).values(id=uuid.uuid4(), **row)
        update_columns = {
            column: stmt.excluded[column]
            for column in row
            if column != "external_id"
        }
        update_columns["updated_at"] = datetime.now(timezone.utc)
        stmt = stmt.on_conflict_do_update(
            index_elements=[model.external_id],
            set_=update_columns,
        )
        try:
            self._session.execute(stmt)
        except SQLAlchemyError as exc:
            raise StoreWriteError(store_error_message(exc)) from exc

    def update_fields(
        self,
        product: ProductV1 | ProductV2,
        changes: Mapping[str, Any],
    ) -> None:
        """Apply *changes* (column name -> value) to a loaded row and flush."""
        for column, value in changes.items():
            setattr(product, column, value)
        try:
            self._session.flush()
        except SQLAlchemyError as exc:
            raise StoreWriteError(store_error_message(exc)) from exc

    def delete_for_user(
        self,
        table_target: TableTarget,
        *,
        product_id: uuid.UUID,
        user_id: str,
    ) -> int:
        """Delete the row if *user_id* owns it. Returns the number of rows removed."""
        model = product_model_for(table_target)
        stmt = delete(model).where(model.id == product_id, model.user_id == user_id)
        try:
            result = self._session.execute(stmt)
        except SQLAlchemyError as exc:
            raise StoreWriteError(store_error_message(exc)) from exc
        return int(result.rowcount or 0)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_for_user(
        self,
        table_target: TableTarget,
        *,
        product_id: uuid.UUID,
        user_id: str,
    ) -> ProductV1 | ProductV2 | None:
        model = product_model_for(table_target)
        stmt = select(model).where(model.id == product_id, model.user_id == user_id)
        try:
            return self._session.scalars(stmt).one_or_none()
        except SQLAlchemyError as exc:
            raise StoreReadError(store_error_message(exc)) from exc

    def count_for_user(
        self,
        table_target: TableTarget,
        user_id: str,
        *,
        status: str | None = None,
    ) -> int:
        model = product_model_for(table_target)
        stmt = select(func.count()).select_from(model).where(model.user_id == user_id)
        if status is not None:
            stmt = stmt.where(model.status == status)
        try:
            return int(self._session.scalar(stmt) or 0)
        except SQLAlchemyError as exc:
            raise StoreReadError(store_error_message(exc)) from exc

    def list_for_user(
        self,
        table_target: TableTarget,
        user_id: str,
        *,
        status: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[ProductV1 | ProductV2]:
        """One page of the user's products, newest first."""
        model = product_model_for(table_target)
        stmt = select(model).where(model.user_id == user_id)
        if status is not None:
            stmt = stmt.where(model.status == status)
        stmt = (
            stmt.order_by(model.created_at.desc(), model.id)
            .limit(max(1, limit))
            .offset(max(0, offset))
        )
        try:
            return list(self._session.scalars(stmt).all())
        except SQLAlchemyError as exc:
            raise StoreReadError(store_error_message(exc)) from exc

    def list_statuses_for_user(self, table_target: TableTarget, user_id: str) -> list[str]:
        """Return the raw ``status`` value of every row owned by *user_id*."""
        model = product_model_for(table_target)
        stmt = select(model.status).where(model.user_id == user_id)
        try:
            return list(self._session.scalars(stmt).all())
        except SQLAlchemyError as exc:
            raise StoreReadError(store_error_message(exc)) from exc

    def list_created_since(
        self,
        table_target: TableTarget,
        user_id: str,
        since: datetime,
    ) -> list[datetime]:
        """Return ``created_at`` for rows created at or after *since*, oldest first."""
        model = product_model_for(table_target)
        stmt = (
            select(model.created_at)
            .where(model.user_id == user_id, model.created_at >= since)
            .order_by(model.created_at.asc())
        )
        try:
            return list(self._session.scalars(stmt).all())
        except SQLAlchemyError as exc:
            raise StoreReadError(store_error_message(exc)) from exc
