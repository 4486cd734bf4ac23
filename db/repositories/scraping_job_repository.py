"""
Read-only repository for scraping job rows.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Select, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from db.models.scraping_job import ScrapingJob
from db.repositories.errors import StoreReadError
from db.repositories.product_repository import store_error_message


class ScrapingJobRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def count_for_user(self, user_id: str) -> int:
        stmt = select(func.count()).select_from(ScrapingJob).where(ScrapingJob.user_id == user_id)
        try:
            return int(self._session.scalar(stmt) or 0)
        except SQLAlchemyError as exc:
            raise StoreReadError(store_error_message(exc)) from exc

    def list_recent_for_user(
        self,
        user_id: str,
        *,
        since: datetime,
        limit: int = 10,
    ) -> list[ScrapingJob]:
        stmt: Select[tuple[ScrapingJob]] = (
            select(ScrapingJob)
            .where(ScrapingJob.user_id == user_id, ScrapingJob.created_at >= since)
            .order_by(ScrapingJob.created_at.desc())
            .limit(max(1, limit))
        )
        return self._scalars(stmt)

    def list_created_between(self, start: datetime, end: datetime) -> list[ScrapingJob]:
        """Jobs of every user created in ``[start, end)``."""
        stmt: Select[tuple[ScrapingJob]] = select(ScrapingJob).where(
            ScrapingJob.created_at >= start,
            ScrapingJob.created_at < end,
        )
        return self._scalars(stmt)

    def _scalars(self, stmt: Select[tuple[ScrapingJob]]) -> list[ScrapingJob]:
        try:
            return list(self._session.scalars(stmt).all())
        except SQLAlchemyError as exc:
            raise StoreReadError(store_error_message(exc)) from exc
