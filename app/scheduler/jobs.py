"""
app/scheduler/jobs.py

APScheduler-based background task that posts the daily scraping digest.

Schedule
--------
  stats_digest: every 4 hours (``STATS_DIGEST_INTERVAL_HOURS``), first run
              immediately on start.

The digest only runs when enabled (by default: ``APP_ENV=development``).

Lifecycle
---------
``build_digest_scheduler()`` returns a :class:`DigestScheduler` handle, or
``None`` when the digest is disabled. The FastAPI lifespan in main.py owns
the handle: ``start()`` on boot, ``stop()`` on shutdown. Tests drive single
ticks through :meth:`DigestScheduler.trigger` or
:meth:`StatsDigestJob.run_once` without a running scheduler.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.base import BaseScheduler

from app.config import (
    DigestSettings,
    get_digest_settings,
    get_stats_settings,
    get_webhook_settings,
)
from app.domain.stats import JobDigest
from app.notifications.webhook import NotificationSink, WebhookNotificationSink
from app.services.stats_service import build_stats_service, format_digest_text
from db.session import session_scope

logger = logging.getLogger(__name__)

DIGEST_JOB_ID = "stats_digest"


def compute_digest_from_database() -> JobDigest:
    """Open a fresh session and compute today's digest."""
    with session_scope() as db:
        return build_stats_service(db, settings=get_stats_settings()).compute_daily_digest()


class StatsDigestJob:
    """
    One digest tick: compute today's job totals, format, send.

    A tick never raises. Query and delivery failures are logged and the
    tick is abandoned; the next scheduled tick starts from scratch.
    """

    def __init__(
        self,
        *,
        sink: NotificationSink,
        compute_digest: Callable[[], JobDigest] = compute_digest_from_database,
    ) -> None:
        self._sink = sink
        self._compute_digest = compute_digest

    def run_once(self) -> bool:
        """Run one tick. Returns ``True`` when the digest was handed to the sink."""
        logger.info("Scheduler: stats_digest starting")
        try:
            digest = self._compute_digest()
        except Exception as exc:  # noqa: BLE001
            logger.error("Scheduler: stats_digest query failed: %s", exc)
            return False

        try:
            self._sink.send(format_digest_text(digest))
        except Exception as exc:  # noqa: BLE001
            logger.error(
                "Scheduler: stats_digest delivery failed date=%s: %s",
                digest.report_date.isoformat(),
                exc,
            )
            return False

        logger.info(
            "Scheduler: stats_digest sent date=%s success=%d failed=%d",
            digest.report_date.isoformat(),
            digest.total_success,
            digest.total_failed,
        )
        return True


class DigestScheduler:
    """
    Owned handle for the periodic digest.

    Overlapping ticks are allowed to run side by side; they share no state.
    """

    def __init__(
        self,
        job: StatsDigestJob,
        *,
        interval_hours: float = 4.0,
        run_on_startup: bool = True,
        scheduler: BaseScheduler | None = None,
    ) -> None:
        self._job = job
        self._interval_hours = interval_hours
        self._run_on_startup = run_on_startup
        self._scheduler = scheduler or BackgroundScheduler(timezone="UTC")

    @property
    def running(self) -> bool:
        return bool(self._scheduler.running)

    def start(self) -> None:
        job_options: dict[str, Any] = {
            "trigger": "interval",
            "hours": self._interval_hours,
            "id": DIGEST_JOB_ID,
            "name": "Scraping stats digest",
            "replace_existing": True,
            "coalesce": False,
            "max_instances": 3,
            "misfire_grace_time": 600,
        }
        if self._run_on_startup:
            job_options["next_run_time"] = datetime.now(timezone.utc)

        self._scheduler.add_job(self._job.run_once, **job_options)
        self._scheduler.start()
        logger.info(
            "Scheduler: stats_digest scheduled every %s hours (run_on_startup=%s)",
            self._interval_hours,
            self._run_on_startup,
        )

    def stop(self, *, wait: bool = True) -> None:
        if self._scheduler.running:
            self._scheduler.shutdown(wait=wait)
            logger.info("Scheduler: stats_digest stopped")

    def trigger(self) -> bool:
        """Run one tick synchronously on the calling thread."""
        return self._job.run_once()


def build_digest_scheduler(
    settings: DigestSettings | None = None,
    *,
    sink: NotificationSink | None = None,
) -> DigestScheduler | None:
    """
    Build the digest scheduler from settings. Returns ``None`` when disabled.

    The returned handle is not started.
    """

    digest_settings = settings or get_digest_settings()
    if not digest_settings.enabled:
        logger.info("Scheduler: stats_digest disabled for this environment")
        return None

    job = StatsDigestJob(sink=sink or WebhookNotificationSink(settings=get_webhook_settings()))
    return DigestScheduler(
        job,
        interval_hours=digest_settings.interval_hours,
        run_on_startup=digest_settings.run_on_startup,
    )
