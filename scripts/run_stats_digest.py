"""
Run the scraping stats digest from CLI.

Without ``--once`` the process keeps the digest schedule alive until it
receives SIGINT or SIGTERM.
"""

from __future__ import annotations

import argparse
import logging
import os
import signal
import threading

from app.config import get_digest_settings, get_webhook_settings
from app.notifications import WebhookNotificationSink
from app.scheduler.jobs import DigestScheduler, StatsDigestJob
from db.config import load_env_files


def main() -> int:
    parser = argparse.ArgumentParser(description="Send the scraping stats digest.")
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single digest tick and exit.",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Run even when STATS_DIGEST_ENABLED resolves to false.",
    )
    args = parser.parse_args()

    load_env_files()
    logging.basicConfig(
        level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").strip().upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    log = logging.getLogger("run_stats_digest")

    settings = get_digest_settings()
    if not settings.enabled and not args.force:
        log.info("Stats digest is disabled; pass --force to run anyway")
        return 0

    job = StatsDigestJob(sink=WebhookNotificationSink(settings=get_webhook_settings()))
    if args.once:
        return 0 if job.run_once() else 1

    scheduler = DigestScheduler(
        job,
        interval_hours=settings.interval_hours,
        run_on_startup=settings.run_on_startup,
    )
    stop_requested = threading.Event()

    def _handle_signal(signum: int, _frame: object) -> None:
        log.info("Received signal %s, shutting down", signum)
        stop_requested.set()

    signal.signal(signal.SIGINT, _handle_signal)
    signal.signal(signal.SIGTERM, _handle_signal)

    scheduler.start()
    try:
        stop_requested.wait()
    finally:
        scheduler.stop(wait=True)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
