"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from db.config import load_env_files

_ALLOWED_APP_ENVS = {"development", "staging", "production"}

# The scheduled digest only runs in this mode unless explicitly overridden.
DIGEST_APP_ENV = "development"


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _require_app_env() -> str:
    """
    Read and validate APP_ENV, defaulting to development.
    """

    _load_env_once()
    raw = os.getenv("APP_ENV", "development")
    env = raw.strip().lower() or "development"
    if env not in _ALLOWED_APP_ENVS:
        raise RuntimeError(
            f"APP_ENV '{raw.strip()}' is not valid. "
            f"Allowed values: {sorted(_ALLOWED_APP_ENVS)}."
        )
    return env


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None or not raw_value.strip():
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


def _get_table_env(name: str, default: str) -> str:
    value = _get_str_env(name, default).lower()
    return value if value in {"v1", "v2"} else default


@dataclass(frozen=True)
class AppSettings:
    """
    Top-level application mode settings.
    """

    env: str

    @property
    def is_development(self) -> bool:
        return self.env == DIGEST_APP_ENV


@dataclass(frozen=True)
class IngestionSettings:
    """
    Runtime settings for scraped product ingestion.
    """

    default_margin_rate: float = 40.0
    default_table: str = "v1"


@dataclass(frozen=True)
class StatsSettings:
    """
    Windows and limits for dashboard statistics.
    """

    daily_window_days: int = 30
    recent_job_days: int = 7
    recent_job_limit: int = 10
    products_table: str = "v1"


@dataclass(frozen=True)
class DigestSettings:
    """
    Scheduled job-digest settings.
    """

    enabled: bool = False
    interval_hours: float = 4.0
    run_on_startup: bool = True


@dataclass(frozen=True)
class WebhookSettings:
    """
    Chat webhook used as the operator notification channel.
    """

    url: str | None = None
    timeout_seconds: float = 10.0


@lru_cache(maxsize=1)
def get_app_settings() -> AppSettings:
    """
    Return cached application settings.

    Raises RuntimeError if APP_ENV holds an unknown value.
    """

    return AppSettings(env=_require_app_env())


@lru_cache(maxsize=1)
def get_ingestion_settings() -> IngestionSettings:
    margin_rate = _get_float_env("INGEST_DEFAULT_MARGIN_RATE", 40.0)
    if not 0.0 <= margin_rate <= 100.0:
        margin_rate = 40.0
    return IngestionSettings(
        default_margin_rate=margin_rate,
        default_table=_get_table_env("INGEST_DEFAULT_TABLE", "v1"),
    )


@lru_cache(maxsize=1)
def get_stats_settings() -> StatsSettings:
    return StatsSettings(
        daily_window_days=max(1, _get_int_env("STATS_DAILY_WINDOW_DAYS", 30)),
        recent_job_days=max(1, _get_int_env("STATS_RECENT_JOB_DAYS", 7)),
        recent_job_limit=max(1, _get_int_env("STATS_RECENT_JOB_LIMIT", 10)),
        products_table=_get_table_env("STATS_PRODUCTS_TABLE", "v1"),
    )


@lru_cache(maxsize=1)
def get_digest_settings() -> DigestSettings:
    """
    Return digest settings. The digest defaults to on only in development.
    """

    return DigestSettings(
        enabled=_get_bool_env("STATS_DIGEST_ENABLED", get_app_settings().is_development),
        interval_hours=max(0.01, _get_float_env("STATS_DIGEST_INTERVAL_HOURS", 4.0)),
        run_on_startup=_get_bool_env("STATS_DIGEST_RUN_ON_STARTUP", True),
    )


@lru_cache(maxsize=1)
def get_webhook_settings() -> WebhookSettings:
    return WebhookSettings(
        url=_get_optional_str_env("DISCORD_WEBHOOK_URL"),
        timeout_seconds=max(1.0, _get_float_env("WEBHOOK_TIMEOUT_SECONDS", 10.0)),
    )
