"""
tests/test_config.py

Environment-driven settings. Caches are cleared around every test.
"""

from __future__ import annotations

import pytest

from app.config import (
    get_app_settings,
    get_digest_settings,
    get_ingestion_settings,
    get_stats_settings,
)

_CACHED = (get_app_settings, get_digest_settings, get_ingestion_settings, get_stats_settings)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch):
    for name in (
        "APP_ENV",
        "STATS_DIGEST_ENABLED",
        "STATS_DIGEST_INTERVAL_HOURS",
        "INGEST_DEFAULT_MARGIN_RATE",
        "INGEST_DEFAULT_TABLE",
        "STATS_PRODUCTS_TABLE",
    ):
        monkeypatch.delenv(name, raising=False)
    for getter in _CACHED:
        getter.cache_clear()
    yield
    for getter in _CACHED:
        getter.cache_clear()


class TestDigestSettings:
    def test_enabled_by_default_in_development(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_ENV", "development")

        settings = get_digest_settings()

        assert settings.enabled is True
        assert settings.interval_hours == 4.0

    @pytest.mark.parametrize("env", ["staging", "production"])
    def test_disabled_by_default_elsewhere(self, monkeypatch: pytest.MonkeyPatch, env: str) -> None:
        monkeypatch.setenv("APP_ENV", env)

        assert get_digest_settings().enabled is False

    def test_explicit_flag_overrides_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_ENV", "production")
        monkeypatch.setenv("STATS_DIGEST_ENABLED", "true")

        assert get_digest_settings().enabled is True

    def test_invalid_app_env_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_ENV", "qa")

        with pytest.raises(RuntimeError, match="APP_ENV"):
            get_app_settings()


class TestIngestionAndStatsSettings:
    def test_defaults(self) -> None:
        assert get_ingestion_settings().default_margin_rate == 40.0
        assert get_ingestion_settings().default_table == "v1"
        assert get_stats_settings().daily_window_days == 30

    def test_out_of_range_margin_falls_back(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("INGEST_DEFAULT_MARGIN_RATE", "250")

        assert get_ingestion_settings().default_margin_rate == 40.0

    def test_table_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STATS_PRODUCTS_TABLE", "V2")

        assert get_stats_settings().products_table == "v2"
