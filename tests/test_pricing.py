"""
tests/test_pricing.py

Pytest unit tests for sale price derivation and margin validation.

Pure functions only, no database.
"""

from __future__ import annotations

import math

import pytest

from app.services.pricing import (
    DEFAULT_MARGIN_RATE,
    compute_sale_price,
    round_half_up_cents,
    validate_margin_rate,
)


# ---------------------------------------------------------------------------
# compute_sale_price
# ---------------------------------------------------------------------------


class TestComputeSalePrice:
    def test_default_margin_is_forty_percent(self) -> None:
        assert DEFAULT_MARGIN_RATE == 40.0
        assert compute_sale_price(10.0) == 14.0

    @pytest.mark.parametrize(
        ("cost_price", "margin_rate", "expected"),
        [
            (10.0, 40.0, 14.0),
            (29.99, 40.0, 41.99),
            (33.33, 33.33, 44.44),
            (0.01, 40.0, 0.01),
            (100.0, 0.0, 100.0),
            (19.99, 100.0, 39.98),
        ],
    )
    def test_known_prices(self, cost_price: float, margin_rate: float, expected: float) -> None:
        assert compute_sale_price(cost_price, margin_rate) == pytest.approx(expected)

    def test_result_has_at_most_two_decimals(self) -> None:
        price = compute_sale_price(12.345, 17.5)
        assert round(price, 2) == price


class TestRoundHalfUpCents:
    def test_rounds_half_up_not_to_even(self) -> None:
        # 0.125 is exact in binary; round() would give 0.12.
        assert round_half_up_cents(0.125) == 0.13

    def test_rounds_down_below_half(self) -> None:
        assert round_half_up_cents(1.234) == 1.23


# ---------------------------------------------------------------------------
# validate_margin_rate
# ---------------------------------------------------------------------------


class TestValidateMarginRate:
    @pytest.mark.parametrize("rate", [0.0, 40.0, 100.0])
    def test_accepts_range_bounds(self, rate: float) -> None:
        assert validate_margin_rate(rate) == rate

    @pytest.mark.parametrize("rate", [-0.01, 100.01, math.nan, math.inf])
    def test_rejects_out_of_range(self, rate: float) -> None:
        with pytest.raises(ValueError):
            validate_margin_rate(rate)
