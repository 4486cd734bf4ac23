"""
app/services/pricing.py

Sale price derivation from a cost price and a margin rate.
"""

from __future__ import annotations

import math

DEFAULT_MARGIN_RATE = 40.0


def round_half_up_cents(value: float) -> float:
    """
    Round to two decimals, halves going up (``floor(x * 100 + 0.5) / 100``).

    ``round()`` is not used because it rounds halves to even.
    """

    return math.floor(value * 100 + 0.5) / 100


def compute_sale_price(cost_price: float, margin_rate: float = DEFAULT_MARGIN_RATE) -> float:
    """
    ``cost_price * (1 + margin_rate / 100)`` rounded to the cent.

    Does not check that ``cost_price`` is positive; callers that persist the
    result are responsible for that.
    """

    return round_half_up_cents(cost_price * (1 + margin_rate / 100))


def validate_margin_rate(margin_rate: float) -> float:
    """
    Return *margin_rate* if it is a finite percentage in ``[0, 100]``.

    Raises
    ------
    ValueError
        For NaN, infinities, or values outside the range.
    """

    if not math.isfinite(margin_rate) or not 0.0 <= margin_rate <= 100.0:
        raise ValueError(f"Margin rate must be between 0 and 100, got {margin_rate}.")
    return margin_rate
