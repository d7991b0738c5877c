"""Spend-to-points arithmetic.

A business converts a percentage of every purchase into cashback value; the
platform-wide money-points ratio turns that value into whole points.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

Number = Union[Decimal, int, float, str]

_ONE_HUNDRED = Decimal("100")


def _to_decimal(value: Number | None) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def calculate_cashback(amount: Number, conversion_rate: Number) -> Decimal:
    return _to_decimal(amount) * _to_decimal(conversion_rate) / _ONE_HUNDRED


def calculate_points(amount: Number, conversion_rate: Number, money_points_ratio: Number) -> int:
    """Whole points earned for ``amount``; halves round up, never negative."""

    amount_value = _to_decimal(amount)
    ratio = _to_decimal(money_points_ratio)
    if amount_value <= 0 or ratio <= 0:
        return 0
    raw = calculate_cashback(amount_value, conversion_rate) / ratio
    points = int(raw.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    return max(points, 0)


def estimate_points(
    amount: Number | None,
    conversion_rate: Number,
    money_points_ratio: Number,
    *,
    award_points: bool = True,
) -> int:
    if not award_points or amount in (None, ""):
        return 0
    return calculate_points(amount, conversion_rate, money_points_ratio)  # type: ignore[arg-type]


def implied_customer_spend(points_required: Number, conversion_rate: Number) -> Decimal:
    """Spend a customer needed to earn a reward, used as its return on investment."""

    rate = _to_decimal(conversion_rate)
    if rate <= 0:
        return Decimal("0")
    return _to_decimal(points_required) / (rate / _ONE_HUNDRED)


__all__ = [
    "calculate_cashback",
    "calculate_points",
    "estimate_points",
    "implied_customer_spend",
]
