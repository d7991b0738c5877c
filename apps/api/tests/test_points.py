from decimal import Decimal

import pytest

from zawadii_api.core.errors import ValidationFailed
from zawadii_api.core.settings import settings
from zawadii_api.services.loyalty import (
    LoyaltySettingsService,
    calculate_cashback,
    calculate_points,
    estimate_points,
    implied_customer_spend,
)


def test_cashback_is_percentage_of_amount() -> None:
    assert calculate_cashback(10000, 2) == Decimal("200")


@pytest.mark.parametrize(
    ("amount", "rate", "ratio", "expected"),
    [
        (10000, 2, 100, 2),
        (7500, 2, 100, 2),  # 1.5 rounds half up
        (7400, 2, 100, 1),
        (0, 2, 100, 0),
        (10000, 2, 0, 0),
        (-500, 2, 100, 0),
    ],
)
def test_calculate_points(amount, rate, ratio, expected) -> None:
    assert calculate_points(amount, rate, ratio) == expected


def test_estimate_points_respects_award_flag() -> None:
    assert estimate_points("10000", 2, 100) == 2
    assert estimate_points("10000", 2, 100, award_points=False) == 0
    assert estimate_points(None, 2, 100) == 0


def test_implied_customer_spend() -> None:
    assert implied_customer_spend(10, 2) == Decimal("500")
    assert implied_customer_spend(10, 0) == Decimal("0")


@pytest.mark.asyncio
async def test_money_points_ratio_falls_back_to_configuration(session_factory) -> None:
    async with session_factory() as session:
        service = LoyaltySettingsService(session)
        assert await service.get_money_points_ratio() == Decimal(str(settings.default_money_points_ratio))

        await service.update_money_points_ratio(Decimal("50"))
        assert await service.get_money_points_ratio() == Decimal("50")


@pytest.mark.asyncio
async def test_money_points_ratio_must_be_positive(session_factory) -> None:
    async with session_factory() as session:
        with pytest.raises(ValidationFailed):
            await LoyaltySettingsService(session).update_money_points_ratio(Decimal("0"))
