from datetime import datetime, timedelta, timezone
from decimal import Decimal
from types import SimpleNamespace
from uuid import uuid4

import pytest

from zawadii_api.models import RewardCodeStatus
from zawadii_api.services.rewards import RewardCodeService, RewardService, RewardStatisticsService, summarize_codes

NOW = datetime(2024, 5, 20, 12, 0, tzinfo=timezone.utc)


def _code(status, *, title="Free Chapati Meal", cost="3500", points=10, bought_at=None, customer=True):
    reward = SimpleNamespace(title=title, cost=Decimal(cost) if cost is not None else None, points_required=points)
    return SimpleNamespace(
        status=status,
        reward=reward,
        bought_at=bought_at,
        customer_id=uuid4() if customer else None,
    )


def test_summarize_codes() -> None:
    this_month = NOW - timedelta(days=3)
    last_month = NOW - timedelta(days=40)
    codes = [
        _code(RewardCodeStatus.UNUSED),
        _code(RewardCodeStatus.UNUSED, cost=None),
        _code(RewardCodeStatus.BOUGHT, bought_at=this_month),
        _code(RewardCodeStatus.REDEEMED, bought_at=this_month),
        _code(RewardCodeStatus.REDEEMED, bought_at=this_month, title="Free Soda", cost="1000", points=4),
        _code(RewardCodeStatus.REDEEMED, bought_at=this_month, customer=False),
        _code(RewardCodeStatus.REDEEMED, bought_at=last_month),
    ]

    stats = summarize_codes(codes, conversion_rate=Decimal("2"), now=NOW)

    assert stats.total_codes == 7
    assert stats.redeemed_codes == 4
    assert stats.redemption_rate == 57
    assert stats.rewards_budget == Decimal("3500")
    assert stats.amount_spent_this_month == Decimal("8000")
    assert stats.monthly_redemptions == 3
    # 10 points at 2% is 500 TSh of spend, 4 points is 200; the anonymous code is excluded.
    assert stats.roi_this_month == 700
    assert stats.most_popular_reward == "Free Chapati Meal"


def test_summarize_without_codes() -> None:
    stats = summarize_codes([], conversion_rate=Decimal("2"), now=NOW)

    assert stats.total_codes == 0
    assert stats.redemption_rate == 0
    assert stats.most_popular_reward == "None"


@pytest.mark.asyncio
async def test_statistics_service_reads_business_codes(session_factory, business) -> None:
    async with session_factory() as session:
        reward = await RewardService(session).create_reward(
            business, {"title": "Free Soda", "points_required": 4, "cost": "1000"}
        )
        await RewardCodeService(session).generate_codes(business, reward.id, quantity=5)

        stats = await RewardStatisticsService(session).summary(business)

    assert stats.total_codes == 5
    assert stats.rewards_budget == Decimal("5000")
    assert stats.redeemed_codes == 0
