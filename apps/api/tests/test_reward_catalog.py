from decimal import Decimal

import pytest
from sqlalchemy import select

from zawadii_api.core.errors import CodeDeletionError, RewardInUseError, ValidationFailed
from zawadii_api.models import Reward, RewardCode, RewardCodeStatus
from zawadii_api.services.rewards import DEFAULT_TERMS, RewardCodeService, RewardService


@pytest.mark.asyncio
async def test_create_reward_validates_and_applies_default_terms(session_factory, business) -> None:
    async with session_factory() as session:
        service = RewardService(session)

        with pytest.raises(ValidationFailed) as excinfo:
            await service.create_reward(business, {"title": " ", "points_required": 0, "cost": "-5"})
        assert set(excinfo.value.errors) == {"title", "points_required", "cost"}

        reward = await service.create_reward(
            business,
            {
                "title": "Free Chapati Meal",
                "points_required": 5,
                "cost": "3500",
                "terms_and_conditions": "ignored while default terms apply",
            },
        )
        assert reward.uses_default_terms
        assert reward.terms_and_conditions is None
        assert Decimal(reward.cost) == Decimal("3500")
        assert DEFAULT_TERMS.startswith("• This reward is valid for one-time use only")


@pytest.mark.asyncio
async def test_update_reward_merges_fields(session_factory, business) -> None:
    async with session_factory() as session:
        service = RewardService(session)
        reward = await service.create_reward(business, {"title": "Free Soda", "points_required": 2})

        updated = await service.update_reward(
            business,
            reward.id,
            {"points_required": 3, "uses_default_terms": False, "terms_and_conditions": "Weekdays only"},
        )
        assert updated.title == "Free Soda"
        assert updated.points_required == 3
        assert updated.terms_and_conditions == "Weekdays only"

        deactivated = await service.deactivate_reward(business, reward.id)
        assert deactivated.is_active is False


@pytest.mark.asyncio
async def test_list_rewards_counts_codes(session_factory, business) -> None:
    async with session_factory() as session:
        reward = await RewardService(session).create_reward(business, {"title": "Free Soda", "points_required": 2})
        batch = await RewardCodeService(session).generate_codes(business, reward.id, quantity=3)
        batch.codes[0].status = RewardCodeStatus.REDEEMED
        await session.commit()

        summaries = await RewardService(session).list_rewards(business)

    assert len(summaries) == 1
    assert summaries[0].redemption_count == 1
    assert summaries[0].available_codes == 2


@pytest.mark.asyncio
async def test_delete_reward_removes_unused_codes(session_factory, business, reset_loyalty_store) -> None:
    async with session_factory() as session:
        reward = await RewardService(session).create_reward(business, {"title": "Free Soda", "points_required": 2})
        await RewardCodeService(session).generate_codes(business, reward.id, quantity=4)

        deletion = await RewardService(session).delete_reward(business, reward.id)

        assert deletion.deleted_codes == 4
        assert (await session.execute(select(Reward))).scalars().all() == []
        assert (await session.execute(select(RewardCode))).scalars().all() == []

    assert reset_loyalty_store.snapshot().rewards["rewards_deleted"] == 1


@pytest.mark.asyncio
async def test_delete_reward_refused_once_codes_are_held(session_factory, business) -> None:
    async with session_factory() as session:
        reward = await RewardService(session).create_reward(business, {"title": "Free Soda", "points_required": 2})
        batch = await RewardCodeService(session).generate_codes(business, reward.id, quantity=2)
        batch.codes[0].status = RewardCodeStatus.BOUGHT
        await session.commit()

        with pytest.raises(RewardInUseError) as excinfo:
            await RewardService(session).delete_reward(business, reward.id)

    payload = excinfo.value.as_payload()
    assert excinfo.value.status_code == 409
    assert payload["usedCodesCount"] == 1
    assert "deactivate_reward" in payload["alternatives"]


@pytest.mark.asyncio
async def test_delete_reward_refused_while_codes_are_being_sent(session_factory, business) -> None:
    async with session_factory() as session:
        reward = await RewardService(session).create_reward(business, {"title": "Free Soda", "points_required": 2})
        batch = await RewardCodeService(session).generate_codes(business, reward.id, quantity=2)
        batch.codes[0].status = RewardCodeStatus.PENDING
        await session.commit()

        with pytest.raises(CodeDeletionError):
            await RewardService(session).delete_reward(business, reward.id)

        remaining = (await session.execute(select(RewardCode))).scalars().all()
        assert len(remaining) == 2
        assert (await session.execute(select(Reward))).scalars().all() != []
