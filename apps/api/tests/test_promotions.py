from datetime import timedelta
from uuid import uuid4

import pytest

from zawadii_api.core.clock import utcnow
from zawadii_api.core.errors import NotFoundError, ValidationFailed
from zawadii_api.models import PromotionStatus
from zawadii_api.services.promotions import PromotionService


@pytest.mark.asyncio
async def test_create_promotion_validates_fields(session_factory, business) -> None:
    now = utcnow()
    async with session_factory() as session:
        service = PromotionService(session)

        with pytest.raises(ValidationFailed) as excinfo:
            await service.create_promotion(
                business,
                {
                    "title": "x" * 101,
                    "description": "",
                    "start_date": now,
                    "end_date": now - timedelta(days=1),
                },
            )
        assert set(excinfo.value.errors) == {"title", "description", "end_date"}

        promotion = await service.create_promotion(
            business,
            {"title": " Happy Hour ", "description": "Half price juice", "end_date": now + timedelta(days=7)},
        )
        assert promotion.title == "Happy Hour"
        assert promotion.status == PromotionStatus.ACTIVE


@pytest.mark.asyncio
async def test_list_promotions_expires_past_end_date(session_factory, business) -> None:
    now = utcnow()
    async with session_factory() as session:
        service = PromotionService(session)
        stale = await service.create_promotion(
            business,
            {
                "title": "Easter",
                "description": "Easter special",
                "start_date": now - timedelta(days=10),
                "end_date": now - timedelta(days=1),
            },
        )
        await service.create_promotion(business, {"title": "Open", "description": "No end date"})

        promotions = await service.list_promotions(business)

    statuses = {promotion.title: promotion.status for promotion in promotions}
    assert statuses == {"Easter": PromotionStatus.EXPIRED, "Open": PromotionStatus.ACTIVE}
    assert stale.status == PromotionStatus.EXPIRED


@pytest.mark.asyncio
async def test_update_and_delete_promotion(session_factory, business) -> None:
    async with session_factory() as session:
        service = PromotionService(session)
        promotion = await service.create_promotion(business, {"title": "Open", "description": "No end date"})

        updated = await service.update_promotion(business, promotion.id, {"status": "inactive"})
        assert updated.status == PromotionStatus.INACTIVE
        assert updated.title == "Open"

        await service.delete_promotion(business, promotion.id)
        assert await service.list_promotions(business) == []

        with pytest.raises(NotFoundError):
            await service.get_promotion(business, uuid4())
