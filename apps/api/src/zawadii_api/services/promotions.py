"""Promotion CRUD."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Sequence
from uuid import UUID

from loguru import logger
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from zawadii_api.core.clock import ensure_aware, utcnow
from zawadii_api.core.errors import NotFoundError, ValidationFailed
from zawadii_api.models import Business, Promotion, PromotionStatus

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 200

_FIELDS = ("title", "description", "image_url", "start_date", "end_date", "status")


def effective_status(promotion: Promotion, now: datetime) -> PromotionStatus:
    status = PromotionStatus(promotion.status)
    if status == PromotionStatus.ACTIVE and promotion.end_date is not None:
        if ensure_aware(promotion.end_date) < ensure_aware(now):
            return PromotionStatus.EXPIRED
    return status


def validate_promotion(data: Mapping[str, Any]) -> dict[str, Any]:
    errors: dict[str, str] = {}

    title = (data.get("title") or "").strip()
    if not title:
        errors["title"] = "Title is required"
    elif len(title) > TITLE_MAX_LENGTH:
        errors["title"] = f"Title must be {TITLE_MAX_LENGTH} characters or less"

    description = (data.get("description") or "").strip()
    if not description:
        errors["description"] = "Description is required"
    elif len(description) > DESCRIPTION_MAX_LENGTH:
        errors["description"] = f"Description must be {DESCRIPTION_MAX_LENGTH} characters or less"

    start = data.get("start_date")
    end = data.get("end_date")
    if start is not None and end is not None and ensure_aware(start) >= ensure_aware(end):
        errors["end_date"] = "End date must be after start date."

    status = data.get("status") or PromotionStatus.ACTIVE
    try:
        status = PromotionStatus(status)
    except ValueError:
        errors["status"] = "Status must be active, inactive or expired"

    if errors:
        raise ValidationFailed(errors)

    return {
        "title": title,
        "description": description,
        "image_url": (data.get("image_url") or "").strip() or None,
        "start_date": start,
        "end_date": end,
        "status": status,
    }


class PromotionService:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_promotions(self, business: Business, *, now: datetime | None = None) -> Sequence[Promotion]:
        """Newest first; active promotions past their end date are flipped to expired."""

        now = now or utcnow()
        result = await self._session.execute(
            select(Promotion).where(Promotion.business_id == business.id).order_by(Promotion.created_at.desc())
        )
        promotions = result.scalars().all()
        expired = [promotion for promotion in promotions if effective_status(promotion, now) != promotion.status]
        if expired:
            for promotion in expired:
                promotion.status = PromotionStatus.EXPIRED
            await self._session.commit()
            logger.info("Expired promotions", business_id=str(business.id), count=len(expired))
        return promotions

    async def get_promotion(self, business: Business, promotion_id: UUID) -> Promotion:
        stmt = select(Promotion).where(Promotion.id == promotion_id, Promotion.business_id == business.id)
        promotion = (await self._session.execute(stmt)).scalar_one_or_none()
        if promotion is None:
            raise NotFoundError("Promotion not found")
        return promotion

    async def create_promotion(self, business: Business, data: Mapping[str, Any]) -> Promotion:
        promotion = Promotion(business_id=business.id, **validate_promotion(data))
        self._session.add(promotion)
        await self._session.commit()
        logger.info("Created promotion", business_id=str(business.id), promotion_id=str(promotion.id))
        return promotion

    async def update_promotion(self, business: Business, promotion_id: UUID, data: Mapping[str, Any]) -> Promotion:
        promotion = await self.get_promotion(business, promotion_id)
        merged = {key: getattr(promotion, key) for key in _FIELDS}
        merged.update({key: value for key, value in data.items() if key in _FIELDS})
        for key, value in validate_promotion(merged).items():
            setattr(promotion, key, value)
        await self._session.commit()
        logger.info("Updated promotion", business_id=str(business.id), promotion_id=str(promotion.id))
        return promotion

    async def delete_promotion(self, business: Business, promotion_id: UUID) -> None:
        promotion = await self.get_promotion(business, promotion_id)
        await self._session.execute(delete(Promotion).where(Promotion.id == promotion.id))
        await self._session.commit()
        logger.info("Deleted promotion", business_id=str(business.id), promotion_id=str(promotion_id))
