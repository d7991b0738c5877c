"""Reward catalog management."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping
from uuid import UUID

from loguru import logger
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from zawadii_api.core.errors import CodeDeletionError, NotFoundError, RewardInUseError, ValidationFailed
from zawadii_api.models import Business, Reward, RewardCode, RewardCodeStatus
from zawadii_api.observability.loyalty import get_loyalty_store

DEFAULT_TERMS = "\n".join(
    [
        "• This reward is valid for one-time use only",
        "• Points cannot be refunded once redeemed",
        "• Cannot be combined with other offers",
        "• Management reserves the right to modify terms at any time",
    ]
)

_EDITABLE_FIELDS = (
    "title",
    "description",
    "points_required",
    "cost",
    "is_active",
    "image_url",
    "terms_and_conditions",
    "uses_default_terms",
    "expiry_date",
)


def default_terms() -> str:
    return DEFAULT_TERMS


@dataclass
class RewardSummary:
    reward: Reward
    redemption_count: int
    available_codes: int


@dataclass
class RewardDeletion:
    reward_id: UUID
    deleted_codes: int


class RewardService:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._store = get_loyalty_store()

    async def get_reward(self, business: Business, reward_id: UUID) -> Reward:
        stmt = select(Reward).where(Reward.id == reward_id, Reward.business_id == business.id)
        reward = (await self._session.execute(stmt)).scalar_one_or_none()
        if reward is None:
            raise NotFoundError("Reward not found")
        return reward

    async def list_rewards(self, business: Business) -> list[RewardSummary]:
        rewards = (
            await self._session.execute(
                select(Reward).where(Reward.business_id == business.id).order_by(Reward.created_at.desc())
            )
        ).scalars().all()

        counts_stmt = (
            select(RewardCode.reward_id, RewardCode.status, func.count(RewardCode.id))
            .where(RewardCode.business_id == business.id)
            .group_by(RewardCode.reward_id, RewardCode.status)
        )
        counts: dict[tuple[UUID, RewardCodeStatus], int] = {}
        for reward_id, status, total in (await self._session.execute(counts_stmt)).all():
            counts[(reward_id, RewardCodeStatus(status))] = int(total)

        return [
            RewardSummary(
                reward=reward,
                redemption_count=counts.get((reward.id, RewardCodeStatus.REDEEMED), 0),
                available_codes=counts.get((reward.id, RewardCodeStatus.UNUSED), 0),
            )
            for reward in rewards
        ]

    async def create_reward(self, business: Business, data: Mapping[str, Any]) -> Reward:
        values = self._validate(data)
        reward = Reward(business_id=business.id, **values)
        self._session.add(reward)
        await self._session.commit()
        self._store.record_reward_event("rewards_created")
        logger.info("Created reward", business_id=str(business.id), reward_id=str(reward.id))
        return reward

    async def update_reward(self, business: Business, reward_id: UUID, data: Mapping[str, Any]) -> Reward:
        reward = await self.get_reward(business, reward_id)
        merged = {key: getattr(reward, key) for key in _EDITABLE_FIELDS}
        merged.update({key: value for key, value in data.items() if key in _EDITABLE_FIELDS})
        values = self._validate(merged)
        for key, value in values.items():
            setattr(reward, key, value)
        await self._session.commit()
        logger.info("Updated reward", business_id=str(business.id), reward_id=str(reward.id))
        return reward

    async def deactivate_reward(self, business: Business, reward_id: UUID) -> Reward:
        reward = await self.get_reward(business, reward_id)
        reward.is_active = False
        await self._session.commit()
        logger.info("Deactivated reward", business_id=str(business.id), reward_id=str(reward.id))
        return reward

    async def delete_reward(self, business: Business, reward_id: UUID) -> RewardDeletion:
        """Delete a reward with its unused codes; refuse once customers hold codes."""

        reward = await self.get_reward(business, reward_id)

        used_stmt = select(func.count(RewardCode.id)).where(
            RewardCode.reward_id == reward.id,
            RewardCode.status.in_([RewardCodeStatus.BOUGHT, RewardCodeStatus.REDEEMED]),
        )
        used = int((await self._session.execute(used_stmt)).scalar_one())
        if used:
            raise RewardInUseError(used)

        pending_stmt = select(func.count(RewardCode.id)).where(
            RewardCode.reward_id == reward.id,
            RewardCode.status == RewardCodeStatus.PENDING,
        )
        if int((await self._session.execute(pending_stmt)).scalar_one()):
            raise CodeDeletionError("Some codes for this reward are currently being sent to customers.")

        removed = await self._session.execute(
            delete(RewardCode).where(
                RewardCode.reward_id == reward.id,
                RewardCode.status == RewardCodeStatus.UNUSED,
            )
        )
        await self._session.execute(delete(Reward).where(Reward.id == reward.id))
        await self._session.commit()

        deleted_codes = int(removed.rowcount or 0)
        self._store.record_reward_event("rewards_deleted")
        self._store.record_reward_event("codes_deleted", deleted_codes)
        logger.info(
            "Deleted reward",
            business_id=str(business.id),
            reward_id=str(reward_id),
            deleted_codes=deleted_codes,
        )
        return RewardDeletion(reward_id=reward_id, deleted_codes=deleted_codes)

    def _validate(self, data: Mapping[str, Any]) -> dict[str, Any]:
        errors: dict[str, str] = {}
        values: dict[str, Any] = {}

        title = (data.get("title") or "").strip()
        if not title:
            errors["title"] = "Reward title is required"
        values["title"] = title

        points_required = data.get("points_required")
        try:
            points_value = int(points_required)
        except (TypeError, ValueError):
            points_value = 0
        if points_value <= 0:
            errors["points_required"] = "Points required must be greater than 0"
        values["points_required"] = points_value

        cost = data.get("cost")
        if cost in (None, ""):
            values["cost"] = None
        else:
            try:
                cost_value = Decimal(str(cost))
            except InvalidOperation:
                cost_value = Decimal("-1")
            if not cost_value.is_finite() or cost_value < 0:
                errors["cost"] = "Cost must be 0 or greater"
            values["cost"] = cost_value

        expiry = data.get("expiry_date")
        if expiry is not None and not isinstance(expiry, datetime):
            errors["expiry_date"] = "Expiry date must be a datetime"
        values["expiry_date"] = expiry

        if errors:
            raise ValidationFailed(errors)

        uses_default_terms = bool(data.get("uses_default_terms", True))
        values["uses_default_terms"] = uses_default_terms
        custom_terms = (data.get("terms_and_conditions") or "").strip() or None
        values["terms_and_conditions"] = None if uses_default_terms else custom_terms
        values["description"] = (data.get("description") or "").strip() or None
        values["image_url"] = (data.get("image_url") or "").strip() or None
        values["is_active"] = bool(data.get("is_active", True))
        return values
