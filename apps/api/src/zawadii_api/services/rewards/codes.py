"""Voucher code generation and lifecycle."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from typing import Sequence
from uuid import UUID

from loguru import logger
from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from zawadii_api.core.clock import utcnow
from zawadii_api.core.errors import (
    AdminConfirmationRequired,
    CodeDeletionError,
    CodeStateError,
    LoyaltyError,
    NotFoundError,
    ValidationFailed,
)
from zawadii_api.core.settings import settings
from zawadii_api.models import (
    Business,
    Customer,
    CustomerReward,
    CustomerRewardStatus,
    Reward,
    RewardCode,
    RewardCodeStatus,
)
from zawadii_api.observability.loyalty import get_loyalty_store

FALLBACK_PREFIX = "RWD"
_LEADING_VERBS = ("free", "get", "win", "buy", "purchase")
_LEADING_NOISE = re.compile(r"^[0-9%\s\-+*/()\[\]{}.,:;!@#$^&]+")
_HAS_LETTER = re.compile(r"[a-zA-Z]")
_NON_LETTERS = re.compile(r"[^A-Za-z]")


def reward_code_prefix(reward_name: str | None) -> str:
    """Three-letter stem taken from the first meaningful word of a reward name.

    ``"Free 2 Large Pizzas"`` -> ``"LAR"``; ``"50% off Coffee"`` -> ``"OFF"``.
    """

    if not reward_name or not reward_name.strip():
        return FALLBACK_PREFIX

    clean = reward_name.strip()
    for verb in _LEADING_VERBS:
        clean = re.sub(rf"^{verb}\s+", "", clean, flags=re.IGNORECASE)
    clean = _LEADING_NOISE.sub("", clean)

    words = [word for word in clean.split() if _HAS_LETTER.search(word)]
    meaningful = words[0] if words else reward_name
    letters = _NON_LETTERS.sub("", meaningful).upper()
    return letters[:3].ljust(3, "X")


def date_code(day: date) -> str:
    return f"{day.month:02d}{day.day:02d}"


def format_reward_code(prefix: str, day: date, sequence: int) -> str:
    return f"{prefix}{date_code(day)}{sequence:03d}"


def _sequence_of(code: str, stem: str) -> int:
    suffix = code[len(stem):]
    return int(suffix) if suffix.isdigit() else 0


@dataclass
class CodeBatch:
    reward_id: UUID
    reward_title: str
    codes: list[RewardCode]


@dataclass
class BulkDeletion:
    deleted: int
    unused: int
    bought: int


class RewardCodeService:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._store = get_loyalty_store()

    async def generate_codes(
        self,
        business: Business,
        reward_id: UUID,
        *,
        quantity: int | None = None,
        today: date | None = None,
    ) -> CodeBatch:
        quantity = settings.reward_code_default_batch if quantity is None else quantity
        limit = settings.reward_code_batch_limit
        if quantity < 1 or quantity > limit:
            raise ValidationFailed({"quantity": f"Quantity must be between 1 and {limit}"})

        reward = await self._get_reward(business, reward_id)
        today = today or utcnow().date()
        prefix = reward_code_prefix(reward.title)
        stem = f"{prefix}{date_code(today)}"

        existing = await self._session.execute(
            select(RewardCode.code).where(
                RewardCode.business_id == business.id,
                RewardCode.code.like(f"{stem}%"),
            )
        )
        start = max((_sequence_of(code, stem) for code in existing.scalars()), default=0) + 1

        codes = [
            RewardCode(
                business_id=business.id,
                reward_id=reward.id,
                code=format_reward_code(prefix, today, start + offset),
                status=RewardCodeStatus.UNUSED,
            )
            for offset in range(quantity)
        ]
        business_key = str(business.id)
        self._session.add_all(codes)
        try:
            await self._session.commit()
        except IntegrityError as exc:
            await self._session.rollback()
            logger.warning("Reward code insert rejected", business_id=business_key, error=str(exc.orig))
            message = str(exc.orig).lower()
            if "unique" in message or "duplicate" in message:
                raise CodeStateError("Code already exists. Please try generating again.") from exc
            raise LoyaltyError("Invalid reward or business reference") from exc

        self._store.record_reward_event("codes_generated", quantity)
        logger.info(
            "Generated reward codes",
            business_id=str(business.id),
            reward_id=str(reward.id),
            quantity=quantity,
            first_code=codes[0].code,
        )
        return CodeBatch(reward_id=reward.id, reward_title=reward.title, codes=codes)

    async def preview_code(self, business: Business, reward_id: UUID, *, today: date | None = None) -> str:
        reward = await self._get_reward(business, reward_id)
        return format_reward_code(reward_code_prefix(reward.title), today or utcnow().date(), 1)

    async def list_codes(
        self,
        business: Business,
        *,
        status: RewardCodeStatus | None = None,
        search: str | None = None,
        reward_id: UUID | None = None,
    ) -> Sequence[RewardCode]:
        stmt = (
            select(RewardCode)
            .outerjoin(Reward, Reward.id == RewardCode.reward_id)
            .outerjoin(Customer, Customer.id == RewardCode.customer_id)
            .where(RewardCode.business_id == business.id)
            .options(selectinload(RewardCode.reward), selectinload(RewardCode.customer))
            .order_by(RewardCode.created_at.desc(), RewardCode.code.desc())
        )
        if status is not None:
            stmt = stmt.where(RewardCode.status == status)
        if reward_id is not None:
            stmt = stmt.where(RewardCode.reward_id == reward_id)
        term = (search or "").strip()
        if term:
            pattern = f"%{term.lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(RewardCode.code).like(pattern),
                    func.lower(Reward.title).like(pattern),
                    func.lower(Customer.full_name).like(pattern),
                )
            )
        result = await self._session.execute(stmt)
        return result.scalars().all()

    async def code_counts(self, business: Business) -> dict[str, int]:
        stmt = (
            select(RewardCode.status, func.count(RewardCode.id))
            .where(RewardCode.business_id == business.id)
            .group_by(RewardCode.status)
        )
        counts = {status.value: 0 for status in RewardCodeStatus}
        for status, total in (await self._session.execute(stmt)).all():
            counts[RewardCodeStatus(status).value] = int(total)
        counts["total"] = sum(counts.values())
        return counts

    async def delete_code(self, business: Business, code_id: UUID) -> None:
        code = await self._get_code(business, code_id)
        if code.status != RewardCodeStatus.UNUSED:
            raise CodeDeletionError(f"Only unused codes can be deleted; this code is {code.status.value}.")
        await self._session.execute(delete(RewardCode).where(RewardCode.id == code.id))
        await self._session.commit()
        self._store.record_reward_event("codes_deleted")
        logger.info("Deleted reward code", business_id=str(business.id), code=code.code)

    async def bulk_delete(
        self,
        business: Business,
        code_ids: Sequence[UUID],
        *,
        admin_confirmed: bool = False,
    ) -> BulkDeletion:
        """Delete a selection of codes.

        Redeemed codes are never deleted. Bought codes belong to customers, so
        removing them requires an administrator's confirmation.
        """

        if not code_ids:
            raise ValidationFailed({"code_ids": "Select at least one code to delete"})

        result = await self._session.execute(
            select(RewardCode).where(RewardCode.business_id == business.id, RewardCode.id.in_(list(code_ids)))
        )
        codes = result.scalars().all()

        by_status: dict[RewardCodeStatus, list[RewardCode]] = {status: [] for status in RewardCodeStatus}
        for code in codes:
            by_status[RewardCodeStatus(code.status)].append(code)

        redeemed = by_status[RewardCodeStatus.REDEEMED]
        if redeemed:
            raise CodeDeletionError(
                f"Cannot delete {len(redeemed)} redeemed code(s). Redeemed codes must be kept for records."
            )
        if by_status[RewardCodeStatus.PENDING]:
            raise CodeDeletionError("Some selected codes are currently being sent to customers.")

        unused = by_status[RewardCodeStatus.UNUSED]
        bought = by_status[RewardCodeStatus.BOUGHT]
        if not unused and not bought:
            raise ValidationFailed({"code_ids": "No deletable codes selected"})
        if bought and not admin_confirmed:
            raise AdminConfirmationRequired(
                f"Deleting {len(bought)} bought code(s) requires administrator confirmation."
            )

        ids = [code.id for code in unused + bought]
        linked = await self._session.execute(
            select(func.count(CustomerReward.id)).where(CustomerReward.reward_code_id.in_(ids))
        )
        if int(linked.scalar_one()):
            raise CodeDeletionError(
                "Some codes are linked to customer reward history and cannot be deleted."
            )

        await self._session.execute(delete(RewardCode).where(RewardCode.id.in_(ids)))
        await self._session.commit()

        outcome = BulkDeletion(deleted=len(ids), unused=len(unused), bought=len(bought))
        self._store.record_reward_event("codes_deleted", outcome.deleted)
        logger.info(
            "Bulk deleted reward codes",
            business_id=str(business.id),
            unused=outcome.unused,
            bought=outcome.bought,
        )
        return outcome

    async def redeem_code(self, business: Business, code_value: str) -> RewardCode:
        """Mark a code presented at the counter as redeemed."""

        normalized = (code_value or "").strip().upper()
        if not normalized:
            raise ValidationFailed({"code": "Reward code is required"})

        stmt = (
            select(RewardCode)
            .where(RewardCode.business_id == business.id, RewardCode.code == normalized)
            .options(selectinload(RewardCode.reward), selectinload(RewardCode.customer))
        )
        code = (await self._session.execute(stmt)).scalar_one_or_none()
        if code is None:
            raise NotFoundError("Reward code not found")
        if code.status == RewardCodeStatus.REDEEMED:
            raise CodeStateError("This code has already been redeemed")
        if code.status == RewardCodeStatus.UNUSED:
            raise CodeStateError("This code has not been issued to a customer")

        now = utcnow()
        code.status = RewardCodeStatus.REDEEMED
        code.redeemed_at = now
        if code.bought_at is None:
            code.bought_at = now

        linked = await self._session.execute(select(CustomerReward).where(CustomerReward.reward_code_id == code.id))
        for customer_reward in linked.scalars():
            customer_reward.status = CustomerRewardStatus.REDEEMED
            customer_reward.redeemed_at = now

        await self._session.commit()
        self._store.record_reward_event("codes_redeemed")
        logger.info("Redeemed reward code", business_id=str(business.id), code=code.code)
        return code

    async def _get_reward(self, business: Business, reward_id: UUID) -> Reward:
        stmt = select(Reward).where(Reward.id == reward_id, Reward.business_id == business.id)
        reward = (await self._session.execute(stmt)).scalar_one_or_none()
        if reward is None:
            raise NotFoundError("Reward not found")
        return reward

    async def _get_code(self, business: Business, code_id: UUID) -> RewardCode:
        stmt = select(RewardCode).where(RewardCode.id == code_id, RewardCode.business_id == business.id)
        code = (await self._session.execute(stmt)).scalar_one_or_none()
        if code is None:
            raise NotFoundError("Reward code not found")
        return code
