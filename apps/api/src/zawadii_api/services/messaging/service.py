"""Business-to-customer messaging with optional reward attachment."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence
from uuid import UUID

from loguru import logger
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from zawadii_api.core.clock import utcnow
from zawadii_api.core.errors import LoyaltyError, NotFoundError, ValidationFailed
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
from zawadii_api.services.messaging.gateway import SmsDispatchResult, SmsGateway
from zawadii_api.services.messaging.templates import attach_reward, with_business_signature
from zawadii_api.services.validation import PHONE_FORMAT_HINT, is_valid_phone, normalize_phone


@dataclass
class AttachableReward:
    reward_id: UUID
    title: str
    code_id: UUID
    code: str


@dataclass
class MessageDispatch:
    phone_numbers: list[str]
    message: str
    result: SmsDispatchResult
    reward_code: str | None = None
    customer_reward_id: UUID | None = None


class MessagingService:
    def __init__(self, session: AsyncSession, sms_gateway: SmsGateway) -> None:
        self._session = session
        self._gateway = sms_gateway
        self._store = get_loyalty_store()

    async def available_rewards(self, business: Business) -> list[AttachableReward]:
        """First unused code of every reward that still has stock."""

        stmt = (
            select(RewardCode)
            .join(Reward, Reward.id == RewardCode.reward_id)
            .where(
                RewardCode.business_id == business.id,
                RewardCode.status == RewardCodeStatus.UNUSED,
                Reward.is_active.is_(True),
            )
            .options(selectinload(RewardCode.reward))
            .order_by(RewardCode.created_at.asc(), RewardCode.code.asc())
        )
        seen: dict[str, AttachableReward] = {}
        for code in (await self._session.execute(stmt)).scalars():
            title = code.reward.title
            if title not in seen:
                seen[title] = AttachableReward(reward_id=code.reward_id, title=title, code_id=code.id, code=code.code)
        return list(seen.values())

    async def is_reward_eligible(self, phone_number: str) -> bool:
        return await self._find_customer(normalize_phone(phone_number)) is not None

    async def send_customer_message(
        self,
        business: Business,
        *,
        phone_number: str,
        message: str,
        reward_id: UUID | None = None,
    ) -> MessageDispatch:
        text = self._validate_message(message)
        phone = normalize_phone(phone_number)
        if not is_valid_phone(phone):
            raise ValidationFailed({"phone_number": PHONE_FORMAT_HINT})

        body = with_business_signature(text, business.name)
        reservation: tuple[RewardCode, CustomerReward, Reward] | None = None
        if reward_id is not None:
            reservation = await self._reserve_reward(business, phone, reward_id)
            code, _, reward = reservation
            body = attach_reward(body, reward.title, code.code)

        try:
            result = await self._gateway.send([phone], body)
        except Exception:
            self._store.record_sms("customer_message", success=False)
            if reservation is not None:
                await self._release_reservation(reservation[0], reservation[1])
            logger.warning("Customer message failed", business_id=str(business.id), reward_attached=reservation is not None)
            raise

        self._store.record_sms("customer_message", success=True)
        dispatch = MessageDispatch(phone_numbers=[phone], message=body, result=result)
        if reservation is not None:
            code, customer_reward, _ = reservation
            code.status = RewardCodeStatus.BOUGHT
            customer_reward.status = CustomerRewardStatus.BOUGHT
            await self._session.commit()
            dispatch.reward_code = code.code
            dispatch.customer_reward_id = customer_reward.id

        logger.info(
            "Sent customer message",
            business_id=str(business.id),
            reward_code=dispatch.reward_code,
        )
        return dispatch

    async def send_bulk_message(
        self,
        business: Business,
        *,
        phone_numbers: Sequence[str],
        message: str,
    ) -> MessageDispatch:
        text = self._validate_message(message)
        phones: list[str] = []
        invalid: list[str] = []
        for raw in phone_numbers:
            phone = normalize_phone(raw)
            if is_valid_phone(phone):
                if phone not in phones:
                    phones.append(phone)
            else:
                invalid.append(raw)
        if invalid:
            raise ValidationFailed({"phone_numbers": f"Invalid phone number(s): {', '.join(invalid)}"})
        if not phones:
            raise ValidationFailed({"phone_numbers": "Select at least one customer"})

        body = with_business_signature(text, business.name)
        try:
            result = await self._gateway.send(phones, body)
        except LoyaltyError:
            self._store.record_sms("bulk_message", success=False)
            raise
        self._store.record_sms("bulk_message", success=True)
        logger.info("Sent bulk message", business_id=str(business.id), recipients=len(phones))
        return MessageDispatch(phone_numbers=phones, message=body, result=result)

    def _validate_message(self, message: str) -> str:
        text = (message or "").strip()
        limit = settings.sms_message_max_length
        if not text:
            raise ValidationFailed({"message": "Message is required"})
        if len(text) > limit:
            raise ValidationFailed({"message": f"Message must be {limit} characters or less"})
        return text

    async def _find_customer(self, phone: str) -> Customer | None:
        stmt = select(Customer).where(Customer.phone_number == phone).limit(1)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def _reserve_reward(
        self,
        business: Business,
        phone: str,
        reward_id: UUID,
    ) -> tuple[RewardCode, CustomerReward, Reward]:
        customer = await self._find_customer(phone)
        if customer is None:
            raise ValidationFailed(
                {"reward_id": "Rewards can only be attached for customers who use the Zawadii app"}
            )

        reward = (
            await self._session.execute(
                select(Reward).where(Reward.id == reward_id, Reward.business_id == business.id)
            )
        ).scalar_one_or_none()
        if reward is None:
            raise NotFoundError("Reward not found")

        code = (
            await self._session.execute(
                select(RewardCode)
                .where(RewardCode.reward_id == reward.id, RewardCode.status == RewardCodeStatus.UNUSED)
                .order_by(RewardCode.created_at.asc(), RewardCode.code.asc())
                .limit(1)
            )
        ).scalar_one_or_none()
        if code is None:
            raise ValidationFailed({"reward_id": "No unused codes are available for this reward"})

        now = utcnow()
        code.status = RewardCodeStatus.PENDING
        code.customer_id = customer.id
        code.bought_at = now
        customer_reward = CustomerReward(
            business_id=business.id,
            customer_id=customer.id,
            reward_id=reward.id,
            reward_code_id=code.id,
            points_spent=0,
            status=CustomerRewardStatus.PENDING,
            claimed_at=now,
        )
        self._session.add(customer_reward)
        try:
            await self._session.commit()
        except SQLAlchemyError:
            await self._session.rollback()
            raise
        return code, customer_reward, reward

    async def _release_reservation(self, code: RewardCode, customer_reward: CustomerReward) -> None:
        await self._session.execute(delete(CustomerReward).where(CustomerReward.id == customer_reward.id))
        code.status = RewardCodeStatus.UNUSED
        code.customer_id = None
        code.bought_at = None
        await self._session.commit()
