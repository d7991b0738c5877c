"""Record purchase activity and award points."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal
from typing import Sequence

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from zawadii_api.core.clock import utcnow
from zawadii_api.core.errors import DuplicateActivityError, LoyaltyError
from zawadii_api.core.settings import settings
from zawadii_api.models import Business, Customer, CustomerInteraction, CustomerPoints, DASHBOARD_ENTRY
from zawadii_api.observability.loyalty import get_loyalty_store
from zawadii_api.services.loyalty import LoyaltySettingsService, calculate_points
from zawadii_api.services.messaging.gateway import SmsGateway
from zawadii_api.services.messaging.templates import activity_message
from zawadii_api.services.validation import validate_activity_form


@dataclass
class ActivityRecord:
    """Outcome of a recorded purchase."""

    interaction: CustomerInteraction
    points_awarded: int
    customer_id: object | None
    sms_sent: bool
    sms_error: str | None = None

    @property
    def is_app_customer(self) -> bool:
        return self.customer_id is not None


class ActivityService:
    def __init__(self, session: AsyncSession, sms_gateway: SmsGateway | None = None) -> None:
        self._session = session
        self._sms_gateway = sms_gateway
        self._store = get_loyalty_store()

    async def record_activity(
        self,
        business: Business,
        *,
        phone_number: str,
        name: str,
        amount: object,
        award_points: bool = True,
        note: str | None = None,
    ) -> ActivityRecord:
        form = validate_activity_form(phone_number, name, amount, note)

        await self._reject_duplicate(business, form.phone_number, form.amount)

        customer = await self._find_customer(form.phone_number)
        customer_id = customer.id if customer else None

        points = 0
        if award_points:
            ratio = await LoyaltySettingsService(self._session).get_money_points_ratio()
            points = calculate_points(form.amount, business.points_conversion, ratio)

        interaction = CustomerInteraction(
            business_id=business.id,
            customer_id=customer_id,
            interaction_type=DASHBOARD_ENTRY,
            amount_spent=form.amount,
            points_awarded=points,
            phone_number=form.phone_number,
            name=form.name,
            optional_note=form.note,
        )
        self._session.add(interaction)
        await self._session.flush()

        if points > 0:
            await self._credit_points(business, form.phone_number, customer_id, points, form.amount)

        await self._session.commit()
        self._store.record_activity(points_awarded=points, walk_in=customer_id is None)
        logger.info(
            "Recorded purchase activity",
            business_id=str(business.id),
            interaction_id=str(interaction.id),
            points=points,
            app_customer=customer_id is not None,
        )

        sms_sent, sms_error = await self._notify_customer(business, form.phone_number, form.name, points)
        return ActivityRecord(
            interaction=interaction,
            points_awarded=points,
            customer_id=customer_id,
            sms_sent=sms_sent,
            sms_error=sms_error,
        )

    async def list_activities(
        self,
        business: Business,
        *,
        limit: int = 50,
        phone_number: str | None = None,
    ) -> Sequence[CustomerInteraction]:
        stmt = (
            select(CustomerInteraction)
            .where(CustomerInteraction.business_id == business.id)
            .order_by(CustomerInteraction.created_at.desc())
            .limit(limit)
        )
        if phone_number:
            stmt = stmt.where(CustomerInteraction.phone_number == phone_number)
        result = await self._session.execute(stmt)
        return result.scalars().all()

    async def _reject_duplicate(self, business: Business, phone_number: str, amount: Decimal) -> None:
        window = timedelta(seconds=settings.duplicate_activity_window_seconds)
        stmt = (
            select(CustomerInteraction.id)
            .where(
                CustomerInteraction.business_id == business.id,
                CustomerInteraction.phone_number == phone_number,
                CustomerInteraction.amount_spent == amount,
                CustomerInteraction.created_at >= utcnow() - window,
            )
            .limit(1)
        )
        if (await self._session.execute(stmt)).first() is not None:
            self._store.record_duplicate_rejected()
            minutes = max(settings.duplicate_activity_window_seconds // 60, 1)
            raise DuplicateActivityError(
                f"A similar transaction was recorded in the last {minutes} minutes. Please verify this is not a duplicate."
            )

    async def _find_customer(self, phone_number: str) -> Customer | None:
        stmt = select(Customer).where(Customer.phone_number == phone_number).limit(1)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def _credit_points(
        self,
        business: Business,
        phone_number: str,
        customer_id: object | None,
        points: int,
        amount: Decimal,
    ) -> None:
        # A failed balance update must not lose the recorded purchase.
        try:
            async with self._session.begin_nested():
                stmt = select(CustomerPoints).where(
                    CustomerPoints.business_id == business.id,
                    CustomerPoints.phone_number == phone_number,
                )
                balance = (await self._session.execute(stmt)).scalar_one_or_none()
                if balance is None:
                    balance = CustomerPoints(
                        business_id=business.id,
                        phone_number=phone_number,
                        customer_id=customer_id,
                        points=0,
                        total_amount_spent=Decimal("0"),
                    )
                    self._session.add(balance)
                balance.points = int(balance.points or 0) + points
                balance.total_amount_spent = Decimal(balance.total_amount_spent or 0) + amount
                if customer_id is not None:
                    balance.customer_id = customer_id
                balance.last_updated = utcnow()
        except SQLAlchemyError as exc:
            logger.warning(
                "Failed to update customer points balance",
                business_id=str(business.id),
                phone_number=phone_number,
                error=str(exc),
            )

    async def _notify_customer(
        self,
        business: Business,
        phone_number: str,
        name: str,
        points: int,
    ) -> tuple[bool, str | None]:
        if not settings.sms_enabled or self._sms_gateway is None:
            return False, None

        message = activity_message(name, points, business.name)
        try:
            await self._sms_gateway.send([phone_number], message)
        except LoyaltyError as exc:
            self._store.record_sms("activity", success=False)
            logger.warning("Activity SMS failed", business_id=str(business.id), error=exc.detail)
            return False, exc.detail
        self._store.record_sms("activity", success=True)
        return True, None
