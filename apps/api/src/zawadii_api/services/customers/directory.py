"""Load a business's customer base from storage."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from zawadii_api.core.clock import utcnow
from zawadii_api.core.errors import NotFoundError
from zawadii_api.models import Business, Customer, CustomerInteraction, CustomerPoints, CustomerReward
from zawadii_api.services.customers.unification import (
    CustomerMetrics,
    UnifiedCustomer,
    compute_customer_metrics,
    unify_customers,
)
from zawadii_api.services.validation import normalize_phone


@dataclass
class CustomerDirectory:
    customers: list[UnifiedCustomer]
    metrics: CustomerMetrics
    interactions: list[CustomerInteraction] = field(repr=False, default_factory=list)


@dataclass
class CustomerDetail:
    customer: UnifiedCustomer
    rewards: list[CustomerReward]


class CustomerDirectoryService:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def load(self, business: Business, *, now: datetime | None = None) -> CustomerDirectory:
        now = now or utcnow()
        interactions = list(
            (
                await self._session.execute(
                    select(CustomerInteraction)
                    .where(CustomerInteraction.business_id == business.id)
                    .order_by(CustomerInteraction.created_at.desc())
                )
            ).scalars()
        )
        points_rows = list(
            (
                await self._session.execute(select(CustomerPoints).where(CustomerPoints.business_id == business.id))
            ).scalars()
        )

        customer_ids = {row.customer_id for row in interactions if row.customer_id is not None}
        customer_ids |= {row.customer_id for row in points_rows if row.customer_id is not None}
        customers: Sequence[Customer] = []
        if customer_ids:
            customers = (
                await self._session.execute(
                    select(Customer).where(Customer.id.in_(customer_ids)).order_by(Customer.created_at.desc())
                )
            ).scalars().all()

        unified = unify_customers(customers, interactions, points_rows, now=now)
        metrics = compute_customer_metrics(unified, interactions, now=now)
        return CustomerDirectory(customers=unified, metrics=metrics, interactions=interactions)

    async def customer_detail(self, business: Business, phone_number: str) -> CustomerDetail:
        phone = normalize_phone(phone_number)
        directory = await self.load(business)
        match = next((customer for customer in directory.customers if customer.phone_number == phone), None)
        if match is None:
            raise NotFoundError("Customer not found")

        rewards: list[CustomerReward] = []
        if match.customer_id is not None:
            rewards = list(
                (
                    await self._session.execute(
                        select(CustomerReward)
                        .where(
                            CustomerReward.business_id == business.id,
                            CustomerReward.customer_id == match.customer_id,
                        )
                        .options(selectinload(CustomerReward.reward))
                        .order_by(CustomerReward.created_at.desc())
                    )
                ).scalars()
            )
        return CustomerDetail(customer=match, rewards=rewards)
