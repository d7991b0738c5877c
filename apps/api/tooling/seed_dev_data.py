"""Seed a demo business, app customers, activity and rewards into the API database."""

from __future__ import annotations

import asyncio
from decimal import Decimal
from typing import TypedDict

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from zawadii_api.core.settings import settings
from zawadii_api.db.base import Base, load_models
from zawadii_api.models import Business, Customer, LoyaltySettings, LOYALTY_SETTINGS_ROW_ID
from zawadii_api.services.activities import ActivityService
from zawadii_api.services.businesses import BusinessService
from zawadii_api.services.rewards import RewardCodeService, RewardService

DEMO_BUSINESS_NAME = "Mama Lishe Kitchen"


class SeedCustomer(TypedDict):
    full_name: str
    phone_number: str


class SeedPurchase(TypedDict):
    phone_number: str
    name: str
    amount: str


class SeedReward(TypedDict):
    title: str
    points_required: int
    cost: str
    codes: int


DEV_CUSTOMERS: list[SeedCustomer] = [
    {"full_name": "Asha Mwinyi", "phone_number": "+255712345678"},
    {"full_name": "Baraka Juma", "phone_number": "+255622334455"},
]

DEV_PURCHASES: list[SeedPurchase] = [
    {"phone_number": "+255712345678", "name": "Asha Mwinyi", "amount": "25000"},
    {"phone_number": "+255622334455", "name": "Baraka Juma", "amount": "12000"},
    {"phone_number": "+255754000111", "name": "Walk-in Neema", "amount": "8000"},
]

DEV_REWARDS: list[SeedReward] = [
    {"title": "Free Chapati Meal", "points_required": 5, "cost": "3500", "codes": 10},
    {"title": "50% off Pilau", "points_required": 8, "cost": "4000", "codes": 5},
]


async def seed_loyalty_settings(session: AsyncSession) -> None:
    if await session.get(LoyaltySettings, LOYALTY_SETTINGS_ROW_ID) is None:
        session.add(
            LoyaltySettings(
                id=LOYALTY_SETTINGS_ROW_ID,
                money_points_ratio=Decimal(str(settings.default_money_points_ratio)),
            )
        )
        await session.commit()


async def seed_customers(session: AsyncSession) -> None:
    for customer in DEV_CUSTOMERS:
        existing = await session.execute(select(Customer).where(Customer.phone_number == customer["phone_number"]))
        record = existing.scalar_one_or_none()
        if record:
            record.full_name = customer["full_name"]
        else:
            session.add(Customer(full_name=customer["full_name"], phone_number=customer["phone_number"]))
    await session.commit()


async def seed_business(session: AsyncSession) -> Business | None:
    """Create the demo business; ``None`` when it already exists."""
    existing = await session.execute(select(Business).where(Business.name == DEMO_BUSINESS_NAME))
    if existing.scalar_one_or_none() is not None:
        return None

    business = await BusinessService(session).create_business(
        {
            "name": DEMO_BUSINESS_NAME,
            "category": "Restaurant",
            "phone_number": "+255700000001",
            "email": "hello@mamalishe.co.tz",
            "location_description": "Kariakoo, Dar es Salaam",
        },
        owner_user_id="dev-owner",
    )

    activities = ActivityService(session)
    for purchase in DEV_PURCHASES:
        await activities.record_activity(
            business,
            phone_number=purchase["phone_number"],
            name=purchase["name"],
            amount=purchase["amount"],
        )

    rewards = RewardService(session)
    codes = RewardCodeService(session)
    for entry in DEV_REWARDS:
        reward = await rewards.create_reward(
            business,
            {"title": entry["title"], "points_required": entry["points_required"], "cost": entry["cost"]},
        )
        await codes.generate_codes(business, reward.id, quantity=entry["codes"])
    return business


async def main() -> None:
    load_models()
    engine = create_async_engine(settings.database_url, future=True)
    session_factory = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

    try:
        async with engine.begin() as connection:
            await connection.run_sync(Base.metadata.create_all)
        async with session_factory() as session:
            await seed_loyalty_settings(session)
            await seed_customers(session)
            business = await seed_business(session)
        if business is None:
            print(f"{DEMO_BUSINESS_NAME} already seeded")
        else:
            print(f"Seeded {DEMO_BUSINESS_NAME} ({business.id})")
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
