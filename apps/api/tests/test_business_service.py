from decimal import Decimal
from uuid import uuid4

import pytest

from zawadii_api.core.errors import NotFoundError, ValidationFailed
from zawadii_api.models import Business
from zawadii_api.services.businesses import BusinessService


@pytest.mark.asyncio
async def test_create_business_uses_default_conversion(session_factory) -> None:
    async with session_factory() as session:
        business = await BusinessService(session).create_business(
            {"name": "Duka la Juma", "category": "Retail", "phone_number": "0712345678"},
            owner_user_id="owner-1",
        )

        assert business.phone_number == "+255712345678"
        assert Decimal(business.points_conversion) == Decimal("2")
        assert business.carousel_images == []

        listed = await BusinessService(session).list_businesses("owner-1")
        assert [row.id for row in listed] == [business.id]
        assert await BusinessService(session).list_businesses("someone-else") == []


@pytest.mark.asyncio
async def test_get_business_raises_when_missing(session_factory) -> None:
    async with session_factory() as session:
        with pytest.raises(NotFoundError):
            await BusinessService(session).get_business(uuid4())


@pytest.mark.asyncio
async def test_update_information_validates_contact_details(session_factory, business) -> None:
    async with session_factory() as session:
        record = await session.get(Business, business.id)
        service = BusinessService(session)

        with pytest.raises(ValidationFailed) as excinfo:
            await service.update_information(
                record,
                {"name": "X", "phone_number": "12345", "email": "nope", "whatsapp": "@ab"},
            )
        assert set(excinfo.value.errors) == {"name", "phone_number", "email", "whatsapp"}

        updated = await service.update_information(
            record,
            {"name": "Mama Lishe Deluxe", "phone_number": "0622334455", "whatsapp": "@mamalishe"},
        )
        assert updated.name == "Mama Lishe Deluxe"
        assert updated.phone_number == "+255622334455"
        assert updated.email == "hello@mamalishe.co.tz"
        assert updated.whatsapp == "@mamalishe"


@pytest.mark.asyncio
async def test_reward_configuration_bounds(session_factory, business) -> None:
    async with session_factory() as session:
        record = await session.get(Business, business.id)
        service = BusinessService(session)

        with pytest.raises(ValidationFailed) as excinfo:
            await service.update_reward_configuration(record, points_conversion="12", tin="123")
        assert excinfo.value.errors["points_conversion"] == "Cashback percentage must be between 1% and 10%"
        assert "tin" in excinfo.value.errors

        updated = await service.update_reward_configuration(record, points_conversion="5", tin="TIN-12345678")
        assert Decimal(updated.points_conversion) == Decimal("5")
        assert updated.tin == "TIN-12345678"


@pytest.mark.asyncio
async def test_brand_identity_limits_carousel(session_factory, business) -> None:
    async with session_factory() as session:
        record = await session.get(Business, business.id)
        service = BusinessService(session)

        with pytest.raises(ValidationFailed):
            await service.update_brand_identity(
                record, {"carousel_images": [f"https://cdn.example/{index}.jpg" for index in range(11)]}
            )

        updated = await service.update_brand_identity(
            record,
            {
                "instagram": " @mamalishe ",
                "carousel_images": ["https://cdn.example/1.jpg", "  ", "https://cdn.example/2.jpg"],
            },
        )
        assert updated.instagram == "@mamalishe"
        assert updated.carousel_images == ["https://cdn.example/1.jpg", "https://cdn.example/2.jpg"]
