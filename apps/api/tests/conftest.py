import sys
from decimal import Decimal
from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine


def _configure_path() -> None:
    src_path = Path(__file__).resolve().parents[1] / "src"
    if src_path.exists():
        sys.path.insert(0, str(src_path))


_configure_path()

from zawadii_api.app import create_app  # noqa: E402
from zawadii_api.api.dependencies.services import get_sms_gateway  # noqa: E402
from zawadii_api.db.base import Base, load_models  # noqa: E402
from zawadii_api.db.session import get_session  # noqa: E402
from zawadii_api.models import Business, BusinessStatus  # noqa: E402
from zawadii_api.observability.loyalty import get_loyalty_store  # noqa: E402
from zawadii_api.services.messaging import InMemorySmsGateway  # noqa: E402

load_models()


@pytest.fixture(autouse=True)
def reset_loyalty_store():
    store = get_loyalty_store()
    store.reset()
    yield store
    store.reset()


@pytest_asyncio.fixture
async def session_factory():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", future=True)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

    try:
        yield factory
    finally:
        await engine.dispose()


@pytest.fixture
def sms_gateway() -> InMemorySmsGateway:
    return InMemorySmsGateway()


@pytest_asyncio.fixture
async def app_with_db(session_factory, sms_gateway):
    app = create_app()

    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_sms_gateway] = lambda: sms_gateway

    try:
        yield app, session_factory
    finally:
        app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def business(session_factory) -> Business:
    async with session_factory() as session:
        record = Business(
            name="Mama Lishe Kitchen",
            category="Restaurant",
            phone_number="+255700000001",
            email="hello@mamalishe.co.tz",
            status=BusinessStatus.ACTIVE,
            points_conversion=Decimal("2"),
            carousel_images=[],
        )
        session.add(record)
        await session.commit()
        return record
