"""Request-scoped service and resource dependencies."""

from __future__ import annotations

from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from zawadii_api.db.session import get_session
from zawadii_api.models import Business
from zawadii_api.services.businesses import BusinessService
from zawadii_api.services.messaging import SmsGateway, build_sms_gateway

_GATEWAY: SmsGateway | None = None


def get_sms_gateway() -> SmsGateway:
    global _GATEWAY
    if _GATEWAY is None:
        _GATEWAY = build_sms_gateway()
    return _GATEWAY


async def get_business(business_id: UUID, session: AsyncSession = Depends(get_session)) -> Business:
    return await BusinessService(session).get_business(business_id)
