from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from zawadii_api.api.dependencies.security import require_operator_api_key
from zawadii_api.db.session import get_session
from zawadii_api.schemas.business import LoyaltySettingsPayload, LoyaltySettingsResponse
from zawadii_api.services.loyalty import LoyaltySettingsService

router = APIRouter(prefix="/settings", tags=["Settings"], dependencies=[Depends(require_operator_api_key)])


async def get_loyalty_settings_service(session: AsyncSession = Depends(get_session)) -> LoyaltySettingsService:
    return LoyaltySettingsService(session)


@router.get("/loyalty", summary="Platform money-points ratio", response_model=LoyaltySettingsResponse)
async def get_loyalty_settings(
    service: LoyaltySettingsService = Depends(get_loyalty_settings_service),
) -> LoyaltySettingsResponse:
    ratio = await service.get_money_points_ratio()
    return LoyaltySettingsResponse(money_points_ratio=float(ratio))


@router.put("/loyalty", summary="Update money-points ratio", response_model=LoyaltySettingsResponse)
async def update_loyalty_settings(
    payload: LoyaltySettingsPayload,
    service: LoyaltySettingsService = Depends(get_loyalty_settings_service),
) -> LoyaltySettingsResponse:
    row = await service.update_money_points_ratio(payload.money_points_ratio)
    return LoyaltySettingsResponse(money_points_ratio=float(row.money_points_ratio))
