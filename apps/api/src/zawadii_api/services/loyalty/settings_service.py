"""Platform loyalty configuration stored in the ``loyalty_settings`` row."""

from __future__ import annotations

from decimal import Decimal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from zawadii_api.core.errors import ValidationFailed
from zawadii_api.core.settings import settings
from zawadii_api.models.platform import LOYALTY_SETTINGS_ROW_ID, LoyaltySettings


class LoyaltySettingsService:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_money_points_ratio(self) -> Decimal:
        row = await self._session.get(LoyaltySettings, LOYALTY_SETTINGS_ROW_ID)
        if row is None or row.money_points_ratio is None or Decimal(row.money_points_ratio) <= 0:
            return Decimal(str(settings.default_money_points_ratio))
        return Decimal(row.money_points_ratio)

    async def update_money_points_ratio(self, ratio: Decimal) -> LoyaltySettings:
        if ratio is None or ratio <= 0:
            raise ValidationFailed({"money_points_ratio": "Money-points ratio must be greater than 0"})

        row = await self._session.get(LoyaltySettings, LOYALTY_SETTINGS_ROW_ID)
        if row is None:
            row = LoyaltySettings(id=LOYALTY_SETTINGS_ROW_ID, money_points_ratio=ratio)
            self._session.add(row)
        else:
            row.money_points_ratio = ratio
        await self._session.commit()
        logger.info("Updated money-points ratio", money_points_ratio=str(ratio))
        return row
