"""Platform-wide loyalty configuration."""

from __future__ import annotations

from sqlalchemy import Column, Integer, Numeric

from zawadii_api.db.base import Base
from zawadii_api.models._columns import updated_at_column

LOYALTY_SETTINGS_ROW_ID = 1


class LoyaltySettings(Base):
    """Single-row table holding the money-to-points ratio."""

    __tablename__ = "loyalty_settings"

    id = Column(Integer, primary_key=True, default=LOYALTY_SETTINGS_ROW_ID)
    money_points_ratio = Column(Numeric(12, 4), nullable=False)
    updated_at = updated_at_column()
