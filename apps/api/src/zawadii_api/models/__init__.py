"""SQLAlchemy models package."""

from .business import Business, BusinessStatus  # noqa: F401
from .customer import Customer  # noqa: F401
from .interaction import DASHBOARD_ENTRY, CustomerInteraction, CustomerPoints  # noqa: F401
from .platform import LOYALTY_SETTINGS_ROW_ID, LoyaltySettings  # noqa: F401
from .promotion import Promotion, PromotionStatus  # noqa: F401
from .reward import (  # noqa: F401
    CustomerReward,
    CustomerRewardStatus,
    Reward,
    RewardCode,
    RewardCodeStatus,
)
