"""Loyalty points exports."""

from .points import (  # noqa: F401
    calculate_cashback,
    calculate_points,
    estimate_points,
    implied_customer_spend,
)
from .settings_service import LoyaltySettingsService  # noqa: F401
