from fastapi import APIRouter

from .endpoints import (
    activities,
    businesses,
    customers,
    health,
    loyalty_settings,
    messages,
    observability,
    promotions,
    reports,
    reward_codes,
    rewards,
)

router = APIRouter()
router.include_router(health.router, tags=["Health"])
router.include_router(businesses.router)
router.include_router(loyalty_settings.router)
router.include_router(activities.router)
router.include_router(customers.router)
router.include_router(rewards.router)
router.include_router(reward_codes.router)
router.include_router(promotions.router)
router.include_router(messages.router)
router.include_router(reports.router)
router.include_router(observability.router)
