from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from zawadii_api.api.dependencies.security import require_operator_api_key
from zawadii_api.api.dependencies.services import get_business
from zawadii_api.db.session import get_session
from zawadii_api.models import Business
from zawadii_api.schemas.reward import (
    DefaultTermsResponse,
    RewardCreate,
    RewardDeletionResponse,
    RewardResponse,
    RewardSummaryResponse,
    RewardUpdate,
)
from zawadii_api.services.rewards import RewardService, default_terms

router = APIRouter(tags=["Rewards"], dependencies=[Depends(require_operator_api_key)])


async def get_reward_service(session: AsyncSession = Depends(get_session)) -> RewardService:
    return RewardService(session)


@router.get("/rewards/default-terms", summary="Default reward terms", response_model=DefaultTermsResponse)
async def get_default_terms() -> DefaultTermsResponse:
    return DefaultTermsResponse(terms=default_terms())


@router.get(
    "/businesses/{business_id}/rewards",
    summary="List rewards with redemption and stock counts",
    response_model=list[RewardSummaryResponse],
)
async def list_rewards(
    business: Business = Depends(get_business),
    service: RewardService = Depends(get_reward_service),
) -> list[RewardSummaryResponse]:
    summaries = await service.list_rewards(business)
    return [
        RewardSummaryResponse.model_validate(summary.reward).model_copy(
            update={"redemption_count": summary.redemption_count, "available_codes": summary.available_codes}
        )
        for summary in summaries
    ]


@router.post(
    "/businesses/{business_id}/rewards",
    summary="Create reward",
    response_model=RewardResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_reward(
    payload: RewardCreate,
    business: Business = Depends(get_business),
    service: RewardService = Depends(get_reward_service),
) -> RewardResponse:
    reward = await service.create_reward(business, payload.model_dump())
    return RewardResponse.model_validate(reward)


@router.patch("/businesses/{business_id}/rewards/{reward_id}", summary="Update reward", response_model=RewardResponse)
async def update_reward(
    reward_id: UUID,
    payload: RewardUpdate,
    business: Business = Depends(get_business),
    service: RewardService = Depends(get_reward_service),
) -> RewardResponse:
    reward = await service.update_reward(business, reward_id, payload.model_dump(exclude_unset=True))
    return RewardResponse.model_validate(reward)


@router.post(
    "/businesses/{business_id}/rewards/{reward_id}/deactivate",
    summary="Hide reward from customers",
    response_model=RewardResponse,
)
async def deactivate_reward(
    reward_id: UUID,
    business: Business = Depends(get_business),
    service: RewardService = Depends(get_reward_service),
) -> RewardResponse:
    reward = await service.deactivate_reward(business, reward_id)
    return RewardResponse.model_validate(reward)


@router.delete(
    "/businesses/{business_id}/rewards/{reward_id}",
    summary="Delete reward and its unused codes",
    response_model=RewardDeletionResponse,
)
async def delete_reward(
    reward_id: UUID,
    business: Business = Depends(get_business),
    service: RewardService = Depends(get_reward_service),
) -> RewardDeletionResponse:
    deletion = await service.delete_reward(business, reward_id)
    return RewardDeletionResponse(reward_id=deletion.reward_id, deleted_codes=deletion.deleted_codes)
