from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from zawadii_api.api.dependencies.security import require_operator_api_key
from zawadii_api.api.dependencies.services import get_business
from zawadii_api.db.session import get_session
from zawadii_api.models import Business
from zawadii_api.schemas.promotion import PromotionCreate, PromotionResponse, PromotionUpdate
from zawadii_api.services.promotions import PromotionService

router = APIRouter(
    prefix="/businesses/{business_id}/promotions",
    tags=["Promotions"],
    dependencies=[Depends(require_operator_api_key)],
)


async def get_promotion_service(session: AsyncSession = Depends(get_session)) -> PromotionService:
    return PromotionService(session)


@router.get("", summary="List promotions", response_model=list[PromotionResponse])
async def list_promotions(
    business: Business = Depends(get_business),
    service: PromotionService = Depends(get_promotion_service),
) -> list[PromotionResponse]:
    promotions = await service.list_promotions(business)
    return [PromotionResponse.model_validate(promotion) for promotion in promotions]


@router.post("", summary="Create promotion", response_model=PromotionResponse, status_code=status.HTTP_201_CREATED)
async def create_promotion(
    payload: PromotionCreate,
    business: Business = Depends(get_business),
    service: PromotionService = Depends(get_promotion_service),
) -> PromotionResponse:
    promotion = await service.create_promotion(business, payload.model_dump())
    return PromotionResponse.model_validate(promotion)


@router.patch("/{promotion_id}", summary="Update promotion", response_model=PromotionResponse)
async def update_promotion(
    promotion_id: UUID,
    payload: PromotionUpdate,
    business: Business = Depends(get_business),
    service: PromotionService = Depends(get_promotion_service),
) -> PromotionResponse:
    promotion = await service.update_promotion(business, promotion_id, payload.model_dump(exclude_unset=True))
    return PromotionResponse.model_validate(promotion)


@router.delete("/{promotion_id}", summary="Delete promotion", status_code=status.HTTP_204_NO_CONTENT)
async def delete_promotion(
    promotion_id: UUID,
    business: Business = Depends(get_business),
    service: PromotionService = Depends(get_promotion_service),
) -> Response:
    await service.delete_promotion(business, promotion_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
