from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from zawadii_api.api.dependencies.security import require_operator_api_key
from zawadii_api.api.dependencies.services import get_business
from zawadii_api.db.session import get_session
from zawadii_api.models import Business
from zawadii_api.schemas.business import (
    BrandIdentityUpdate,
    BusinessCreate,
    BusinessInformationUpdate,
    BusinessResponse,
    RewardConfigurationUpdate,
)
from zawadii_api.services.businesses import BusinessService

router = APIRouter(prefix="/businesses", tags=["Businesses"], dependencies=[Depends(require_operator_api_key)])


async def get_business_service(session: AsyncSession = Depends(get_session)) -> BusinessService:
    return BusinessService(session)


@router.post("", summary="Register a business", response_model=BusinessResponse, status_code=status.HTTP_201_CREATED)
async def create_business(
    payload: BusinessCreate,
    service: BusinessService = Depends(get_business_service),
) -> BusinessResponse:
    data = payload.model_dump(exclude={"owner_user_id"})
    business = await service.create_business(data, owner_user_id=payload.owner_user_id)
    return BusinessResponse.model_validate(business)


@router.get("", summary="List businesses", response_model=list[BusinessResponse])
async def list_businesses(
    owner_user_id: str | None = Query(None, alias="ownerUserId"),
    service: BusinessService = Depends(get_business_service),
) -> list[BusinessResponse]:
    businesses = await service.list_businesses(owner_user_id)
    return [BusinessResponse.model_validate(business) for business in businesses]


@router.get("/{business_id}", summary="Get business profile", response_model=BusinessResponse)
async def get_business_profile(business: Business = Depends(get_business)) -> BusinessResponse:
    return BusinessResponse.model_validate(business)


@router.patch("/{business_id}", summary="Update business information", response_model=BusinessResponse)
async def update_business_information(
    payload: BusinessInformationUpdate,
    business: Business = Depends(get_business),
    service: BusinessService = Depends(get_business_service),
) -> BusinessResponse:
    updated = await service.update_information(business, payload.model_dump(exclude_unset=True))
    return BusinessResponse.model_validate(updated)


@router.put(
    "/{business_id}/reward-configuration",
    summary="Update cashback percentage and TIN",
    response_model=BusinessResponse,
)
async def update_reward_configuration(
    payload: RewardConfigurationUpdate,
    business: Business = Depends(get_business),
    service: BusinessService = Depends(get_business_service),
) -> BusinessResponse:
    updated = await service.update_reward_configuration(
        business,
        points_conversion=payload.points_conversion,
        tin=payload.tin,
    )
    return BusinessResponse.model_validate(updated)


@router.put("/{business_id}/brand", summary="Update brand identity", response_model=BusinessResponse)
async def update_brand_identity(
    payload: BrandIdentityUpdate,
    business: Business = Depends(get_business),
    service: BusinessService = Depends(get_business_service),
) -> BusinessResponse:
    updated = await service.update_brand_identity(business, payload.model_dump(exclude_unset=True))
    return BusinessResponse.model_validate(updated)
