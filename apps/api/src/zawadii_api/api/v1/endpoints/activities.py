from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from zawadii_api.api.dependencies.security import require_operator_api_key
from zawadii_api.api.dependencies.services import get_business, get_sms_gateway
from zawadii_api.db.session import get_session
from zawadii_api.models import Business
from zawadii_api.schemas.activity import (
    ActivityCreate,
    ActivityEstimateRequest,
    ActivityEstimateResponse,
    ActivityRecordResponse,
    InteractionResponse,
)
from zawadii_api.services.activities import ActivityService
from zawadii_api.services.loyalty import LoyaltySettingsService, calculate_cashback, estimate_points
from zawadii_api.services.messaging import SmsGateway
from zawadii_api.services.validation import normalize_phone, parse_amount

router = APIRouter(
    prefix="/businesses/{business_id}/activities",
    tags=["Activities"],
    dependencies=[Depends(require_operator_api_key)],
)


async def get_activity_service(
    session: AsyncSession = Depends(get_session),
    gateway: SmsGateway = Depends(get_sms_gateway),
) -> ActivityService:
    return ActivityService(session, sms_gateway=gateway)


@router.post(
    "",
    summary="Record a purchase",
    response_model=ActivityRecordResponse,
    status_code=status.HTTP_201_CREATED,
)
async def record_activity(
    payload: ActivityCreate,
    business: Business = Depends(get_business),
    service: ActivityService = Depends(get_activity_service),
) -> ActivityRecordResponse:
    record = await service.record_activity(
        business,
        phone_number=payload.phone_number,
        name=payload.name,
        amount=payload.amount,
        award_points=payload.award_points,
        note=payload.note,
    )
    return ActivityRecordResponse(
        interaction=InteractionResponse.model_validate(record.interaction),
        points_awarded=record.points_awarded,
        is_app_customer=record.is_app_customer,
        sms_sent=record.sms_sent,
        sms_error=record.sms_error,
    )


@router.get("", summary="List recent purchases", response_model=list[InteractionResponse])
async def list_activities(
    limit: int = Query(50, ge=1, le=500),
    phone: str | None = Query(None),
    business: Business = Depends(get_business),
    service: ActivityService = Depends(get_activity_service),
) -> list[InteractionResponse]:
    rows = await service.list_activities(business, limit=limit, phone_number=normalize_phone(phone) if phone else None)
    return [InteractionResponse.model_validate(row) for row in rows]


@router.post("/estimate", summary="Preview points for an amount", response_model=ActivityEstimateResponse)
async def estimate_activity_points(
    payload: ActivityEstimateRequest,
    business: Business = Depends(get_business),
    session: AsyncSession = Depends(get_session),
) -> ActivityEstimateResponse:
    ratio = await LoyaltySettingsService(session).get_money_points_ratio()
    amount = parse_amount(payload.amount)
    points = estimate_points(amount, business.points_conversion, ratio, award_points=payload.award_points)
    cashback = calculate_cashback(amount, business.points_conversion) if amount and amount > 0 else 0
    return ActivityEstimateResponse(
        points=points,
        cashback=float(cashback),
        points_conversion=float(business.points_conversion),
        money_points_ratio=float(ratio),
    )
