from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from zawadii_api.api.dependencies.security import require_operator_api_key
from zawadii_api.api.dependencies.services import get_business, get_sms_gateway
from zawadii_api.core.errors import LoyaltyError, ValidationFailed
from zawadii_api.db.session import get_session
from zawadii_api.models import Business
from zawadii_api.observability.loyalty import get_loyalty_store
from zawadii_api.schemas.messaging import (
    AttachableRewardResponse,
    BulkMessageRequest,
    CustomerMessageRequest,
    MessageDispatchResponse,
    RawSmsRequest,
    RewardEligibilityResponse,
    SmsDispatchResponse,
)
from zawadii_api.services.messaging import MessageDispatch, MessagingService, SmsGateway
from zawadii_api.services.validation import normalize_phone

router = APIRouter(tags=["Messaging"], dependencies=[Depends(require_operator_api_key)])


async def get_messaging_service(
    session: AsyncSession = Depends(get_session),
    gateway: SmsGateway = Depends(get_sms_gateway),
) -> MessagingService:
    return MessagingService(session, gateway)


def _dispatch_response(dispatch: MessageDispatch) -> MessageDispatchResponse:
    return MessageDispatchResponse(
        phone_numbers=dispatch.phone_numbers,
        message=dispatch.message,
        reward_code=dispatch.reward_code,
        customer_reward_id=dispatch.customer_reward_id,
        delivery=SmsDispatchResponse(
            request_id=dispatch.result.request_id,
            sent_count=dispatch.result.sent_count,
            failed_count=dispatch.result.failed_count,
        ),
    )


@router.get(
    "/businesses/{business_id}/messages/rewards",
    summary="Rewards that can be attached to a message",
    response_model=list[AttachableRewardResponse],
)
async def list_attachable_rewards(
    business: Business = Depends(get_business),
    service: MessagingService = Depends(get_messaging_service),
) -> list[AttachableRewardResponse]:
    rewards = await service.available_rewards(business)
    return [AttachableRewardResponse.model_validate(reward) for reward in rewards]


@router.get(
    "/businesses/{business_id}/messages/eligibility",
    summary="Whether a phone number can receive an attached reward",
    response_model=RewardEligibilityResponse,
)
async def reward_eligibility(
    phone: str = Query(...),
    business: Business = Depends(get_business),
    service: MessagingService = Depends(get_messaging_service),
) -> RewardEligibilityResponse:
    return RewardEligibilityResponse(phone_number=normalize_phone(phone), eligible=await service.is_reward_eligible(phone))


@router.post(
    "/businesses/{business_id}/messages",
    summary="Message one customer, optionally attaching a reward",
    response_model=MessageDispatchResponse,
)
async def send_customer_message(
    payload: CustomerMessageRequest,
    business: Business = Depends(get_business),
    service: MessagingService = Depends(get_messaging_service),
) -> MessageDispatchResponse:
    dispatch = await service.send_customer_message(
        business,
        phone_number=payload.phone_number,
        message=payload.message,
        reward_id=payload.reward_id,
    )
    return _dispatch_response(dispatch)


@router.post(
    "/businesses/{business_id}/messages/bulk",
    summary="Message several customers",
    response_model=MessageDispatchResponse,
)
async def send_bulk_message(
    payload: BulkMessageRequest,
    business: Business = Depends(get_business),
    service: MessagingService = Depends(get_messaging_service),
) -> MessageDispatchResponse:
    dispatch = await service.send_bulk_message(business, phone_numbers=payload.phone_numbers, message=payload.message)
    return _dispatch_response(dispatch)


@router.post("/sms/send", summary="Send a raw SMS", response_model=SmsDispatchResponse)
async def send_sms(payload: RawSmsRequest, gateway: SmsGateway = Depends(get_sms_gateway)) -> SmsDispatchResponse:
    store = get_loyalty_store()
    try:
        result = await gateway.send([recipient.phone for recipient in payload.recipients], payload.message)
    except ValidationFailed as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.detail) from exc
    except LoyaltyError:
        store.record_sms("raw", success=False)
        raise
    store.record_sms("raw", success=True)
    return SmsDispatchResponse(
        request_id=result.request_id,
        sent_count=result.sent_count,
        failed_count=result.failed_count,
    )
