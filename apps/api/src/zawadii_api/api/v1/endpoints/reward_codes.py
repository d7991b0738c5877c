from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from zawadii_api.api.dependencies.security import admin_confirmation, require_operator_api_key
from zawadii_api.api.dependencies.services import get_business
from zawadii_api.db.session import get_session
from zawadii_api.models import Business, RewardCode, RewardCodeStatus
from zawadii_api.schemas.reward import (
    BulkDeleteRequest,
    BulkDeleteResponse,
    CodeBatchResponse,
    CodeGenerationRequest,
    CodeListResponse,
    CodePreviewResponse,
    RedeemCodeRequest,
    RewardCodeResponse,
)
from zawadii_api.services.rewards import RewardCodeService

router = APIRouter(
    prefix="/businesses/{business_id}",
    tags=["Reward codes"],
    dependencies=[Depends(require_operator_api_key)],
)


async def get_code_service(session: AsyncSession = Depends(get_session)) -> RewardCodeService:
    return RewardCodeService(session)


def serialize_code(code: RewardCode, *, with_relations: bool = True, reward_title: str | None = None) -> RewardCodeResponse:
    response = RewardCodeResponse.model_validate(code)
    if with_relations:
        reward_title = code.reward.title if code.reward else None
        customer_name = code.customer.display_name if code.customer else None
        return response.model_copy(update={"reward_title": reward_title, "customer_name": customer_name})
    return response.model_copy(update={"reward_title": reward_title})


@router.post(
    "/rewards/{reward_id}/codes",
    summary="Generate reward codes",
    response_model=CodeBatchResponse,
    status_code=status.HTTP_201_CREATED,
)
async def generate_codes(
    reward_id: UUID,
    payload: CodeGenerationRequest,
    business: Business = Depends(get_business),
    service: RewardCodeService = Depends(get_code_service),
) -> CodeBatchResponse:
    batch = await service.generate_codes(business, reward_id, quantity=payload.quantity, today=payload.issue_date)
    return CodeBatchResponse(
        reward_id=batch.reward_id,
        count=len(batch.codes),
        codes=[serialize_code(code, with_relations=False, reward_title=batch.reward_title) for code in batch.codes],
    )


@router.get("/rewards/{reward_id}/codes/preview", summary="Preview the next code format", response_model=CodePreviewResponse)
async def preview_code(
    reward_id: UUID,
    business: Business = Depends(get_business),
    service: RewardCodeService = Depends(get_code_service),
) -> CodePreviewResponse:
    return CodePreviewResponse(code=await service.preview_code(business, reward_id))


@router.get("/codes", summary="List reward codes", response_model=CodeListResponse)
async def list_codes(
    code_status: RewardCodeStatus | None = Query(None, alias="status"),
    search: str | None = Query(None),
    reward_id: UUID | None = Query(None, alias="rewardId"),
    business: Business = Depends(get_business),
    service: RewardCodeService = Depends(get_code_service),
) -> CodeListResponse:
    codes = await service.list_codes(business, status=code_status, search=search, reward_id=reward_id)
    counts = await service.code_counts(business)
    return CodeListResponse(items=[serialize_code(code) for code in codes], counts=counts)


@router.delete("/codes/{code_id}", summary="Delete an unused code", status_code=status.HTTP_204_NO_CONTENT)
async def delete_code(
    code_id: UUID,
    business: Business = Depends(get_business),
    service: RewardCodeService = Depends(get_code_service),
) -> Response:
    await service.delete_code(business, code_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/codes/bulk-delete", summary="Delete several codes", response_model=BulkDeleteResponse)
async def bulk_delete_codes(
    payload: BulkDeleteRequest,
    business: Business = Depends(get_business),
    confirmed: bool = Depends(admin_confirmation),
    service: RewardCodeService = Depends(get_code_service),
) -> BulkDeleteResponse:
    outcome = await service.bulk_delete(business, payload.code_ids, admin_confirmed=confirmed)
    return BulkDeleteResponse(deleted=outcome.deleted, unused=outcome.unused, bought=outcome.bought)


@router.post("/codes/redeem", summary="Redeem a customer's code", response_model=RewardCodeResponse)
async def redeem_code(
    payload: RedeemCodeRequest,
    business: Business = Depends(get_business),
    service: RewardCodeService = Depends(get_code_service),
) -> RewardCodeResponse:
    code = await service.redeem_code(business, payload.code)
    return serialize_code(code)
