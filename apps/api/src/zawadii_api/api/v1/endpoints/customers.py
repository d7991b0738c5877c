from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from zawadii_api.api.dependencies.security import require_operator_api_key
from zawadii_api.api.dependencies.services import get_business
from zawadii_api.db.session import get_session
from zawadii_api.models import Business
from zawadii_api.schemas.customer import (
    CustomerDetailResponse,
    CustomerListResponse,
    CustomerMetricsResponse,
    CustomerRewardResponse,
    UnifiedCustomerResponse,
)
from zawadii_api.services.customers import (
    DEFAULT_PAGE_SIZE,
    CustomerDirectoryService,
    CustomerFilter,
    query_customers,
)

router = APIRouter(
    prefix="/businesses/{business_id}/customers",
    tags=["Customers"],
    dependencies=[Depends(require_operator_api_key)],
)


async def get_directory_service(session: AsyncSession = Depends(get_session)) -> CustomerDirectoryService:
    return CustomerDirectoryService(session)


def parse_filters(raw_filters: list[str]) -> list[CustomerFilter]:
    """Parse ``field:operator:value`` triples, e.g. ``Total Spend:greater:10000``."""

    parsed: list[CustomerFilter] = []
    for raw in raw_filters:
        parts = raw.split(":", 2)
        if len(parts) != 3 or parts[1] not in ("greater", "less"):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid filter '{raw}'; expected field:greater|less:value",
            )
        parsed.append(CustomerFilter(field=parts[0].strip(), operator=parts[1], value=parts[2]))  # type: ignore[arg-type]
    return parsed


@router.get("", summary="Search and page the unified customer list", response_model=CustomerListResponse)
async def list_customers(
    search: str | None = Query(None),
    filters: list[str] | None = Query(None, alias="filter"),
    sort_field: str | None = Query(None, alias="sortField"),
    sort_direction: Literal["asc", "desc"] = Query("asc", alias="sortDirection"),
    page: int = Query(1, ge=1),
    page_size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=200, alias="pageSize"),
    business: Business = Depends(get_business),
    service: CustomerDirectoryService = Depends(get_directory_service),
) -> CustomerListResponse:
    directory = await service.load(business)
    result = query_customers(
        directory.customers,
        search=search,
        filters=parse_filters(filters or []),
        sort_field=sort_field,
        sort_direction=sort_direction,
        page=page,
        page_size=page_size,
    )
    return CustomerListResponse(
        items=[UnifiedCustomerResponse.model_validate(customer) for customer in result.items],
        total=result.total,
        page=result.page,
        page_size=result.page_size,
        total_pages=result.total_pages,
        metrics=CustomerMetricsResponse.model_validate(directory.metrics),
    )


@router.get("/{phone_number}", summary="Customer profile with reward history", response_model=CustomerDetailResponse)
async def get_customer(
    phone_number: str,
    business: Business = Depends(get_business),
    service: CustomerDirectoryService = Depends(get_directory_service),
) -> CustomerDetailResponse:
    detail = await service.customer_detail(business, phone_number)
    return CustomerDetailResponse(
        customer=UnifiedCustomerResponse.model_validate(detail.customer),
        rewards=[
            CustomerRewardResponse(
                id=row.id,
                reward_id=row.reward_id,
                reward_title=row.reward.title if row.reward else None,
                reward_code_id=row.reward_code_id,
                status=row.status.value,
                points_spent=row.points_spent,
                claimed_at=row.claimed_at,
                redeemed_at=row.redeemed_at,
                created_at=row.created_at,
            )
            for row in detail.rewards
        ],
    )
