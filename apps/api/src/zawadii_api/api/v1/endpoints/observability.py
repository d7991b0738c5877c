"""Loyalty pipeline counters."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from zawadii_api.api.dependencies.security import require_operator_api_key
from zawadii_api.observability.loyalty import get_loyalty_store


router = APIRouter(prefix="/observability", tags=["Observability"])


@router.get(
    "/loyalty",
    dependencies=[Depends(require_operator_api_key)],
    summary="Loyalty activity, messaging and reward counters",
)
async def loyalty_snapshot() -> dict[str, object]:
    return get_loyalty_store().snapshot().as_dict()
