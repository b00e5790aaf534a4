from __future__ import annotations

from fastapi import APIRouter, Depends

from quote_proxy.api.deps import get_fee_policy
from quote_proxy.api.schemas.swap import HealthResponse
from quote_proxy.domain.entities.quote import FeePolicy


router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(fee_policy: FeePolicy = Depends(get_fee_policy)):
    return HealthResponse(status="ok", feeBps=fee_policy.fee_bps)
