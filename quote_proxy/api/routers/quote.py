from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from quote_proxy.api.deps import get_get_quote_use_case
from quote_proxy.api.errors import error_response, upstream_error_response
from quote_proxy.api.schemas.swap import SwapQuoteRequest
from quote_proxy.application.use_cases.get_quote import GetQuoteUseCase
from quote_proxy.domain.entities.swap import SwapRequest
from quote_proxy.domain.exceptions import SwapRequestValidationError, UpstreamQuoteError


router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/api/quote")
@router.post("/quote")
async def get_quote(
    req: SwapQuoteRequest,
    use_case: GetQuoteUseCase = Depends(get_get_quote_use_case),
):
    try:
        quote = await use_case.execute(
            SwapRequest(
                sell_token=req.sellToken,
                buy_token=req.buyToken,
                sell_amount=req.sellAmount,
                taker=req.taker,
            )
        )
    except SwapRequestValidationError as exc:
        return error_response(400, "Invalid request", str(exc))
    except UpstreamQuoteError as exc:
        logger.warning(
            "quote_router: upstream_error sell=%s buy=%s status=%s detail=%s",
            req.sellToken,
            req.buyToken,
            exc.status_code,
            exc,
        )
        return upstream_error_response("Failed to get quote", exc)

    return quote.to_envelope()
