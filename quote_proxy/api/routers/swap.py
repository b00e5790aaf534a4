from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from quote_proxy.api.deps import (
    get_fresh_swap_use_case,
    get_prepare_swap_use_case,
    get_quote_and_execute_use_case,
)
from quote_proxy.api.errors import error_response, upstream_error_response
from quote_proxy.api.schemas.swap import FreshSwapRequest, PrepareSwapRequest, SwapQuoteRequest
from quote_proxy.application.dto.swap import FreshSwapInput
from quote_proxy.application.use_cases.fresh_swap import FreshSwapUseCase
from quote_proxy.application.use_cases.prepare_swap import PrepareSwapUseCase
from quote_proxy.application.use_cases.quote_and_execute import QuoteAndExecuteUseCase
from quote_proxy.domain.entities.quote import Quote
from quote_proxy.domain.entities.swap import SwapRequest
from quote_proxy.domain.exceptions import (
    QuoteExpiredError,
    SwapRequestValidationError,
    UpstreamQuoteError,
)


router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/api/prepare-swap")
@router.post("/prepare-swap")
async def prepare_swap(
    req: PrepareSwapRequest,
    use_case: PrepareSwapUseCase = Depends(get_prepare_swap_use_case),
):
    quote = Quote.from_envelope(req.quote)
    try:
        payload = use_case.execute(quote)
    except QuoteExpiredError as exc:
        logger.warning("swap_router: quote_expired valid_until=%s", quote.valid_until)
        return error_response(400, str(exc))
    except SwapRequestValidationError as exc:
        return error_response(400, "Invalid request", str(exc))

    return payload.to_response()


@router.post("/api/quote-and-execute")
@router.post("/quote-and-execute")
async def quote_and_execute(
    req: SwapQuoteRequest,
    use_case: QuoteAndExecuteUseCase = Depends(get_quote_and_execute_use_case),
):
    try:
        payload = await use_case.execute(
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
            "swap_router: quote_and_execute_upstream_error sell=%s buy=%s status=%s detail=%s",
            req.sellToken,
            req.buyToken,
            exc.status_code,
            exc,
        )
        return upstream_error_response("Failed to get fresh quote for execution", exc)

    return payload.to_response()


@router.post("/api/fresh-swap")
@router.post("/fresh-swap")
async def fresh_swap(
    req: FreshSwapRequest,
    use_case: FreshSwapUseCase = Depends(get_fresh_swap_use_case),
):
    try:
        payload = await use_case.execute(FreshSwapInput(sell_amount=req.sellAmount, taker=req.taker))
    except SwapRequestValidationError as exc:
        return error_response(400, "Invalid request", str(exc))
    except UpstreamQuoteError as exc:
        logger.warning("swap_router: fresh_swap_upstream_error status=%s detail=%s", exc.status_code, exc)
        return upstream_error_response("Fresh swap failed", exc)

    return {
        "success": True,
        "to": payload.to,
        "data": payload.data,
        "value": payload.value,
        "buyAmount": payload.buy_amount,
        "sellAmount": payload.sell_amount,
    }
