from __future__ import annotations

from typing import Any

from quote_proxy.domain.entities.quote import ExecutionPayload
from quote_proxy.domain.entities.swap import NormalizedSwapRequest
from quote_proxy.domain.exceptions import SwapRequestValidationError, UpstreamQuoteError
from quote_proxy.domain.services.execution import project_execution_payload


def validate_normalized_request(request: NormalizedSwapRequest) -> None:
    if not request.sell_token or not request.buy_token:
        raise SwapRequestValidationError("sellToken and buyToken are required.")
    if not request.taker:
        raise SwapRequestValidationError("taker is required.")
    if request.sell_amount <= 0:
        raise SwapRequestValidationError("sellAmount must be a positive integer.")
    if request.sell_token.lower() == request.buy_token.lower():
        raise SwapRequestValidationError("sellToken and buyToken must differ.")


def project_upstream_payload(payload: dict[str, Any]) -> ExecutionPayload:
    # A quote without a transaction (e.g. liquidityAvailable=false) is an upstream fault.
    try:
        return project_execution_payload(payload)
    except SwapRequestValidationError as exc:
        raise UpstreamQuoteError(
            "Upstream quote returned no transaction.",
            status_code=200,
            body=payload,
        ) from exc
