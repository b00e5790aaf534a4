from __future__ import annotations

from typing import Any

from quote_proxy.domain.entities.quote import ExecutionPayload, Quote
from quote_proxy.domain.exceptions import QuoteExpiredError, SwapRequestValidationError


QUOTE_EXPIRED_MESSAGE = "Quote expired, please refresh"


def _as_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def project_execution_payload(payload: dict[str, Any]) -> ExecutionPayload:
    transaction = payload.get("transaction")
    if not isinstance(transaction, dict):
        raise SwapRequestValidationError("quote.transaction is required.")
    return ExecutionPayload(
        to=_as_str(transaction.get("to")),
        data=_as_str(transaction.get("data")),
        value=_as_str(transaction.get("value")) or "0",
        gas=_as_str(transaction.get("gas")),
        gas_price=_as_str(transaction.get("gasPrice")),
        allowance_target=_as_str(payload.get("allowanceTarget")),
        buy_amount=_as_str(payload.get("buyAmount")),
        sell_amount=_as_str(payload.get("sellAmount")),
    )


def prepare_execution(quote: Quote, *, now_ms: int) -> ExecutionPayload:
    if now_ms > quote.valid_until:
        raise QuoteExpiredError(QUOTE_EXPIRED_MESSAGE)
    return project_execution_payload(quote.payload)
