from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator


def _parse_amount(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError("sellAmount must be an integer in the token's smallest unit.")
    if isinstance(value, int):
        amount = value
    elif isinstance(value, str) and value.strip().isdigit():
        amount = int(value.strip())
    else:
        raise ValueError("sellAmount must be an integer in the token's smallest unit.")
    if amount < 0:
        raise ValueError("sellAmount must be non-negative.")
    return amount


class SwapQuoteRequest(BaseModel):
    sellToken: str = Field(..., min_length=1, description="Sell token address or native sentinel.")
    buyToken: str = Field(..., min_length=1, description="Buy token address or native sentinel.")
    sellAmount: int = Field(..., description="Amount in the sell token's smallest unit.")
    taker: str = Field(..., min_length=1, description="Address that will sign and send the swap.")

    @field_validator("sellAmount", mode="before")
    @classmethod
    def _validate_sell_amount(cls, value: Any) -> int:
        return _parse_amount(value)


class FreshSwapRequest(BaseModel):
    sellAmount: int = Field(..., description="Amount in the sell token's smallest unit.")
    taker: str = Field(..., min_length=1)

    @field_validator("sellAmount", mode="before")
    @classmethod
    def _validate_sell_amount(cls, value: Any) -> int:
        return _parse_amount(value)


class PrepareSwapRequest(BaseModel):
    quote: dict[str, Any] = Field(..., description="Quote envelope previously returned by /quote.")


class HealthResponse(BaseModel):
    status: str
    feeBps: int
