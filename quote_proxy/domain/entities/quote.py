from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any

from quote_proxy.domain.exceptions import ConfigurationError

MAX_FEE_BPS = 10000


def _stamp(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


@dataclass(frozen=True)
class FeePolicy:
    fee_bps: int
    fee_recipient: str

    def __post_init__(self) -> None:
        if isinstance(self.fee_bps, bool) or not isinstance(self.fee_bps, int):
            raise ConfigurationError("FEE_BPS must be an integer.")
        if not 0 <= self.fee_bps <= MAX_FEE_BPS:
            raise ConfigurationError(f"FEE_BPS must be in [0, {MAX_FEE_BPS}], got {self.fee_bps}.")
        if not self.fee_recipient:
            raise ConfigurationError("FEE_RECIPIENT is required.")

    def to_params(self, *, buy_token: str) -> dict[str, str]:
        return {
            "swapFeeRecipient": self.fee_recipient,
            "swapFeeBps": str(self.fee_bps),
            "swapFeeToken": buy_token,
        }


@dataclass(frozen=True)
class Quote:
    """Aggregator quote plus the proxy's validity stamps (epoch milliseconds)."""

    payload: dict[str, Any]
    valid_until: int
    fee_bps: int
    cached_at: int

    def copy(self) -> "Quote":
        return Quote(
            payload=copy.deepcopy(self.payload),
            valid_until=self.valid_until,
            fee_bps=self.fee_bps,
            cached_at=self.cached_at,
        )

    @classmethod
    def from_envelope(cls, envelope: dict[str, Any]) -> "Quote":
        payload = copy.deepcopy(envelope)
        # Missing or unreadable stamps make the quote already expired.
        return cls(
            payload=payload,
            valid_until=_stamp(payload.pop("validUntil", None)),
            fee_bps=_stamp(payload.pop("feeBps", None)),
            cached_at=_stamp(payload.pop("cachedAt", None)),
        )

    def to_envelope(self) -> dict[str, Any]:
        envelope = copy.deepcopy(self.payload)
        envelope["validUntil"] = self.valid_until
        envelope["feeBps"] = self.fee_bps
        envelope["cachedAt"] = self.cached_at
        return envelope


@dataclass(frozen=True)
class CacheEntry:
    key: str
    quote: Quote
    inserted_at: int


@dataclass(frozen=True)
class ExecutionPayload:
    to: str | None
    data: str | None
    value: str
    gas: str | None
    gas_price: str | None
    allowance_target: str | None
    buy_amount: str | None
    sell_amount: str | None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_response(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "success": True,
            "to": self.to,
            "data": self.data,
            "value": self.value,
            "gas": self.gas,
            "gasPrice": self.gas_price,
            "allowanceTarget": self.allowance_target,
            "buyAmount": self.buy_amount,
            "sellAmount": self.sell_amount,
        }
        body.update(self.extra)
        return body
