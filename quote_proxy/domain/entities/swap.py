from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SwapRequest:
    sell_token: str
    buy_token: str
    sell_amount: int
    taker: str


@dataclass(frozen=True)
class NormalizedSwapRequest:
    sell_token: str
    buy_token: str
    sell_amount: int
    taker: str

    def cache_key(self) -> str:
        return f"{self.sell_token}-{self.buy_token}-{self.sell_amount}-{self.taker}"
