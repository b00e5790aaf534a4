from __future__ import annotations

from typing import Protocol

from quote_proxy.domain.entities.quote import Quote


class QuoteCachePort(Protocol):
    def get(self, key: str) -> Quote | None:
        ...

    def put(self, key: str, quote: Quote) -> None:
        ...
