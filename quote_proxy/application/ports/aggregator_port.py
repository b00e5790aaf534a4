from __future__ import annotations

from typing import Any, Protocol

from quote_proxy.domain.entities.quote import FeePolicy
from quote_proxy.domain.entities.swap import NormalizedSwapRequest


class AggregatorPort(Protocol):
    async def fetch_quote(
        self,
        request: NormalizedSwapRequest,
        *,
        fee_policy: FeePolicy,
        timeout_seconds: float | None = None,
    ) -> dict[str, Any]:
        ...
