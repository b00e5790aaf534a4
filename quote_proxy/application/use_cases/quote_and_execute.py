from __future__ import annotations

from dataclasses import replace
import logging
from typing import Callable

from quote_proxy.application.ports.aggregator_port import AggregatorPort
from quote_proxy.application.use_cases.swap_common import (
    project_upstream_payload,
    validate_normalized_request,
)
from quote_proxy.domain.entities.quote import ExecutionPayload, FeePolicy
from quote_proxy.domain.entities.swap import SwapRequest
from quote_proxy.domain.services.token_normalizer import TokenNormalizer
from quote_proxy.shared.clock import epoch_ms


logger = logging.getLogger(__name__)


class QuoteAndExecuteUseCase:
    """Fetch a fresh quote and hand back its transaction in one round trip.

    Bypasses the quote cache so the returned payload is never stale.
    """

    def __init__(
        self,
        *,
        normalizer: TokenNormalizer,
        aggregator: AggregatorPort,
        fee_policy: FeePolicy,
        timeout_seconds: float | None = None,
        clock: Callable[[], int] = epoch_ms,
    ):
        self._normalizer = normalizer
        self._aggregator = aggregator
        self._fee_policy = fee_policy
        self._timeout_seconds = timeout_seconds
        self._clock = clock

    async def execute(self, command: SwapRequest) -> ExecutionPayload:
        request = self._normalizer.normalize(command)
        validate_normalized_request(request)

        payload = await self._aggregator.fetch_quote(
            request,
            fee_policy=self._fee_policy,
            timeout_seconds=self._timeout_seconds,
        )
        execution = project_upstream_payload(payload)
        logger.info(
            "quote_and_execute: fresh_quote sell=%s buy=%s upstream_sell=%s value=%s",
            request.sell_token,
            request.buy_token,
            payload.get("sellToken"),
            execution.value,
        )
        return replace(
            execution,
            extra={
                "sellToken": payload.get("sellToken"),
                "freshQuote": True,
                "timestamp": self._clock(),
            },
        )
