from __future__ import annotations

import logging

from quote_proxy.application.dto.swap import FreshSwapInput
from quote_proxy.application.ports.aggregator_port import AggregatorPort
from quote_proxy.application.use_cases.swap_common import (
    project_upstream_payload,
    validate_normalized_request,
)
from quote_proxy.domain.entities.quote import ExecutionPayload, FeePolicy
from quote_proxy.domain.entities.swap import SwapRequest
from quote_proxy.domain.services.token_normalizer import TokenNormalizer


logger = logging.getLogger(__name__)


class FreshSwapUseCase:
    """Quote the deployment's default pair without touching the cache."""

    def __init__(
        self,
        *,
        normalizer: TokenNormalizer,
        aggregator: AggregatorPort,
        fee_policy: FeePolicy,
        sell_token: str,
        buy_token: str,
        timeout_seconds: float | None = None,
    ):
        self._normalizer = normalizer
        self._aggregator = aggregator
        self._fee_policy = fee_policy
        self._sell_token = sell_token
        self._buy_token = buy_token
        self._timeout_seconds = timeout_seconds

    async def execute(self, command: FreshSwapInput) -> ExecutionPayload:
        request = self._normalizer.normalize(
            SwapRequest(
                sell_token=self._sell_token,
                buy_token=self._buy_token,
                sell_amount=command.sell_amount,
                taker=command.taker,
            )
        )
        validate_normalized_request(request)

        logger.info(
            "fresh_swap: start sell_amount=%s taker=%s",
            request.sell_amount,
            request.taker,
        )
        payload = await self._aggregator.fetch_quote(
            request,
            fee_policy=self._fee_policy,
            timeout_seconds=self._timeout_seconds,
        )
        return project_upstream_payload(payload)
