from __future__ import annotations

import logging
from typing import Callable

from quote_proxy.application.ports.aggregator_port import AggregatorPort
from quote_proxy.application.ports.quote_cache_port import QuoteCachePort
from quote_proxy.application.use_cases.swap_common import validate_normalized_request
from quote_proxy.domain.entities.quote import FeePolicy, Quote
from quote_proxy.domain.entities.swap import SwapRequest
from quote_proxy.domain.services.token_normalizer import TokenNormalizer
from quote_proxy.shared.clock import epoch_ms


logger = logging.getLogger(__name__)


class GetQuoteUseCase:
    """Normalize, serve from cache when fresh, otherwise fetch and cache.

    Concurrent misses for the same key are not coalesced; each one calls the
    aggregator and the last write wins.
    """

    def __init__(
        self,
        *,
        normalizer: TokenNormalizer,
        cache: QuoteCachePort,
        aggregator: AggregatorPort,
        fee_policy: FeePolicy,
        validity_seconds: float = 30,
        timeout_seconds: float | None = None,
        clock: Callable[[], int] = epoch_ms,
    ):
        self._normalizer = normalizer
        self._cache = cache
        self._aggregator = aggregator
        self._fee_policy = fee_policy
        self._validity_ms = int(validity_seconds * 1000)
        self._timeout_seconds = timeout_seconds
        self._clock = clock

    async def execute(self, command: SwapRequest) -> Quote:
        request = self._normalizer.normalize(command)
        validate_normalized_request(request)

        key = request.cache_key()
        cached = self._cache.get(key)
        if cached is not None:
            logger.info("get_quote: cache_hit key=%s", key)
            return cached

        logger.info(
            "get_quote: cache_miss key=%s mode=%s",
            key,
            self._normalizer.mode.value,
        )
        payload = await self._aggregator.fetch_quote(
            request,
            fee_policy=self._fee_policy,
            timeout_seconds=self._timeout_seconds,
        )

        now = self._clock()
        quote = Quote(
            payload=payload,
            valid_until=now + self._validity_ms,
            fee_bps=self._fee_policy.fee_bps,
            cached_at=now,
        )
        self._cache.put(key, quote)
        return quote.copy()
