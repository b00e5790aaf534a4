from __future__ import annotations

from dataclasses import dataclass

import httpx
from fastapi import Depends, Request

from quote_proxy.application.use_cases.fresh_swap import FreshSwapUseCase
from quote_proxy.application.use_cases.get_quote import GetQuoteUseCase
from quote_proxy.application.use_cases.prepare_swap import PrepareSwapUseCase
from quote_proxy.application.use_cases.quote_and_execute import QuoteAndExecuteUseCase
from quote_proxy.domain.entities.quote import FeePolicy
from quote_proxy.domain.services.token_normalizer import TokenNormalizer
from quote_proxy.infrastructure.cache.quote_cache import InMemoryQuoteCache
from quote_proxy.infrastructure.clients.zerox_client import (
    ZeroExAggregatorClient,
    ZeroExClientSettings,
)
from quote_proxy.shared.config import Settings


@dataclass
class ServiceContainer:
    """Process-scoped collaborators, built once at startup and closed at shutdown."""

    settings: Settings
    fee_policy: FeePolicy
    normalizer: TokenNormalizer
    cache: InMemoryQuoteCache
    aggregator: ZeroExAggregatorClient

    async def aclose(self) -> None:
        await self.aggregator.aclose()


def build_container(
    settings: Settings,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ServiceContainer:
    fee_policy = FeePolicy(fee_bps=settings.fee_bps, fee_recipient=settings.fee_recipient)
    return ServiceContainer(
        settings=settings,
        fee_policy=fee_policy,
        normalizer=TokenNormalizer(
            mode=settings.native_asset_mode,
            wrapped_native_address=settings.wrapped_native_address,
        ),
        cache=InMemoryQuoteCache(
            ttl_seconds=settings.quote_cache_ttl_seconds,
            max_entries=settings.quote_cache_max_entries,
        ),
        aggregator=ZeroExAggregatorClient(
            ZeroExClientSettings(
                api_base=settings.zerox_api_base,
                api_key=settings.zerox_api_key,
                chain_id=settings.chain_id,
                slippage_bps=settings.slippage_bps,
                timeout_seconds=settings.quote_timeout_seconds,
                max_connections=settings.http_max_connections,
                max_keepalive_connections=settings.http_max_keepalive_connections,
            ),
            transport=transport,
        ),
    )


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def get_fee_policy(container: ServiceContainer = Depends(get_container)) -> FeePolicy:
    return container.fee_policy


def get_get_quote_use_case(container: ServiceContainer = Depends(get_container)) -> GetQuoteUseCase:
    return GetQuoteUseCase(
        normalizer=container.normalizer,
        cache=container.cache,
        aggregator=container.aggregator,
        fee_policy=container.fee_policy,
        validity_seconds=container.settings.quote_validity_seconds,
        timeout_seconds=container.settings.quote_timeout_seconds,
    )


def get_prepare_swap_use_case() -> PrepareSwapUseCase:
    return PrepareSwapUseCase()


def get_quote_and_execute_use_case(
    container: ServiceContainer = Depends(get_container),
) -> QuoteAndExecuteUseCase:
    return QuoteAndExecuteUseCase(
        normalizer=container.normalizer,
        aggregator=container.aggregator,
        fee_policy=container.fee_policy,
        timeout_seconds=container.settings.execute_timeout_seconds,
    )


def get_fresh_swap_use_case(container: ServiceContainer = Depends(get_container)) -> FreshSwapUseCase:
    return FreshSwapUseCase(
        normalizer=container.normalizer,
        aggregator=container.aggregator,
        fee_policy=container.fee_policy,
        sell_token=container.settings.fresh_swap_sell_token,
        buy_token=container.settings.fresh_swap_buy_token,
        timeout_seconds=container.settings.quote_timeout_seconds,
    )
