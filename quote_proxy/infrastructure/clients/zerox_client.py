from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any

import httpx

from quote_proxy.application.ports.aggregator_port import AggregatorPort
from quote_proxy.domain.entities.quote import FeePolicy
from quote_proxy.domain.entities.swap import NormalizedSwapRequest
from quote_proxy.domain.exceptions import UpstreamQuoteError


logger = logging.getLogger(__name__)

ALLOWANCE_HOLDER_QUOTE_PATH = "/swap/allowance-holder/quote"
ZEROX_API_VERSION = "v2"
MAX_ERROR_BODY_CHARS = 2000


@dataclass(frozen=True)
class ZeroExClientSettings:
    api_base: str
    api_key: str
    chain_id: int
    slippage_bps: int
    timeout_seconds: float
    max_connections: int = 10
    max_keepalive_connections: int = 10


class ZeroExAggregatorClient(AggregatorPort):
    """Async 0x Swap API client sharing one keep-alive connection pool.

    A single call is made per quote; failures are never retried here.
    """

    def __init__(
        self,
        settings: ZeroExClientSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._settings = settings
        self._client = httpx.AsyncClient(
            base_url=settings.api_base.rstrip("/"),
            headers={
                "0x-api-key": settings.api_key,
                "0x-version": ZEROX_API_VERSION,
            },
            timeout=settings.timeout_seconds,
            limits=httpx.Limits(
                max_connections=settings.max_connections,
                max_keepalive_connections=settings.max_keepalive_connections,
            ),
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    def build_params(self, request: NormalizedSwapRequest, *, fee_policy: FeePolicy) -> dict[str, str]:
        params = {
            "chainId": str(self._settings.chain_id),
            "sellToken": request.sell_token,
            "buyToken": request.buy_token,
            "sellAmount": str(request.sell_amount),
            "taker": request.taker,
            "slippageBps": str(self._settings.slippage_bps),
        }
        params.update(fee_policy.to_params(buy_token=request.buy_token))
        return params

    async def fetch_quote(
        self,
        request: NormalizedSwapRequest,
        *,
        fee_policy: FeePolicy,
        timeout_seconds: float | None = None,
    ) -> dict[str, Any]:
        params = self.build_params(request, fee_policy=fee_policy)
        timeout = timeout_seconds if timeout_seconds is not None else self._settings.timeout_seconds
        try:
            response = await self._client.get(
                ALLOWANCE_HOLDER_QUOTE_PATH,
                params=params,
                timeout=timeout,
            )
        except httpx.TimeoutException as exc:
            logger.warning(
                "zerox_client: upstream_timeout timeout=%s sell=%s buy=%s",
                timeout,
                request.sell_token,
                request.buy_token,
            )
            raise UpstreamQuoteError(f"Upstream quote timed out after {timeout}s.") from exc
        except httpx.HTTPError as exc:
            logger.warning("zerox_client: upstream_unreachable error=%s", exc)
            raise UpstreamQuoteError(f"Upstream quote request failed: {exc}") from exc

        if not response.is_success:
            body = _error_body(response)
            logger.warning(
                "zerox_client: upstream_error status=%s sell=%s buy=%s body=%s",
                response.status_code,
                request.sell_token,
                request.buy_token,
                body,
            )
            raise UpstreamQuoteError(
                f"Upstream quote failed with status {response.status_code}.",
                status_code=response.status_code,
                body=body,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamQuoteError(
                "Upstream quote returned a malformed body.",
                status_code=response.status_code,
                body=response.text[:MAX_ERROR_BODY_CHARS],
            ) from exc
        if not isinstance(payload, dict):
            raise UpstreamQuoteError(
                "Upstream quote returned a malformed body.",
                status_code=response.status_code,
                body=payload,
            )
        return payload


def _error_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text[:MAX_ERROR_BODY_CHARS]
