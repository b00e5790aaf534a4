from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from quote_proxy.domain.exceptions import ConfigurationError
from quote_proxy.domain.services.token_normalizer import (
    NATIVE_ASSET_SENTINEL,
    WRAPPED_NATIVE_BASE,
    NativeAssetMode,
)
from quote_proxy.main import create_app
from quote_proxy.shared.config import Settings


USDC = "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913"
TAKER = "0xabc0000000000000000000000000000000000001"
BODY = {
    "sellToken": NATIVE_ASSET_SENTINEL,
    "buyToken": USDC,
    "sellAmount": "5000000000000000",
    "taker": TAKER,
}


def _settings(**overrides) -> Settings:
    values = {
        "zerox_api_key": "test-key",
        "zerox_api_base": "https://api.0x.org",
        "fee_recipient": "0xfee",
        "fee_bps": 8,
        "port": 3001,
        "chain_id": 8453,
        "slippage_bps": 200,
        "native_asset_mode": NativeAssetMode.PASSTHROUGH,
        "wrapped_native_address": WRAPPED_NATIVE_BASE,
        "quote_timeout_seconds": 3.0,
        "execute_timeout_seconds": 2.0,
        "quote_cache_ttl_seconds": 10.0,
        "quote_cache_max_entries": 100,
        "quote_validity_seconds": 30.0,
        "http_max_connections": 10,
        "http_max_keepalive_connections": 10,
        "fresh_swap_sell_token": NATIVE_ASSET_SENTINEL,
        "fresh_swap_buy_token": USDC,
        "cors_allow_origins": ["*"],
        "log_level": "INFO",
    }
    values.update(overrides)
    return Settings(**values)


class RecordingUpstream:
    def __init__(self, status_code: int = 200):
        self.requests: list[httpx.Request] = []
        self._status_code = status_code

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self._status_code != 200:
            return httpx.Response(self._status_code, json={"name": "INTERNAL_ERROR"})
        params = request.url.params
        return httpx.Response(
            200,
            json={
                "sellToken": params["sellToken"],
                "buyToken": params["buyToken"],
                "sellAmount": params["sellAmount"],
                "buyAmount": "12500000",
                "allowanceTarget": "0x0000000000001fF3684f28c67538d4D072C22734",
                "transaction": {
                    "to": "0x0000000000001fF3684f28c67538d4D072C22734",
                    "data": "0xcafe",
                    "value": params["sellAmount"] if params["sellToken"] == NATIVE_ASSET_SENTINEL else "0",
                    "gas": "200000",
                    "gasPrice": "5000000",
                },
            },
        )


def test_quote_end_to_end_fetches_once_then_serves_from_cache():
    upstream = RecordingUpstream()
    app = create_app(_settings(), transport=httpx.MockTransport(upstream))

    with TestClient(app) as client:
        first = client.post("/quote", json=BODY)
        second = client.post("/api/quote", json=BODY)
        health = client.get("/health")

    assert first.status_code == 200
    assert second.status_code == 200
    assert len(upstream.requests) == 1
    params = upstream.requests[0].url.params
    assert params["sellToken"] == NATIVE_ASSET_SENTINEL
    assert params["swapFeeBps"] == "8"
    assert params["swapFeeRecipient"] == "0xfee"
    payload = first.json()
    assert payload["validUntil"] - payload["cachedAt"] == 30_000
    assert payload["feeBps"] == 8
    assert second.json() == payload
    assert health.json() == {"status": "ok", "feeBps": 8}


def test_wrap_mode_deployment_rewrites_native_sentinel():
    upstream = RecordingUpstream()
    app = create_app(
        _settings(native_asset_mode=NativeAssetMode.WRAP),
        transport=httpx.MockTransport(upstream),
    )

    with TestClient(app) as client:
        response = client.post("/quote-and-execute", json=BODY)

    assert response.status_code == 200
    assert upstream.requests[0].url.params["sellToken"] == WRAPPED_NATIVE_BASE
    assert response.json()["value"] == "0"


def test_quote_and_execute_bypasses_cache():
    upstream = RecordingUpstream()
    app = create_app(_settings(), transport=httpx.MockTransport(upstream))

    with TestClient(app) as client:
        client.post("/quote", json=BODY)
        response = client.post("/quote-and-execute", json=BODY)

    assert len(upstream.requests) == 2
    payload = response.json()
    assert payload["freshQuote"] is True
    assert payload["value"] == "5000000000000000"
    assert payload["sellToken"] == NATIVE_ASSET_SENTINEL


def test_quote_then_prepare_swap_round_trip():
    upstream = RecordingUpstream()
    app = create_app(_settings(), transport=httpx.MockTransport(upstream))

    with TestClient(app) as client:
        quote = client.post("/quote", json=BODY).json()
        response = client.post("/prepare-swap", json={"quote": quote})

    assert response.status_code == 200
    assert response.json()["data"] == "0xcafe"


def test_fresh_swap_uses_configured_pair():
    upstream = RecordingUpstream()
    app = create_app(_settings(), transport=httpx.MockTransport(upstream))

    with TestClient(app) as client:
        response = client.post("/fresh-swap", json={"sellAmount": "5000000000000000", "taker": TAKER})

    assert response.status_code == 200
    params = upstream.requests[0].url.params
    assert params["buyToken"] == USDC
    assert params["swapFeeToken"] == USDC
    assert set(response.json()) == {"success", "to", "data", "value", "buyAmount", "sellAmount"}


def test_upstream_failure_keeps_server_serving():
    upstream = RecordingUpstream(status_code=500)
    app = create_app(_settings(), transport=httpx.MockTransport(upstream))

    with TestClient(app) as client:
        failed = client.post("/quote", json=BODY)
        health = client.get("/health")

    assert failed.status_code == 500
    assert failed.json()["details"]["upstreamStatus"] == 500
    assert health.status_code == 200


def test_invalid_fee_bps_is_fatal_at_startup():
    with pytest.raises(ConfigurationError):
        create_app(_settings(fee_bps=10001))


def _no_liquidity(request: httpx.Request) -> httpx.Response:
    _ = request
    return httpx.Response(200, json={"liquidityAvailable": False, "zid": "0x1"})


def test_quote_and_execute_without_upstream_transaction_returns_500():
    app = create_app(_settings(), transport=httpx.MockTransport(_no_liquidity))

    with TestClient(app) as client:
        response = client.post("/quote-and-execute", json=BODY)

    assert response.status_code == 500
    payload = response.json()
    assert payload["error"] == "Failed to get fresh quote for execution"
    assert payload["details"]["upstreamStatus"] == 200
    assert payload["details"]["upstreamBody"] == {"liquidityAvailable": False, "zid": "0x1"}


def test_fresh_swap_without_upstream_transaction_returns_500():
    app = create_app(_settings(), transport=httpx.MockTransport(_no_liquidity))

    with TestClient(app) as client:
        response = client.post("/fresh-swap", json={"sellAmount": "5000000000000000", "taker": TAKER})

    assert response.status_code == 500
    payload = response.json()
    assert payload["error"] == "Fresh swap failed"
    assert payload["details"]["upstreamBody"]["liquidityAvailable"] is False
