from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from quote_proxy.domain.exceptions import ConfigurationError
from quote_proxy.domain.services.token_normalizer import NativeAssetMode
from quote_proxy.main import create_app
from quote_proxy.shared.config import get_settings


OPTIONAL_VARIABLES = (
    "FEE_BPS",
    "NATIVE_ASSET_MODE",
    "CHAIN_ID",
    "QUOTE_CACHE_MAX_ENTRIES",
    "CORS_ALLOW_ORIGINS",
)


@pytest.fixture
def required_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("ZEROX_API_KEY", "key")
    monkeypatch.setenv("FEE_RECIPIENT", "0xfee")
    monkeypatch.setenv("PORT", "3001")
    for name in OPTIONAL_VARIABLES:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults_match_deployment_constants(required_env):
    settings = get_settings()

    assert settings.fee_bps == 8
    assert settings.chain_id == 8453
    assert settings.port == 3001
    assert settings.native_asset_mode is NativeAssetMode.PASSTHROUGH
    assert settings.quote_cache_max_entries == 100
    assert settings.quote_cache_ttl_seconds == 10
    assert settings.quote_validity_seconds == 30
    assert settings.cors_allow_origins == ["*"]


@pytest.mark.parametrize("missing", ["ZEROX_API_KEY", "FEE_RECIPIENT", "PORT"])
def test_missing_required_variable_is_fatal(required_env, missing):
    required_env.delenv(missing)

    with pytest.raises(ConfigurationError, match=missing):
        get_settings()


def test_invalid_native_asset_mode_is_fatal(required_env):
    required_env.setenv("NATIVE_ASSET_MODE", "hybrid")

    with pytest.raises(ConfigurationError):
        get_settings()


def test_non_integer_fee_bps_is_fatal(required_env):
    required_env.setenv("FEE_BPS", "eight")

    with pytest.raises(ConfigurationError):
        get_settings()


def test_wrap_mode_from_env(required_env):
    required_env.setenv("NATIVE_ASSET_MODE", "WRAP")

    assert get_settings().native_asset_mode is NativeAssetMode.WRAP


def test_app_without_explicit_settings_reads_cors_origins_from_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "https://app.example, https://admin.example")
    client = TestClient(create_app())
    preflight_headers = {"Access-Control-Request-Method": "POST"}

    allowed = client.options("/quote", headers={"Origin": "https://app.example", **preflight_headers})
    rejected = client.options("/quote", headers={"Origin": "https://evil.example", **preflight_headers})

    assert allowed.status_code == 200
    assert allowed.headers["access-control-allow-origin"] == "https://app.example"
    assert rejected.status_code == 400
