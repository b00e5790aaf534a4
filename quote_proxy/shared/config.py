from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from quote_proxy.domain.exceptions import ConfigurationError
from quote_proxy.domain.services.token_normalizer import (
    NATIVE_ASSET_SENTINEL,
    WRAPPED_NATIVE_BASE,
    NativeAssetMode,
)


load_dotenv()

REQUIRED_VARIABLES = ("ZEROX_API_KEY", "FEE_RECIPIENT", "PORT")
USDC_BASE = "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913"


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


def _int(name: str, default: str) -> int:
    value = _env(name, default)
    try:
        return int(str(value).strip())
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}.") from exc


def _float(name: str, default: str) -> float:
    value = _env(name, default)
    try:
        return float(str(value).strip())
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {value!r}.") from exc


def _csv(name: str, default: str) -> list[str]:
    value = _env(name, default) or ""
    return [item.strip() for item in value.split(",") if item.strip()]


def get_cors_allow_origins() -> list[str]:
    return _csv("CORS_ALLOW_ORIGINS", "*")


@dataclass(frozen=True)
class Settings:
    zerox_api_key: str
    zerox_api_base: str
    fee_recipient: str
    fee_bps: int
    port: int
    chain_id: int
    slippage_bps: int
    native_asset_mode: NativeAssetMode
    wrapped_native_address: str
    quote_timeout_seconds: float
    execute_timeout_seconds: float
    quote_cache_ttl_seconds: float
    quote_cache_max_entries: int
    quote_validity_seconds: float
    http_max_connections: int
    http_max_keepalive_connections: int
    fresh_swap_sell_token: str
    fresh_swap_buy_token: str
    cors_allow_origins: list[str]
    log_level: str


def get_settings() -> Settings:
    missing = [name for name in REQUIRED_VARIABLES if not (_env(name) or "").strip()]
    if missing:
        raise ConfigurationError(f"Missing required environment variables: {', '.join(missing)}.")

    mode_raw = (_env("NATIVE_ASSET_MODE", NativeAssetMode.PASSTHROUGH.value) or "").strip().lower()
    try:
        native_asset_mode = NativeAssetMode(mode_raw)
    except ValueError as exc:
        raise ConfigurationError(
            f"NATIVE_ASSET_MODE must be one of: passthrough, wrap (got {mode_raw!r})."
        ) from exc

    return Settings(
        zerox_api_key=_env("ZEROX_API_KEY", "").strip(),
        zerox_api_base=_env("ZEROX_API_BASE", "https://api.0x.org"),
        fee_recipient=_env("FEE_RECIPIENT", "").strip(),
        fee_bps=_int("FEE_BPS", "8"),
        port=_int("PORT", "3001"),
        chain_id=_int("CHAIN_ID", "8453"),
        slippage_bps=_int("SLIPPAGE_BPS", "200"),
        native_asset_mode=native_asset_mode,
        wrapped_native_address=_env("WRAPPED_NATIVE_ADDRESS", WRAPPED_NATIVE_BASE),
        quote_timeout_seconds=_float("QUOTE_TIMEOUT_SECONDS", "3"),
        execute_timeout_seconds=_float("EXECUTE_TIMEOUT_SECONDS", "2"),
        quote_cache_ttl_seconds=_float("QUOTE_CACHE_TTL_SECONDS", "10"),
        quote_cache_max_entries=_int("QUOTE_CACHE_MAX_ENTRIES", "100"),
        quote_validity_seconds=_float("QUOTE_VALIDITY_SECONDS", "30"),
        http_max_connections=_int("HTTP_MAX_CONNECTIONS", "10"),
        http_max_keepalive_connections=_int("HTTP_MAX_KEEPALIVE_CONNECTIONS", "10"),
        fresh_swap_sell_token=_env("FRESH_SWAP_SELL_TOKEN", NATIVE_ASSET_SENTINEL),
        fresh_swap_buy_token=_env("FRESH_SWAP_BUY_TOKEN", USDC_BASE),
        cors_allow_origins=get_cors_allow_origins(),
        log_level=(_env("LOG_LEVEL", "INFO") or "INFO").upper(),
    )
