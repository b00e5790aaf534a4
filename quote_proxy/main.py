from __future__ import annotations

from contextlib import asynccontextmanager
import logging
import sys

import httpx
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from quote_proxy.api.deps import build_container
from quote_proxy.api.errors import request_validation_handler, unhandled_error_handler
from quote_proxy.api.routers import health, quote, swap
from quote_proxy.domain.entities.quote import FeePolicy
from quote_proxy.domain.exceptions import ConfigurationError
from quote_proxy.shared.config import Settings, get_cors_allow_origins, get_settings


logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    if settings is not None:
        FeePolicy(fee_bps=settings.fee_bps, fee_recipient=settings.fee_recipient)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        resolved = settings if settings is not None else get_settings()
        container = build_container(resolved, transport=transport)
        app.state.container = container
        logger.info(
            "main: started chain_id=%s fee_bps=%s native_asset_mode=%s cache_ttl=%ss cache_max=%s",
            resolved.chain_id,
            resolved.fee_bps,
            resolved.native_asset_mode.value,
            resolved.quote_cache_ttl_seconds,
            resolved.quote_cache_max_entries,
        )
        try:
            yield
        finally:
            await container.aclose()
            logger.info("main: stopped")

    app = FastAPI(title="Quote Proxy", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins if settings is not None else get_cors_allow_origins(),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
    app.include_router(health.router)
    app.include_router(quote.router)
    app.include_router(swap.router)
    return app


app = create_app()


def run() -> None:
    try:
        settings = get_settings()
        application = create_app(settings)
    except ConfigurationError as exc:
        logging.basicConfig(level=logging.INFO)
        logger.error("main: configuration_error detail=%s", exc)
        sys.exit(1)

    logging.basicConfig(level=settings.log_level)

    import uvicorn

    uvicorn.run(application, host="0.0.0.0", port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
