from __future__ import annotations

import logging
from typing import Any

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from quote_proxy.domain.exceptions import UpstreamQuoteError


logger = logging.getLogger(__name__)


def error_response(status_code: int, error: str, details: Any | None = None) -> JSONResponse:
    content: dict[str, Any] = {"error": error}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content))


def upstream_error_response(error: str, exc: UpstreamQuoteError) -> JSONResponse:
    return error_response(
        500,
        error,
        {
            "message": str(exc),
            "upstreamStatus": exc.status_code,
            "upstreamBody": exc.body,
        },
    )


async def request_validation_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(400, "Invalid request", exc.errors())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("api: unhandled_error path=%s", request.url.path)
    return error_response(500, "Internal server error", str(exc))
