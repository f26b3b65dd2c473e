"""Application-level exception handlers returning the ``{"error": ...}`` shape."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from quote_relay.errors import QuoteRelayError
from quote_relay.events import CORS_HEADERS

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """Catch errors that escape the quote handler so clients still get JSON."""

    @app.exception_handler(QuoteRelayError)
    async def quote_relay_error_handler(
        request: Request, exc: QuoteRelayError
    ) -> JSONResponse:  # type: ignore[override]
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.message},
            headers=CORS_HEADERS,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:  # type: ignore[override]
        # Routing errors (unknown path, method the routes do not list)
        if exc.status_code == 405:
            message = "Method not allowed"
        else:
            message = str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": message},
            headers={**(exc.headers or {}), **CORS_HEADERS},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:  # type: ignore[override]
        logger.exception(
            "Unhandled exception while processing %s %s", request.method, request.url
        )
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error"},
            headers=CORS_HEADERS,
        )
