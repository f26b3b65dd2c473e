"""
Quote request endpoint – CORS preflight plus the form POST.
"""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from quote_relay.dependencies import QuoteHandler
from quote_relay.events import HttpEvent
from quote_relay.models import ErrorResponse, QuoteAccepted, QuoteFormBody

router = APIRouter(prefix="/api", tags=["quotes"])


async def _dispatch(request: Request, handler: QuoteHandler) -> JSONResponse:
    body = await request.body()
    event = HttpEvent(
        method=request.method,
        headers=dict(request.headers),
        body=body.decode("utf-8", errors="replace"),
    )
    result = await handler.handle(event)
    return JSONResponse(
        status_code=result.status_code,
        content=result.body,
        headers=result.headers,
    )


@router.post(
    "/quote-request",
    operation_id="submitQuoteRequest",
    summary="Submit the quote form and forward it by email",
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {
                "application/json": {"schema": QuoteFormBody.model_json_schema()},
            },
        },
    },
    responses={
        200: {"model": QuoteAccepted},
        400: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def submit_quote_request(request: Request, handler: QuoteHandler) -> JSONResponse:
    return await _dispatch(request, handler)


# Preflight gets 200, everything else a 405, both from the handler
@router.api_route(
    "/quote-request",
    methods=["OPTIONS", "GET", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
async def quote_request_other_methods(request: Request, handler: QuoteHandler) -> JSONResponse:
    return await _dispatch(request, handler)
