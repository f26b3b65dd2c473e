"""
Serverless entry point.

``handler(event, context)`` accepts an HTTP-like event with ``httpMethod``,
``headers`` and ``body`` and returns ``{statusCode, headers, body}``.

Every invocation runs on one long-lived event loop owned by a daemon
thread.  The response is returned as soon as it is computed; confirmation
emails keep running on that loop between invocations.  ``shutdown()``
gives them ``BACKGROUND_SHUTDOWN_TIMEOUT`` seconds and stops the loop.  It
is registered with ``atexit``.
"""

from __future__ import annotations

import asyncio
import atexit
import logging
import threading
from typing import Any, Mapping

from quote_relay.config import BACKGROUND_SHUTDOWN_TIMEOUT
from quote_relay.errors import QuoteRelayError
from quote_relay.events import HttpEvent, HttpResponse
from quote_relay.handler import quote_handler
from quote_relay.logging_setup import configure_logging

configure_logging()

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_loop: asyncio.AbstractEventLoop | None = None
_thread: threading.Thread | None = None


def _event_loop() -> asyncio.AbstractEventLoop:
    global _loop, _thread
    with _lock:
        if _loop is None:
            _loop = asyncio.new_event_loop()
            _thread = threading.Thread(
                target=_loop.run_forever,
                name="quote-relay-loop",
                daemon=True,
            )
            _thread.start()
        return _loop


async def _invoke(event: Mapping[str, Any]) -> HttpResponse:
    try:
        request = HttpEvent.from_serverless(event)
        return await quote_handler.handle(request)
    except QuoteRelayError as exc:
        return HttpResponse.json(exc.status_code, {"error": exc.message})
    except Exception:
        logger.exception("Unhandled exception while processing %s", event.get("httpMethod"))
        return HttpResponse.json(500, {"error": "Internal server error"})


def handler(event: Mapping[str, Any], context: Any = None) -> dict[str, Any]:
    future = asyncio.run_coroutine_threadsafe(_invoke(event), _event_loop())
    return future.result().to_serverless()


def shutdown(timeout: float | None = BACKGROUND_SHUTDOWN_TIMEOUT) -> None:
    """Finish or cancel pending background work, then stop the loop."""
    global _loop, _thread
    with _lock:
        loop, thread = _loop, _thread
        _loop = _thread = None
    if loop is None or thread is None:
        return

    pending = asyncio.run_coroutine_threadsafe(
        quote_handler.background.shutdown(timeout), loop
    )
    pending.result()
    loop.call_soon_threadsafe(loop.stop)
    thread.join()
    loop.close()


atexit.register(shutdown)
