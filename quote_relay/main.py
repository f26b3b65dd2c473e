"""
Quote Relay – FastAPI application.

Mounts the quote endpoint and health check.  Confirmation emails still in
flight get a bounded wait on shutdown, then are cancelled.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from quote_relay.config import BACKGROUND_SHUTDOWN_TIMEOUT
from quote_relay.error_handlers import register_exception_handlers
from quote_relay.logging_setup import configure_logging
from quote_relay.routers import health, quote
from quote_relay.services.background import background

configure_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Quote Relay starting")
    yield
    await background.shutdown(BACKGROUND_SHUTDOWN_TIMEOUT)
    logger.info("Quote Relay stopped")


app = FastAPI(
    title="Quote Relay API",
    description="Receives website quote requests and forwards them by email",
    version="0.1.0",
    lifespan=lifespan,
)

register_exception_handlers(app)

app.include_router(health.router)
app.include_router(quote.router)
