"""
Quote request handler.

Framework-independent core shared by the FastAPI router and the serverless
entry point.  Each POST goes through:

1.  Configuration check (MailerSend credentials).
2.  Per-client rate limiting (fail-open).
3.  JSON parsing and the ``company`` honeypot.
4.  Normalization into a ``QuoteRequest`` and field validation.
5.  Business email, awaited: its outcome decides the response.
6.  Confirmation email, submitted as a background task.
"""

from __future__ import annotations

import logging
from typing import Callable

from quote_relay.config import (
    CONFIRMATION_EMAIL_ENABLED,
    MailerSendCredentials,
    mailersend_credentials,
)
from quote_relay.errors import ConfigurationError, QuoteRelayError, RateLimitError
from quote_relay.events import HttpEvent, HttpResponse
from quote_relay.rate_limit import RateLimiter, limiter as default_limiter
from quote_relay.services.background import BackgroundTaskRunner, background as default_background
from quote_relay.services.email import QuoteMailer
from quote_relay.services.mailersend import MailerSendClient
from quote_relay.validation import is_honeypot, normalize_payload, parse_body, validate

logger = logging.getLogger(__name__)

MailerFactory = Callable[[MailerSendCredentials], QuoteMailer]


def default_mailer_factory(credentials: MailerSendCredentials) -> QuoteMailer:
    return QuoteMailer(MailerSendClient(credentials.api_token), credentials)


class QuoteRequestHandler:
    def __init__(
        self,
        *,
        limiter: RateLimiter | None = None,
        background: BackgroundTaskRunner | None = None,
        mailer_factory: MailerFactory = default_mailer_factory,
        confirmation_enabled: bool = CONFIRMATION_EMAIL_ENABLED,
    ) -> None:
        self.limiter = limiter if limiter is not None else default_limiter
        self.background = background if background is not None else default_background
        self._mailer_factory = mailer_factory
        self.confirmation_enabled = confirmation_enabled

    async def handle(self, event: HttpEvent) -> HttpResponse:
        if event.method == "OPTIONS":
            return HttpResponse.json(200, {"ok": True})
        if event.method != "POST":
            return HttpResponse.json(405, {"error": "Method not allowed"})

        try:
            return await self._submit(event)
        except RateLimitError as exc:
            headers = {"Retry-After": str(exc.retry_after)} if exc.retry_after else None
            return HttpResponse.json(exc.status_code, {"error": exc.message}, headers)
        except QuoteRelayError as exc:
            return HttpResponse.json(exc.status_code, {"error": exc.message})

    async def _submit(self, event: HttpEvent) -> HttpResponse:
        try:
            credentials = mailersend_credentials()
        except ConfigurationError:
            logger.error("MAILERSEND_TOKEN, MAILERSEND_FROM and MAILERSEND_TO must all be set")
            raise

        self.limiter.check(event)

        payload = parse_body(event.body)
        if is_honeypot(payload):
            logger.info("Honeypot field filled in, dropping submission")
            return HttpResponse.json(200, {"ok": True, "skipped": True})

        quote = normalize_payload(payload)
        validate(quote)

        mailer = self._mailer_factory(credentials)
        message_id = await mailer.send_business_email(quote)

        if self.confirmation_enabled:
            self.background.submit(
                mailer.send_confirmation_email(quote),
                name=f"confirmation-email:{quote.email}",
            )

        return HttpResponse.json(200, {"ok": True, "id": message_id or "sent"})


# ── Singleton instance ────────────────────────────────────────────────────
quote_handler = QuoteRequestHandler()
