"""
Email service: turns a validated quote request into MailerSend messages.

Two messages come out of every request:

* the business notification, sent to the configured inbox with
  ``reply_to`` set to the customer so a plain "Reply" reaches them;
* the confirmation, sent back to the customer.  It is best-effort and is
  run as a background task by the handler.
"""

from __future__ import annotations

import html
import logging

from quote_relay.config import BUSINESS_NAME, MailerSendCredentials
from quote_relay.models import EmailAddress, EmailAttachment, OutboundEmail, QuoteRequest
from quote_relay.services.mailersend import MailerSendClient

logger = logging.getLogger(__name__)


def _esc(value: str) -> str:
    return html.escape(value or "")


def _build_business_text(quote: QuoteRequest) -> str:
    return (
        "New quote request\n"
        "\n"
        f"Full name: {quote.full_name}\n"
        f"Phone: {quote.phone}\n"
        f"Email: {quote.email}\n"
        f"Postcode: {quote.address}\n"
        f"Service: {quote.service}\n"
        f"Preferred date: {quote.date}\n"
        "\n"
        "Message:\n"
        f"{quote.message}"
    ).strip()


def _build_business_html(quote: QuoteRequest) -> str:
    message = _esc(quote.message).replace("\n", "<br>")
    return f"""
    <h2>New quote request</h2>
    <p><strong>Full name:</strong> {_esc(quote.full_name)}</p>
    <p><strong>Phone:</strong> {_esc(quote.phone)}</p>
    <p><strong>Email:</strong> {_esc(quote.email)}</p>
    <p><strong>Postcode:</strong> {_esc(quote.address)}</p>
    <p><strong>Service:</strong> {_esc(quote.service)}</p>
    <p><strong>Preferred date:</strong> {_esc(quote.date or "n/a")}</p>
    <p><strong>Message:</strong><br>{message}</p>
    """.strip()


def build_business_email(quote: QuoteRequest, credentials: MailerSendCredentials) -> OutboundEmail:
    """Notification for the business inbox, carrying all attachments."""
    return OutboundEmail(
        sender=EmailAddress(email=credentials.from_email),
        recipients=[EmailAddress(email=credentials.to_email)],
        reply_to=EmailAddress(email=quote.email),
        subject=f"New Quote Request — {quote.full_name} ({quote.service})",
        text=_build_business_text(quote),
        html=_build_business_html(quote),
        attachments=[
            EmailAttachment(filename=a.filename, content=a.content)
            for a in quote.attachments
        ],
    )


def build_confirmation_email(quote: QuoteRequest, credentials: MailerSendCredentials) -> OutboundEmail:
    """Acknowledgement for the customer, echoing back what they asked for."""
    first_name = quote.full_name.strip().split(" ")[0]
    date = quote.date or "n/a"

    text = (
        f"Hi {first_name},\n"
        "\n"
        f"Thanks for your quote request. {BUSINESS_NAME.capitalize()} will be in touch shortly.\n"
        "\n"
        f"Service: {quote.service}\n"
        f"Postcode: {quote.address}\n"
        f"Preferred date: {date}\n"
    )
    body = f"""
    <p>Hi {_esc(first_name)},</p>
    <p>Thanks for your quote request. {_esc(BUSINESS_NAME.capitalize())} will be in touch shortly.</p>
    <p><strong>Service:</strong> {_esc(quote.service)}<br>
       <strong>Postcode:</strong> {_esc(quote.address)}<br>
       <strong>Preferred date:</strong> {_esc(date)}</p>
    """.strip()

    return OutboundEmail(
        sender=EmailAddress(email=credentials.from_email),
        recipients=[EmailAddress(email=quote.email, name=quote.full_name.strip() or None)],
        reply_to=EmailAddress(email=credentials.to_email),
        subject="We've received your quote request",
        text=text,
        html=body,
    )


class QuoteMailer:
    """Sends the two emails for one quote request through MailerSend."""

    def __init__(self, client: MailerSendClient, credentials: MailerSendCredentials) -> None:
        self._client = client
        self._credentials = credentials

    async def send_business_email(self, quote: QuoteRequest) -> str | None:
        email = build_business_email(quote, self._credentials)
        logger.info(
            "Sending quote request from %s (%d attachment(s))",
            quote.email,
            len(email.attachments),
        )
        return await self._client.send(email)

    async def send_confirmation_email(self, quote: QuoteRequest) -> None:
        email = build_confirmation_email(quote, self._credentials)
        await self._client.send(email)
        logger.info("Confirmation sent to %s", quote.email)
