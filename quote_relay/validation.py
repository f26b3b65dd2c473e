"""
Parsing, normalization and validation of quote form submissions.

The pipeline is::

    raw body ──parse_body──▶ dict ──normalize_payload──▶ QuoteRequest
                                                           │
                                            first_invalid_field / validate

Field checks run in a fixed order and only the first failure is reported,
so the error a customer sees for a given payload is always the same.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from quote_relay.config import MAX_ATTACHMENTS
from quote_relay.errors import InvalidQuoteError
from quote_relay.models import Attachment, QuoteRequest

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")

HONEYPOT_FIELD = "company"


def parse_body(body: str | None) -> dict[str, Any]:
    """Decode the request body.  An empty body counts as ``{}``.

    Raises:
        InvalidQuoteError: the body is not JSON, or not a JSON object.
    """
    try:
        payload = json.loads(body or "{}")
    except (TypeError, ValueError) as exc:
        raise InvalidQuoteError("Bad JSON") from exc
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise InvalidQuoteError("Bad JSON")
    return payload


def is_honeypot(payload: dict[str, Any]) -> bool:
    """True when the hidden ``company`` field was filled in (a bot)."""
    return bool(payload.get(HONEYPOT_FIELD))


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return ""


def _attachments(raw: Any, limit: int) -> list[Attachment]:
    if not isinstance(raw, list):
        return []

    items = [item for item in raw if isinstance(item, dict)]
    if len(items) > limit:
        logger.info("Dropping %d attachment(s) over the limit of %d", len(items) - limit, limit)

    return [
        Attachment(
            filename=_text(item.get("filename")) or "photo",
            content_type=_text(item.get("content_type")) or "application/octet-stream",
            content=_text(item.get("base64")) or _text(item.get("content")),
        )
        for item in items[:limit]
    ]


def normalize_payload(payload: dict[str, Any], *, max_attachments: int = MAX_ATTACHMENTS) -> QuoteRequest:
    """Coalesce the raw form fields into a single canonical request."""
    return QuoteRequest(
        full_name=_text(payload.get("fullName")),
        phone=_text(payload.get("phone")),
        email=_text(payload.get("email")),
        address=_text(payload.get("address")) or _text(payload.get("postcode")),
        service=_text(payload.get("service")),
        date=_text(payload.get("date")),
        message=_text(payload.get("message")),
        attachments=_attachments(payload.get("attachments"), max_attachments),
    )


def first_invalid_field(quote: QuoteRequest) -> str | None:
    """Label of the first missing or invalid field, or ``None``."""
    if not quote.full_name.strip():
        return "name"
    if not EMAIL_PATTERN.fullmatch(quote.email):
        return "valid email"
    if not quote.phone.strip():
        return "phone"
    if not quote.address.strip():
        return "postcode"
    # Not trimmed: any non-empty value is a valid choice
    if not quote.service:
        return "service"
    if not quote.message.strip():
        return "message"
    return None


def validate(quote: QuoteRequest) -> None:
    """Raises ``InvalidQuoteError`` naming the first bad field."""
    missing = first_invalid_field(quote)
    if missing:
        raise InvalidQuoteError(f"Please provide a {missing}.")
