"""
Framework-neutral request / response objects.

The quote handler only ever sees an ``HttpEvent`` and returns an
``HttpResponse``; the FastAPI router and the serverless entry point
translate to and from their own representations.
"""

from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass, field
from typing import Any, Mapping

from quote_relay.errors import InvalidQuoteError

CORS_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}


@dataclass
class HttpEvent:
    method: str
    headers: dict[str, str] = field(default_factory=dict)
    body: str | None = None

    def __post_init__(self) -> None:
        self.method = (self.method or "").upper()
        # Header lookups are case-insensitive
        self.headers = {str(k).lower(): v for k, v in (self.headers or {}).items()}

    def header(self, name: str) -> str | None:
        return self.headers.get(name.lower())

    @classmethod
    def from_serverless(cls, event: Mapping[str, Any]) -> HttpEvent:
        """Build from a serverless event (``httpMethod``, ``headers``, ``body``).

        Raises:
            InvalidQuoteError: ``isBase64Encoded`` is set but the body is not base64.
        """
        body = event.get("body")
        if body is not None and event.get("isBase64Encoded"):
            try:
                raw = base64.b64decode(body)
            except (binascii.Error, ValueError) as exc:
                raise InvalidQuoteError("Bad JSON") from exc
            body = raw.decode("utf-8", errors="replace")
        return cls(
            method=event.get("httpMethod") or "",
            headers=dict(event.get("headers") or {}),
            body=body,
        )


@dataclass
class HttpResponse:
    status_code: int
    body: dict[str, Any]
    headers: dict[str, str] = field(default_factory=dict)

    @classmethod
    def json(
        cls,
        status_code: int,
        body: dict[str, Any],
        extra_headers: Mapping[str, str] | None = None,
    ) -> HttpResponse:
        """JSON response carrying the CORS headers."""
        headers = {"Content-Type": "application/json", **CORS_HEADERS}
        headers.update(extra_headers or {})
        return cls(status_code=status_code, body=body, headers=headers)

    def to_serverless(self) -> dict[str, Any]:
        return {
            "statusCode": self.status_code,
            "headers": dict(self.headers),
            "body": json.dumps(self.body),
        }
