from __future__ import annotations

import logging
from typing import Any

import httpx

from quote_relay.config import MAILERSEND_API_URL, SUPPORT_PHONE
from quote_relay.errors import ProviderError, TransportError
from quote_relay.models import OutboundEmail

logger = logging.getLogger(__name__)

_SEND_PATH = "/v1/email"


def _fallback_error() -> str:
    if SUPPORT_PHONE:
        return f"Email send failed. Please try again or call {SUPPORT_PHONE}."
    return ProviderError.default_message


class MailerSendClient:
    """Thin async client for the MailerSend transactional email API.

    A fresh ``httpx.AsyncClient`` is opened per send, so one instance can be
    shared by the request path and a detached background task.
    """

    def __init__(
        self,
        api_token: str,
        *,
        base_url: str = MAILERSEND_API_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._headers = {
            "Authorization": f"Bearer {api_token}",
            "Content-Type": "application/json",
        }
        self._transport = transport

    async def send(self, email: OutboundEmail) -> str | None:
        """POST one email.  Returns the provider message id, if any.

        Raises:
            ProviderError: MailerSend answered with a non-2xx status.
            TransportError: MailerSend could not be reached.
        """
        payload = email.to_mailersend()
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                headers=self._headers,
                transport=self._transport,
            ) as client:
                resp = await client.post(_SEND_PATH, json=payload)
        except httpx.HTTPError as exc:
            logger.exception("MailerSend unreachable")
            raise TransportError() from exc

        data = self._json_or_empty(resp)

        if not resp.is_success:
            logger.error("MailerSend error: %s %s", resp.status_code, data)
            message = data.get("message") if isinstance(data.get("message"), str) else None
            raise ProviderError(message or _fallback_error(), upstream_status=resp.status_code)

        message_id = data.get("message_id") or resp.headers.get("x-message-id")
        logger.info(
            "MailerSend accepted email to %s (id=%s)",
            ", ".join(r.email for r in email.recipients),
            message_id,
        )
        return message_id

    @staticmethod
    def _json_or_empty(resp: httpx.Response) -> dict[str, Any]:
        # 202 responses have an empty body
        try:
            data = resp.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}
