"""
Application configuration from environment variables.

All settings have sensible defaults for local development, except the
MailerSend credentials which are required and checked on every request.
A .env file in the project root is loaded automatically (if present).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from quote_relay.errors import ConfigurationError

# Load .env file before reading any env vars
load_dotenv(Path(__file__).resolve().parent.parent / ".env")


def _to_bool(value: str, *, default: bool = False) -> bool:
    lowered = value.strip().lower()
    if not lowered:
        return default
    return lowered in {"true", "1", "yes", "y", "on"}


# ── Environment ───────────────────────────────────────────────────────────

ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "info")

# ── MailerSend ────────────────────────────────────────────────────────────

MAILERSEND_API_URL: str = os.getenv("MAILERSEND_API_URL", "https://api.mailersend.com")

# ── Rate limiting ─────────────────────────────────────────────────────────

RATE_LIMIT_ENABLED: bool = _to_bool(os.getenv("RATE_LIMIT_ENABLED", "true"), default=True)
RATE_LIMIT_WINDOW_SECONDS: float = float(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "600"))
RATE_LIMIT_MAX_REQUESTS: int = int(os.getenv("RATE_LIMIT_MAX_REQUESTS", "5"))

# ── Quote form ────────────────────────────────────────────────────────────

MAX_ATTACHMENTS: int = int(os.getenv("MAX_ATTACHMENTS", "5"))

# Set to "false" to skip the acknowledgement email sent to the customer.
CONFIRMATION_EMAIL_ENABLED: bool = _to_bool(
    os.getenv("CONFIRMATION_EMAIL_ENABLED", "true"), default=True
)

# ── Background work ───────────────────────────────────────────────────────

# Seconds pending confirmation emails get on shutdown before being cancelled.
BACKGROUND_SHUTDOWN_TIMEOUT: float = float(os.getenv("BACKGROUND_SHUTDOWN_TIMEOUT", "10"))

# ── Business details ──────────────────────────────────────────────────────

BUSINESS_NAME: str = os.getenv("BUSINESS_NAME", "our team")

# Shown in the generic "send failed" message when set.
SUPPORT_PHONE: str = os.getenv("SUPPORT_PHONE", "")


@dataclass(frozen=True)
class MailerSendCredentials:
    api_token: str
    from_email: str
    to_email: str


def mailersend_credentials() -> MailerSendCredentials:
    """Read the MailerSend credentials from the environment.

    Read on every call, so changes to the environment apply without a
    restart.

    Raises:
        ConfigurationError: if any of MAILERSEND_TOKEN, MAILERSEND_FROM or
            MAILERSEND_TO is missing or blank.
    """
    api_token = os.getenv("MAILERSEND_TOKEN", "").strip()
    from_email = os.getenv("MAILERSEND_FROM", "").strip()
    to_email = os.getenv("MAILERSEND_TO", "").strip()

    if not (api_token and from_email and to_email):
        raise ConfigurationError()

    return MailerSendCredentials(
        api_token=api_token,
        from_email=from_email,
        to_email=to_email,
    )
