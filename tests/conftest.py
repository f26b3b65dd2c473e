"""
Shared test fixtures.

Provides:
  • MailerSend credentials in the environment
  • a fake MailerSend API (no external HTTP)
  • a controllable clock and a fresh rate limiter per test
  • a FastAPI TestClient wired to all of the above

The `client` fixture runs the full lifespan so background confirmation
emails are drained on exit.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from quote_relay.dependencies import get_quote_handler
from quote_relay.handler import QuoteRequestHandler
from quote_relay.main import app
from quote_relay.rate_limit import InMemoryRateLimitStore, RateLimiter
from quote_relay.services.background import BackgroundTaskRunner, background
from tests.mocks.mailersend import FakeMailerSend
from tests.mocks.payloads import BUSINESS_INBOX, SENDER


# ── Helpers ────────────────────────────────────────────────────────────────


class FakeClock:
    """Manually advanced replacement for ``time.time``."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ── Fixtures ───────────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def mailersend_env(monkeypatch):
    monkeypatch.setenv("MAILERSEND_TOKEN", "test-token")
    monkeypatch.setenv("MAILERSEND_FROM", SENDER)
    monkeypatch.setenv("MAILERSEND_TO", BUSINESS_INBOX)


@pytest.fixture()
def fake_mailersend() -> FakeMailerSend:
    return FakeMailerSend(json_body={"message_id": "abc"})


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def limiter(clock: FakeClock) -> RateLimiter:
    return RateLimiter(
        InMemoryRateLimitStore(),
        window_seconds=600,
        max_requests=5,
        enabled=True,
        clock=clock,
    )


@pytest.fixture()
def runner() -> BackgroundTaskRunner:
    return BackgroundTaskRunner()


@pytest.fixture()
def handler(
    limiter: RateLimiter,
    runner: BackgroundTaskRunner,
    fake_mailersend: FakeMailerSend,
) -> QuoteRequestHandler:
    return QuoteRequestHandler(
        limiter=limiter,
        background=runner,
        mailer_factory=fake_mailersend.mailer_factory,
        confirmation_enabled=True,
    )


@pytest.fixture()
def client(limiter: RateLimiter, fake_mailersend: FakeMailerSend) -> TestClient:
    """
    TestClient whose quote handler talks to the fake MailerSend.

    Uses the app-wide background runner so the lifespan drains it.
    """
    test_handler = QuoteRequestHandler(
        limiter=limiter,
        background=background,
        mailer_factory=fake_mailersend.mailer_factory,
        confirmation_enabled=True,
    )
    app.dependency_overrides[get_quote_handler] = lambda: test_handler

    with TestClient(app, raise_server_exceptions=False) as tc:
        yield tc

    app.dependency_overrides.clear()
