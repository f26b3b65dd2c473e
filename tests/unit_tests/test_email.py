"""Tests for the business / confirmation email builders."""

from quote_relay.config import MailerSendCredentials
from quote_relay.services.email import build_business_email, build_confirmation_email
from quote_relay.validation import normalize_payload
from tests.mocks.payloads import (
    BUSINESS_INBOX,
    CUSTOMER_EMAIL,
    SENDER,
    make_attachments,
    make_payload,
)

CREDENTIALS = MailerSendCredentials(
    api_token="test-token",
    from_email=SENDER,
    to_email=BUSINESS_INBOX,
)


def _quote(**overrides):
    return normalize_payload(make_payload(**overrides))


class TestBusinessEmail:
    def test_addressing(self):
        email = build_business_email(_quote(), CREDENTIALS)
        assert email.sender.email == SENDER
        assert [r.email for r in email.recipients] == [BUSINESS_INBOX]
        assert email.reply_to.email == CUSTOMER_EMAIL

    def test_subject_has_name_and_service(self):
        email = build_business_email(_quote(), CREDENTIALS)
        assert email.subject == "New Quote Request — Jane Doe (House removal)"

    def test_text_body_lists_every_field(self):
        text = build_business_email(_quote(), CREDENTIALS).text
        assert text.startswith("New quote request")
        for line in (
            "Full name: Jane Doe",
            "Phone: 07700 900123",
            f"Email: {CUSTOMER_EMAIL}",
            "Postcode: SW1A 1AA",
            "Service: House removal",
            "Preferred date: 2026-11-02",
            "Piano in the lounge.",
        ):
            assert line in text

    def test_html_body(self):
        html = build_business_email(_quote(), CREDENTIALS).html
        assert "<h2>New quote request</h2>" in html
        assert "<strong>Postcode:</strong> SW1A 1AA" in html
        assert "two flights of stairs.<br>Piano" in html

    def test_html_missing_date_is_na(self):
        html = build_business_email(_quote(date=""), CREDENTIALS).html
        assert "<strong>Preferred date:</strong> n/a" in html

    def test_html_escapes_user_input(self):
        html = build_business_email(_quote(fullName="<script>x</script>"), CREDENTIALS).html
        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_attachments(self):
        email = build_business_email(_quote(attachments=make_attachments(2)), CREDENTIALS)
        assert [(a.filename, a.content) for a in email.attachments] == [
            ("photo-0.jpg", "aW1hZ2Ut0"),
            ("photo-1.jpg", "aW1hZ2Ut1"),
        ]

    def test_mailersend_payload_shape(self):
        payload = build_business_email(_quote(), CREDENTIALS).to_mailersend()
        assert payload["from"] == {"email": SENDER}
        assert payload["to"] == [{"email": BUSINESS_INBOX}]
        assert payload["reply_to"] == {"email": CUSTOMER_EMAIL}
        assert payload["attachments"] == []
        assert set(payload) == {"from", "to", "reply_to", "subject", "text", "html", "attachments"}


class TestConfirmationEmail:
    def test_addressing(self):
        email = build_confirmation_email(_quote(), CREDENTIALS)
        assert email.sender.email == SENDER
        assert email.recipients[0].email == CUSTOMER_EMAIL
        assert email.recipients[0].name == "Jane Doe"
        assert email.reply_to.email == BUSINESS_INBOX

    def test_echoes_request(self):
        email = build_confirmation_email(_quote(), CREDENTIALS)
        assert email.text.startswith("Hi Jane,")
        assert "Service: House removal" in email.text
        assert "Postcode: SW1A 1AA" in email.text
        assert "Preferred date: 2026-11-02" in email.text
        assert "House removal" in email.html

    def test_no_attachments(self):
        email = build_confirmation_email(_quote(attachments=make_attachments(3)), CREDENTIALS)
        assert email.attachments == []
