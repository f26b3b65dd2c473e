"""Pydantic models for the Quote Relay API."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


# ── Inbound ────────────────────────────────────────────────────────────────


class Attachment(BaseModel):
    """A file uploaded with the quote form."""
    filename: str = Field(default="photo", description="Original file name")
    content_type: str = Field(default="application/octet-stream", description="MIME type")
    content: str = Field(default="", description="Base64-encoded file content")


class QuoteRequest(BaseModel):
    """Canonical quote request, produced by normalizing the raw form JSON."""
    full_name: str = Field(default="", description="Customer full name")
    phone: str = Field(default="", description="Contact phone number")
    email: str = Field(default="", description="Customer email address")
    address: str = Field(default="", description="Address or postcode")
    service: str = Field(default="", description="Requested service")
    date: str = Field(default="", description="Preferred date, free text")
    message: str = Field(default="", description="Job description")
    attachments: List[Attachment] = Field(default_factory=list, description="At most five files")


class QuoteFormBody(BaseModel):
    """Shape of the JSON the quote form posts (documentation only)."""
    fullName: str
    phone: str
    email: str
    address: Optional[str] = None
    postcode: Optional[str] = None
    service: str
    date: Optional[str] = None
    message: str
    company: Optional[str] = Field(None, description="Honeypot, must be left empty")
    attachments: Optional[List[Dict[str, Any]]] = Field(
        None, description="[{filename, content_type, base64}]"
    )


# ── Outbound ───────────────────────────────────────────────────────────────


class EmailAddress(BaseModel):
    email: str
    name: Optional[str] = None


class EmailAttachment(BaseModel):
    filename: str
    content: str


class OutboundEmail(BaseModel):
    """A single message handed to MailerSend."""
    sender: EmailAddress
    recipients: List[EmailAddress]
    reply_to: Optional[EmailAddress] = None
    subject: str
    text: str
    html: str
    attachments: List[EmailAttachment] = Field(default_factory=list)

    def to_mailersend(self) -> Dict[str, Any]:
        """Request body for ``POST /v1/email``."""
        payload: Dict[str, Any] = {
            "from": self.sender.model_dump(exclude_none=True),
            "to": [r.model_dump(exclude_none=True) for r in self.recipients],
            "subject": self.subject,
            "text": self.text,
            "html": self.html,
            "attachments": [a.model_dump() for a in self.attachments],
        }
        if self.reply_to is not None:
            payload["reply_to"] = self.reply_to.model_dump(exclude_none=True)
        return payload


# ── Responses ──────────────────────────────────────────────────────────────


class QuoteAccepted(BaseModel):
    ok: bool = True
    id: Optional[str] = Field(None, description="Provider message id, or 'sent'")
    skipped: Optional[bool] = Field(None, description="Set when the submission was dropped")


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str
    version: str
    timestamp: datetime
