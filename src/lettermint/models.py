"""Data models for the Lettermint API."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class MessageStatus(str, Enum):
    """Server-side lifecycle status of a message."""

    PENDING = "pending"
    QUEUED = "queued"
    PROCESSED = "processed"
    DELIVERED = "delivered"
    SOFT_BOUNCED = "soft_bounced"
    HARD_BOUNCED = "hard_bounced"
    FAILED = "failed"


@dataclass
class EmailAttachment:
    """A file attached to an email. ``content`` is base64-encoded."""

    filename: str
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"filename": self.filename, "content": self.content}


@dataclass
class EmailPayload:
    """Body of a send request.

    ``from_`` is serialized as ``from``. Optional fields left as ``None``
    are omitted from the request body.
    """

    from_: str = ""
    to: List[str] = field(default_factory=list)
    subject: str = ""
    html: Optional[str] = None
    text: Optional[str] = None
    cc: Optional[List[str]] = None
    bcc: Optional[List[str]] = None
    reply_to: Optional[List[str]] = None
    headers: Optional[Dict[str, str]] = None
    attachments: Optional[List[EmailAttachment]] = None
    route: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON shape expected by the API."""
        data: Dict[str, Any] = {
            "from": self.from_,
            "to": list(self.to),
            "subject": self.subject,
        }

        for key in ("html", "text", "route"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value

        for key in ("cc", "bcc", "reply_to"):
            value = getattr(self, key)
            if value is not None:
                data[key] = list(value)

        if self.headers is not None:
            data["headers"] = dict(self.headers)
        if self.attachments is not None:
            data["attachments"] = [attachment.to_dict() for attachment in self.attachments]

        return data


@dataclass
class SendEmailResponse:
    """Result of a send request."""

    message_id: str
    status: MessageStatus

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SendEmailResponse":
        """Build a response from the decoded JSON body.

        Raises:
            KeyError: If a required field is missing
            ValueError: If the status is not a known MessageStatus
        """
        return cls(message_id=data["message_id"], status=MessageStatus(data["status"]))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {"message_id": self.message_id, "status": self.status.value}
