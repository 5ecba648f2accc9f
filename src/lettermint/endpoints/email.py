"""Fluent builder for the send-email endpoint."""

import logging
from typing import Dict, Optional

from ..config import RequestConfig
from ..models import EmailAttachment, EmailPayload, SendEmailResponse
from .base import Endpoint

logger = logging.getLogger(__name__)


class EmailEndpoint(Endpoint):
    """Compose an email through chained calls, then :meth:`send` it.

    Every setter replaces the field it names and returns the same builder;
    :meth:`attach` is the only call that accumulates. A builder is meant for
    a single email.

    Example::

        response = (
            EmailEndpoint(client)
            .from_("John Doe <john@example.com>")
            .to("alice@example.com", "bob@example.com")
            .subject("Hello")
            .html("<p>Hi there</p>")
            .send()
        )
    """

    SEND_PATH = "/send"

    def __init__(self, client):
        super().__init__(client)
        self._payload = EmailPayload()
        self._idempotency_key: Optional[str] = None

    @property
    def payload(self) -> EmailPayload:
        """The payload accumulated so far."""
        return self._payload

    def headers(self, headers: Dict[str, str]) -> "EmailEndpoint":
        """Set custom headers for the email, e.g. ``{"X-Custom": "Value"}``."""
        self._payload.headers = dict(headers)
        return self

    def idempotency_key(self, key: str) -> "EmailEndpoint":
        """Set the idempotency key for the request.

        Requests sharing a key are processed only once by the API, which
        makes it safe to resend after a failure. The key travels as the
        ``Idempotency-Key`` header, not in the payload.
        """
        self._idempotency_key = key
        return self

    def from_(self, email: str) -> "EmailEndpoint":
        """Set the sender.

        Supports RFC 5322 addresses such as ``john@example.com`` or
        ``John Doe <john@example.com>``.
        """
        self._payload.from_ = email
        return self

    def to(self, *emails: str) -> "EmailEndpoint":
        """Set one or more recipients, replacing any set before."""
        self._payload.to = list(emails)
        return self

    def subject(self, subject: str) -> "EmailEndpoint":
        self._payload.subject = subject
        return self

    def html(self, html: Optional[str]) -> "EmailEndpoint":
        """Set the HTML body. ``None`` leaves the current value untouched."""
        if html is not None:
            self._payload.html = html
        return self

    def text(self, text: Optional[str]) -> "EmailEndpoint":
        """Set the plain text body. ``None`` leaves the current value untouched."""
        if text is not None:
            self._payload.text = text
        return self

    def cc(self, *emails: str) -> "EmailEndpoint":
        self._payload.cc = list(emails)
        return self

    def bcc(self, *emails: str) -> "EmailEndpoint":
        self._payload.bcc = list(emails)
        return self

    def reply_to(self, *emails: str) -> "EmailEndpoint":
        self._payload.reply_to = list(emails)
        return self

    def route(self, route: str) -> "EmailEndpoint":
        """Set the routing key for the email."""
        self._payload.route = route
        return self

    def attach(self, filename: str, content: str) -> "EmailEndpoint":
        """Append an attachment.

        Args:
            filename: Attachment filename
            content: Base64-encoded file content
        """
        if self._payload.attachments is None:
            self._payload.attachments = []

        self._payload.attachments.append(EmailAttachment(filename=filename, content=content))
        return self

    def send(self) -> SendEmailResponse:
        """Send the composed email.

        No local validation is done; the API reports problems through the
        client's error mapping.

        Returns:
            Parsed API response

        Raises:
            ValidationError: If the API rejects the payload
            ClientError: If the request is malformed
            HttpRequestError: On any other HTTP failure
            TimeoutError: If the API does not answer in time
        """
        config = None
        if self._idempotency_key:
            config = RequestConfig(headers={"Idempotency-Key": self._idempotency_key})

        data = self.http_client.post(self.SEND_PATH, self._payload.to_dict(), config)
        response = SendEmailResponse.from_dict(data)

        logger.debug(
            "Email accepted",
            extra={"message_id": response.message_id, "status": response.status.value},
        )
        return response
