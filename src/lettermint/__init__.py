"""Python client for the Lettermint email API."""

__version__ = "0.1.0"

from .exceptions import (
    LettermintError,
    ConfigurationError,
    HttpRequestError,
    ValidationError,
    ClientError,
    TimeoutError,
)
from .config import ClientConfig, RequestConfig, LoggingConfig, load_config
from .models import EmailAttachment, EmailPayload, SendEmailResponse, MessageStatus
from .client import LettermintClient
from .endpoints import Endpoint, EmailEndpoint
from .logging import setup_logging


class Lettermint:
    """Entry point wiring a client to its endpoints.

    Example::

        lettermint = Lettermint(api_token="...")
        lettermint.email.from_("me@example.com").to("you@example.com").subject("Hi").text("Hello").send()
    """

    def __init__(self, config=None, **kwargs):
        """Initialize the SDK.

        Args:
            config: Optional ClientConfig
            **kwargs: ``api_token``, ``base_url`` and ``timeout`` when no config is given
        """
        self.client = LettermintClient(config, **kwargs)

    @property
    def email(self) -> EmailEndpoint:
        """A new email builder bound to this client."""
        return EmailEndpoint(self.client)


__all__ = [
    "Lettermint",
    "LettermintClient",
    "LettermintError",
    "ConfigurationError",
    "HttpRequestError",
    "ValidationError",
    "ClientError",
    "TimeoutError",
    "ClientConfig",
    "RequestConfig",
    "LoggingConfig",
    "load_config",
    "EmailAttachment",
    "EmailPayload",
    "SendEmailResponse",
    "MessageStatus",
    "Endpoint",
    "EmailEndpoint",
    "setup_logging",
]
