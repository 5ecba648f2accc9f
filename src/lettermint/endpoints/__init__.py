"""API endpoint implementations."""

from .base import Endpoint
from .email import EmailEndpoint

__all__ = ["Endpoint", "EmailEndpoint"]
