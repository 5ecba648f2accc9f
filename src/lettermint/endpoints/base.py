"""Base class for API endpoints."""

from ..client import LettermintClient


class Endpoint:
    """Base class for all API endpoints."""

    def __init__(self, client: LettermintClient):
        """Initialize the endpoint.

        Args:
            client: Transport client used to reach the API
        """
        self.http_client = client
