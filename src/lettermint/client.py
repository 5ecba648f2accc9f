"""HTTP transport for the Lettermint API."""

import json
import logging
import platform
import time
from collections.abc import Mapping
from typing import Any, Dict, Optional
from urllib.parse import urlencode, urljoin, urlsplit

import requests
from urllib3.exceptions import ReadTimeoutError

from . import __version__
from .config import ClientConfig, QueryParams, RequestConfig, build_config
from .exceptions import ClientError, HttpRequestError, TimeoutError, ValidationError
from .transport import CallGuard, GuardedAdapter

logger = logging.getLogger(__name__)


class LettermintClient:
    """Client for making HTTP requests to the Lettermint API.

    The client only holds configuration frozen at construction, so one
    instance can be shared between threads.
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        api_token: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[int] = None,
    ):
        """Initialize the client.

        Args:
            config: Complete client configuration
            api_token: API token, used when no config is given
            base_url: Base URL override, used when no config is given
            timeout: Timeout in milliseconds, used when no config is given

        Raises:
            ConfigurationError: If the resulting configuration is invalid
        """
        if config is None:
            config = build_config(api_token=api_token, base_url=base_url, timeout=timeout)

        self.config = config
        self.base_url = config.base_url
        self.timeout = config.timeout
        self.default_headers: Dict[str, str] = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "x-lettermint-token": config.api_token,
            "User-Agent": _user_agent(),
        }

    def build_url(self, path: str, params: Optional[QueryParams] = None) -> str:
        """Build the full URL for an API path.

        Args:
            path: API endpoint path, with or without a leading slash
            params: Query parameters, appended in the order given

        Returns:
            Absolute URL
        """
        path_segment = path[1:] if path.startswith("/") else path
        url = urljoin(self.base_url, path_segment)

        if params:
            pairs = params.items() if isinstance(params, Mapping) else params
            separator = "&" if urlsplit(url).query else "?"
            url = f"{url}{separator}{urlencode(list(pairs))}"

        return url

    def get(self, path: str, config: Optional[RequestConfig] = None) -> Any:
        """Make a GET request and return the decoded JSON body."""
        return self._request("GET", path, config=config)

    def post(self, path: str, data: Any = None, config: Optional[RequestConfig] = None) -> Any:
        """Make a POST request and return the decoded JSON body."""
        return self._request("POST", path, data=data, config=config)

    def put(self, path: str, data: Any = None, config: Optional[RequestConfig] = None) -> Any:
        """Make a PUT request and return the decoded JSON body."""
        return self._request("PUT", path, data=data, config=config)

    def delete(self, path: str, config: Optional[RequestConfig] = None) -> Any:
        """Make a DELETE request and return the decoded JSON body."""
        return self._request("DELETE", path, config=config)

    def _request(
        self,
        method: str,
        path: str,
        data: Any = None,
        config: Optional[RequestConfig] = None,
    ) -> Any:
        """Send a request with the timeout guard applied.

        Args:
            method: HTTP verb
            path: API endpoint path
            data: JSON-serializable body, or None for no body
            config: Optional per-call overrides

        Returns:
            Decoded JSON body, or None for an empty response

        Raises:
            TimeoutError: If no response arrives within the timeout
            ValidationError: On HTTP 422
            ClientError: On HTTP 400
            HttpRequestError: On any other non-2xx status
        """
        config = config or RequestConfig()
        url = self.build_url(path, config.params)
        headers = {**self.default_headers, **config.headers}
        timeout = config.timeout if config.timeout is not None else self.timeout
        body = json.dumps(data) if data is not None else None

        logger.debug("Sending request", extra={"method": method, "url": url})
        started = time.monotonic()

        # The session lives for this call only; closing it releases the socket
        with requests.Session() as session, CallGuard(timeout) as guard:
            adapter = GuardedAdapter()
            session.mount("http://", adapter)
            session.mount("https://", adapter)
            try:
                response = session.request(
                    method, url, headers=headers, data=body, timeout=timeout / 1000
                )
            except requests.exceptions.RequestException as e:
                if guard.expired or _is_timeout(e):
                    raise TimeoutError(f"Request timeout after {timeout}ms") from e
                raise

        try:
            logger.debug(
                "Received response",
                extra={
                    "method": method,
                    "url": url,
                    "status_code": response.status_code,
                    "elapsed_ms": round((time.monotonic() - started) * 1000),
                },
            )

            if not 200 <= response.status_code < 300:
                _raise_for_status(response)

            if not response.content:
                return None
            return response.json()
        finally:
            response.close()


def _is_timeout(error: requests.exceptions.RequestException) -> bool:
    """Whether a requests failure was caused by a socket timeout.

    A read timeout while the body is downloaded surfaces as a
    ConnectionError wrapping urllib3's ReadTimeoutError.
    """
    if isinstance(error, requests.exceptions.Timeout):
        return True
    return bool(error.args) and isinstance(error.args[0], ReadTimeoutError)


def _raise_for_status(response: requests.Response) -> None:
    """Map an unsuccessful response onto the error taxonomy.

    The body is decoded before classification; a body that is not JSON
    raises requests' JSONDecodeError unchanged.
    """
    response_body = response.json()
    error = response_body.get("error") if isinstance(response_body, dict) else None

    if response.status_code == 422:
        error_type = error or "ValidationError"
        raise ValidationError(f"Validation error: {error_type}", error_type, response_body)

    if response.status_code == 400:
        raise ClientError(f"Client error: {error or 'Unknown client error'}", response_body)

    raise HttpRequestError(
        f"HTTP error {response.status_code} {response.reason}",
        response.status_code,
        response_body,
    )


def _user_agent() -> str:
    return (
        f"Lettermint/{__version__} "
        f"(Python; {platform.python_implementation()} {platform.python_version()})"
    )
