"""Shared test fixtures."""

import json
import socket
import threading
from unittest.mock import patch

import pytest
import requests

from lettermint.client import LettermintClient


def make_response(status_code=200, body=None, reason="OK", raw_body=None):
    """Build a requests.Response without touching the network."""
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    if raw_body is not None:
        response._content = raw_body
    elif body is not None:
        response._content = json.dumps(body).encode("utf-8")
    else:
        response._content = b""
    response._content_consumed = True
    response.headers["Content-Type"] = "application/json"
    return response


@pytest.fixture
def api_token():
    return "test-api-key"


@pytest.fixture
def client(api_token, monkeypatch):
    """Client with default settings and no environment overrides."""
    for name in ("LETTERMINT_API_TOKEN", "LETTERMINT_BASE_URL", "LETTERMINT_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    return LettermintClient(api_token=api_token)


@pytest.fixture
def mock_request():
    """Patch the per-call session request made by the client."""
    with patch("requests.Session.request") as mocked:
        mocked.return_value = make_response(200, {})
        yield mocked


@pytest.fixture
def response_factory():
    return make_response


class SlowServer:
    """One-shot HTTP server on a local socket that misbehaves on purpose.

    ``script`` is a list of ``(delay_seconds, bytes)`` steps sent in order
    after the request has been read. The server stops early when the client
    hangs up.
    """

    def __init__(self, script):
        self.script = script
        self.stopped = threading.Event()
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self.sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self.sock.bind(("127.0.0.1", 0))
        self.sock.listen(1)
        self.thread = threading.Thread(target=self._serve, daemon=True)

    @property
    def base_url(self):
        return f"http://127.0.0.1:{self.sock.getsockname()[1]}"

    def start(self):
        self.thread.start()
        return self

    def stop(self):
        self.stopped.set()
        self.sock.close()
        self.thread.join(timeout=5)

    def _serve(self):
        try:
            conn, _ = self.sock.accept()
        except OSError:
            return
        with conn:
            conn.settimeout(5)
            try:
                conn.recv(65536)
                for delay, chunk in self.script:
                    if self.stopped.wait(delay):
                        return
                    conn.sendall(chunk)
                self.stopped.wait(5)
            except OSError:
                return


@pytest.fixture
def slow_server(monkeypatch):
    """Factory for SlowServer instances, stopped after the test."""
    for name in ("HTTP_PROXY", "http_proxy", "ALL_PROXY", "all_proxy"):
        monkeypatch.delenv(name, raising=False)
    servers = []

    def start(script):
        server = SlowServer(script).start()
        servers.append(server)
        return server

    yield start
    for server in servers:
        server.stop()
