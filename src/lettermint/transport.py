"""Deadline enforcement for a single HTTP call.

``requests`` only applies its timeout to individual socket operations, so a
server that keeps sending a byte at a time never trips it. :class:`CallGuard`
puts a wall-clock deadline on the whole call: a timer thread shuts down every
socket the call opened once the deadline passes, which makes the blocked
read in the calling thread fail immediately.
"""

import logging
import socket
import threading
from typing import List

from requests.adapters import HTTPAdapter
from urllib3 import ProxyManager
from urllib3.connection import HTTPConnection, HTTPSConnection
from urllib3.connectionpool import HTTPConnectionPool, HTTPSConnectionPool

logger = logging.getLogger(__name__)

# Guard of the call currently running in this thread
_active = threading.local()


class CallGuard:
    """Race one request against a timer.

    Use as a context manager around the request. Connections opened inside
    the block register themselves through :class:`GuardedAdapter`.
    """

    def __init__(self, timeout_ms: int):
        self.timeout_ms = timeout_ms
        self.expired = False
        self._connections: List[HTTPConnection] = []
        self._lock = threading.Lock()
        self._timer = threading.Timer(timeout_ms / 1000, self.expire)
        self._timer.daemon = True

    def __enter__(self):
        _active.guard = self
        self._timer.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._timer.cancel()
        _active.guard = None

    def watch(self, connection: HTTPConnection) -> None:
        """Track a connected socket; shut it at once if the deadline passed."""
        with self._lock:
            self._connections.append(connection)
            expired = self.expired

        if expired:
            _shutdown(connection)

    def expire(self) -> None:
        """Mark the call as timed out and cut its sockets."""
        with self._lock:
            self.expired = True
            connections = list(self._connections)

        logger.debug(
            "Request deadline reached",
            extra={"timeout_ms": self.timeout_ms, "connections": len(connections)},
        )
        for connection in connections:
            _shutdown(connection)


def _shutdown(connection: HTTPConnection) -> None:
    sock = getattr(connection, "sock", None)
    if sock is None:
        return
    try:
        # Plain socket shutdown so an SSLSocket's state is left to the reader
        socket.socket.shutdown(sock, socket.SHUT_RDWR)
    except OSError as e:
        logger.debug(f"Socket already closed: {e}")


class _GuardedConnectionMixin:
    def connect(self):
        super().connect()
        guard = getattr(_active, "guard", None)
        if guard is not None:
            guard.watch(self)


class _GuardedHTTPConnection(_GuardedConnectionMixin, HTTPConnection):
    pass


class _GuardedHTTPSConnection(_GuardedConnectionMixin, HTTPSConnection):
    pass


class _GuardedHTTPConnectionPool(HTTPConnectionPool):
    ConnectionCls = _GuardedHTTPConnection


class _GuardedHTTPSConnectionPool(HTTPSConnectionPool):
    ConnectionCls = _GuardedHTTPSConnection


_GUARDED_POOLS = {"http": _GuardedHTTPConnectionPool, "https": _GuardedHTTPSConnectionPool}


class GuardedAdapter(HTTPAdapter):
    """HTTPAdapter whose connections register with the active CallGuard."""

    def init_poolmanager(self, *args, **kwargs):
        super().init_poolmanager(*args, **kwargs)
        self.poolmanager.pool_classes_by_scheme = dict(_GUARDED_POOLS)

    def proxy_manager_for(self, proxy, **proxy_kwargs):
        manager = super().proxy_manager_for(proxy, **proxy_kwargs)
        # SOCKS managers bring their own connection classes
        if isinstance(manager, ProxyManager):
            manager.pool_classes_by_scheme = dict(_GUARDED_POOLS)
        return manager
