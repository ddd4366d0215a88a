"""Shared HTTP client pool for streaming runners.

Purpose:
    Provide a thread-safe pool of reusable ``httpx.Client`` instances so every
    streamed query does not pay for a fresh connection pool.

External dependencies:
    - ``httpx`` for the underlying synchronous HTTP client.

Timeout strategy:
    - Connect, write and pool phases are bounded by
      ``HTTP_CONNECT_TIMEOUT_SECONDS``. The read phase is unbounded: a
      streamed answer may pause for as long as the model thinks, and queries
      have no overall deadline.

Lifecycle & cleanup:
    - Clients are cached by ``purpose``. All clients are closed at interpreter
      exit via ``atexit``; tests may call :func:`close_all_clients` directly.
"""

from __future__ import annotations

import atexit
import threading
from typing import Dict

import httpx

from ...config.defaults import HTTP_CONNECT_TIMEOUT_SECONDS

_CLIENTS: Dict[str, httpx.Client] = {}
_LOCK = threading.RLock()


def stream_timeout(connect: float = HTTP_CONNECT_TIMEOUT_SECONDS) -> httpx.Timeout:
    """Return the timeout policy used for streaming requests."""
    return httpx.Timeout(connect=connect, read=None, write=connect, pool=connect)


def get_httpx_client(purpose: str = "stream") -> httpx.Client:
    """Return a pooled ``httpx.Client`` for ``purpose``.

    Parameters:
        purpose: Short string discriminating separate pools. Keep stable to
            maximize reuse.

    Returns:
        A reusable ``httpx.Client`` instance.

    Thread-safety:
        Safe for concurrent use; per-key creation is guarded by a re-entrant
        lock.
    """
    client = _CLIENTS.get(purpose)
    if client is not None and not client.is_closed:
        return client

    with _LOCK:
        client = _CLIENTS.get(purpose)
        if client is not None and not client.is_closed:
            return client
        client = httpx.Client(timeout=stream_timeout())
        _CLIENTS[purpose] = client
        return client


def close_all_clients() -> None:
    """Close and clear all pooled HTTP clients."""
    with _LOCK:
        for client in _CLIENTS.values():
            try:
                client.close()
            except Exception:  # nosec B110 - teardown of a pool; nothing to report to
                pass
        _CLIENTS.clear()


atexit.register(close_all_clients)

__all__ = ["get_httpx_client", "close_all_clients", "stream_timeout"]
