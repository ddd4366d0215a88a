"""
HTTP stream runner.

Sends a :class:`StreamRequest` as a streaming POST through a pooled
``httpx.Client`` on a daemon thread and feeds the response body to the stdout
reader chunk by chunk, using the same ``on_stdout`` / ``on_exit`` contract as
:class:`CurlProcessRunner`. ``on_exit`` receives the HTTP status code (``-1``
when no response was received).

Transport errors are reported as ``on_stdout(err, None)``; end-of-stream is
always signalled afterwards so the query drains normally.
"""
from __future__ import annotations

import json
import logging
import threading
from typing import Any, Callable, Optional

import httpx

from ..http import get_httpx_client
from ..interfaces import StdoutReader
from ..logging import get_logger, log_event
from .request import StreamRequest

_logger = get_logger("dispatch.runner.http")


class HttpxStreamRunner:
    """Streams responses in-process with httpx instead of a child process."""

    def __init__(self, client: Optional[httpx.Client] = None) -> None:
        self._client = client

    @property
    def client(self) -> httpx.Client:
        return self._client if self._client is not None else get_httpx_client("stream")

    def start(
        self,
        document: Any,
        request: StreamRequest,
        on_stdout: StdoutReader,
        on_exit: Optional[Callable[[int], None]] = None,
    ) -> threading.Thread:
        thread = threading.Thread(
            target=self._transfer,
            args=(request, on_stdout, on_exit),
            name=f"dispatch-http-{request.query_id or 'query'}",
            daemon=True,
        )
        thread.start()
        return thread

    def _body(self, request: StreamRequest) -> bytes:
        if request.body is not None:
            return json.dumps(request.body).encode("utf-8")
        if request.payload_file:
            with open(request.payload_file, "rb") as fh:
                return fh.read()
        return b"{}"

    def _transfer(
        self,
        request: StreamRequest,
        on_stdout: StdoutReader,
        on_exit: Optional[Callable[[int], None]],
    ) -> None:
        status = -1
        headers = {"Content-Type": "application/json", **request.headers}
        try:
            content = self._body(request)
            with self.client.stream("POST", request.endpoint, content=content, headers=headers) as response:
                status = response.status_code
                log_event(
                    _logger,
                    "runner.http_response",
                    level=logging.DEBUG if status < 400 else logging.WARNING,
                    provider=request.provider,
                    query_id=request.query_id,
                    status=status,
                )
                for chunk in response.iter_bytes():
                    if chunk:
                        on_stdout(None, chunk)
        except (httpx.HTTPError, OSError) as exc:
            on_stdout(exc, None)
        on_stdout(None, None)
        if on_exit is not None:
            on_exit(status)


__all__ = ["HttpxStreamRunner"]
