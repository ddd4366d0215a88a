"""Incremental stream decoder.

Turns the raw byte stream of one query into handler events
``(query_id, text, is_reasoning, stop)``.

Buffering:
    Network deliveries do not respect line boundaries. ``feed`` appends to a
    pending buffer and processes everything up to the last newline as one
    block; the trailing partial line waits for the next delivery (or for
    ``close``). Splitting happens on bytes, so multi-byte UTF-8 sequences are
    never cut in half.

Per block:
    reasoning text is emitted once as ``(reasoning, True, False)``; content is
    appended to the query's response and emitted as ``(content, False,
    False)``, preceded by the reasoning-block closing sequence the first time
    content follows reasoning.

End of stream (``close``):
    the buffered remainder is processed, then either the closing sequence (if
    still in reasoning mode) or a single ``("", False, True)`` sentinel is
    emitted. An empty accumulated response is logged as
    :class:`EmptyResponseError`.

Cancellation:
    every entry point re-fetches the query from the registry; once it is gone
    all further calls are silent no-ops.
"""
from __future__ import annotations

import logging
from typing import Callable, List, Optional, Union

from ...config.defaults import REASONING_CLOSE_AT_END, REASONING_CLOSE_MIDSTREAM
from ..errors import EmptyResponseError
from ..interfaces import ResponseHandler
from ..logging import LogContext, get_logger, log_error, log_event
from ..session.query import Query
from ..session.registry import QueryRegistry
from .line_parser import LineKind, classify_line
from .usage import UsageReport, usage_report_from

_logger = get_logger("dispatch.stream")

UsageListener = Callable[[UsageReport], None]


class StreamDecoder:
    """Stateful decoder for one query; never shared between queries."""

    def __init__(
        self,
        query_id: str,
        registry: QueryRegistry,
        handler: ResponseHandler,
        *,
        reasoning: bool = False,
        on_usage: Optional[UsageListener] = None,
        logger: logging.Logger = _logger,
    ) -> None:
        self.query_id = query_id
        self._registry = registry
        self._handler = handler
        self._reasoning = reasoning
        self._on_usage = on_usage
        self._logger = logger
        self._buffer = b""
        self._closed = False

    @property
    def reasoning(self) -> bool:
        """Whether a reasoning block is open."""
        return self._reasoning

    @property
    def pending(self) -> bytes:
        """Bytes received but not yet forming a complete line."""
        return self._buffer

    def feed(self, chunk: Union[bytes, str]) -> None:
        """Accept one delivery of stream bytes."""
        if self._closed or self._registry.get(self.query_id) is None:
            return
        if isinstance(chunk, str):
            chunk = chunk.encode("utf-8")
        self._buffer += chunk
        last_newline = self._buffer.rfind(b"\n")
        if last_newline < 0:
            return
        block = self._buffer[:last_newline]
        self._buffer = self._buffer[last_newline + 1:]
        self._process_block(block)

    def close(self) -> bool:
        """Finish the stream; returns False if the query was cancelled."""
        if self._closed:
            return False
        self._closed = True
        query = self._registry.get(self.query_id)
        if query is None:
            return False

        if self._buffer:
            block, self._buffer = self._buffer, b""
            self._process_block(block)

        if self._reasoning:
            self._emit("", True, True)
            self._emit("\n", False, True)
            self._emit(REASONING_CLOSE_AT_END, False, True)
            self._reasoning = False
        else:
            self._emit("", False, True)

        if query.response == "":
            log_error(
                self._logger,
                EmptyResponseError(
                    f"{query.provider} response is empty",
                    provider=query.provider,
                    query_id=self.query_id,
                ),
                raw_response=query.raw_response or None,
            )
        return True

    # -------------------- internals --------------------

    def _emit(self, text: str, is_reasoning: bool, stop: bool) -> None:
        self._handler(self.query_id, text, is_reasoning, stop)

    def _process_block(self, block: bytes) -> None:
        query = self._registry.get(self.query_id)
        if query is None:
            return

        content: List[str] = []
        reasoning: List[str] = []
        for line in block.decode("utf-8", errors="replace").split("\n"):
            if line.strip():
                query.raw_response += line + "\n"
            decoded = classify_line(line)
            if decoded.kind is LineKind.IGNORED:
                continue
            if decoded.kind is LineKind.MALFORMED:
                log_event(
                    self._logger,
                    "stream.line_malformed",
                    LogContext.for_query(query),
                    level=logging.DEBUG,
                    line=decoded.raw,
                )
                continue
            if decoded.reasoning:
                reasoning.append(decoded.reasoning)
            if decoded.content:
                content.append(decoded.content)
            if decoded.usage is not None:
                self._report_usage(query, decoded.usage)

        if reasoning:
            self._emit("".join(reasoning), True, False)
        if content:
            if self._reasoning:
                self._emit("", True, True)
                self._emit(REASONING_CLOSE_MIDSTREAM, False, True)
                self._reasoning = False
            text = "".join(content)
            query.response += text
            self._emit(text, False, False)

    def _report_usage(self, query: Query, usage: dict) -> None:
        report = usage_report_from(usage)
        log_event(
            self._logger,
            "stream.usage",
            LogContext.for_query(query),
            tokens=report.tokens(),
            cost=round(report.cost, 6),
            currency=report.currency,
        )
        if self._on_usage is not None:
            self._on_usage(report)


__all__ = ["StreamDecoder", "UsageListener"]
