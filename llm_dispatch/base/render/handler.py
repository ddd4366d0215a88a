"""Incremental render handler.

A :class:`RenderHandler` receives ``(query_id, chunk, is_reasoning, stop)``
events for one query and writes the streamed answer into a document region
that starts at a tracked anchor.

Batching:
    Chunks accumulate until ``batch_size`` are pending or ``stop`` is set;
    only then is the document touched (one flush covers all pending text).

Flush:
    The last, still-growing line written by the previous flush is replaced:
    it is deleted, the pending text is split on newlines, every line gets the
    prefix (plus ``"> "`` inside a reasoning block) and the lines are inserted
    at ``first_line + finished``. The raw text of the final line stays pending
    so the next flush rewrites it with whatever arrived meanwhile; a carried
    line first written inside a reasoning block keeps its ``"> "``.

Threading:
    Call only on the main loop; ``Dispatcher.create_handler`` returns the
    handler already wrapped with ``MainLoop.wrap``.
"""
from __future__ import annotations

import logging
from typing import Any, List, Optional

from ...config.defaults import REASONING_LINE_PREFIX, RENDER_BATCH_SIZE
from ..logging import LogContext, get_logger, log_event
from ..session.registry import QueryRegistry
from ..utils.files import new_uuid

_logger = get_logger("dispatch.render")


class RenderHandler:
    """Writes one query's streamed text into a document."""

    def __init__(
        self,
        document: Any,
        registry: QueryRegistry,
        *,
        viewport: Any = None,
        line: Optional[int] = None,
        first_undojoin: bool = False,
        prefix: str = "",
        cursor: bool = False,
        batch_size: int = RENDER_BATCH_SIZE,
    ) -> None:
        if line is None:
            if viewport is None:
                raise ValueError("either line or viewport is required to place the response")
            line = viewport.cursor_line()
        self.document = document
        self.viewport = viewport
        self.prefix = prefix or ""
        self.cursor = cursor
        self.batch_size = batch_size
        self._registry = registry
        self._skip_undojoin = not first_undojoin
        self._pending: List[str] = []
        self._carried_reasoning = False
        self.first_line = line
        self.finished = 0
        self.flushes = 0
        self.anchor_group = document.create_anchor_group(f"dispatch_handler_{new_uuid()}")
        self.anchor_id = document.set_anchor(self.anchor_group, line, right_gravity=False)

    def __call__(self, qid: str, chunk: str, is_reasoning: bool, stop: bool) -> None:
        self._pending.append(chunk)
        if len(self._pending) < self.batch_size and not stop:
            return

        query = self._registry.get(qid)
        if query is None:
            return
        if not self.document.is_valid():
            return

        if self._skip_undojoin:
            self._skip_undojoin = False
        else:
            self.document.join_undo()

        if query.anchor_group is None:
            query.anchor_group = self.anchor_group
        if query.anchor_id is None:
            query.anchor_id = self.anchor_id

        first_line = self.document.anchor_line(self.anchor_group, self.anchor_id)
        at = first_line + self.finished
        self.document.set_lines(at, at + 1, [])

        raw_lines = "".join(self._pending).split("\n")
        lines = [self.prefix + ln for ln in raw_lines]
        if is_reasoning:
            lines = [REASONING_LINE_PREFIX + ln for ln in lines]
        elif self._carried_reasoning:
            lines[0] = REASONING_LINE_PREFIX + lines[0]
        self.document.set_lines(at, at, lines)

        self.finished = max(0, self.finished + len(lines) - 1)
        self._pending = [raw_lines[-1]]
        self._carried_reasoning = is_reasoning or (self._carried_reasoning and len(raw_lines) == 1)
        self.first_line = first_line
        self.flushes += 1

        query.first_line = first_line
        query.last_line = first_line + self.finished

        if self.cursor and self.viewport is not None:
            self.viewport.set_cursor(first_line + self.finished)

        log_event(
            _logger,
            "render.flush",
            LogContext.for_query(query),
            level=logging.DEBUG,
            first_line=first_line,
            last_line=query.last_line,
            lines=len(lines),
            stop=stop or None,
        )


__all__ = ["RenderHandler"]
