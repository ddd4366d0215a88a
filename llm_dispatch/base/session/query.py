"""Query record.

One :class:`Query` exists per in-flight request. The decoder appends to
``response`` / ``raw_response``; the render handler fills the line range and
anchor ids. Line numbers are 0-based with ``-1`` meaning "not rendered yet".
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Optional

from ..interfaces import CompletionCallback, ExitHandler, ResponseHandler
from ..models import Payload
from .lifecycle import QueryEvent, QueryState, advance

UNSET_LINE = -1


@dataclass
class Query:
    """State of one request/response streaming exchange."""

    id: str
    provider: str
    payload: Payload
    handler: ResponseHandler
    document: Any = None
    on_exit: Optional[ExitHandler] = None
    callback: Optional[CompletionCallback] = None
    timestamp: float = field(default_factory=time.time)
    raw_response: str = ""
    response: str = ""
    first_line: int = UNSET_LINE
    last_line: int = UNSET_LINE
    anchor_group: Optional[int] = None
    anchor_id: Optional[int] = None
    state: QueryState = QueryState.PENDING
    finished_at: Optional[float] = None

    def apply(self, event: QueryEvent) -> QueryState:
        """Advance the lifecycle state; returns the new state."""
        self.state = advance(self.state, event)
        if self.state is QueryState.DONE and self.finished_at is None:
            self.finished_at = time.time()
        return self.state

    @property
    def done(self) -> bool:
        return self.state is QueryState.DONE


__all__ = ["Query", "UNSET_LINE"]
