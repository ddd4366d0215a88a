"""Per-query lifecycle state machine.

A query moves ``PENDING -> STREAMING -> DRAINING -> DONE``:

* ``BYTES_RECEIVED`` starts (or continues) streaming;
* ``STREAM_CLOSED`` begins draining (flush decoder, run exit callbacks);
* ``FINISHED`` ends draining;
* ``CANCELLED`` (registry eviction observed) ends the query from any state.

``DONE`` is terminal; events after it are rejected so late deliveries cannot
revive a finished query.
"""
from __future__ import annotations

from enum import Enum
from typing import Dict, Tuple


class QueryState(str, Enum):
    """Lifecycle state of one query."""

    PENDING = "pending"
    STREAMING = "streaming"
    DRAINING = "draining"
    DONE = "done"


class QueryEvent(str, Enum):
    """Events driving :class:`QueryState` transitions."""

    BYTES_RECEIVED = "bytes_received"
    STREAM_CLOSED = "stream_closed"
    FINISHED = "finished"
    CANCELLED = "cancelled"


class IllegalTransition(ValueError):
    """Raised when an event is not valid in the current state."""

    def __init__(self, state: QueryState, event: QueryEvent) -> None:
        super().__init__(f"{event.value} is not valid in state {state.value}")
        self.state = state
        self.event = event


_TRANSITIONS: Dict[Tuple[QueryState, QueryEvent], QueryState] = {
    (QueryState.PENDING, QueryEvent.BYTES_RECEIVED): QueryState.STREAMING,
    (QueryState.STREAMING, QueryEvent.BYTES_RECEIVED): QueryState.STREAMING,
    (QueryState.PENDING, QueryEvent.STREAM_CLOSED): QueryState.DRAINING,
    (QueryState.STREAMING, QueryEvent.STREAM_CLOSED): QueryState.DRAINING,
    (QueryState.DRAINING, QueryEvent.FINISHED): QueryState.DONE,
    (QueryState.PENDING, QueryEvent.CANCELLED): QueryState.DONE,
    (QueryState.STREAMING, QueryEvent.CANCELLED): QueryState.DONE,
    (QueryState.DRAINING, QueryEvent.CANCELLED): QueryState.DONE,
}


def advance(state: QueryState, event: QueryEvent) -> QueryState:
    """Return the state reached from ``state`` on ``event``.

    Raises:
        IllegalTransition: when the pair has no transition.
    """
    try:
        return _TRANSITIONS[(state, event)]
    except KeyError:
        raise IllegalTransition(state, event) from None


__all__ = ["QueryState", "QueryEvent", "IllegalTransition", "advance"]
