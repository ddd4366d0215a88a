"""Query records, their lifecycle state machine and the shared registry."""

from .lifecycle import IllegalTransition, QueryEvent, QueryState, advance
from .query import UNSET_LINE, Query
from .registry import QueryRegistry

__all__ = [
    "IllegalTransition",
    "QueryEvent",
    "QueryState",
    "advance",
    "Query",
    "UNSET_LINE",
    "QueryRegistry",
]
