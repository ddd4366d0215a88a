"""Structured logging context for query events.

:class:`LogContext` names what an event is about: the provider, the model, the
query and where that query stands in its lifecycle. ``for_query`` snapshots a
query record at the moment of the event, so a ``query.finished`` line reads
``"state": "done"`` while a flush logged mid-stream reads ``"streaming"``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


def _state_name(state: Any) -> Optional[str]:
    return getattr(state, "value", state)


@dataclass(frozen=True)
class LogContext:
    """Provider/query fields merged into every structured event."""

    provider: Optional[str] = None
    model: Optional[str] = None
    query_id: Optional[str] = None
    state: Optional[str] = None

    @classmethod
    def for_query(cls, query: Any) -> "LogContext":
        """Context of a ``Query`` record, including its current lifecycle state."""
        return cls(
            provider=getattr(query, "provider", None),
            model=getattr(getattr(query, "payload", None), "model", None),
            query_id=getattr(query, "id", None),
            state=_state_name(getattr(query, "state", None)),
        )

    def to_dict(self) -> Dict[str, Any]:
        fields = {
            "provider": self.provider,
            "model": self.model,
            "query_id": self.query_id,
            "state": self.state,
        }
        return {k: v for k, v in fields.items() if v is not None}


__all__ = ["LogContext"]
