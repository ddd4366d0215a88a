"""Thread-safe query registry.

The only synchronization point between queries: records are created on
submit, fetched by every decoder / render / exit step, and deleted by the
host to cancel. A missing record means the query was cancelled or evicted.

Eviction:
    Every ``create`` prunes finished records. The ``keep_finished`` most
    recently finished ones stay readable (line range, response) unless they
    finished more than ``max_age`` seconds ago. Records still streaming are
    never evicted.
"""
from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Dict, List, Optional

from ...config.defaults import QUERY_REGISTRY_KEEP_FINISHED, QUERY_REGISTRY_MAX_AGE_SECONDS
from ..logging import get_logger, log_event
from .query import Query

_logger = get_logger("dispatch.registry")


class QueryRegistry:
    """Lock-protected mapping of query id to :class:`Query`.

    All methods are safe to call from runner threads and the main loop.
    """

    def __init__(
        self,
        keep_finished: int = QUERY_REGISTRY_KEEP_FINISHED,
        max_age: float = QUERY_REGISTRY_MAX_AGE_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._queries: Dict[str, Query] = {}
        self._lock = threading.Lock()
        self.keep_finished = keep_finished
        self.max_age = max_age
        self._clock = clock

    def create(self, query_id: str, record: Query) -> Query:
        with self._lock:
            self._queries[query_id] = record
            evicted = self._prune_locked()
        if evicted:
            log_event(_logger, "registry.evicted", level=logging.DEBUG, query_ids=evicted, count=len(evicted))
        return record

    def get(self, query_id: str) -> Optional[Query]:
        """Return the record, or None if cancelled/evicted."""
        with self._lock:
            return self._queries.get(query_id)

    def delete(self, query_id: str) -> Optional[Query]:
        """Remove and return the record; deleting twice is harmless."""
        with self._lock:
            return self._queries.pop(query_id, None)

    def prune(self) -> List[str]:
        """Evict finished records past the retention bounds; returns their ids."""
        with self._lock:
            return self._prune_locked()

    def ids(self) -> List[str]:
        with self._lock:
            return list(self._queries)

    def __contains__(self, query_id: object) -> bool:
        with self._lock:
            return query_id in self._queries

    def __len__(self) -> int:
        with self._lock:
            return len(self._queries)

    def _prune_locked(self) -> List[str]:
        now = self._clock()
        finished = sorted(
            (
                (q.finished_at or q.timestamp, order, qid)
                for order, (qid, q) in enumerate(self._queries.items())
                if q.done
            ),
            reverse=True,
        )
        evicted: List[str] = []
        for index, (finished_at, _, qid) in enumerate(finished):
            if index >= self.keep_finished or now - finished_at > self.max_age:
                del self._queries[qid]
                evicted.append(qid)
        return evicted


__all__ = ["QueryRegistry"]
