"""Cooperative main loop.

All document, anchor and viewport work, and every completion callback, must
run on one execution context. Runner threads never touch a document directly:
they ``schedule`` callables here and the host drains them with
``run_pending`` from its own thread (a UI tick, an idle callback, a test).

Callbacks that raise are logged and do not stop the drain.
"""
from __future__ import annotations

import queue
from typing import Any, Callable, Optional, Tuple

from .logging import get_logger

_logger = get_logger("dispatch.loop")

_Task = Tuple[Callable[..., Any], Tuple[Any, ...]]


class MainLoop:
    """Thread-safe FIFO of callables executed by ``run_pending``."""

    def __init__(self) -> None:
        self._tasks: "queue.SimpleQueue[_Task]" = queue.SimpleQueue()

    def schedule(self, fn: Callable[..., Any], *args: Any) -> None:
        """Queue ``fn(*args)`` for the next drain; safe from any thread."""
        self._tasks.put((fn, args))

    def wrap(self, fn: Callable[..., Any]) -> Callable[..., None]:
        """Return a function that schedules ``fn`` with its call arguments."""

        def scheduled(*args: Any) -> None:
            self.schedule(fn, *args)

        scheduled.__wrapped__ = fn  # type: ignore[attr-defined]
        return scheduled

    def run_pending(self, limit: Optional[int] = None) -> int:
        """Run queued callables (including ones queued meanwhile).

        Returns the number of callables executed. ``limit`` bounds one drain
        so a busy stream cannot starve the host.
        """
        ran = 0
        while limit is None or ran < limit:
            try:
                fn, args = self._tasks.get_nowait()
            except queue.Empty:
                break
            ran += 1
            try:
                fn(*args)
            except Exception:
                _logger.exception("scheduled callback %r failed", getattr(fn, "__name__", fn))
        return ran

    def pending(self) -> int:
        """Approximate number of queued callables."""
        return self._tasks.qsize()


__all__ = ["MainLoop"]
