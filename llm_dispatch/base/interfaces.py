"""
Collaborator contracts for the dispatch engine.

The engine talks to its environment only through these structural protocols:
secret storage, the stream runner, the main loop, and the document/viewport
primitives. Default in-process implementations live in
``base.repositories.secrets``, ``base.runners``, ``base.loop`` and
``base.render.text_document``; hosts may substitute their own.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, List, Optional, Protocol, Sequence, runtime_checkable

if TYPE_CHECKING:
    from .runners.request import StreamRequest


# (query_id, text_chunk, is_reasoning, stop)
ResponseHandler = Callable[[str, str, bool, bool], None]
# (query_id)
ExitHandler = Callable[[str], None]
# (full_response_text)
CompletionCallback = Callable[[str], None]
# (error, chunk); chunk is None at end-of-stream
StdoutReader = Callable[[Optional[BaseException], Optional[bytes]], None]


@runtime_checkable
class SecretProvider(Protocol):
    """Secret lookup plus the load/refresh continuations used before a query."""

    def get_secret(self, name: str) -> Optional[str]: ...

    def run_with_secret(self, name: str, fn: Callable[[], Any]) -> Any: ...

    def refresh(self, name: str, fn: Callable[[], Any]) -> Any: ...


@runtime_checkable
class StreamRunner(Protocol):
    """Starts one streaming transfer for a resolved request.

    ``on_stdout`` receives raw byte chunks as they arrive, ``(err, None)`` for
    transport errors, and exactly one ``(None, None)`` at end-of-stream.
    ``on_exit`` receives the process return code (or HTTP status) afterwards.
    """

    def start(
        self,
        document: Any,
        request: "StreamRequest",
        on_stdout: StdoutReader,
        on_exit: Optional[Callable[[int], None]] = None,
    ) -> Any: ...


@runtime_checkable
class Scheduler(Protocol):
    """Single cooperative execution context (the host main loop)."""

    def schedule(self, fn: Callable[..., Any], *args: Any) -> None: ...

    def wrap(self, fn: Callable[..., Any]) -> Callable[..., None]: ...


@runtime_checkable
class Document(Protocol):
    """Line-addressed text document with anchor groups.

    Lines are 0-based; ``set_lines(start, end, lines)`` replaces the half-open
    range ``[start, end)``. Anchors are tracked positions that follow edits
    made elsewhere in the document.
    """

    def is_valid(self) -> bool: ...

    def line_count(self) -> int: ...

    def get_lines(self, start: int, end: int) -> List[str]: ...

    def set_lines(self, start: int, end: int, lines: Sequence[str]) -> None: ...

    def create_anchor_group(self, name: str) -> int: ...

    def set_anchor(self, group: int, line: int, *, right_gravity: bool = False) -> int: ...

    def anchor_line(self, group: int, anchor: int) -> int: ...

    def clear_anchor_group(self, group: int) -> None: ...

    def join_undo(self) -> None: ...


@runtime_checkable
class Viewport(Protocol):
    """A view onto a document with a cursor."""

    def cursor_line(self) -> int: ...

    def set_cursor(self, line: int) -> None: ...


__all__ = [
    "ResponseHandler",
    "ExitHandler",
    "CompletionCallback",
    "StdoutReader",
    "SecretProvider",
    "StreamRunner",
    "Scheduler",
    "Document",
    "Viewport",
]
