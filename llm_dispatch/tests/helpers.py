"""Test helpers: a scripted stream runner and SSE line builders."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from llm_dispatch.base.runners import StreamRequest


@dataclass
class StartedTransfer:
    """One ``start`` call captured by :class:`ScriptedRunner`."""

    document: Any
    request: StreamRequest
    on_stdout: Callable[[Optional[BaseException], Optional[bytes]], None]
    on_exit: Optional[Callable[[int], None]]

    def send(self, *chunks: str) -> None:
        for chunk in chunks:
            self.on_stdout(None, chunk.encode("utf-8"))

    def fail(self, err: BaseException) -> None:
        self.on_stdout(err, None)

    def finish(self, returncode: int = 0) -> None:
        self.on_stdout(None, None)
        if self.on_exit is not None:
            self.on_exit(returncode)


@dataclass
class ScriptedRunner:
    """Stream runner double; transfers are driven from the test."""

    started: List[StartedTransfer] = field(default_factory=list)

    def start(self, document, request, on_stdout, on_exit=None):
        transfer = StartedTransfer(document, request, on_stdout, on_exit)
        self.started.append(transfer)
        return transfer

    @property
    def last(self) -> StartedTransfer:
        return self.started[-1]


def sse_delta(content: Optional[str] = None, reasoning: Optional[str] = None) -> str:
    """Return one ``data: {...}`` line carrying a choice delta."""
    delta: Dict[str, Any] = {}
    if content is not None:
        delta["content"] = content
    if reasoning is not None:
        delta["reasoning_content"] = reasoning
    return "data: " + json.dumps({"choices": [{"index": 0, "delta": delta}]}) + "\n"


def sse_usage(prompt: int, completion: int, total: Optional[int] = None) -> str:
    """Return one ``data: {...}`` line carrying only a usage object."""
    usage: Dict[str, Any] = {"prompt_tokens": prompt, "completion_tokens": completion}
    if total is not None:
        usage["total_tokens"] = total
    return "data: " + json.dumps({"choices": [], "usage": usage}) + "\n"


class Recorder:
    """Response handler double collecting ``(qid, text, is_reasoning, stop)``."""

    def __init__(self) -> None:
        self.events: List[tuple] = []

    def __call__(self, qid: str, text: str, is_reasoning: bool, stop: bool) -> None:
        self.events.append((qid, text, is_reasoning, stop))

    def text(self) -> str:
        return "".join(e[1] for e in self.events)

    def content(self) -> str:
        return "".join(e[1] for e in self.events if not e[2] and not e[3])
