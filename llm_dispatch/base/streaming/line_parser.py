"""Single-line classification for the response stream.

Each complete line of the stream is decoded into a tagged :class:`DecodedLine`
instead of being matched on substrings. Structured JSON parsing is tried
first; the textual ``choices``/``delta``/``content`` markers only serve to
tell a malformed delta line apart from ordinary noise (``[DONE]``, SSE
``event:`` lines, keep-alives) when parsing fails.

Parse failures never raise: usage probing is best-effort.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

SSE_DATA_PREFIX = "data: "
_DELTA_MARKERS = ("choices", "delta", "content")


class LineKind(str, Enum):
    """Classification of one stream line."""

    DELTA = "delta"
    USAGE = "usage"
    MALFORMED = "malformed"
    IGNORED = "ignored"


@dataclass(frozen=True)
class DecodedLine:
    """Tagged decode result for one line.

    ``content`` / ``reasoning`` are set for ``DELTA`` lines when the first
    choice carries them; ``usage`` is set whenever the object has a usage
    mapping (``USAGE`` lines, and ``DELTA`` lines that piggyback usage).
    """

    kind: LineKind
    content: Optional[str] = None
    reasoning: Optional[str] = None
    usage: Optional[Dict[str, Any]] = None
    raw: Optional[str] = None


_IGNORED = DecodedLine(LineKind.IGNORED)


def strip_sse_prefix(line: str) -> str:
    """Remove a leading ``"data: "`` frame marker if present."""
    return line[len(SSE_DATA_PREFIX):] if line.startswith(SSE_DATA_PREFIX) else line


def has_delta_markers(text: str) -> bool:
    """Return True if ``text`` textually looks like a streamed choice delta."""
    return all(marker in text for marker in _DELTA_MARKERS)


def _first_delta(data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    delta = first.get("delta")
    return delta if isinstance(delta, dict) else None


def _text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def classify_line(line: str) -> DecodedLine:
    """Decode one stream line into a :class:`DecodedLine`."""
    text = strip_sse_prefix(line).strip()
    if not text:
        return _IGNORED
    try:
        data = json.loads(text)
    except ValueError:
        if has_delta_markers(text):
            return DecodedLine(LineKind.MALFORMED, raw=text)
        return _IGNORED
    if not isinstance(data, dict):
        return _IGNORED

    usage = data.get("usage")
    usage = usage if isinstance(usage, dict) else None
    delta = _first_delta(data)
    if delta is not None:
        return DecodedLine(
            LineKind.DELTA,
            content=_text(delta.get("content")),
            reasoning=_text(delta.get("reasoning_content")),
            usage=usage,
        )
    if usage is not None:
        return DecodedLine(LineKind.USAGE, usage=usage)
    return _IGNORED


__all__ = [
    "LineKind",
    "DecodedLine",
    "SSE_DATA_PREFIX",
    "strip_sse_prefix",
    "has_delta_markers",
    "classify_line",
]
