"""In-memory document and viewport.

Reference implementation of the ``Document`` / ``Viewport`` contracts with
explicit tracked positions. Suitable for tests, headless use, and as the model
for host adapters.

Anchor shift semantics for ``set_lines(start, end, lines)`` (replace the
half-open range ``[start, end)`` with ``lines``), where ``delta = len(lines) -
(end - start)``:

* anchor before ``start`` → unchanged;
* pure insertion (``start == end``) exactly at the anchor → unchanged for
  left gravity, moved past the inserted lines for right gravity;
* anchor inside ``[start, end)`` → collapses to ``start``;
* anchor at or after ``end`` (other than the pure-insertion case) → shifted
  by ``delta``.

Thread safety: none. Mutate only from the main loop.
"""
from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence


@dataclass
class TrackedPosition:
    """A line position that follows edits made around it."""

    line: int
    right_gravity: bool = False

    def shift(self, start: int, end: int, inserted: int) -> None:
        """Apply the effect of replacing ``[start, end)`` with ``inserted`` lines."""
        if self.line < start:
            return
        if start == end and self.line == start:
            if self.right_gravity:
                self.line += inserted
            return
        if self.line < end:
            self.line = start
            return
        self.line += inserted - (end - start)


class TextDocument:
    """List-of-lines document with named anchor groups."""

    def __init__(self, lines: Optional[Sequence[str]] = None, name: str = "") -> None:
        self.name = name
        self._lines: List[str] = list(lines) if lines else [""]
        self._valid = True
        self._groups: Dict[int, Dict[int, TrackedPosition]] = {}
        self._group_names: Dict[int, str] = {}
        self._ids = itertools.count(1)
        self.edits = 0
        self.undo_joins = 0

    # -------------------- validity --------------------

    def is_valid(self) -> bool:
        return self._valid

    def close(self) -> None:
        """Invalidate the document (e.g. the buffer was wiped)."""
        self._valid = False
        self._groups.clear()

    # -------------------- lines --------------------

    def line_count(self) -> int:
        return len(self._lines)

    def get_lines(self, start: int = 0, end: Optional[int] = None) -> List[str]:
        return self._lines[start:end]

    @property
    def text(self) -> str:
        return "\n".join(self._lines)

    def set_lines(self, start: int, end: int, lines: Sequence[str]) -> None:
        """Replace lines ``[start, end)``; out-of-range bounds are clamped."""
        if not self._valid:
            raise ValueError(f"document {self.name or id(self)} is no longer valid")
        count = len(self._lines)
        start = max(0, min(start, count))
        end = max(start, min(end, count))
        self._lines[start:end] = list(lines)
        if not self._lines:
            self._lines = [""]
        for group in self._groups.values():
            for pos in group.values():
                pos.shift(start, end, len(lines))
        self.edits += 1

    def join_undo(self) -> None:
        """Merge the next edit into the previous undo step."""
        self.undo_joins += 1

    # -------------------- anchors --------------------

    def create_anchor_group(self, name: str) -> int:
        group = next(self._ids)
        self._groups[group] = {}
        self._group_names[group] = name
        return group

    def set_anchor(self, group: int, line: int, *, right_gravity: bool = False) -> int:
        anchor = next(self._ids)
        line = max(0, min(line, len(self._lines)))
        self._groups.setdefault(group, {})[anchor] = TrackedPosition(line, right_gravity)
        return anchor

    def anchor_line(self, group: int, anchor: int) -> int:
        """Return the anchor's current line.

        Raises:
            KeyError: if the group or anchor does not exist (anymore).
        """
        return self._groups[group][anchor].line

    def clear_anchor_group(self, group: int) -> None:
        """Drop every anchor in ``group``; the group id stays reserved."""
        if group in self._groups:
            self._groups[group] = {}

    def anchors(self, group: int) -> Dict[int, int]:
        return {anchor: pos.line for anchor, pos in self._groups.get(group, {}).items()}


class TextViewport:
    """Cursor holder for a :class:`TextDocument`."""

    def __init__(self, document: TextDocument, cursor: int = 0) -> None:
        self.document = document
        self._cursor = cursor

    def cursor_line(self) -> int:
        return self._cursor

    def set_cursor(self, line: int) -> None:
        """Move the cursor, clamped to the document's last line."""
        self._cursor = max(0, min(line, self.document.line_count() - 1))


__all__ = ["TrackedPosition", "TextDocument", "TextViewport"]
