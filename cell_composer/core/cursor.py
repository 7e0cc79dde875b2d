"""Cursor positions in cells and in generated files.

WHY: Interactive features (inspection, completion) are answered by tools
that only see the generated file. A cursor in the user's cell must be
translated into the equivalent position of the generated file, and some
cells have no cursor at all.

HOW: Cursor is a frozen (line, col) pair. NO_CURSOR is a module-level
sentinel instance used wherever "not applicable" or "not mapped" must be
expressed without resorting to None checks at every call site.

RULES:
- line and col are zero-based
- col counts characters, not bytes
- NO_CURSOR compares unequal to every real position
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Cursor:
    """A zero-based (line, column) position.

    Used both for absolute positions and for deltas relative to the start
    of some piece of text (see CursorWriter.cursor_plus_delta).
    """

    line: int = 0
    col: int = 0

    @property
    def has_cursor(self) -> bool:
        """False only for the NO_CURSOR sentinel."""
        return self.line >= 0 and self.col >= 0

    def __str__(self) -> str:
        if not self.has_cursor:
            return "none"
        return "{}:{}".format(self.line, self.col)


NO_CURSOR = Cursor(line=-1, col=-1)
"""Sentinel meaning "no cursor requested" or "cursor not mapped"."""
