"""Text writer that keeps track of the current line and column.

WHY: Cursor mapping needs to know, at the moment a piece of a
declaration is written, where in the generated file that piece starts.
Composers also issue dozens of small writes in sequence; checking for an
I/O error after every single one would bury the rendering logic.

HOW: CursorWriter wraps a text stream. Each write updates line/col by
counting newlines and measuring the trailing segment. The first failure
is stored and every later write becomes a no-op, so callers write
unconditionally and check ``error`` once at the end.

RULES:
- Only the first failure is kept
- After a failure: no bytes written, no position change
- A stream reporting fewer characters than given is a failure
- cursor_plus_delta: later-line deltas carry an absolute column,
  same-line deltas add to the current column
"""

from __future__ import annotations

from typing import Optional, TextIO

from cell_composer.core.cursor import Cursor
from cell_composer.core.errors import ShortWriteError


class CursorWriter:
    """Writes text to a stream and tracks the position of its end.

    Attributes:
        line: Zero-based line of the end of the written text.
        col: Column (in characters) of the end of the written text.
    """

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream
        self._error: Optional[Exception] = None
        self.line = 0
        self.col = 0

    @property
    def error(self) -> Optional[Exception]:
        """First error that happened while writing, if any."""
        return self._error

    @property
    def cursor(self) -> Cursor:
        """Position at the end of everything written so far."""
        return Cursor(line=self.line, col=self.col)

    def cursor_plus_delta(self, delta: Cursor) -> Cursor:
        """Map a cursor recorded relative to text about to be written.

        The delta was recorded against the start of a sub-text before it
        was known to span one or more lines. On a later line its column is
        already absolute; on the same line it adds to the current column.
        """
        if delta.line > 0:
            return Cursor(line=self.line + delta.line, col=delta.col)
        return Cursor(line=self.line, col=self.col + delta.col)

    def writef(self, template: str, *args: object) -> None:
        """Format with ``str.format`` and write. Errors via ``error``."""
        if self._error is not None:
            return
        self.write(template.format(*args))

    def write(self, content: str) -> None:
        """Write content and advance the cursor. Errors via ``error``."""
        if self._error is not None:
            return
        err = self._try_write(content)
        if err is not None:
            self._error = err
            return
        self._advance(content)

    def _try_write(self, content: str) -> Optional[Exception]:
        """Write to the stream, returning the failure instead of raising it."""
        try:
            written = self._stream.write(content)
        except (OSError, ValueError) as exc:
            return exc
        # Some streams return None; treat that as a complete write.
        if written is not None and written != len(content):
            return ShortWriteError(content, written)
        return None

    def _advance(self, content: str) -> None:
        parts = content.split("\n")
        if len(parts) == 1:
            self.col += len(parts[0])
        else:
            self.line += len(parts) - 1
            self.col = len(parts[-1])
