"""Exception types surfaced by the composer.

WHY: Callers (the kernel, the CLI, tests) need typed exceptions to tell
a broken output file apart from a lost cursor, and both apart from a
cell that never parsed in the first place.

HOW: One small class per failure kind. ComposeError carries the phase
in which the output sink failed plus the cursor resolved so far; the
underlying I/O error is chained as ``__cause__``.

RULES:
- A ComposeError means the output file must not be compiled
- CursorLostError is only raised when a cursor was actually requested
- CellParseError is raised by the input side, never by rendering
"""

from __future__ import annotations

from cell_composer.core.cursor import NO_CURSOR, Cursor


class CellParseError(ValueError):
    """Raised when the contents of a cell could not be parsed.

    WHY: Composition only works on well-formed declarations. When the
    upstream parse fails there is nothing to compose, and callers want
    to report that differently from an I/O failure.

    RULES:
    - Message says which input failed and why
    """


class DeclarationError(ValueError):
    """Raised when declarations violate the model's structure.

    Duplicate keys within a category, or a linked constant chain with
    more than one head, more than one tail, or a cycle.
    """


class CursorLostError(Exception):
    """Raised when a requested cursor was not rendered into the file.

    WHY: "No cursor requested" is normal; "cursor requested but no
    phase produced it" signals a mismatch between the cursor locator and
    the declarations it was matched against.
    """

    def __init__(self, requested: Cursor) -> None:
        self.requested = requested
        super().__init__(
            "cursor position {} not rendered in generated file".format(requested)
        )


class ShortWriteError(OSError):
    """Raised (and stored) when a stream accepts fewer characters than given."""

    def __init__(self, content: str, written: int) -> None:
        self.content = content
        self.written = written
        super().__init__(
            "failed to write {!r}, {} characters: wrote only {}".format(
                content, len(content), written,
            )
        )


class ComposeError(Exception):
    """Raised when writing the generated file failed.

    WHY: A partially written file must never reach the compiler, and the
    person debugging it needs to know which block was being written.

    HOW: Raised once, after every phase has run, with ``phase`` naming
    the block (imports, types, constants, variables, functions, main),
    a cell line ("line 3"), or a file operation (create, close).

    RULES:
    - phase is always set
    - cursor holds whatever cursor was mapped before the failure
    """

    def __init__(self, phase: str, message: str, cursor: Cursor = NO_CURSOR) -> None:
        self.phase = phase
        self.cursor = cursor
        super().__init__("in block {!r}: {}".format(phase, message))
