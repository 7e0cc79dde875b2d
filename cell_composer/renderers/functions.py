"""Function renderer: full definitions, one after another, sorted by key.

Init hooks sort under their synthetic ``init_NNNN`` keys, which keeps them
in sequence order; their text already says ``func init()`` so it is
written as is.
"""

from __future__ import annotations

from cell_composer.core.cursor import NO_CURSOR, Cursor
from cell_composer.core.ir import Declarations
from cell_composer.core.writer import CursorWriter
from cell_composer.renderers.base import BaseRenderer, sorted_keys


class FunctionsRenderer(BaseRenderer):
    """Renders function definitions, without comments."""

    @property
    def name(self) -> str:
        return "functions"

    def render(self, decls: Declarations, w: CursorWriter) -> Cursor:
        cursor = NO_CURSOR
        if not decls.functions:
            return cursor

        for key in sorted_keys(decls.functions):
            entry = decls.functions[key]
            if entry.has_cursor:
                cursor = w.cursor_plus_delta(entry.cursor)
            w.writef("{}\n\n", entry.definition)
        return cursor
