"""Type declarations renderer: one ``type <name> <definition>`` per line."""

from __future__ import annotations

from cell_composer.core.cursor import NO_CURSOR, Cursor
from cell_composer.core.ir import CursorIn, Declarations
from cell_composer.core.writer import CursorWriter
from cell_composer.renderers.base import BaseRenderer, sorted_keys


class TypesRenderer(BaseRenderer):
    """Renders type declarations, without comments."""

    @property
    def name(self) -> str:
        return "types"

    def render(self, decls: Declarations, w: CursorWriter) -> Cursor:
        cursor = NO_CURSOR
        if not decls.types:
            return cursor

        for key in sorted_keys(decls.types):
            entry = decls.types[key]
            w.write("type ")
            if entry.cursor_in is CursorIn.NAME:
                cursor = w.cursor_plus_delta(entry.cursor)
            w.writef("{} ", key)
            if entry.cursor_in is CursorIn.TYPE:
                cursor = w.cursor_plus_delta(entry.cursor)
            w.writef("{}\n", entry.type_definition)
        w.write("\n")
        return cursor
