"""Variable block renderer.

RULES:
- One ``var ( ... )`` block holding every variable, sorted by name
- Entry layout: ``<name>[ <type>][ = <value>]``
- The cursor may sit in the name, the type or the value
"""

from __future__ import annotations

from cell_composer.config import INDENT
from cell_composer.core.cursor import NO_CURSOR, Cursor
from cell_composer.core.ir import CursorIn, Declarations
from cell_composer.core.writer import CursorWriter
from cell_composer.renderers.base import BaseRenderer, sorted_keys


class VariablesRenderer(BaseRenderer):
    """Renders ``var ( ... )`` for all variables."""

    @property
    def name(self) -> str:
        return "variables"

    def render(self, decls: Declarations, w: CursorWriter) -> Cursor:
        cursor = NO_CURSOR
        if not decls.variables:
            return cursor

        w.write("var (\n")
        for key in sorted_keys(decls.variables):
            entry = decls.variables[key]
            w.write(INDENT)
            if entry.cursor_in is CursorIn.NAME:
                cursor = w.cursor_plus_delta(entry.cursor)
            w.write(entry.name)
            if entry.type_definition:
                w.write(" ")
                if entry.cursor_in is CursorIn.TYPE:
                    cursor = w.cursor_plus_delta(entry.cursor)
                w.write(entry.type_definition)
            if entry.value_definition:
                w.write(" = ")
                if entry.cursor_in is CursorIn.VALUE:
                    cursor = w.cursor_plus_delta(entry.cursor)
                w.write(entry.value_definition)
            w.write("\n")
        w.write(")\n\n")
        return cursor
