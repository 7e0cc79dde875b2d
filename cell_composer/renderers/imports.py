"""Import block renderer.

HOW: Writes one parenthesized ``import ( ... )`` block, one package per
line, with the optional alias before the quoted path.

RULES:
- Sorted by import path
- Paths are written as Go double-quoted string literals
- An ALIAS cursor counts from the alias, a PATH cursor from the quote
"""

from __future__ import annotations

import json

from cell_composer.config import INDENT
from cell_composer.core.cursor import NO_CURSOR, Cursor
from cell_composer.core.ir import CursorIn, Declarations
from cell_composer.core.writer import CursorWriter
from cell_composer.renderers.base import BaseRenderer, sorted_keys


def quote_go_string(text: str) -> str:
    """Quote text as a Go interpreted string literal."""
    # JSON string escapes are a subset of Go's.
    return json.dumps(text, ensure_ascii=False)


class ImportsRenderer(BaseRenderer):
    """Renders ``import ( ... )`` for all imports."""

    @property
    def name(self) -> str:
        return "imports"

    def render(self, decls: Declarations, w: CursorWriter) -> Cursor:
        cursor = NO_CURSOR
        if not decls.imports:
            return cursor

        w.write("import (\n")
        for key in sorted_keys(decls.imports):
            entry = decls.imports[key]
            w.write(INDENT)
            if entry.alias:
                if entry.cursor_in is CursorIn.ALIAS:
                    cursor = w.cursor_plus_delta(entry.cursor)
                w.writef("{} ", entry.alias)
            if entry.cursor_in is CursorIn.PATH:
                cursor = w.cursor_plus_delta(entry.cursor)
            w.writef("{}\n", quote_go_string(entry.path))
        w.write(")\n\n")
        return cursor
