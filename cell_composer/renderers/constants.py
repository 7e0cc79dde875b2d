"""Constant renderer: block by block, preserving in-block order.

WHY: Constants declared together in ``const ( ... )`` may depend on
their position: an entry without a value repeats the previous entry's
expression with the next ``iota``. Sorting them individually would
silently renumber enumerations.

HOW: Blocks are sorted by the key of their head. A block of one is
written as a single ``const`` line; larger blocks are written in their
original order inside one ``const ( ... )``.

RULES:
- Block order: sorted by head key
- In-block order: exactly the block's order, never sorted
- Each constant may mark its key, type or value as holding the cursor
"""

from __future__ import annotations

from cell_composer.config import INDENT
from cell_composer.core.cursor import NO_CURSOR, Cursor
from cell_composer.core.ir import Constant, CursorIn, Declarations
from cell_composer.core.writer import CursorWriter
from cell_composer.renderers.base import BaseRenderer, sorted_keys


def render_constant(const: Constant, w: CursorWriter, cursor: Cursor) -> Cursor:
    """Write one constant (without the ``const`` keyword).

    Returns the cursor mapped from this constant if it is marked,
    otherwise the ``cursor`` passed in.
    """
    if const.cursor_in is CursorIn.NAME:
        cursor = w.cursor_plus_delta(const.cursor)
    w.write(const.key)
    if const.type_definition:
        w.write(" ")
        if const.cursor_in is CursorIn.TYPE:
            cursor = w.cursor_plus_delta(const.cursor)
        w.write(const.type_definition)
    if const.value_definition:
        w.write(" = ")
        if const.cursor_in is CursorIn.VALUE:
            cursor = w.cursor_plus_delta(const.cursor)
        w.write(const.value_definition)
    return cursor


class ConstantsRenderer(BaseRenderer):
    """Renders all constant blocks, without comments."""

    @property
    def name(self) -> str:
        return "constants"

    def render(self, decls: Declarations, w: CursorWriter) -> Cursor:
        cursor = NO_CURSOR
        if not decls.constant_blocks:
            return cursor

        for head_key in sorted_keys(decls.constant_blocks):
            block = decls.constant_blocks[head_key]
            if len(block) == 1:
                w.write("const ")
                cursor = render_constant(block.head, w, cursor)
                w.write("\n\n")
                continue

            w.write("const (\n")
            for const in block:
                w.write(INDENT)
                cursor = render_constant(const, w, cursor)
                w.write("\n")
            w.write(")\n\n")
        return cursor
