"""File composers: declarations → main.go, cell lines → main.go.

WHY: The Go toolchain compiles files, not cells. Every evaluation
re-creates ``main.go`` from everything declared so far, and tools asked
about the user's cursor need to know where that cursor ended up in the
file. This module writes the file and answers that question.

HOW: compose_main_contents() writes the package preamble, then runs
every category renderer in registry order, then the optional ``main``
function. Each renderer reports a mapped cursor or NO_CURSOR; the latest
real cursor wins. create_go_file_from_lines() is the lighter path for a
single cell's literal lines, which also expands the ``%%`` shorthand
into a ``func main()`` wrapper. The create_* functions own the file:
open, compose, always close.

RULES:
- Fixed order: preamble, imports, types, constants, variables,
  functions, main
- Every phase runs even after a write failure (the writer is frozen,
  so later phases write nothing); the failure is raised afterwards as a
  ComposeError naming the phase in which it happened
- A compose error takes precedence over a close error
- A lost cursor is NOT an error here; see ensure_cursor_mapped()
- No logging, no retries
"""

from __future__ import annotations

from pathlib import Path
from typing import IO, Collection, Iterable, Optional, Sequence, TextIO

from cell_composer.config import (
    INDENT,
    MAIN_DIRECTIVE_PREFIXES,
    MAIN_WRAPPER_CLOSE,
    MAIN_WRAPPER_OPEN,
    PACKAGE_PREAMBLE,
)
from cell_composer.core.cursor import NO_CURSOR, Cursor
from cell_composer.core.errors import ComposeError, CursorLostError
from cell_composer.core.ir import Declarations, Function
from cell_composer.core.writer import CursorWriter
from cell_composer.renderers import RENDERERS


def compose_main_contents(
    stream: TextIO,
    decls: Declarations,
    main_decl: Optional[Function] = None,
) -> Cursor:
    """Write a complete Go file for ``decls`` to ``stream``.

    The ``main`` cursor is mapped as (recorded line + current line,
    recorded column). It is written right after a newline, so the
    current column is always 0 and this agrees with cursor_plus_delta.

    Args:
        stream: Text stream to write to; not closed here.
        decls: All declarations to render.
        main_decl: Optional ``func main()`` definition, written last.

    Returns:
        The mapped cursor, or NO_CURSOR if no declaration carried one.

    Raises:
        ComposeError: The stream failed; ``phase`` names where.
    """
    w = CursorWriter(stream)
    cursor = NO_CURSOR
    failed_phase: Optional[str] = None

    w.write(PACKAGE_PREAMBLE)
    if w.error is not None:
        failed_phase = "preamble"

    for name, renderer in RENDERERS.items():
        candidate = renderer.render(decls, w)
        if w.error is not None and failed_phase is None:
            failed_phase = name
        if candidate.has_cursor:
            cursor = candidate

    if main_decl is not None:
        w.write("\n")
        if main_decl.has_cursor:
            cursor = Cursor(line=main_decl.cursor.line + w.line, col=main_decl.cursor.col)
        w.writef("{}\n", main_decl.definition)
        if w.error is not None and failed_phase is None:
            failed_phase = "main"

    if failed_phase is not None:
        raise ComposeError(failed_phase, str(w.error), cursor) from w.error
    return cursor


def create_main_file_from_decls(
    path: str | Path,
    decls: Declarations,
    main_decl: Optional[Function] = None,
) -> Cursor:
    """Create (or truncate) ``path`` and compose ``decls`` into it.

    Raises:
        ComposeError: phase "create" if the file can't be opened, the
            failing block if writing failed, "close" if only closing did.
    """
    f = _create(path)
    try:
        cursor = compose_main_contents(f, decls, main_decl)
    except BaseException:
        # The root cause wins over any close failure.
        _close(f)
        raise
    _raise_on_close_error(f, path, cursor)
    return cursor


def create_go_file_from_lines(
    path: str | Path,
    lines: Sequence[str],
    skip_lines: Collection[int] = (),
    cursor_in_cell: Cursor = NO_CURSOR,
) -> Cursor:
    """Create a Go file from the literal lines of one cell.

    It doesn't include previous declarations. Among the things it
    handles:
    * The initial ``package main`` line.
    * The ``%%`` (or ``%main``) shorthand: the directive line is replaced
      by ``func main() {``; every following non-empty line is indented
      and the function is closed after the last line.

    Args:
        path: Where to write the Go code.
        lines: Lines of the cell.
        skip_lines: Indices of lines that are not Go code (``!`` and
            ``%`` special commands). Directive lines are recognized
            before skipping, since they are usually listed here too.
        cursor_in_cell: Cursor in the cell, or NO_CURSOR.

    Returns:
        The equivalent cursor in the file. NO_CURSOR if none was given,
        or if it sat on a skipped or directive line.

    Raises:
        ComposeError: phase "create", "preamble", "line N", "main"
            (closing the wrapper) or "close".
    """
    f = _create(path)
    try:
        cursor = _write_cell_lines(f, lines, skip_lines, cursor_in_cell)
    except BaseException:
        _close(f)
        raise
    _raise_on_close_error(f, path, cursor)
    return cursor


def _write_cell_lines(
    stream: TextIO,
    lines: Sequence[str],
    skip_lines: Collection[int],
    cursor_in_cell: Cursor,
) -> Cursor:
    w = CursorWriter(stream)
    cursor = NO_CURSOR
    failed_phase: Optional[str] = None

    w.write(PACKAGE_PREAMBLE)
    if w.error is not None:
        failed_phase = "preamble"

    created_func_main = False
    for ii, line in enumerate(lines):
        if line.startswith(MAIN_DIRECTIVE_PREFIXES):
            if not created_func_main:
                w.write(MAIN_WRAPPER_OPEN)
                created_func_main = True
        elif ii not in skip_lines:
            if created_func_main and line != "":
                w.write(INDENT)
            if ii == cursor_in_cell.line:
                # Current line for the cursor, plus the column in the cell.
                cursor = w.cursor_plus_delta(Cursor(line=0, col=cursor_in_cell.col))
            w.write(line)
            w.write("\n")
        if w.error is not None and failed_phase is None:
            failed_phase = "line {}".format(ii)

    if created_func_main:
        w.write(MAIN_WRAPPER_CLOSE)
        if w.error is not None and failed_phase is None:
            failed_phase = "main"

    if failed_phase is not None:
        raise ComposeError(failed_phase, str(w.error), cursor) from w.error
    return cursor


def write_lines_to_file(path: str | Path, lines: Iterable[str]) -> None:
    """Write each line, newline-terminated, to ``path``.

    RULES:
    - The whole iterable is consumed even after a write failure, so a
      producer feeding it (e.g. a generator over a pipe) never stalls
    - The first write failure is raised after consumption, and wins
      over a close failure
    """
    f = _create(path)
    w = CursorWriter(f)
    failed_line: Optional[int] = None
    try:
        for ii, line in enumerate(lines):
            if w.error is not None:
                continue
            w.writef("{}\n", line)
            if w.error is not None:
                failed_line = ii
    except BaseException:
        _close(f)
        raise
    if w.error is not None:
        _close(f)
        raise ComposeError(
            "line {}".format(failed_line),
            "writing to {}: {}".format(path, w.error),
        ) from w.error
    _raise_on_close_error(f, path, NO_CURSOR)


def ensure_cursor_mapped(requested: Cursor, cursor: Cursor) -> Cursor:
    """Return ``cursor``, raising if a requested cursor was lost.

    Raises:
        CursorLostError: ``requested`` is a real position but ``cursor``
            is NO_CURSOR.
    """
    if requested.has_cursor and not cursor.has_cursor:
        raise CursorLostError(requested)
    return cursor


def _create(path: str | Path) -> TextIO:
    # newline="" keeps "\n" as written, so tracked columns match the file.
    try:
        return open(path, "w", encoding="utf-8", newline="")
    except OSError as exc:
        raise ComposeError("create", "creating {}: {}".format(path, exc)) from exc


def _close(f: IO[str]) -> Optional[OSError]:
    try:
        f.close()
    except OSError as exc:
        return exc
    return None


def _raise_on_close_error(f: IO[str], path: str | Path, cursor: Cursor) -> None:
    err = _close(f)
    if err is not None:
        raise ComposeError("close", "closing {}: {}".format(path, err), cursor) from err
