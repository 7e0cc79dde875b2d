"""Command-line interface for the cell composer.

WHY: The kernel calls the composer as a library, but composing a file
from a saved declarations document (or a saved cell) by hand is the
quickest way to see what the compiler will see, and where a cursor ends
up, when debugging a notebook.

HOW: argparse with two subcommands. ``decls`` loads a JSON declarations
document and composes it; ``lines`` composes one cell file literally,
expanding the ``%%`` shorthand. The mapped cursor goes to stdout, status
messages to stderr via logging.

RULES:
- Output file: config.main_path(--output-dir)
- stdout carries only the mapped cursor ("LINE:COL" or "none")
- Exit codes: 0 ok, 1 parse/compose failure, 2 cursor requested but lost
- --require-cursor turns a lost cursor into exit code 2
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Set, Tuple

from cell_composer.config import LOG_LEVEL, MAIN_DIRECTIVE_PREFIXES, main_path
from cell_composer.core.composer import (
    create_go_file_from_lines,
    create_main_file_from_decls,
    ensure_cursor_mapped,
)
from cell_composer.core.cursor import NO_CURSOR, Cursor
from cell_composer.core.errors import CellParseError, ComposeError, CursorLostError
from cell_composer.document import load_declarations

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CURSOR_LOST = 2


def parse_cursor(text: str) -> Cursor:
    """Parse "LINE:COL" (zero-based) for argparse."""
    try:
        line_text, col_text = text.split(":", 1)
        line, col = int(line_text), int(col_text)
    except ValueError:
        raise argparse.ArgumentTypeError("cursor must be LINE:COL, got {!r}".format(text))
    if line < 0 or col < 0:
        raise argparse.ArgumentTypeError("cursor must not be negative, got {!r}".format(text))
    return Cursor(line=line, col=col)


def special_command_lines(lines: List[str]) -> Set[int]:
    """Indices of lines that are not Go code: ``%`` and ``!`` commands.

    Directive lines (``%%``, ``%main``) are included; the composer still
    recognizes them before skipping.
    """
    skip = set()
    for ii, line in enumerate(lines):
        stripped = line.lstrip()
        if stripped.startswith(("%", "!")) or line.startswith(MAIN_DIRECTIVE_PREFIXES):
            skip.add(ii)
    return skip


def _run_decls(args: argparse.Namespace) -> Tuple[Cursor, Cursor]:
    decls, main_decl = load_declarations(args.document)
    requested = decls.cursor_marker()
    if main_decl is not None and main_decl.has_cursor:
        requested = main_decl.cursor
    path = main_path(args.output_dir)
    logger.info(
        "Composing %d imports, %d types, %d constant blocks, %d variables, %d functions into %s",
        len(decls.imports), len(decls.types), len(decls.constant_blocks),
        len(decls.variables), len(decls.functions), path,
    )
    return requested, create_main_file_from_decls(path, decls, main_decl)


def _run_lines(args: argparse.Namespace) -> Tuple[Cursor, Cursor]:
    lines = Path(args.cell_file).read_text(encoding="utf-8").splitlines()
    skip_lines = special_command_lines(lines)
    if args.skip:
        skip_lines.update(args.skip)
    path = main_path(args.output_dir)
    logger.info("Composing %d cell lines (%d skipped) into %s", len(lines), len(skip_lines), path)
    return args.cursor, create_go_file_from_lines(path, lines, skip_lines, args.cursor)


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    Separate from main() so tests can inspect it without composing.
    """
    parser = argparse.ArgumentParser(
        prog="cell_composer",
        description="Compose notebook cell declarations into a single Go file "
                    "and report where the cursor maps to.",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log debug messages to stderr.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--output-dir",
        default=None,
        help="Directory for the generated file (default: CELL_COMPOSER_OUTPUT_DIR or CWD).",
    )
    common.add_argument(
        "--require-cursor",
        action="store_true",
        help="Fail with exit code 2 if a requested cursor is not mapped.",
    )

    decls_parser = subparsers.add_parser(
        "decls",
        parents=[common],
        help="Compose a JSON declarations document.",
    )
    decls_parser.add_argument("document", help="Path to the declarations JSON document.")
    decls_parser.set_defaults(handler=_run_decls)

    lines_parser = subparsers.add_parser(
        "lines",
        parents=[common],
        help="Compose the literal lines of one cell.",
    )
    lines_parser.add_argument("cell_file", help="Path to the cell source.")
    lines_parser.add_argument(
        "--skip",
        type=int,
        action="append",
        default=None,
        help="Zero-based line index to leave out. Can be specified multiple times.",
    )
    lines_parser.add_argument(
        "--cursor",
        type=parse_cursor,
        default=NO_CURSOR,
        help="Cursor in the cell as LINE:COL (zero-based).",
    )
    lines_parser.set_defaults(handler=_run_lines)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for ``python -m cell_composer``.

    Returns the process exit code; argv=None means sys.argv.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else LOG_LEVEL,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        requested, cursor = args.handler(args)
    except CellParseError as exc:
        logger.error("%s", exc)
        return EXIT_FAILED
    except ComposeError as exc:
        logger.error("Failed to compose %s: %s", main_path(args.output_dir), exc)
        return EXIT_FAILED
    except OSError as exc:
        logger.error("%s", exc)
        return EXIT_FAILED

    print(cursor)
    if args.require_cursor:
        try:
            ensure_cursor_mapped(requested, cursor)
        except CursorLostError as exc:
            logger.error("%s", exc)
            return EXIT_CURSOR_LOST
    return EXIT_OK
