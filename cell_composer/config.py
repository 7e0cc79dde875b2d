"""Configuration constants and .env loading.

WHY: Centralizes the fixed pieces of generated Go source (package
preamble, indentation, entry-point directives) and the few values users
may want to override (output file name, output directory, log level), so
nobody has to hunt for string literals buried in rendering logic.

HOW: python-dotenv loads the .env file on import. Constants are defined
as module-level strings and tuples. Overridable values read the
environment with a default.

RULES:
- Generated files always start with PACKAGE_PREAMBLE
- Entry-point directives are recognized by prefix, not exact match
- All overridable defaults use the CELL_COMPOSER_ environment prefix
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (where the kernel is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Generated source layout
# ---------------------------------------------------------------------------

PACKAGE_PREAMBLE = "package main\n\n"
"""First text written to every generated file."""

INDENT = "\t"
"""One level of indentation inside blocks and the entry-point wrapper."""

MAIN_DIRECTIVE_PREFIXES: tuple[str, ...] = ("%main", "%%")
"""Cell lines starting with any of these open a ``func main()`` wrapper."""

MAIN_WRAPPER_OPEN = "func main() {\n" + INDENT + "flag.Parse()\n"
MAIN_WRAPPER_CLOSE = "\n}\n"

INIT_HOOK_KEY_PREFIX = "init_"
"""Storage key prefix for the (possibly many) ``func init()`` of a program."""

# ---------------------------------------------------------------------------
# Overridable defaults
# ---------------------------------------------------------------------------

MAIN_FILE_NAME = os.getenv("CELL_COMPOSER_MAIN_FILE", "main.go")
DEFAULT_OUTPUT_DIR = os.getenv("CELL_COMPOSER_OUTPUT_DIR", "")
LOG_LEVEL = os.getenv("CELL_COMPOSER_LOG_LEVEL", "WARNING").upper()


def main_path(output_dir: str | Path | None = None) -> Path:
    """Return the well-known path of the file about to be compiled.

    RULES:
    - An explicit output_dir wins over CELL_COMPOSER_OUTPUT_DIR
    - With neither set, the current working directory is used
    """
    directory = output_dir or DEFAULT_OUTPUT_DIR or Path.cwd()
    return Path(directory) / MAIN_FILE_NAME
