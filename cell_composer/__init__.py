"""Cell Composer: assembles notebook cell declarations into one Go file.

WHY: A Go notebook kernel receives code one cell at a time, but the Go
toolchain only compiles whole files. Every cell's imports, types,
constants, variables and functions must be re-assembled into a single
``main.go``, and interactive features (inspection, completion) need to
know where the user's cursor landed inside that generated file.

HOW: Three-stage pipeline of model (core IR of parsed declarations),
render (one renderer per declaration category), compose (write the file
through a cursor-tracking writer and merge the mapped cursor).

RULES:
- All renderers consume the same Declarations IR
- Output is deterministic: same declarations, same bytes
- Composition never logs and never retries; failures are raised once
"""

__version__ = "0.1.0"
