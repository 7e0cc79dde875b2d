"""Shared test fixtures for the cell_composer test suite.

WHY: Most test modules need the same small program (a few imports, an
enum-style constant block, a variable, a function and ``main``) and the
same kind of misbehaving output stream. Centralizing both keeps the
expected file text in one place.

HOW: Pytest fixtures build the sample Declarations and main function.
FailingStream is a text stream that accepts writes up to a character
limit and then raises, optionally also failing on close().

RULES:
- SAMPLE_MAIN_GO is the exact expected composition of the sample
- FailingStream never stores a partially rejected write
"""

from typing import List, Optional

import pytest

from cell_composer.core.ir import (
    Constant,
    ConstantBlock,
    Declarations,
    Function,
    Import,
    TypeDecl,
    Variable,
)


class FailingStream:
    """Text stream that fails once more than ``limit`` characters arrive."""

    def __init__(self, limit: int, close_error: Optional[OSError] = None) -> None:
        self.limit = limit
        self.close_error = close_error
        self.chunks: List[str] = []
        self.write_calls = 0
        self.closed = False

    def write(self, text: str) -> int:
        self.write_calls += 1
        if len(self.getvalue()) + len(text) > self.limit:
            raise OSError(28, "No space left on device")
        self.chunks.append(text)
        return len(text)

    def close(self) -> None:
        self.closed = True
        if self.close_error is not None:
            raise self.close_error

    def getvalue(self) -> str:
        return "".join(self.chunks)


# ---------------------------------------------------------------------------
# Sample program
# ---------------------------------------------------------------------------

HELLO_DEF = 'func hello() { fmt.Println("hi") }'
MAIN_DEF = "func main() {\n\thello()\n}"

SAMPLE_MAIN_GO = (
    "package main\n\n"
    "import (\n"
    '\t"fmt"\n'
    ")\n\n"
    "type Color int\n"
    "\n"
    "const Pi = 3.14\n\n"
    "const (\n"
    "\tRed Color = iota\n"
    "\tGreen\n"
    "\tBlue\n"
    ")\n\n"
    "var (\n"
    "\tcounter int = 0\n"
    ")\n\n"
    + HELLO_DEF + "\n\n"
    "\n"
    + MAIN_DEF + "\n"
)


def build_sample_declarations() -> Declarations:
    decls = Declarations()
    decls.add_import(Import(path="fmt"))
    decls.add_type(TypeDecl(key="Color", type_definition="int"))
    decls.add_constant_block(ConstantBlock([
        Constant(key="Red", type_definition="Color", value_definition="iota"),
        Constant(key="Green"),
        Constant(key="Blue"),
    ]))
    decls.add_constant_block(ConstantBlock([Constant(key="Pi", value_definition="3.14")]))
    decls.add_variable(Variable(name="counter", type_definition="int", value_definition="0"))
    decls.add_function(Function(name="hello", definition=HELLO_DEF))
    return decls


@pytest.fixture
def sample_declarations() -> Declarations:
    """The sample program's declarations, without markers."""
    return build_sample_declarations()


@pytest.fixture
def sample_main() -> Function:
    """The sample program's func main(), without a marker."""
    return Function(name="main", definition=MAIN_DEF)


@pytest.fixture
def sample_main_go() -> str:
    """Exact expected composition of the sample program."""
    return SAMPLE_MAIN_GO


@pytest.fixture
def failing_stream():
    """Factory for FailingStream(limit, close_error=None)."""
    return FailingStream
