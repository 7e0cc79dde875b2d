"""Unit tests for the raw-line composer and write_lines_to_file.

WHY: Cells that are only statements (the common "%%" case) skip the
declarations path entirely. The ``%%`` shorthand, line skipping and the
indentation it adds must all keep the cursor pointing at the same
character it pointed at in the cell.

HOW: Cells are written to tmp_path files and read back; a monkeypatched
FailingStream drives the error paths.

RULES:
- Cell line indices and cursor lines are zero-based
- A cursor on a skipped or directive line maps to NO_CURSOR, not an error
"""

import pytest

from cell_composer.core import composer
from cell_composer.core.composer import create_go_file_from_lines, write_lines_to_file
from cell_composer.core.cursor import NO_CURSOR, Cursor
from cell_composer.core.errors import ComposeError

DIRECTIVE_CELL = ["x := 1", "%%", "print(x)"]
DIRECTIVE_CELL_GO = (
    "package main\n\n"
    "x := 1\n"
    "func main() {\n"
    "\tflag.Parse()\n"
    "\tprint(x)\n"
    "\n}\n"
)


def _compose(tmp_path, lines, skip_lines=(), cursor=NO_CURSOR):
    path = tmp_path / "main.go"
    mapped = create_go_file_from_lines(path, lines, skip_lines, cursor)
    return path.read_text(encoding="utf-8"), mapped


class TestEntryPointWrapper:
    """The %% and %main shorthands open a func main() wrapper."""

    def test_wraps_following_lines(self, tmp_path):
        text, _ = _compose(tmp_path, DIRECTIVE_CELL)
        assert text == DIRECTIVE_CELL_GO

    def test_main_directive(self, tmp_path):
        text, _ = _compose(tmp_path, ["%main", "run()"])
        assert text == "package main\n\nfunc main() {\n\tflag.Parse()\n\trun()\n\n}\n"

    def test_empty_lines_not_indented(self, tmp_path):
        text, _ = _compose(tmp_path, ["%%", "a()", "", "b()"])
        assert text == "package main\n\nfunc main() {\n\tflag.Parse()\n\ta()\n\n\tb()\n\n}\n"

    def test_directive_recognized_when_skipped(self, tmp_path):
        text, _ = _compose(tmp_path, DIRECTIVE_CELL, skip_lines={1})
        assert text == DIRECTIVE_CELL_GO

    def test_second_directive_does_not_reopen(self, tmp_path):
        text, _ = _compose(tmp_path, ["%%", "a()", "%%", "b()"])
        assert text.count("func main()") == 1
        assert text.endswith("\ta()\n\tb()\n\n}\n")

    def test_no_directive_no_wrapper(self, tmp_path):
        text, _ = _compose(tmp_path, ["func f() {}", "var y = 2"])
        assert text == "package main\n\nfunc f() {}\nvar y = 2\n"


class TestSkipLines:

    def test_skipped_lines_are_omitted(self, tmp_path):
        text, _ = _compose(tmp_path, ["!go get foo", "var y = 2"], skip_lines={0})
        assert text == "package main\n\nvar y = 2\n"


class TestCursorMapping:
    """Cell cursor → file cursor."""

    def test_plain_line(self, tmp_path):
        _, cursor = _compose(tmp_path, ["func f() {}", "var y = 2"], cursor=Cursor(1, 4))
        assert cursor == Cursor(3, 4)

    def test_indented_line_accounts_for_indent(self, tmp_path):
        text, cursor = _compose(tmp_path, DIRECTIVE_CELL, cursor=Cursor(2, 6))
        assert cursor == Cursor(5, 7)
        assert text.splitlines()[5][cursor.col] == "x"

    def test_cursor_on_directive_line_is_lost(self, tmp_path):
        _, cursor = _compose(tmp_path, DIRECTIVE_CELL, cursor=Cursor(1, 1))
        assert cursor == NO_CURSOR

    def test_cursor_on_skipped_line_is_lost(self, tmp_path):
        text, cursor = _compose(tmp_path, DIRECTIVE_CELL, skip_lines={0}, cursor=Cursor(0, 2))
        assert cursor == NO_CURSOR
        assert "x := 1" not in text

    def test_skipped_lines_shift_following_cursor(self, tmp_path):
        _, cursor = _compose(tmp_path, ["!ls", "%ls", "var y = 2"], skip_lines={0, 1}, cursor=Cursor(2, 4))
        assert cursor == Cursor(2, 4)

    def test_no_cursor_requested(self, tmp_path):
        _, cursor = _compose(tmp_path, DIRECTIVE_CELL)
        assert cursor == NO_CURSOR


class TestLineErrors:

    def test_open_failure(self, tmp_path):
        with pytest.raises(ComposeError) as exc_info:
            create_go_file_from_lines(tmp_path / "nope" / "main.go", ["x"])
        assert exc_info.value.phase == "create"

    def test_failure_tagged_with_line(self, monkeypatch, failing_stream):
        stream = failing_stream(limit=len("package main\n\nx := 1\n"))
        monkeypatch.setattr(composer, "_create", lambda path: stream)
        with pytest.raises(ComposeError) as exc_info:
            create_go_file_from_lines("main.go", ["x := 1", "y := 2", "z := 3"])
        assert exc_info.value.phase == "line 1"
        assert stream.getvalue() == "package main\n\nx := 1\n"
        assert stream.closed

    def test_failure_closing_wrapper(self, monkeypatch, failing_stream):
        stream = failing_stream(limit=len(DIRECTIVE_CELL_GO) - 1)
        monkeypatch.setattr(composer, "_create", lambda path: stream)
        with pytest.raises(ComposeError) as exc_info:
            create_go_file_from_lines("main.go", DIRECTIVE_CELL)
        assert exc_info.value.phase == "main"

    def test_write_error_wins_over_close_error(self, monkeypatch, failing_stream):
        stream = failing_stream(limit=3, close_error=OSError("close failed"))
        monkeypatch.setattr(composer, "_create", lambda path: stream)
        with pytest.raises(ComposeError) as exc_info:
            create_go_file_from_lines("main.go", ["x := 1"])
        assert exc_info.value.phase == "preamble"

    def test_close_error_alone(self, monkeypatch, failing_stream):
        stream = failing_stream(limit=10 ** 6, close_error=OSError("close failed"))
        monkeypatch.setattr(composer, "_create", lambda path: stream)
        with pytest.raises(ComposeError) as exc_info:
            create_go_file_from_lines("main.go", ["x := 1"], cursor_in_cell=Cursor(0, 0))
        assert exc_info.value.phase == "close"
        assert exc_info.value.cursor == Cursor(2, 0)


class TestWriteLinesToFile:

    def test_writes_lines(self, tmp_path):
        path = tmp_path / "go.mod"
        write_lines_to_file(path, ["module gonb_abc", "", "go 1.21"])
        assert path.read_text(encoding="utf-8") == "module gonb_abc\n\ngo 1.21\n"

    def test_consumes_all_lines_after_failure(self, monkeypatch, failing_stream):
        stream = failing_stream(limit=4)
        monkeypatch.setattr(composer, "_create", lambda path: stream)
        consumed = []

        def lines():
            for line in ["abc", "defg", "hij", "klm"]:
                consumed.append(line)
                yield line

        with pytest.raises(ComposeError) as exc_info:
            write_lines_to_file("go.mod", lines())
        assert exc_info.value.phase == "line 1"
        assert consumed == ["abc", "defg", "hij", "klm"]
        assert stream.getvalue() == "abc\n"
        assert stream.closed
