"""Pydantic models for declarations documents.

WHY: The parser that turns cells into declarations runs outside this
package and hands its result over as JSON. Pydantic models validate that
hand-off at the boundary, so a malformed document is reported as a parse
failure instead of surfacing later as a confusing render bug, and they
publish a JSON Schema the parser side can validate against.

HOW: One model per declaration category, mirroring the IR field names.
Constants are given as a list of blocks, each block a list in source
order. DeclarationsDocument.to_declarations() builds the IR; the load_*
helpers turn every validation problem into a CellParseError.

RULES:
- cursor_in and cursor are given together or not at all
- cursor_in must name a sub-text the entry actually has
- Duplicate keys are parse errors
- Python 3.9+ compatible (no PEP 604 unions at runtime, use Optional)
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, ClassVar, Dict, FrozenSet, List, Optional, Tuple

from pydantic import BaseModel, Field, ValidationError, model_validator

from cell_composer.core.cursor import NO_CURSOR, Cursor
from cell_composer.core.errors import CellParseError, DeclarationError
from cell_composer.core.ir import (
    Constant,
    ConstantBlock,
    CursorIn,
    Declarations,
    Function,
    FunctionKind,
    Import,
    TypeDecl,
    Variable,
)


class CursorModel(BaseModel):
    """A zero-based cursor delta relative to the start of a sub-text."""

    line: int = Field(ge=0, description="Lines after the start of the sub-text.")
    col: int = Field(ge=0, description="Column; absolute when line > 0, else relative.")

    def to_cursor(self) -> Cursor:
        return Cursor(line=self.line, col=self.col)


class _MarkedModel(BaseModel):
    """Shared cursor marker fields and their validation."""

    allowed_cursor_in: ClassVar[FrozenSet[CursorIn]] = frozenset()

    cursor_in: Optional[CursorIn] = Field(
        default=None,
        description="Which sub-text of the declaration holds the cursor.",
    )
    cursor: Optional[CursorModel] = Field(
        default=None,
        description="Cursor position relative to the start of that sub-text.",
    )

    @model_validator(mode="after")
    def _check_marker(self) -> "_MarkedModel":
        if (self.cursor_in is None) != (self.cursor is None):
            raise ValueError("cursor_in and cursor must be given together")
        if self.cursor_in is not None and self.cursor_in not in self.allowed_cursor_in:
            raise ValueError("cursor_in {!r} not allowed here".format(self.cursor_in.value))
        return self

    def _marker(self) -> Tuple[Optional[CursorIn], Cursor]:
        if self.cursor is None:
            return None, NO_CURSOR
        return self.cursor_in, self.cursor.to_cursor()


class ImportModel(_MarkedModel):
    allowed_cursor_in: ClassVar[FrozenSet[CursorIn]] = frozenset({CursorIn.ALIAS, CursorIn.PATH})

    path: str = Field(min_length=1, description="Import path, unquoted.")
    alias: str = Field(default="", description="Package alias, '' for none.")

    def to_ir(self) -> Import:
        cursor_in, cursor = self._marker()
        return Import(path=self.path, alias=self.alias, cursor_in=cursor_in, cursor=cursor)


class TypeModel(_MarkedModel):
    allowed_cursor_in: ClassVar[FrozenSet[CursorIn]] = frozenset({CursorIn.NAME, CursorIn.TYPE})

    key: str = Field(min_length=1, description="Type name.")
    type_definition: str = Field(description="Everything after the type name.")

    def to_ir(self) -> TypeDecl:
        cursor_in, cursor = self._marker()
        return TypeDecl(
            key=self.key,
            type_definition=self.type_definition,
            cursor_in=cursor_in,
            cursor=cursor,
        )


class ConstantModel(_MarkedModel):
    allowed_cursor_in: ClassVar[FrozenSet[CursorIn]] = frozenset(
        {CursorIn.NAME, CursorIn.TYPE, CursorIn.VALUE}
    )

    key: str = Field(min_length=1, description="Constant name.")
    type_definition: str = Field(default="", description="Optional type.")
    value_definition: str = Field(default="", description="Value; may be empty inside a block.")

    def to_ir(self) -> Constant:
        cursor_in, cursor = self._marker()
        return Constant(
            key=self.key,
            type_definition=self.type_definition,
            value_definition=self.value_definition,
            cursor_in=cursor_in,
            cursor=cursor,
        )


class VariableModel(_MarkedModel):
    allowed_cursor_in: ClassVar[FrozenSet[CursorIn]] = frozenset(
        {CursorIn.NAME, CursorIn.TYPE, CursorIn.VALUE}
    )

    name: str = Field(min_length=1, description="Variable name.")
    type_definition: str = Field(default="", description="Optional type.")
    value_definition: str = Field(default="", description="Optional initial value.")

    def to_ir(self) -> Variable:
        cursor_in, cursor = self._marker()
        return Variable(
            name=self.name,
            type_definition=self.type_definition,
            value_definition=self.value_definition,
            cursor_in=cursor_in,
            cursor=cursor,
        )


class FunctionModel(_MarkedModel):
    allowed_cursor_in: ClassVar[FrozenSet[CursorIn]] = frozenset({CursorIn.DEFINITION})

    name: str = Field(min_length=1, description="Storage key, e.g. 'Point~String'.")
    definition: str = Field(description="Full source text of the function.")
    init_hook: bool = Field(default=False, description="True for each 'func init()'.")
    sequence: int = Field(default=0, ge=0, description="Order among init hooks.")

    def to_ir(self) -> Function:
        cursor_in, cursor = self._marker()
        return Function(
            name=self.name,
            definition=self.definition,
            kind=FunctionKind.INIT_HOOK if self.init_hook else FunctionKind.ORDINARY,
            sequence=self.sequence,
            cursor_in=cursor_in,
            cursor=cursor,
        )


class MainModel(BaseModel):
    """The optional ``func main()`` written after every other declaration."""

    definition: str = Field(description="Full source text of func main().")
    cursor: Optional[CursorModel] = Field(
        default=None,
        description="Cursor relative to the start of the definition.",
    )

    def to_ir(self) -> Function:
        if self.cursor is None:
            return Function(name="main", definition=self.definition)
        return Function(
            name="main",
            definition=self.definition,
            cursor_in=CursorIn.DEFINITION,
            cursor=self.cursor.to_cursor(),
        )


class DeclarationsDocument(BaseModel):
    """Every declaration of a program, as produced by the cell parser."""

    imports: List[ImportModel] = Field(default_factory=list)
    types: List[TypeModel] = Field(default_factory=list)
    constants: List[List[ConstantModel]] = Field(
        default_factory=list,
        description="Constant blocks, each in source order.",
    )
    variables: List[VariableModel] = Field(default_factory=list)
    functions: List[FunctionModel] = Field(default_factory=list)
    main: Optional[MainModel] = None

    model_config = {"json_schema_extra": {
        "examples": [
            {
                "imports": [{"path": "fmt"}],
                "constants": [[
                    {"key": "Red", "type_definition": "Color", "value_definition": "iota"},
                    {"key": "Green"},
                ]],
                "types": [{"key": "Color", "type_definition": "int"}],
                "main": {"definition": "func main() {\n\tfmt.Println(Green)\n}"},
            }
        ]
    }}

    def to_declarations(self) -> Declarations:
        """Build the IR.

        Raises:
            DeclarationError: duplicate keys or an empty constant block.
        """
        decls = Declarations()
        for imp in self.imports:
            decls.add_import(imp.to_ir())
        for type_model in self.types:
            decls.add_type(type_model.to_ir())
        for block in self.constants:
            decls.add_constant_block(ConstantBlock([c.to_ir() for c in block]))
        for var in self.variables:
            decls.add_variable(var.to_ir())
        for func in self.functions:
            decls.add_function(func.to_ir())
        return decls

    def main_function(self) -> Optional[Function]:
        return self.main.to_ir() if self.main is not None else None


def document_json_schema() -> Dict[str, Any]:
    """JSON Schema of DeclarationsDocument, for the parser side."""
    return DeclarationsDocument.model_json_schema()


def parse_document(text: str | bytes) -> DeclarationsDocument:
    """Validate a JSON declarations document.

    Raises:
        CellParseError: invalid JSON or schema violation.
    """
    try:
        return DeclarationsDocument.model_validate_json(text)
    except ValidationError as exc:
        raise CellParseError("invalid declarations document: {}".format(exc)) from exc


def load_declarations(path: str | Path) -> Tuple[Declarations, Optional[Function]]:
    """Read a declarations document and build (declarations, main).

    Raises:
        CellParseError: the document is invalid or inconsistent.
        OSError: the file can't be read.
    """
    document = parse_document(Path(path).read_bytes())
    try:
        return document.to_declarations(), document.main_function()
    except DeclarationError as exc:
        raise CellParseError("{}: {}".format(path, exc)) from exc
