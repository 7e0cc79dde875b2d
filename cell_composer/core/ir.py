"""Intermediate representation of parsed cell declarations.

WHY: The parser sees one cell at a time, the compiler needs one file.
The IR is the hand-off between the two: every declaration the program
has accumulated, grouped by category, with enough of the original text
to re-render it and an optional marker saying where the user's cursor
sits inside it.

HOW: One dataclass per declaration category:
  Import: one imported package (optional alias)
  TypeDecl: one named type
  Constant: one constant; constants live in ConstantBlocks
  Variable: one package-level variable
  Function: one function or method, or one of many init hooks
  Declarations: the complete set, keyed by name within each category

RULES:
- Keys are unique within a category (add_* raises DeclarationError)
- A ConstantBlock is a non-empty ordered list; its order is the order
  of the original ``const ( ... )`` block and must be preserved
- Cursor deltas are relative to the start of the marked sub-text
- Nothing in this package mutates a Declarations once built
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

from cell_composer.config import INIT_HOOK_KEY_PREFIX
from cell_composer.core.cursor import NO_CURSOR, Cursor
from cell_composer.core.errors import DeclarationError


class CursorIn(str, Enum):
    """Which sub-text of a declaration holds the cursor."""

    ALIAS = "alias"
    PATH = "path"
    NAME = "name"
    TYPE = "type"
    VALUE = "value"
    DEFINITION = "definition"


class FunctionKind(str, Enum):
    """Ordinary functions are unique by name; init hooks are not."""

    ORDINARY = "ordinary"
    INIT_HOOK = "init_hook"


@dataclass
class Import:
    """An imported package, keyed by its import path.

    RULES:
    - alias is "" when the package is imported under its own name
    - cursor_in is ALIAS or PATH; PATH deltas count from the opening quote
    """

    path: str
    alias: str = ""
    cursor_in: Optional[CursorIn] = None
    cursor: Cursor = NO_CURSOR

    @property
    def key(self) -> str:
        return self.path


@dataclass
class TypeDecl:
    """A named type: ``type <key> <type_definition>``."""

    key: str
    type_definition: str
    cursor_in: Optional[CursorIn] = None
    cursor: Cursor = NO_CURSOR


@dataclass
class Variable:
    """A package-level variable: ``<name> [<type>] [= <value>]``."""

    name: str
    type_definition: str = ""
    value_definition: str = ""
    cursor_in: Optional[CursorIn] = None
    cursor: Cursor = NO_CURSOR

    @property
    def key(self) -> str:
        return self.name


@dataclass
class Constant:
    """A constant: ``<key> [<type>] [= <value>]``.

    The value may be empty inside a block, where Go repeats the previous
    expression (``iota`` style enumerations).
    """

    key: str
    type_definition: str = ""
    value_definition: str = ""
    cursor_in: Optional[CursorIn] = None
    cursor: Cursor = NO_CURSOR


@dataclass
class Function:
    """A function or method definition, stored as its full source text.

    WHY: Go allows many ``func init()`` in one file, but the IR keys
    functions by name. Init hooks are therefore tagged with their kind and
    a sequence number and stored under a synthetic key, while their
    definition text keeps the real ``init`` identifier.

    RULES:
    - name is the storage key of an ORDINARY function (receiver-qualified
      for methods, e.g. ``Point~String``)
    - INIT_HOOK keys are zero-padded so sorting keeps sequence order
    - A cursor, if any, is relative to the start of ``definition``
    """

    name: str
    definition: str
    kind: FunctionKind = FunctionKind.ORDINARY
    sequence: int = 0
    cursor_in: Optional[CursorIn] = None
    cursor: Cursor = NO_CURSOR

    @classmethod
    def init_hook(
        cls,
        definition: str,
        sequence: int,
        cursor: Cursor = NO_CURSOR,
    ) -> Function:
        """Build one ``func init()`` entry."""
        return cls(
            name="init",
            definition=definition,
            kind=FunctionKind.INIT_HOOK,
            sequence=sequence,
            cursor_in=CursorIn.DEFINITION if cursor.has_cursor else None,
            cursor=cursor,
        )

    @property
    def key(self) -> str:
        if self.kind is FunctionKind.INIT_HOOK:
            return "{}{:04d}".format(INIT_HOOK_KEY_PREFIX, self.sequence)
        return self.name

    @property
    def has_cursor(self) -> bool:
        return self.cursor_in is not None


@dataclass
class ConstantBlock:
    """An ordered run of constants declared together.

    WHY: Inside ``const ( ... )`` an entry without a value repeats the
    previous expression, so ``iota`` enumerations depend on position.
    Re-rendering must keep the original order.

    RULES:
    - Never empty; the first constant is the head and names the block
    - Keys are unique within the block
    """

    constants: List[Constant]

    def __post_init__(self) -> None:
        if not self.constants:
            raise DeclarationError("constant block must not be empty")
        seen = set()
        for const in self.constants:
            if const.key in seen:
                raise DeclarationError(
                    "duplicate constant {!r} in block {!r}".format(const.key, self.key)
                )
            seen.add(const.key)

    @property
    def key(self) -> str:
        return self.constants[0].key

    @property
    def head(self) -> Constant:
        return self.constants[0]

    @property
    def tail(self) -> Constant:
        return self.constants[-1]

    def __len__(self) -> int:
        return len(self.constants)

    def __iter__(self) -> Iterator[Constant]:
        return iter(self.constants)

    def prev_of(self, key: str) -> Optional[Constant]:
        """Constant declared just before ``key`` in this block, if any."""
        index = self._index(key)
        return self.constants[index - 1] if index > 0 else None

    def next_of(self, key: str) -> Optional[Constant]:
        """Constant declared just after ``key`` in this block, if any."""
        index = self._index(key)
        return self.constants[index + 1] if index + 1 < len(self.constants) else None

    def _index(self, key: str) -> int:
        for i, const in enumerate(self.constants):
            if const.key == key:
                return i
        raise KeyError(key)


def constant_blocks_from_links(
    constants: Mapping[str, Constant],
    links: Mapping[str, Tuple[Optional[str], Optional[str]]],
) -> List[ConstantBlock]:
    """Rebuild ordered constant blocks from a linked (prev, next) description.

    WHY: Parsers naturally record each constant's neighbours while walking
    a ``const ( ... )`` block. The IR wants explicit ordered blocks.

    HOW: Heads are the constants without a previous link. Each chain is
    followed through its next links until it ends, checking that every
    link is mirrored and that no constant is visited twice.

    RULES:
    - Constants missing from ``links`` are single-entry blocks
    - A next link must point back with a matching prev link
    - Every constant must be reached from exactly one head (no cycles)

    Args:
        constants: Constants keyed by name.
        links: key → (prev_key, next_key); either side may be None.

    Returns:
        Blocks in head-key order.
    """
    def _link(key: str) -> Tuple[Optional[str], Optional[str]]:
        return links.get(key, (None, None))

    heads = sorted(key for key in constants if _link(key)[0] is None)
    visited: set = set()
    blocks: List[ConstantBlock] = []
    for head in heads:
        chain: List[Constant] = []
        key: Optional[str] = head
        prev_key: Optional[str] = None
        while key is not None:
            if key in visited:
                raise DeclarationError("constant chain through {!r} has a cycle".format(key))
            if key not in constants:
                raise DeclarationError("constant chain refers to unknown {!r}".format(key))
            if _link(key)[0] != prev_key:
                raise DeclarationError(
                    "constant {!r} links back to {!r}, expected {!r}".format(
                        key, _link(key)[0], prev_key,
                    )
                )
            visited.add(key)
            chain.append(constants[key])
            prev_key = key
            key = _link(key)[1]
        blocks.append(ConstantBlock(chain))

    unreached = sorted(set(constants) - visited)
    if unreached:
        raise DeclarationError(
            "constants not reachable from any block head: {}".format(", ".join(unreached))
        )
    return blocks


@dataclass
class Declarations:
    """Every declaration accumulated for the program, by category.

    HOW: Built once per composition request by the upstream collaborator
    (or by cell_composer.document), then handed read-only to renderers.

    RULES:
    - Each category is keyed by the entry's key
    - constant_blocks is keyed by block head; constant keys are unique
      across all blocks
    """

    imports: Dict[str, Import] = field(default_factory=dict)
    types: Dict[str, TypeDecl] = field(default_factory=dict)
    constant_blocks: Dict[str, ConstantBlock] = field(default_factory=dict)
    variables: Dict[str, Variable] = field(default_factory=dict)
    functions: Dict[str, Function] = field(default_factory=dict)

    @property
    def constants(self) -> Dict[str, Constant]:
        """Flat view of all constants, keyed by name."""
        return {c.key: c for block in self.constant_blocks.values() for c in block}

    def is_empty(self) -> bool:
        return not (
            self.imports or self.types or self.constant_blocks
            or self.variables or self.functions
        )

    def cursor_marker(self) -> Cursor:
        """Cursor delta of the first marked entry, or NO_CURSOR if none is marked.

        Tells callers whether a cursor was requested at all.
        """
        categories = (self.imports, self.types, self.constants, self.variables, self.functions)
        for category in categories:
            for entry in category.values():
                if entry.cursor_in is not None:
                    return entry.cursor
        return NO_CURSOR

    def add_import(self, entry: Import) -> None:
        _add_unique(self.imports, entry.key, entry, "import")

    def add_type(self, entry: TypeDecl) -> None:
        _add_unique(self.types, entry.key, entry, "type")

    def add_variable(self, entry: Variable) -> None:
        _add_unique(self.variables, entry.key, entry, "variable")

    def add_function(self, entry: Function) -> None:
        _add_unique(self.functions, entry.key, entry, "function")

    def add_constant_block(self, block: ConstantBlock) -> None:
        existing = self.constants
        for const in block:
            if const.key in existing:
                raise DeclarationError("duplicate constant {!r}".format(const.key))
        self.constant_blocks[block.key] = block


def _add_unique(category: Dict[str, object], key: str, entry: object, kind: str) -> None:
    if key in category:
        raise DeclarationError("duplicate {} {!r}".format(kind, key))
    category[key] = entry
