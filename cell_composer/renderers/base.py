"""Abstract base renderer.

WHY: Every declaration category is written out differently, but the
file composer treats them all alike: hand over the declarations and a
writer, get back a mapped cursor (or NO_CURSOR). This base class fixes
that interface so composers can run any renderer generically.

HOW: BaseRenderer is an ABC with a ``name`` property (also the phase
name used in error messages) and a ``render()`` method. ``sorted_keys``
is the shared helper that makes output independent of dict order.

RULES:
- render() writes nothing at all for an empty category
- render() returns the cursor of the last marked entry it wrote
- Entries are visited in sorted key order
- Renderers never log and never raise on write failures; the writer
  keeps the error
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Mapping

from cell_composer.core.cursor import Cursor
from cell_composer.core.ir import Declarations
from cell_composer.core.writer import CursorWriter


def sorted_keys(entries: Mapping[str, object]) -> List[str]:
    """Keys of a category in lexicographic order."""
    return sorted(entries)


class BaseRenderer(ABC):
    """Abstract base for all category renderers.

    To add a new category:
    1. Create a new file in renderers/
    2. Subclass BaseRenderer
    3. Implement name and render()
    4. Register in RENDERERS in renderers/__init__.py, at its position
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Category name, e.g. 'imports'."""

    @abstractmethod
    def render(self, decls: Declarations, w: CursorWriter) -> Cursor:
        """Write this category of ``decls`` to ``w``.

        Args:
            decls: The complete declarations; only this category is read.
            w: Writer positioned where the category should start.

        Returns:
            The mapped cursor, or NO_CURSOR when no entry carries one.
        """
