"""Category renderer registry.

WHY: The file composer must write categories in one fixed order, and
adding a category should not mean touching the composer. A central
ordered dict gives both.

HOW: RENDERERS maps the category (phase) name to a renderer *instance*;
renderers are stateless, so one instance is shared by every call.

RULES:
- Order is the order categories appear in the generated file:
  imports, types, constants, variables, functions
- Keys equal each renderer's ``name`` and are used as phase names
- Every renderer listed here must be importable without side effects
"""

from __future__ import annotations

from typing import Dict

from cell_composer.renderers.base import BaseRenderer
from cell_composer.renderers.constants import ConstantsRenderer
from cell_composer.renderers.functions import FunctionsRenderer
from cell_composer.renderers.imports import ImportsRenderer
from cell_composer.renderers.type_decls import TypesRenderer
from cell_composer.renderers.variables import VariablesRenderer

RENDERERS: Dict[str, BaseRenderer] = {
    "imports": ImportsRenderer(),
    "types": TypesRenderer(),
    "constants": ConstantsRenderer(),
    "variables": VariablesRenderer(),
    "functions": FunctionsRenderer(),
}
