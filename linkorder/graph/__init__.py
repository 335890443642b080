"""Public graph API surface."""

from linkorder.graph.cycles import find_static_cycles
from linkorder.graph.schema import DepKind, UnitSpec, parse_dep_string
from linkorder.graph.view import ALL_KINDS, DependencyView

__all__ = [
    "ALL_KINDS",
    "DepKind",
    "DependencyView",
    "UnitSpec",
    "find_static_cycles",
    "parse_dep_string",
]
