"""Linkorder - transitive static-library link-order resolver.

Computes, for every library unit of a frozen dependency graph, the order in
which its static archives must be passed to a single-pass linker, together
with the full static+shared dependency closure.
"""

from linkorder.config import ResolverConfig, load_resolver_config
from linkorder.errors import GraphDefinitionError, LinkOrderError, UnknownUnitError
from linkorder.graph import DepKind, DependencyView, UnitSpec, find_static_cycles
from linkorder.graph.io import export_plans, load_dependency_view
from linkorder.ordering import ClosureWalker, LinkPlan, LinkPlanner, OrderMerger

__version__ = "0.1.0"

__all__ = [
    "ClosureWalker",
    "DepKind",
    "DependencyView",
    "GraphDefinitionError",
    "LinkOrderError",
    "LinkPlan",
    "LinkPlanner",
    "OrderMerger",
    "ResolverConfig",
    "UnitSpec",
    "UnknownUnitError",
    "export_plans",
    "find_static_cycles",
    "load_dependency_view",
    "load_resolver_config",
]
