"""Link-order algorithms built on top of the dependency view."""

from .closure import ClosureWalker
from .merger import Cycle, Linearization, MergeResult, OrderMerger, linearize
from .plan import LinkPlan, LinkPlanner, PlanCache

__all__ = [
    "ClosureWalker",
    "Cycle",
    "Linearization",
    "LinkPlan",
    "LinkPlanner",
    "MergeResult",
    "OrderMerger",
    "PlanCache",
    "linearize",
]
