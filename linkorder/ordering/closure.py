"""Transitive closure over static and shared edges.

The closure is bookkeeping data for completeness and availability checks;
it is never handed to the linker. Units reachable only through a shared
edge show up here but not in the link order, because a shared object's own
static deps are linked into that shared object.
"""

from __future__ import annotations

import logging
from typing import List, Sequence, Set, Tuple

from linkorder.graph.schema import DepKind
from linkorder.graph.view import ALL_KINDS, DependencyView
from linkorder.ordering.merger import Linearization, linearize

logger = logging.getLogger("linkorder.ordering.closure")


class ClosureWalker:
    """Walks every edge kind of a DependencyView."""

    def __init__(self, view: DependencyView) -> None:
        self.view = view

    def _children(self, name: str) -> Tuple[str, ...]:
        return self.view.deps(name, ALL_KINDS)

    def walk(self, unit: str) -> Linearization:
        """Linearize the mixed static/shared closure of ``unit``."""
        return linearize(self._children(unit), self._children)

    def closure(self, unit: str) -> Tuple[str, ...]:
        """Every unit reachable from ``unit``, each once.

        Static edges are followed before shared edges, each in declared
        order. The result is dependents first, like the link order.
        """
        return self.walk(unit).order

    def reachable(self, unit: str, kinds: Sequence[DepKind] = ALL_KINDS) -> Tuple[str, ...]:
        """Units reachable via ``kinds`` edges, in first-discovery order."""
        seen: Set[str] = set()
        order: List[str] = []
        stack = list(reversed(self.view.deps(unit, kinds)))
        while stack:
            node = stack.pop()
            if node in seen:
                continue
            seen.add(node)
            order.append(node)
            stack.extend(reversed(self.view.deps(node, kinds)))
        return tuple(order)

    def shared_only(self, unit: str) -> Tuple[str, ...]:
        """Units in the closure that no purely static path reaches."""
        static_reach = set(self.reachable(unit, (DepKind.STATIC,)))
        result = tuple(dep for dep in self.closure(unit) if dep not in static_reach)
        logger.debug("%s has %d shared-only dependencies", unit, len(result))
        return result


__all__ = ["ClosureWalker"]
