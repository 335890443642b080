"""Static link-order merging.

Single-pass linkers resolve symbols left to right, so an archive must be
listed before every archive it pulls symbols from. Each unit declares its
own preferred order for its direct static dependencies; the merger folds
all of those local orders into one order per unit.

The merge is a linearization: walk the declared list in reverse, place a
unit only after everything it depends on has been placed (postorder), then
reverse the placed sequence. On any acyclic graph this equals
"concatenate each dependency followed by its own merged order and keep the
last occurrence of every unit", so when no edge forces an order between two
units, the one declared later is placed later.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Sequence, Set, Tuple

from linkorder.graph.view import ALL_KINDS, DependencyView

logger = logging.getLogger("linkorder.ordering.merger")

Cycle = Tuple[str, ...]


@dataclass(frozen=True)
class Linearization:
    """Result of a single linearize() walk.

    Attributes:
        order: Every unit reached from the roots, dependents first.
        cycles: Back-edge paths found during the walk. Each path starts at
            the re-entered unit and ends at the unit that referenced it.
    """

    order: Tuple[str, ...]
    cycles: Tuple[Cycle, ...] = ()


def linearize(
    roots: Sequence[str],
    children: Callable[[str], Sequence[str]],
) -> Linearization:
    """Merge ordered dependency lists into one dependents-first order.

    The walk uses an explicit stack, so chain depth is not limited by the
    interpreter recursion limit. Visit state is local to this call.

    Args:
        roots: Directly declared dependencies, in declaration order.
            Duplicates are allowed.
        children: Returns the declared dependencies of a unit, in order.

    Returns:
        Linearization: Duplicate-free order plus any cycles encountered.
    """
    entered: Set[str] = set()
    placed: List[str] = []
    cycles: List[Cycle] = []
    seen_cycles: Set[Cycle] = set()

    for root in reversed(roots):
        if root in entered:
            continue

        entered.add(root)
        stack: List[Tuple[str, Iterator[str]]] = [(root, reversed(children(root)))]
        # Units entered but not yet placed, mapped to their stack depth.
        on_stack: Dict[str, int] = {root: 0}

        while stack:
            node, pending = stack[-1]
            for child in pending:
                if child not in entered:
                    entered.add(child)
                    on_stack[child] = len(stack)
                    stack.append((child, reversed(children(child))))
                    break
                if child in on_stack:
                    cycle = tuple(name for name, _ in stack[on_stack[child]:])
                    if cycle not in seen_cycles:
                        seen_cycles.add(cycle)
                        cycles.append(cycle)
            else:
                stack.pop()
                del on_stack[node]
                placed.append(node)

    placed.reverse()
    return Linearization(order=tuple(placed), cycles=tuple(cycles))


@dataclass(frozen=True)
class MergeResult:
    """Merged static ordering for one unit.

    Attributes:
        unit: Unit that was resolved.
        order: Full transitive static order, dependents first.
        declared: The unit's own declared static deps, de-duplicated and
            arranged according to ``order``.
        cycles: Static dependency cycles met while merging.
    """

    unit: str
    order: Tuple[str, ...]
    declared: Tuple[str, ...]
    cycles: Tuple[Cycle, ...] = ()


class OrderMerger:
    """Computes link orders for the static archives of a DependencyView.

    Membership follows static edges only. Shared edges are walked as
    ordering constraints so that archives a shared dep relies on are not
    placed ahead of the unit that links it.
    """

    def __init__(self, view: DependencyView) -> None:
        self.view = view

    def merge(self, unit: str) -> MergeResult:
        """Run one static linearization for ``unit``.

        Raises:
            UnknownUnitError: If ``unit`` is not part of the view.
        """
        direct = self.view.static_deps(unit)
        static = linearize(direct, self.view.static_deps)

        # Shared edges only constrain the order: a shared dep's static
        # archives must still come after the units that link against it.
        ordered = linearize(direct, self._ordering_children)
        members = set(static.order)
        order = tuple(dep for dep in ordered.order if dep in members)

        # Only the unit's own requirements go on its list; transitive
        # archives it never declared are left to their declaring units.
        wanted = set(direct)
        declared = tuple(dep for dep in order if dep in wanted)

        logger.debug(
            "Merged %s: %d declared, %d transitive, %d cycle(s)",
            unit,
            len(declared),
            len(order),
            len(static.cycles),
        )
        return MergeResult(
            unit=unit,
            order=order,
            declared=declared,
            cycles=static.cycles,
        )

    def _ordering_children(self, name: str) -> Tuple[str, ...]:
        return self.view.deps(name, ALL_KINDS)

    def resolve(self, unit: str) -> Tuple[str, ...]:
        """Return the link order of ``unit``'s declared static deps."""
        return self.merge(unit).declared

    def static_order(self, unit: str) -> Tuple[str, ...]:
        """Return every statically reachable unit in link order."""
        return self.merge(unit).order


__all__ = [
    "Cycle",
    "Linearization",
    "MergeResult",
    "OrderMerger",
    "linearize",
]
