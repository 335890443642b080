"""Link plans and their per-snapshot memoisation.

A LinkPlan pairs a unit with its link order and its full closure. Plans are
requested once per binary that transitively depends on a unit, so they are
computed lazily and cached per (snapshot, unit). Every key is computed at
most once, even under concurrent callers, and no caller ever sees a
partially built plan.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from linkorder.config.schema import ResolverConfig
from linkorder.graph.view import DependencyView
from linkorder.ordering.closure import ClosureWalker
from linkorder.ordering.merger import Cycle, OrderMerger

logger = logging.getLogger("linkorder.ordering.plan")

PlanKey = Tuple[str, str]


@dataclass(frozen=True)
class LinkPlan:
    """Computed ordering data for one unit.

    Attributes:
        unit: Unit identifier.
        out_ordered: Declared static deps in link order, no duplicates.
        all_ordered: Every unit reachable through static or shared edges.
        static_ordered: Every statically reachable unit in link order.
        cycles: Static dependency cycles met while merging.
        snapshot_id: Fingerprint of the view the plan was computed from.
    """

    unit: str
    out_ordered: Tuple[str, ...]
    all_ordered: Tuple[str, ...]
    static_ordered: Tuple[str, ...] = ()
    cycles: Tuple[Cycle, ...] = ()
    snapshot_id: str = ""

    @property
    def has_cycles(self) -> bool:
        return bool(self.cycles)

    def link_line(self) -> Tuple[str, ...]:
        """The unit followed by its transitive static archives."""
        return (self.unit,) + tuple(dep for dep in self.static_ordered if dep != self.unit)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "unit": self.unit,
            "out_ordered": list(self.out_ordered),
            "all_ordered": list(self.all_ordered),
            "static_ordered": list(self.static_ordered),
            "cycles": [list(cycle) for cycle in self.cycles],
        }


class PlanCache:
    """Thread-safe compute-once store keyed by (snapshot_id, unit)."""

    def __init__(self) -> None:
        self._plans: Dict[PlanKey, LinkPlan] = {}
        self._key_locks: Dict[PlanKey, threading.Lock] = {}
        self._lock = threading.Lock()

    def get_or_compute(self, key: PlanKey, compute: Callable[[], LinkPlan]) -> LinkPlan:
        plan = self._plans.get(key)
        if plan is not None:
            return plan

        with self._lock:
            key_lock = self._key_locks.setdefault(key, threading.Lock())

        with key_lock:
            plan = self._plans.get(key)
            if plan is None:
                plan = compute()
                self._plans[key] = plan
        return plan

    def invalidate(self, snapshot_id: Optional[str] = None) -> int:
        """Drop cached plans, either all of them or one snapshot's.

        Returns:
            int: Number of plans removed.
        """
        with self._lock:
            stale = [
                key for key in self._plans
                if snapshot_id is None or key[0] == snapshot_id
            ]
            for key in stale:
                del self._plans[key]
                self._key_locks.pop(key, None)
        logger.debug("Invalidated %d cached plan(s)", len(stale))
        return len(stale)

    def __len__(self) -> int:
        return len(self._plans)

    def __contains__(self, key: object) -> bool:
        return key in self._plans


class LinkPlanner:
    """Resolves LinkPlans for the units of one DependencyView."""

    def __init__(
        self,
        view: DependencyView,
        config: Optional[ResolverConfig] = None,
        cache: Optional[PlanCache] = None,
    ) -> None:
        """Initialize planner.

        Args:
            view: Frozen dependency snapshot.
            config: Resolver configuration; defaults are used when omitted.
            cache: Plan cache to use. Pass a shared cache to reuse plans
                between planners bound to the same snapshot.
        """
        self.view = view
        self.config = config or ResolverConfig()
        self.cache = cache if cache is not None else PlanCache()
        self._merger = OrderMerger(view)
        self._walker = ClosureWalker(view)

    def with_view(self, view: DependencyView) -> "LinkPlanner":
        """Return a planner for a new snapshot sharing this cache.

        Plans from the old snapshot are never returned for the new one
        because cache keys include the snapshot id.
        """
        return LinkPlanner(view, config=self.config, cache=self.cache)

    def plan(self, unit: str) -> LinkPlan:
        """Return the LinkPlan of ``unit``, computing it on first use.

        Raises:
            UnknownUnitError: If ``unit`` is not part of the view.
        """
        if not self.config.enable_caching:
            return self._compute(unit)
        return self.cache.get_or_compute(
            (self.view.snapshot_id, unit),
            lambda: self._compute(unit),
        )

    def plan_all(self, units: Optional[Iterable[str]] = None) -> Dict[str, LinkPlan]:
        """Resolve plans for many units concurrently.

        Args:
            units: Units to resolve; all units of the view when omitted.

        Returns:
            Dict[str, LinkPlan]: Plans keyed by unit, in request order.
        """
        names = list(dict.fromkeys(units if units is not None else self.view.units()))
        workers = min(self.config.max_workers, len(names))
        logger.info("Resolving %d link plan(s) with %d worker(s)", len(names), max(workers, 1))

        if workers <= 1:
            return {name: self.plan(name) for name in names}

        with ThreadPoolExecutor(max_workers=workers) as executor:
            plans = list(executor.map(self.plan, names))
        return dict(zip(names, plans))

    def invalidate(self) -> int:
        """Drop cached plans of this planner's snapshot."""
        return self.cache.invalidate(self.view.snapshot_id)

    def _compute(self, unit: str) -> LinkPlan:
        merged = self._merger.merge(unit)
        plan = LinkPlan(
            unit=unit,
            out_ordered=merged.declared,
            all_ordered=self._walker.closure(unit),
            static_ordered=merged.order if self.config.include_static_closure else (),
            cycles=merged.cycles,
            snapshot_id=self.view.snapshot_id,
        )

        if plan.cycles and self.config.warn_on_cycle:
            logger.warning(
                "%d static dependency cycle(s) while ordering %s: %s "
                "(link order inside a cycle is not guaranteed)",
                len(plan.cycles),
                unit,
                "; ".join(" -> ".join(cycle + (cycle[0],)) for cycle in plan.cycles),
            )

        logger.debug("Computed link plan for %s: %s", unit, ", ".join(plan.out_ordered))
        return plan


__all__ = ["LinkPlan", "LinkPlanner", "PlanCache", "PlanKey"]
