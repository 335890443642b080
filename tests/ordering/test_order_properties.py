"""Property checks over randomly generated dependency DAGs."""

from __future__ import annotations

import random
from typing import Dict, List, Sequence

import networkx as nx
import pytest

from linkorder.graph import DepKind, DependencyView
from linkorder.ordering import ClosureWalker, OrderMerger

SEEDS = list(range(40))


def _random_dag_view(seed: int, size: int = 14, density: float = 0.3) -> DependencyView:
    """Random DAG with shuffled, partly duplicated, partly shared deps."""
    rng = random.Random(seed)
    graph = nx.gnp_random_graph(size, density, seed=seed, directed=True)

    static: Dict[str, List[str]] = {}
    shared: Dict[str, List[str]] = {}
    for node in range(size):
        # Edges only point to higher ids, which keeps the graph acyclic.
        targets = [f"u{succ}" for succ in graph.successors(node) if succ > node]
        rng.shuffle(targets)
        static_deps: List[str] = []
        shared_deps: List[str] = []
        for target in targets:
            (shared_deps if rng.random() < 0.25 else static_deps).append(target)
        if static_deps and rng.random() < 0.5:
            static_deps.insert(rng.randrange(len(static_deps) + 1), rng.choice(static_deps))
        static[f"u{node}"] = static_deps
        shared[f"u{node}"] = shared_deps
    return DependencyView.from_mapping(static, shared)


def _kind_graph(view: DependencyView, kinds: Sequence[DepKind]) -> nx.DiGraph:
    graph = nx.DiGraph()
    for unit in view.units():
        graph.add_node(unit)
        for dep in view.deps(unit, kinds):
            graph.add_edge(unit, dep)
    return graph


def _last_unique_reference(view: DependencyView, unit: str, kinds: Sequence[DepKind]) -> List[str]:
    """Concatenate each dep and its own order, keep last occurrences."""
    memo: Dict[str, List[str]] = {}

    def ordered(name: str) -> List[str]:
        if name not in memo:
            sequence: List[str] = []
            for dep in view.deps(name, kinds):
                sequence.append(dep)
                sequence.extend(ordered(dep))
            seen = set()
            kept = []
            for dep in reversed(sequence):
                if dep not in seen:
                    seen.add(dep)
                    kept.append(dep)
            memo[name] = kept[::-1]
        return memo[name]

    return ordered(unit)


def _static_rooted_reference(view: DependencyView, unit: str) -> List[str]:
    """Last-occurrence order from the static roots, walking every edge kind."""
    sequence: List[str] = []
    for dep in view.static_deps(unit):
        sequence.append(dep)
        sequence.extend(_last_unique_reference(view, dep, (DepKind.STATIC, DepKind.SHARED)))
    kept: List[str] = []
    for dep in reversed(sequence):
        if dep not in kept:
            kept.append(dep)
    return kept[::-1]


@pytest.mark.parametrize("seed", SEEDS)
def test_dependents_precede_their_dependencies(seed: int) -> None:
    view = _random_dag_view(seed)
    full_graph = _kind_graph(view, (DepKind.STATIC, DepKind.SHARED))
    merger = OrderMerger(view)

    for unit in view.units():
        for order in (merger.resolve(unit), merger.static_order(unit)):
            position = {dep: idx for idx, dep in enumerate(order)}
            for dep in order:
                for descendant in nx.descendants(full_graph, dep):
                    if descendant in position:
                        assert position[dep] < position[descendant], (unit, dep, descendant)


@pytest.mark.parametrize("seed", SEEDS)
def test_orders_are_duplicate_free_and_cover_reachable_units(seed: int) -> None:
    view = _random_dag_view(seed)
    static_graph = _kind_graph(view, (DepKind.STATIC,))
    full_graph = _kind_graph(view, (DepKind.STATIC, DepKind.SHARED))
    merger = OrderMerger(view)
    walker = ClosureWalker(view)

    for unit in view.units():
        out_ordered = merger.resolve(unit)
        static_ordered = merger.static_order(unit)
        all_ordered = walker.closure(unit)

        for order in (out_ordered, static_ordered, all_ordered):
            assert len(order) == len(set(order))

        assert set(out_ordered) == set(view.static_deps(unit))
        assert set(static_ordered) == nx.descendants(static_graph, unit)
        assert set(all_ordered) == nx.descendants(full_graph, unit)
        assert set(all_ordered) >= set(out_ordered)
        assert set(walker.reachable(unit)) == set(all_ordered)


@pytest.mark.parametrize("seed", SEEDS)
def test_shared_only_units_stay_out_of_link_order(seed: int) -> None:
    view = _random_dag_view(seed)
    merger = OrderMerger(view)
    walker = ClosureWalker(view)

    for unit in view.units():
        shared_only = set(walker.shared_only(unit))
        assert shared_only <= set(walker.closure(unit))
        assert not shared_only & set(merger.resolve(unit))
        assert not shared_only & set(merger.static_order(unit))


@pytest.mark.parametrize("seed", SEEDS)
def test_matches_last_occurrence_formulation(seed: int) -> None:
    view = _random_dag_view(seed)
    merger = OrderMerger(view)
    walker = ClosureWalker(view)

    for unit in view.units():
        members = set(_last_unique_reference(view, unit, (DepKind.STATIC,)))
        assert list(merger.static_order(unit)) == [
            dep for dep in _static_rooted_reference(view, unit) if dep in members
        ]
        assert list(walker.closure(unit)) == _last_unique_reference(
            view, unit, (DepKind.STATIC, DepKind.SHARED)
        )


@pytest.mark.parametrize("seed", SEEDS[:10])
def test_resolution_is_idempotent_across_equal_snapshots(seed: int) -> None:
    first = _random_dag_view(seed)
    second = _random_dag_view(seed)

    assert first.snapshot_id == second.snapshot_id
    for unit in first.units():
        assert OrderMerger(first).resolve(unit) == OrderMerger(first).resolve(unit)
        assert OrderMerger(first).resolve(unit) == OrderMerger(second).resolve(unit)
        assert ClosureWalker(first).closure(unit) == ClosureWalker(second).closure(unit)


@pytest.mark.parametrize("seed", SEEDS[:10])
def test_random_cyclic_graphs_terminate_without_duplicates(seed: int) -> None:
    rng = random.Random(seed)
    names = [f"c{idx}" for idx in range(8)]
    static = {
        name: [rng.choice(names) for _ in range(rng.randint(0, 4))]
        for name in names
    }
    view = DependencyView.from_mapping(static)
    merger = OrderMerger(view)

    for unit in names:
        merged = merger.merge(unit)
        assert len(merged.order) == len(set(merged.order))
        assert merger.merge(unit) == merged
