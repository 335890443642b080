"""Read-only dependency view over a resolved module graph.

The view wraps a NetworkX MultiDiGraph whose edges carry the dependency
``kind`` (static/shared) and the ``position`` of the entry in the declaring
unit's list. Duplicate declarations become parallel edges, so the exact
authored lists can always be reconstructed. Once built the graph is frozen.
"""

from __future__ import annotations

import hashlib
import json
import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import networkx as nx

from linkorder.errors import GraphDefinitionError, UnknownUnitError
from linkorder.graph.schema import DepKind, UnitSpec

logger = logging.getLogger("linkorder.graph.view")

ALL_KINDS: Tuple[DepKind, ...] = (DepKind.STATIC, DepKind.SHARED)


def _in_position_order(entries: List[Tuple[int, str]]) -> Tuple[str, ...]:
    # Stable sort: equal positions keep edge insertion order.
    return tuple(dep for _, dep in sorted(entries, key=lambda entry: entry[0]))


class DependencyView:
    """Immutable snapshot of declared static and shared dependencies.

    Lookups return tuples in declaration order. The view is safe to share
    between threads because nothing mutates it after construction.
    """

    def __init__(self, graph: nx.MultiDiGraph) -> None:
        """Index an already-built dependency graph.

        Args:
            graph: MultiDiGraph with ``kind`` and ``position`` attributes on
                every edge. It is frozen in place.

        Raises:
            GraphDefinitionError: If an edge lacks a valid kind or position.
        """
        declared: Dict[str, Dict[DepKind, List[Tuple[int, str]]]] = {
            str(node): {DepKind.STATIC: [], DepKind.SHARED: []}
            for node in graph.nodes
        }

        for source, target, attrs in graph.edges(data=True):
            try:
                kind = DepKind(attrs["kind"])
                position = int(attrs["position"])
            except (KeyError, TypeError, ValueError) as exc:
                raise GraphDefinitionError(
                    f"Edge {source} -> {target} needs a valid 'kind' and 'position'"
                ) from exc
            declared[str(source)][kind].append((position, str(target)))

        self._static: Dict[str, Tuple[str, ...]] = {}
        self._shared: Dict[str, Tuple[str, ...]] = {}
        for name, by_kind in declared.items():
            self._static[name] = _in_position_order(by_kind[DepKind.STATIC])
            self._shared[name] = _in_position_order(by_kind[DepKind.SHARED])

        self._graph = nx.freeze(graph)
        self._snapshot_id = self._fingerprint()

        logger.info(
            "DependencyView built: %d units, %d edges (snapshot %s)",
            len(self._static),
            graph.number_of_edges(),
            self._snapshot_id[:12],
        )

    @classmethod
    def from_units(cls, units: Iterable[UnitSpec], strict: bool = True) -> "DependencyView":
        """Build a view from unit declarations.

        Args:
            units: Unit declarations. Names must be unique.
            strict: When True, referencing an undeclared unit raises.
                Otherwise the name is registered as a leaf unit.

        Raises:
            GraphDefinitionError: On duplicate declarations.
            UnknownUnitError: On an undeclared reference in strict mode.
        """
        specs = list(units)
        graph = nx.MultiDiGraph()
        for spec in specs:
            if graph.has_node(spec.name):
                raise GraphDefinitionError(f"Unit '{spec.name}' is declared more than once")
            graph.add_node(spec.name, declared=True)

        for spec in specs:
            for kind in ALL_KINDS:
                for position, dep in enumerate(spec.deps_of(kind)):
                    if not graph.has_node(dep):
                        if strict:
                            raise UnknownUnitError(dep, referenced_by=spec.name)
                        logger.warning(
                            "Unit %s references undeclared %s dependency %s; treating it as a leaf",
                            spec.name,
                            kind.value,
                            dep,
                        )
                        graph.add_node(dep, declared=False)
                    graph.add_edge(spec.name, dep, kind=kind.value, position=position)

        return cls(graph)

    @classmethod
    def from_mapping(
        cls,
        static: Mapping[str, Sequence[str]],
        shared: Optional[Mapping[str, Sequence[str]]] = None,
    ) -> "DependencyView":
        """Build a view from plain ``name -> [deps]`` mappings.

        Names that only appear as dependencies are declared as leaf units,
        in order of first mention.
        """
        shared = shared or {}
        names: Dict[str, None] = {}
        for mapping in (static, shared):
            for name in mapping:
                names.setdefault(name, None)
        for mapping in (static, shared):
            for deps in mapping.values():
                for dep in deps:
                    names.setdefault(dep, None)

        specs = [
            UnitSpec(
                name=name,
                static_deps=list(static.get(name, ())),
                shared_deps=list(shared.get(name, ())),
            )
            for name in names
        ]
        return cls.from_units(specs)

    @classmethod
    def from_graph(cls, graph: nx.MultiDiGraph) -> "DependencyView":
        """Wrap a graph produced by a graph-construction collaborator.

        The graph is copied before freezing so the caller keeps a mutable
        original.
        """
        return cls(nx.MultiDiGraph(graph))

    @property
    def snapshot_id(self) -> str:
        """Deterministic fingerprint of the declared dependencies."""
        return self._snapshot_id

    @property
    def graph(self) -> nx.MultiDiGraph:
        """Frozen underlying graph."""
        return self._graph

    def units(self) -> Tuple[str, ...]:
        """Return all unit identifiers in declaration order."""
        return tuple(self._static)

    def has_unit(self, name: str) -> bool:
        return name in self._static

    def __contains__(self, name: object) -> bool:
        return name in self._static

    def __len__(self) -> int:
        return len(self._static)

    def static_deps(self, name: str) -> Tuple[str, ...]:
        """Directly declared static dependencies of ``name``, in order."""
        self._require(name)
        return self._static[name]

    def shared_deps(self, name: str) -> Tuple[str, ...]:
        """Directly declared shared dependencies of ``name``, in order."""
        self._require(name)
        return self._shared[name]

    def deps(self, name: str, kinds: Sequence[DepKind] = ALL_KINDS) -> Tuple[str, ...]:
        """Declared dependencies of the requested kinds.

        Lists are concatenated in the order of ``kinds``; with the default
        that is static deps first, then shared deps.
        """
        self._require(name)
        result: Tuple[str, ...] = ()
        for kind in kinds:
            result += self._static[name] if kind == DepKind.STATIC else self._shared[name]
        return result

    def static_subgraph(self) -> nx.DiGraph:
        """Collapse static edges into a simple DiGraph (parallel edges merged)."""
        static_graph = nx.DiGraph()
        static_graph.add_nodes_from(self._static)
        for name, deps in self._static.items():
            for dep in deps:
                static_graph.add_edge(name, dep)
        return static_graph

    def _require(self, name: str) -> None:
        if name not in self._static:
            raise UnknownUnitError(name)

    def _fingerprint(self) -> str:
        payload = [
            [name, list(self._static[name]), list(self._shared[name])]
            for name in self._static
        ]
        encoded = json.dumps(payload, separators=(",", ":")).encode("utf-8")
        return hashlib.sha256(encoded).hexdigest()


__all__ = ["ALL_KINDS", "DependencyView"]
