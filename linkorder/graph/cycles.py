"""Static dependency cycle reporting.

Cycles among static archives have no valid single-pass link order. The
merger tolerates them by dropping re-entrant edges; this module reports
them up front, as strongly connected components of the static subgraph.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

import networkx as nx

from linkorder.graph.view import DependencyView

logger = logging.getLogger("linkorder.graph.cycles")


def _component_sort_key(component: Sequence[str]) -> Tuple[int, Sequence[str]]:
    """Sorting helper to keep the report deterministic across runs."""

    return (len(component), component)


def find_static_cycles(view: DependencyView, limit: Optional[int] = None) -> List[List[str]]:
    """Return the groups of units joined by static dependency cycles.

    A group is a strongly connected component with more than one member,
    or a single unit that lists itself as a static dependency.

    Args:
        view: Dependency snapshot.
        limit: Maximum number of groups to return; ``None`` for all.

    Returns:
        List[List[str]]: Sorted member lists, smallest groups first.
    """
    static_graph = view.static_subgraph()

    components: List[List[str]] = []
    for component in nx.strongly_connected_components(static_graph):
        members = sorted(str(node_id) for node_id in component)
        if len(members) == 1 and not static_graph.has_edge(members[0], members[0]):
            continue
        components.append(members)

    components.sort(key=_component_sort_key)
    if limit is not None and limit > 0:
        components = components[:limit]

    logger.debug("Found %d static cycle group(s)", len(components))
    return components


__all__ = ["find_static_cycles"]
