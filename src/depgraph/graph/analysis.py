"""Graph queries: root, cycles and topological order."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import networkx as nx

from depgraph.coordinates import Coordinates
from depgraph.errors import CycleError, GraphError


def find_cycles(graph: nx.DiGraph) -> list[list[Coordinates]]:
    """Return the dependency cycles of *graph*, one list per cycle group.

    Each group is a strongly-connected component of size ≥ 2 (or a single
    node depending on itself), sorted by label.
    """
    cycles = []
    for scc in nx.strongly_connected_components(graph):
        if len(scc) >= 2 or any(graph.has_edge(n, n) for n in scc):
            cycles.append(sorted(scc, key=lambda n: n.sort_key()))
    return sorted(cycles, key=lambda c: c[0].sort_key())


def cycle_error(graph: nx.DiGraph) -> CycleError:
    """Return a :class:`CycleError` naming one cycle of *graph*."""
    edges = nx.find_cycle(graph)
    labels = [u.gav() for u, _ in edges]
    labels.append(edges[0][0].gav())
    return CycleError(labels)


def root(graph: nx.DiGraph) -> Coordinates:
    """Return the unique node without dependents."""
    roots = [node for node, degree in graph.in_degree() if degree == 0]
    if not roots:
        if graph.number_of_nodes() == 0:
            raise GraphError("The graph is empty")
        # every node has a dependent, so there must be a cycle
        raise cycle_error(graph)
    if len(roots) > 1:
        labels = ", ".join(sorted(n.gav() for n in roots))
        raise GraphError(f"Expected exactly one root, found {len(roots)}: {labels}")
    return roots[0]


def topological_order(
    graph: nx.DiGraph,
    key: Callable[[Coordinates], Any] | None = None,
) -> list[Coordinates]:
    """Return every node of *graph*, dependencies first.

    For every edge ``(u, v)``, *v* comes before *u*.  Among nodes that are
    ready at the same step the one with the smallest *key* is taken first
    (default: :meth:`Coordinates.sort_key`).  The whole graph must be acyclic
    with a single root, so the order never leaves a node out.
    """
    if not nx.is_directed_acyclic_graph(graph):
        raise cycle_error(graph)
    # acyclic with one root: every node is reachable from it
    root(graph)
    return list(
        nx.lexicographical_topological_sort(
            graph.reverse(copy=True),
            key=key or (lambda n: n.sort_key()),
        )
    )
