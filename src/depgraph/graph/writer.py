"""Render dependency graphs as Graphviz DOT and topological-order text."""

from __future__ import annotations

import networkx as nx

from depgraph.coordinates import Coordinates, ProjectCoordinates
from depgraph.graph.analysis import topological_order

# Fixed regardless of platform; the artifacts are cached by content hash.
NEWLINE = "\n"

_PROJECT_NODE_STYLE = '[style=filled fillcolor="#008080"]'
_PROJECT_EDGE_STYLE = ' [style=bold color="#FF6347" weight=8]'


def _quote(label: str) -> str:
    return '"' + label.replace("\\", "\\\\").replace('"', '\\"') + '"'


class GraphWriter:
    """Renders graphs from the point of view of the build at *build_path*.

    Included-build nodes that point back into that build are shown as the
    projects they resolve to.
    """

    def __init__(self, build_path: str = ":") -> None:
        self.build_path = build_path

    def _resolve(self, node: Coordinates) -> Coordinates:
        return node.maybe_project_coordinates(self.build_path)

    def label(self, node: Coordinates) -> str:
        return self._resolve(node).gav()

    def to_dot(self, graph: nx.DiGraph) -> str:
        # included builds may collapse onto a project that is already a node
        project_nodes = dict.fromkeys(
            resolved.gav()
            for resolved in map(self._resolve, graph.nodes)
            if isinstance(resolved, ProjectCoordinates)
        )

        lines = [
            "strict digraph DependencyGraph {",
            "  ratio=0.6;",
            "  node [shape=box];",
        ]

        # styling for project nodes
        if project_nodes:
            lines.append("")
            lines.extend(f"  {_quote(label)} {_PROJECT_NODE_STYLE};" for label in project_nodes)
            lines.append("")

        edges: dict[str, None] = {}
        for u, v in graph.edges:
            source = self._resolve(u)
            target = self._resolve(v)
            both_projects = isinstance(source, ProjectCoordinates) and isinstance(
                target, ProjectCoordinates
            )
            style = _PROJECT_EDGE_STYLE if both_projects else ""
            edges[f"  {_quote(source.gav())} -> {_quote(target.gav())}{style};"] = None
        lines.extend(edges)

        lines.append("}")
        return NEWLINE.join(lines)

    def topological(self, graph: nx.DiGraph) -> str:
        """Return the graph in ascending topological order with in-degrees.

        One ``"<label> <in-degree>"`` line per node, dependencies first; the
        in-degree is the number of direct dependents.
        """
        order = topological_order(graph, key=lambda n: self._resolve(n).sort_key())
        return NEWLINE.join(f"{self.label(node)} {graph.in_degree(node)}" for node in order)
