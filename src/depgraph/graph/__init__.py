"""Graph construction, analysis and rendering."""

from __future__ import annotations

from depgraph.graph.analysis import cycle_error, find_cycles, root, topological_order
from depgraph.graph.builder import GraphBuilder, build_graph_view
from depgraph.graph.writer import GraphWriter

__all__ = [
    "GraphBuilder",
    "GraphWriter",
    "build_graph_view",
    "cycle_error",
    "find_cycles",
    "root",
    "topological_order",
]
