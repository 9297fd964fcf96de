"""Graph snapshot types shared by the builder, the codec and the writer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import networkx as nx

from depgraph.coordinates import Coordinates


class SourceKind(str, Enum):
    """Which source set a variant belongs to."""

    MAIN = "main"
    TEST = "test"
    ANDROID_TEST = "android_test"
    CUSTOM_JVM = "custom_jvm"


@dataclass(frozen=True)
class Variant:
    """A variant (source set) of the project under analysis."""

    name: str
    kind: SourceKind = SourceKind.MAIN

    @classmethod
    def main(cls) -> Variant:
        return cls(name="main", kind=SourceKind.MAIN)


def new_graph() -> nx.DiGraph:
    """Return an empty dependency graph.

    Nodes are :class:`Coordinates` values; an edge ``(u, v)`` means *u*
    directly depends on *v*.
    """
    return nx.DiGraph()


@dataclass(frozen=True, eq=False)
class GraphView:
    """One analysed configuration: a variant, its configuration and its graph.

    The graph is frozen on construction; views can be shared freely.
    """

    variant: Variant
    configuration_name: str
    graph: nx.DiGraph

    def __post_init__(self) -> None:
        if not nx.is_frozen(self.graph):
            nx.freeze(self.graph)

    def nodes(self) -> set[Coordinates]:
        return set(self.graph.nodes)

    def edges(self) -> set[tuple[Coordinates, Coordinates]]:
        return set(self.graph.edges)

    def __repr__(self) -> str:
        return (
            f"GraphView(variant={self.variant!r}, "
            f"configuration_name={self.configuration_name!r}, "
            f"nodes={self.graph.number_of_nodes()}, "
            f"edges={self.graph.number_of_edges()})"
        )
