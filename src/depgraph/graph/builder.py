"""Convert a resolved dependency tree into a graph of coordinates."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from functools import cached_property

import networkx as nx

from depgraph.coordinates import (
    Coordinates,
    IncludedBuildCoordinates,
    ModuleCoordinates,
    ProjectCoordinates,
)
from depgraph.model import GraphView, Variant, new_graph
from depgraph.resolution import ProjectComponentId, ResolvedComponent

logger = logging.getLogger(__name__)


class GraphBuilder:
    """Build the dependency graph rooted at *root*.

    Each distinct node is expanded once, no matter how many paths lead to it,
    so diamonds cost nothing extra.  With *local_only* set, only dependencies
    on projects of the root's build are kept and nothing beyond them is
    visited.  *file_coordinates* are flat dependencies without metadata; they
    hang directly off the root.
    """

    def __init__(
        self,
        root: ResolvedComponent,
        file_coordinates: Iterable[Coordinates] = (),
        *,
        local_only: bool = False,
    ) -> None:
        self._root = root
        self._file_coordinates = tuple(file_coordinates)
        self._local_only = local_only
        root_id = root.id
        self.build_path = (
            root_id.build_path if isinstance(root_id, ProjectComponentId) else ":"
        )

    @cached_property
    def graph(self) -> nx.DiGraph:
        return nx.freeze(self._build())

    def coordinates_for(self, component: ResolvedComponent) -> Coordinates:
        """Return the coordinates identifying *component* in this build."""
        component_id = component.id
        capabilities = frozenset(component.capabilities)
        attributes = dict(component.attributes)

        if not isinstance(component_id, ProjectComponentId):
            return ModuleCoordinates(
                group=component_id.group,
                artifact=component_id.module,
                version=component.version,
                capabilities=capabilities,
                attributes=attributes,
            )

        if component_id.build_path == self.build_path:
            return ProjectCoordinates(
                project_path=component_id.project_path,
                build_path=component_id.build_path,
                artifact=component_id.project_name,
                group=component_id.group,
                version=component.version,
                capabilities=capabilities,
                attributes=attributes,
            )

        resolved_project = ProjectCoordinates(
            project_path=component_id.project_path,
            build_path=component_id.build_path,
            artifact=component_id.project_name,
            group=component_id.group,
            version=component.version,
        )
        return IncludedBuildCoordinates(
            target_build_path=component_id.build_path,
            resolved_project=resolved_project,
            version=component.version,
            capabilities=capabilities,
            attributes=attributes,
        )

    def _build(self) -> nx.DiGraph:
        graph = new_graph()
        root = self.coordinates_for(self._root)
        graph.add_node(root)

        expanded: set[Coordinates] = set()
        stack: list[tuple[ResolvedComponent, Coordinates]] = [(self._root, root)]
        while stack:
            component, source = stack.pop()
            if source in expanded:
                continue
            expanded.add(source)

            pending = []
            for dependency in component.dependencies:
                if not dependency.resolved:
                    logger.debug("Skipping unresolved dependency of %s", source.gav())
                    continue
                target = self.coordinates_for(dependency)
                if self._local_only and not isinstance(target, ProjectCoordinates):
                    continue
                if target == source:
                    logger.debug("Ignoring self-dependency of %s", source.gav())
                    continue
                graph.add_edge(source, target)
                if target not in expanded:
                    pending.append((dependency, target))
            # reversed so children are expanded in declaration order
            stack.extend(reversed(pending))

        for coordinates in self._file_coordinates:
            if self._local_only and not isinstance(coordinates, ProjectCoordinates):
                continue
            graph.add_edge(root, coordinates)

        logger.debug(
            "Built graph for %s: %d nodes, %d edges",
            root.gav(),
            graph.number_of_nodes(),
            graph.number_of_edges(),
        )
        return graph


def build_graph_view(
    root: ResolvedComponent,
    configuration_name: str,
    variant: Variant | None = None,
    *,
    file_coordinates: Iterable[Coordinates] = (),
    local_only: bool = False,
) -> GraphView:
    """Build the graph of *root* and wrap it in a :class:`GraphView`."""
    builder = GraphBuilder(root, file_coordinates, local_only=local_only)
    return GraphView(
        variant=variant or Variant.main(),
        configuration_name=configuration_name,
        graph=builder.graph,
    )
