"""Resolved dependency trees, as handed over by a resolution engine.

depgraph does not resolve anything itself.  Engines expose their result as a
tree of objects satisfying :class:`ResolvedComponent`; :class:`ResolvedNode`
is the plain implementation used by the file loader and the Maven adapter.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol, Union

import yaml

from depgraph.coordinates import ModuleCoordinates, ProjectCoordinates, parse
from depgraph.errors import DeserializationError, ParseError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModuleComponentId:
    """A published component selected from a repository."""

    group: str
    module: str


@dataclass(frozen=True)
class ProjectComponentId:
    """A project of some build participating in the resolution."""

    project_path: str
    build_path: str = ":"
    project_name: str | None = None
    group: str | None = None


ComponentId = Union[ModuleComponentId, ProjectComponentId]


class ResolvedComponent(Protocol):
    """One node of a resolved dependency tree."""

    id: ComponentId
    version: str | None
    capabilities: Iterable[str]
    attributes: Mapping[str, str]
    resolved: bool
    dependencies: Sequence[ResolvedComponent]


@dataclass(eq=False)
class ResolvedNode:
    """Plain :class:`ResolvedComponent` implementation."""

    id: ComponentId
    version: str | None = None
    capabilities: frozenset[str] = frozenset()
    attributes: dict[str, str] = field(default_factory=dict)
    resolved: bool = True
    dependencies: list[ResolvedNode] = field(default_factory=list)

    def depends_on(self, *children: ResolvedNode) -> ResolvedNode:
        self.dependencies.extend(children)
        return self


@dataclass
class Resolution:
    """Resolved trees for several configurations of one project."""

    build_path: str
    configurations: dict[str, ResolvedNode] = field(default_factory=dict)


def node_from_mapping(data: Mapping[str, Any], build_path: str = ":") -> ResolvedNode:
    """Build a :class:`ResolvedNode` tree from its mapping form.

    ``id`` uses the raw coordinate notation (``:project`` or
    ``group:artifact[:version]``); a node may override the build it belongs to
    with ``buildPath``.
    """
    if not isinstance(data, Mapping) or "id" not in data:
        raise DeserializationError(f"Component entries need an 'id': {data!r}")

    raw = data["id"]
    try:
        coordinates = parse(str(raw))
    except ParseError as e:
        raise DeserializationError(str(e)) from e

    version = data.get("version")
    if isinstance(coordinates, ProjectCoordinates):
        component_id: ComponentId = ProjectComponentId(
            project_path=coordinates.project_path,
            build_path=data.get("buildPath", build_path),
            group=data.get("group"),
        )
    elif isinstance(coordinates, ModuleCoordinates):
        component_id = ModuleComponentId(
            group=coordinates.group, module=coordinates.artifact
        )
        version = version or coordinates.version
    else:
        raise DeserializationError(f"Unsupported component id: {raw!r}")

    resolved = data.get("resolved", True)
    if not isinstance(resolved, bool):
        raise DeserializationError(f"'resolved' of {raw!r} must be a boolean")

    children = data.get("dependencies") or []
    if not isinstance(children, list):
        raise DeserializationError(f"'dependencies' of {raw!r} must be a list")

    return ResolvedNode(
        id=component_id,
        version=version,
        capabilities=frozenset(data.get("capabilities") or ()),
        attributes={str(k): str(v) for k, v in (data.get("attributes") or {}).items()},
        resolved=resolved,
        dependencies=[node_from_mapping(child, build_path) for child in children],
    )


def load_resolution(path: Path) -> Resolution:
    """Read a resolution document (YAML, or JSON which YAML also accepts)."""
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise DeserializationError(f"Could not read {path}: {e}") from e

    if not isinstance(data, dict):
        raise DeserializationError(f"{path}: expected a mapping at the top level")

    build_path = data.get("buildPath", ":")
    configurations = data.get("configurations")
    if not isinstance(configurations, dict) or not configurations:
        raise DeserializationError(f"{path}: 'configurations' must be a non-empty mapping")

    resolution = Resolution(build_path=build_path)
    for name, root in configurations.items():
        resolution.configurations[name] = node_from_mapping(root, build_path)
    logger.debug(
        "Loaded %d configuration(s) from %s", len(resolution.configurations), path
    )
    return resolution
