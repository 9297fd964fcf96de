"""Build a resolved dependency tree from a Maven POM via jgo."""

from __future__ import annotations

import logging
from pathlib import Path

from depgraph.resolution import (
    ModuleComponentId,
    ProjectComponentId,
    Resolution,
    ResolvedNode,
)

logger = logging.getLogger(__name__)

# Scopes that end up on the runtime classpath.
_CLASSPATH_SCOPES = (None, "compile", "runtime")

CONFIGURATION_NAME = "runtimeClasspath"


def resolve_pom(pom_path: Path) -> Resolution | None:
    """Resolve *pom_path* with jgo and return its runtime classpath tree.

    Returns None when jgo is not installed or the POM cannot be resolved.
    """
    try:
        from jgo.maven import POM, MavenContext, Model
    except ImportError:
        logger.warning(
            "jgo not installed; skipping Maven resolution. "
            "Install with: pip install depgraph[java]"
        )
        return None

    try:
        pom = POM(pom_path)
        model = Model(pom, MavenContext())
        _, tree = model.dependencies()
    except (OSError, ValueError, KeyError) as e:
        logger.warning("Could not resolve %s: %s", pom_path, e)
        return None

    artifact_id = pom.artifactId
    root = ResolvedNode(
        id=ProjectComponentId(
            project_path=f":{artifact_id}",
            project_name=artifact_id,
            group=pom.groupId,
        ),
        version=pom.version,
    )

    converted: dict[int, ResolvedNode] = {}

    def _convert(node) -> ResolvedNode:
        node_id = id(node)
        if node_id in converted:
            return converted[node_id]
        dep = node.dep
        result = ResolvedNode(
            id=ModuleComponentId(group=dep.groupId, module=dep.artifactId),
            version=getattr(dep, "version", None),
        )
        converted[node_id] = result
        result.dependencies = [
            _convert(child)
            for child in node.children
            if child.dep.scope in _CLASSPATH_SCOPES
        ]
        return result

    root.dependencies = [
        _convert(child) for child in tree.children if child.dep.scope in _CLASSPATH_SCOPES
    ]
    logger.debug("Maven tree for %s: %d direct dependencies", pom_path, len(root.dependencies))
    return Resolution(build_path=":", configurations={CONFIGURATION_NAME: root})
