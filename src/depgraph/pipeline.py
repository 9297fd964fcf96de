"""Orchestrator: load resolution → build graphs → write artifacts."""

from __future__ import annotations

import logging
from pathlib import Path

from depgraph.config import Settings, load_settings
from depgraph.errors import ConfigError, DeserializationError
from depgraph.graph import GraphWriter, build_graph_view, cycle_error, find_cycles
from depgraph.model import GraphView
from depgraph.resolution import Resolution, load_resolution
from depgraph.serialization import encode

logger = logging.getLogger(__name__)


def _relative(path: Path, base: Path) -> Path:
    try:
        return path.relative_to(base)
    except ValueError:
        return path


def _select_configurations(resolution: Resolution, settings: Settings) -> list[str]:
    if not settings.configurations:
        return list(resolution.configurations)
    missing = [c for c in settings.configurations if c not in resolution.configurations]
    if missing:
        raise ConfigError(f"Unknown configuration(s): {', '.join(missing)}")
    return list(settings.configurations)


def write_artifacts(view: GraphView, writer: GraphWriter, out_dir: Path) -> list[Path]:
    """Write the DOT, topological and graph-view files of *view*.

    All three texts are rendered before anything is written, so a failure
    leaves no partial set of artifacts behind.
    """
    name = view.configuration_name
    contents = {
        out_dir / f"{name}.gv": writer.to_dot(view.graph),
        out_dir / f"{name}-topological.txt": writer.topological(view.graph),
        out_dir / f"{name}.json": encode(view),
    }

    out_dir.mkdir(parents=True, exist_ok=True)
    for path, text in contents.items():
        path.write_text(text, encoding="utf-8", newline="\n")
    return list(contents)


def run(
    project_dir: Path,
    *,
    resolution_file: Path | None = None,
    resolution: Resolution | None = None,
    output: Path | None = None,
    settings: Settings | None = None,
) -> list[Path]:
    """Run the full depgraph pipeline and return the written paths.

    The resolved trees come from *resolution* when given, otherwise from
    *resolution_file*.
    """
    project_dir = project_dir.resolve()
    settings = settings or load_settings(project_dir)

    if resolution is None:
        if resolution_file is None:
            raise DeserializationError("No resolution input given")
        resolution = load_resolution(resolution_file)

    out_dir = output or settings.output
    if not out_dir.is_absolute():
        out_dir = project_dir / out_dir

    build_path = settings.build_path or resolution.build_path
    writer = GraphWriter(build_path)
    logger.debug("Project: %s, build path: %s", project_dir, build_path)

    written: list[Path] = []
    dot_paths: list[Path] = []
    for name in _select_configurations(resolution, settings):
        view = build_graph_view(
            resolution.configurations[name],
            name,
            settings.variant,
            local_only=settings.local_only,
        )
        cycles = find_cycles(view.graph)
        if cycles:
            for group in cycles:
                logger.error(
                    "%s: dependency cycle between %s",
                    name,
                    ", ".join(node.gav() for node in group),
                )
            raise cycle_error(view.graph.subgraph(cycles[0]))

        paths = write_artifacts(view, writer, out_dir)
        dot_paths.append(paths[0])
        written.extend(paths)

    lines = ["Graphs generated to:"]
    lines.extend(f" - {_relative(p, project_dir)}" for p in dot_paths)
    if dot_paths:
        svg_name = dot_paths[-1].stem + ".svg"
        lines.append("")
        lines.append(
            "To generate an SVG with graphviz, you could run the following. "
            "(You must have graphviz installed.)"
        )
        lines.append("")
        lines.append(f"    dot -Tsvg {_relative(dot_paths[-1], project_dir)} -o {svg_name}")
    logger.info("\n".join(lines))

    return written
