"""Command-line interface for depgraph."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from depgraph.config import load_settings
from depgraph.errors import DepGraphError
from depgraph.pipeline import run

logger = logging.getLogger("depgraph")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="depgraph",
        description="Render resolved dependency graphs as Graphviz and topological order.",
    )
    parser.add_argument(
        "project_dir",
        type=Path,
        help="Path to the analysed project",
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "-r",
        "--resolution",
        type=Path,
        help="Resolved dependency tree (YAML or JSON)",
    )
    source.add_argument(
        "--pom",
        type=Path,
        help="Resolve this pom.xml with jgo instead (requires depgraph[java])",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Output directory (default: build/depgraph)",
    )
    parser.add_argument(
        "-c",
        "--configuration",
        action="append",
        dest="configurations",
        help="Configuration to render; repeat for several (default: all)",
    )
    parser.add_argument(
        "--build-path",
        default=None,
        help="Build from whose point of view nodes are labelled (default: the root's)",
    )
    parser.add_argument(
        "--all",
        action="store_false",
        dest="local_only",
        default=None,
        help="Keep external dependencies instead of only local projects",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose (debug) output",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.WARNING, format="%(message)s")
    logger.setLevel(logging.DEBUG if args.verbose else logging.INFO)

    try:
        settings = load_settings(args.project_dir.resolve()).with_overrides(
            build_path=args.build_path,
            local_only=args.local_only,
            configurations=tuple(args.configurations) if args.configurations else None,
        )

        resolution = None
        if args.pom is not None:
            from depgraph.resolution.maven import resolve_pom

            resolution = resolve_pom(args.pom)
            if resolution is None:
                logger.error("Could not resolve %s", args.pom)
                sys.exit(1)

        run(
            args.project_dir,
            resolution_file=args.resolution,
            resolution=resolution,
            output=args.output,
            settings=settings,
        )
    except DepGraphError as e:
        logger.error("%s", e)
        sys.exit(1)
