"""Dependency identity and graph analysis for build-dependency advice."""

from __future__ import annotations

from depgraph.coordinates import (
    Coordinates,
    CoordinatesNotation,
    IncludedBuildCoordinates,
    ModuleCoordinates,
    ProjectCoordinates,
    parse,
)
from depgraph.errors import (
    ConfigError,
    ConstructionError,
    CycleError,
    DepGraphError,
    DeserializationError,
    GraphError,
    IdentifierError,
    ParseError,
)
from depgraph.graph import GraphBuilder, GraphWriter, build_graph_view
from depgraph.model import GraphView, SourceKind, Variant
from depgraph.serialization import decode, encode

__all__ = [
    "ConfigError",
    "ConstructionError",
    "Coordinates",
    "CoordinatesNotation",
    "CycleError",
    "DepGraphError",
    "DeserializationError",
    "GraphBuilder",
    "GraphError",
    "GraphView",
    "GraphWriter",
    "IdentifierError",
    "IncludedBuildCoordinates",
    "ModuleCoordinates",
    "ParseError",
    "ProjectCoordinates",
    "SourceKind",
    "Variant",
    "build_graph_view",
    "decode",
    "encode",
    "parse",
]
