"""Exception taxonomy for identity, graph and serialization failures."""

from __future__ import annotations


class DepGraphError(Exception):
    """Base class for every error raised by depgraph."""


class ParseError(DepGraphError, ValueError):
    """A raw coordinate string does not have a recognised shape."""

    def __init__(self, raw: str) -> None:
        super().__init__(f"Cannot parse coordinates from {raw!r}")
        self.raw = raw


class ConstructionError(DepGraphError, ValueError):
    """A Coordinates value would violate one of its invariants."""


class IdentifierError(DepGraphError, LookupError):
    """The requested identifier notation has no backing field."""


class GraphError(DepGraphError):
    """The graph does not have the shape an operation requires."""


class CycleError(GraphError):
    """A dependency cycle was found where a DAG is required."""

    def __init__(self, cycle: list[str]) -> None:
        path = " -> ".join(cycle)
        super().__init__(f"Dependency graph contains a cycle: {path}")
        self.cycle = cycle


class DeserializationError(DepGraphError, ValueError):
    """Serialized input is malformed or does not match the expected schema."""


class ConfigError(DepGraphError):
    """Invalid depgraph settings."""
