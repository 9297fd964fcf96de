"""JSON codec for :class:`GraphView`.

Wire shape::

    {
      "variant": {"name": "main", "kind": "main"},
      "configurationName": "compileClasspath",
      "nodes": [<coordinates>, ...],
      "edges": [{"source": <coordinates>, "target": <coordinates>}, ...]
    }

Coordinates carry a ``kind`` discriminator.  Nodes and edges are sets; they are
emitted in a canonical order so equal graphs always encode to the same bytes.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from depgraph.coordinates import AnyCoordinates, Coordinates
from depgraph.errors import DeserializationError
from depgraph.model import GraphView, Variant, new_graph

logger = logging.getLogger(__name__)

_COORDINATES = TypeAdapter(AnyCoordinates)


class EdgeJson(BaseModel):
    source: AnyCoordinates
    target: AnyCoordinates


class GraphViewJson(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    variant: Variant
    configuration_name: str = Field(alias="configurationName")
    nodes: list[AnyCoordinates]
    edges: list[EdgeJson]


def _canonical(node: Coordinates) -> bytes:
    return _COORDINATES.dump_json(node)


def encode(view: GraphView, indent: int | None = None) -> str:
    """Serialize *view*; equal graphs produce byte-identical output."""
    nodes = sorted(view.graph.nodes, key=_canonical)
    edges = sorted(view.graph.edges, key=lambda e: (_canonical(e[0]), _canonical(e[1])))
    payload = GraphViewJson(
        variant=view.variant,
        configuration_name=view.configuration_name,
        nodes=nodes,
        edges=[EdgeJson(source=u, target=v) for u, v in edges],
    )
    return payload.model_dump_json(by_alias=True, indent=indent)


def decode(data: str | bytes) -> GraphView:
    """Rebuild a :class:`GraphView` from its JSON form.

    Every listed node is added before the edges, so isolated nodes survive.
    Raises :class:`DeserializationError` for any malformed input.
    """
    try:
        payload = GraphViewJson.model_validate_json(data)
    except ValueError as e:
        # pydantic's ValidationError and our ConstructionError are both ValueErrors
        raise DeserializationError(f"Invalid graph view: {e}") from e

    graph = new_graph()
    graph.add_nodes_from(payload.nodes)
    graph.add_edges_from((edge.source, edge.target) for edge in payload.edges)
    return GraphView(
        variant=payload.variant,
        configuration_name=payload.configuration_name,
        graph=graph,
    )


def write_graph_view(view: GraphView, path: Path, indent: int | None = None) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(encode(view, indent=indent), encoding="utf-8", newline="\n")
    logger.debug("Wrote graph view %s to %s", view.configuration_name, path)


def read_graph_view(path: Path) -> GraphView:
    try:
        data = path.read_bytes()
    except OSError as e:
        raise DeserializationError(f"Could not read {path}: {e}") from e
    return decode(data)
