import networkx as nx
import pytest

from depgraph.coordinates import IncludedBuildCoordinates, ProjectCoordinates, parse
from depgraph.errors import CycleError, GraphError
from depgraph.graph import GraphWriter, find_cycles, topological_order
from depgraph.model import GraphView, Variant
from depgraph.serialization import decode, encode

APP = parse(":app")
LIB = parse(":lib")
GUAVA = parse("com.google.guava:guava:33.0")


def graph_of(*edges, nodes=()):
    graph = nx.DiGraph()
    graph.add_nodes_from(nodes)
    graph.add_edges_from(edges)
    return graph


# -- topological ---------------------------------------------------------------


def test_topological_dependencies_first_with_in_degree():
    graph = graph_of((APP, LIB), (APP, GUAVA), (LIB, GUAVA))
    text = GraphWriter(":").topological(graph)
    assert text == "com.google.guava:guava:33.0 2\n:lib 1\n:app 0"


def test_topological_order_respects_every_edge():
    graph = graph_of((APP, LIB), (APP, GUAVA), (LIB, GUAVA))
    order = topological_order(graph)
    assert order == [GUAVA, LIB, APP]
    for u, v in graph.edges:
        assert order.index(v) < order.index(u)


def test_topological_ties_are_broken_by_label():
    a, b = parse(":a"), parse(":b")
    forward = graph_of((APP, b), (APP, a))
    backward = graph_of((APP, a), (APP, b))
    writer = GraphWriter(":")
    assert writer.topological(forward) == ":a 1\n:b 1\n:app 0"
    assert writer.topological(backward) == writer.topological(forward)


def test_topological_single_node():
    assert GraphWriter(":").topological(graph_of(nodes=[APP])) == ":app 0"


def test_topological_rejects_cycle_without_root():
    a, b = parse("g:a"), parse("g:b")
    with pytest.raises(CycleError):
        GraphWriter(":").topological(graph_of((a, b), (b, a)))


def test_topological_rejects_cycle_below_root():
    a, b = parse("g:a"), parse("g:b")
    with pytest.raises(CycleError) as excinfo:
        GraphWriter(":").topological(graph_of((APP, a), (a, b), (b, a)))
    assert "g:a" in str(excinfo.value)


def test_topological_rejects_cycle_detached_from_root():
    a, b = parse("g:a"), parse("g:b")
    graph = graph_of((APP, LIB), (a, b), (b, a))
    with pytest.raises(CycleError):
        GraphWriter(":").topological(graph)

    decoded = decode(encode(GraphView(Variant.main(), "compileClasspath", graph)))
    with pytest.raises(CycleError):
        GraphWriter(":").topological(decoded.graph)


def test_topological_requires_single_root():
    with pytest.raises(GraphError):
        topological_order(graph_of((APP, GUAVA), (LIB, GUAVA)))


def test_empty_graph_has_no_root():
    with pytest.raises(GraphError):
        topological_order(nx.DiGraph())


def test_find_cycles():
    a, b = parse("g:a"), parse("g:b")
    assert find_cycles(graph_of((APP, a), (a, b), (b, a))) == [[a, b]]
    assert find_cycles(graph_of((APP, LIB))) == []


# -- DOT -----------------------------------------------------------------------


def test_dot_project_node_and_external_edge():
    lib = parse("com.g:lib:1.0")
    dot = GraphWriter(":").to_dot(graph_of((APP, lib)))
    assert dot == (
        "strict digraph DependencyGraph {\n"
        "  ratio=0.6;\n"
        "  node [shape=box];\n"
        "\n"
        '  ":app" [style=filled fillcolor="#008080"];\n'
        "\n"
        '  ":app" -> "com.g:lib:1.0";\n'
        "}"
    )


def test_dot_project_edges_are_bold():
    dot = GraphWriter(":").to_dot(graph_of((APP, LIB)))
    assert '  ":app" -> ":lib" [style=bold color="#FF6347" weight=8];' in dot.splitlines()
    assert '  ":lib" [style=filled fillcolor="#008080"];' in dot.splitlines()


def test_dot_without_project_nodes_has_no_styling_block():
    a, b = parse("g:a:1"), parse("g:b:2")
    dot = GraphWriter(":").to_dot(graph_of((a, b)))
    assert dot == (
        "strict digraph DependencyGraph {\n"
        "  ratio=0.6;\n"
        "  node [shape=box];\n"
        '  "g:a:1" -> "g:b:2";\n'
        "}"
    )


def test_dot_is_deterministic():
    first = graph_of((APP, LIB), (APP, GUAVA), (LIB, GUAVA))
    second = graph_of((APP, LIB), (APP, GUAVA), (LIB, GUAVA))
    assert GraphWriter(":").to_dot(first) == GraphWriter(":").to_dot(second)
    assert "\r" not in GraphWriter(":").to_dot(first)


def test_dot_collapsed_included_build_is_not_repeated():
    tool = ProjectCoordinates(":tool", group="com.x")
    included = IncludedBuildCoordinates(target_build_path=":", resolved_project=tool)
    dot = GraphWriter(":").to_dot(graph_of((APP, tool), (APP, included)))
    assert dot == (
        "strict digraph DependencyGraph {\n"
        "  ratio=0.6;\n"
        "  node [shape=box];\n"
        "\n"
        '  ":app" [style=filled fillcolor="#008080"];\n'
        '  ":tool" [style=filled fillcolor="#008080"];\n'
        "\n"
        '  ":app" -> ":tool" [style=bold color="#FF6347" weight=8];\n'
        "}"
    )


def test_included_build_of_reference_build_renders_as_project():
    tool = IncludedBuildCoordinates(
        target_build_path=":",
        resolved_project=ProjectCoordinates(":tool", group="com.x"),
    )
    graph = graph_of((APP, tool))

    dot = GraphWriter(":").to_dot(graph)
    assert '  ":app" -> ":tool" [style=bold color="#FF6347" weight=8];' in dot

    other = GraphWriter(":elsewhere").to_dot(graph)
    assert '  ":app" -> "com.x:tool";' in other
    assert GraphWriter(":").topological(graph) == ":tool 1\n:app 0"
