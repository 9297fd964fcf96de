import json
import sys
import types

import pytest

from depgraph.errors import DeserializationError
from depgraph.resolution import (
    ModuleComponentId,
    ProjectComponentId,
    load_resolution,
    node_from_mapping,
)
from depgraph.resolution.maven import CONFIGURATION_NAME, resolve_pom

RESOLUTION_YAML = """\
buildPath: ":"
configurations:
  compileClasspath:
    id: ":app"
    dependencies:
      - id: ":lib"
        dependencies:
          - id: "com.google.guava:guava:33.0"
      - id: "com.google.guava:guava"
        version: "33.0"
      - id: ":tool"
        buildPath: ":build-logic"
        group: com.x
      - id: "com.x:gone"
        resolved: false
"""


def test_node_from_mapping():
    node = node_from_mapping(
        {
            "id": "com.x:lib:1.0",
            "capabilities": ["com.x:lib-test-fixtures"],
            "attributes": {"org.gradle.category": "library"},
        }
    )
    assert node.id == ModuleComponentId("com.x", "lib")
    assert node.version == "1.0"
    assert node.capabilities == frozenset({"com.x:lib-test-fixtures"})
    assert node.attributes == {"org.gradle.category": "library"}
    assert node.dependencies == []


def test_node_from_mapping_project_inherits_build_path():
    node = node_from_mapping({"id": ":app"}, build_path=":nested")
    assert node.id == ProjectComponentId(":app", ":nested")


@pytest.mark.parametrize(
    "data",
    [
        {"version": "1.0"},
        {"id": "bad"},
        {"id": ":app", "dependencies": {"id": ":lib"}},
        {"id": "g:a", "resolved": "false"},
        {"id": "g:a", "resolved": 0},
        "just a string",
    ],
)
def test_node_from_mapping_rejects_malformed(data):
    with pytest.raises(DeserializationError):
        node_from_mapping(data)


def test_load_yaml(tmp_path):
    path = tmp_path / "resolution.yaml"
    path.write_text(RESOLUTION_YAML)

    resolution = load_resolution(path)

    assert resolution.build_path == ":"
    root = resolution.configurations["compileClasspath"]
    assert root.id == ProjectComponentId(":app")
    lib, guava, tool, gone = root.dependencies
    assert lib.dependencies[0].version == "33.0"
    assert guava.version == "33.0"
    assert tool.id == ProjectComponentId(":tool", ":build-logic", group="com.x")
    assert gone.resolved is False


def test_load_json(tmp_path):
    path = tmp_path / "resolution.json"
    path.write_text(json.dumps({"configurations": {"runtimeClasspath": {"id": ":app"}}}))
    resolution = load_resolution(path)
    assert list(resolution.configurations) == ["runtimeClasspath"]


@pytest.mark.parametrize("text", ["- a\n- b\n", "buildPath: ':'\n", "key: [unclosed\n"])
def test_load_rejects_bad_documents(tmp_path, text):
    path = tmp_path / "resolution.yaml"
    path.write_text(text)
    with pytest.raises(DeserializationError):
        load_resolution(path)


def test_load_missing_file(tmp_path):
    with pytest.raises(DeserializationError):
        load_resolution(tmp_path / "missing.yaml")


# -- Maven adapter -------------------------------------------------------------


def test_resolve_pom_without_jgo(monkeypatch, tmp_path):
    monkeypatch.setitem(sys.modules, "jgo", None)
    monkeypatch.setitem(sys.modules, "jgo.maven", None)
    assert resolve_pom(tmp_path / "pom.xml") is None


def _tree_node(group, artifact, version, scope=None, children=()):
    dep = types.SimpleNamespace(groupId=group, artifactId=artifact, version=version, scope=scope)
    return types.SimpleNamespace(dep=dep, children=list(children))


def test_resolve_pom_converts_tree(monkeypatch, tmp_path):
    shared = _tree_node("com.google.guava", "guava", "33.0")
    tree = types.SimpleNamespace(
        children=[
            _tree_node("org.example", "core", "1.0", "compile", [shared]),
            _tree_node("org.junit", "junit", "5.0", "test"),
            shared,
        ]
    )

    fake = types.ModuleType("jgo.maven")

    class POM:
        def __init__(self, path):
            self.groupId = "org.example"
            self.artifactId = "app"
            self.version = "0.1"

    class Model:
        def __init__(self, pom, context):
            pass

        def dependencies(self):
            return [], tree

    fake.POM = POM
    fake.Model = Model
    fake.MavenContext = lambda: None
    monkeypatch.setitem(sys.modules, "jgo", types.ModuleType("jgo"))
    monkeypatch.setitem(sys.modules, "jgo.maven", fake)

    resolution = resolve_pom(tmp_path / "pom.xml")

    root = resolution.configurations[CONFIGURATION_NAME]
    assert root.id == ProjectComponentId(":app", project_name="app", group="org.example")
    core, guava = root.dependencies
    assert core.id == ModuleComponentId("org.example", "core")
    assert core.dependencies[0] is guava
    assert guava.version == "33.0"
