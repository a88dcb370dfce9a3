"""Tests for interface naming heuristics"""

import pytest

from tests.fakes.fake_object_graph import ObjectGraphBuilder
from webcat_engine.web_catalog.application.name_resolver import (
    NameResolver,
    class_name_from_to_string,
    class_names_from_prototype_paths,
    is_marker,
    names_from_graph_paths,
)
from webcat_engine.web_catalog.infrastructure.config import ExtractionConfig


def _tagged_prototype(tag: str):
    b = ObjectGraphBuilder()
    proto = b.obj(to_string=tag)
    return b.build(), proto


class TestMarkers:
    @pytest.mark.parametrize("name", ["+constructor+", "+valueOf+", "++"])
    def test_markers(self, name):
        assert is_marker(name)

    @pytest.mark.parametrize("name", ["constructor", "+constructor", "a+b+", ""])
    def test_not_markers(self, name):
        assert not is_marker(name)


class TestFunctionNames:
    """Names of constructor-like nodes"""

    def test_graph_path_names_skip_markers(self, window_fixture, window_graph):
        # "Node.prototype.+constructor+" contributes nothing
        assert names_from_graph_paths(window_graph, window_fixture.node_ctor) == ["Node"]

    def test_aliases_are_all_names(self):
        b = ObjectGraphBuilder()
        ctor = b.function("webkitURL", prototype=b.obj())
        b.set(b.root, "URL", ctor)
        b.set(b.root, "webkitURL", ctor)
        resolver = NameResolver(b.build(), ExtractionConfig())

        assert resolver.function_names(ctor) == ["URL", "webkitURL"]

    def test_runtime_name_appended_when_novel(self):
        b = ObjectGraphBuilder()
        ctor = b.function("HTMLImageElement", prototype=b.obj())
        b.set(b.root, "Image", ctor)
        resolver = NameResolver(b.build(), ExtractionConfig())

        assert resolver.function_names(ctor) == ["Image", "HTMLImageElement"]

    def test_graph_path_heuristic_can_be_disabled(self):
        b = ObjectGraphBuilder()
        ctor = b.function("HTMLImageElement", prototype=b.obj())
        b.set(b.root, "Image", ctor)
        resolver = NameResolver(b.build(), ExtractionConfig(function_names_from_graph_paths=False))

        assert resolver.function_names(ctor) == ["HTMLImageElement"]

    def test_unnamed_function(self):
        b = ObjectGraphBuilder()
        ctor = b.function(prototype=b.obj())
        resolver = NameResolver(b.build(), ExtractionConfig())

        assert resolver.function_names(ctor) == []


class TestClassNames:
    """Names of prototypes"""

    def test_constructor_marker_wins(self, window_fixture, window_graph):
        resolver = NameResolver(window_graph, ExtractionConfig())
        assert resolver.class_names(window_fixture.node_proto) == ["Node"]

    def test_constructor_marker_short_circuits_other_heuristics(self):
        b = ObjectGraphBuilder()
        proto = b.obj(to_string="[object Other]")
        ctor = b.function("Real", prototype=proto)
        b.set(proto, "+constructor+", ctor)
        b.set(b.root, "Real", ctor)
        resolver = NameResolver(b.build(), ExtractionConfig())

        assert resolver.class_names(proto) == ["Real"]

    def test_prototype_paths(self, window_fixture, window_graph):
        assert class_names_from_prototype_paths(window_graph, window_fixture.node_proto) == ["Node"]

    def test_prototype_paths_when_marker_disabled(self, window_fixture, window_graph):
        resolver = NameResolver(window_graph, ExtractionConfig(class_names_from_constructor_property=False))
        assert resolver.class_names(window_fixture.window_proto) == ["Window"]

    def test_anonymous_prototype(self, window_fixture, window_graph):
        resolver = NameResolver(window_graph, ExtractionConfig())
        assert resolver.class_names(window_fixture.window_properties) == []

    def test_all_class_heuristics_disabled(self, window_fixture, window_graph):
        config = ExtractionConfig(
            class_names_from_constructor_property=False,
            class_names_from_graph_paths=False,
            class_names_from_to_string=False,
        )
        assert NameResolver(window_graph, config).class_names(window_fixture.node_proto) == []

    def test_results_are_copies(self, window_fixture, window_graph):
        resolver = NameResolver(window_graph, ExtractionConfig())
        names = resolver.class_names(window_fixture.node_proto)
        names.append("Mutated")
        assert resolver.class_names(window_fixture.node_proto) == ["Node"]


class TestToStringTag:
    """"[object <Name>]" tags"""

    @pytest.mark.parametrize(
        "tag,expected",
        [
            ("[object HTMLElement]", ["HTMLElement"]),
            ("[object HTMLElementPrototype]", ["HTMLElement"]),
            ("[object DOMParserConstructor]", ["DOMParser"]),
            ("[object Object]", []),
            ("[object Prototype]", []),
            ("[object ]", []),
            ("function Foo() {}", []),
            ("[object Foo Bar]", []),
        ],
    )
    def test_tags(self, tag, expected):
        graph, proto = _tagged_prototype(tag)
        assert class_name_from_to_string(graph, proto) == expected

    def test_no_tag(self, window_fixture, window_graph):
        assert class_name_from_to_string(window_graph, window_fixture.window_properties) == []

    def test_tag_heuristic_can_be_disabled(self):
        graph, proto = _tagged_prototype("[object HTMLElementPrototype]")
        resolver = NameResolver(graph, ExtractionConfig(class_names_from_to_string=False))
        assert resolver.class_names(proto) == []
