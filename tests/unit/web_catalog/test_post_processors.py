"""Tests for the post-processor pipeline"""

import copy

import pytest

from webcat_engine.web_catalog.application.post_processors import PostProcessorPipeline
from webcat_engine.web_catalog.domain.directives import (
    AddApisDirective,
    CopyToPrototypeDirective,
    RemoveApisDirective,
    RemoveInterfacesDirective,
)
from webcat_engine.web_catalog.infrastructure.config import ExtractionConfig
from webcat_shared.common.exceptions import InvalidConfigurationError


def _run(catalog, *directives, sources=None):
    return PostProcessorPipeline(directives).apply(catalog, sources)


class TestCopy:
    """Copy to prototype"""

    def test_explicit_targets(self):
        catalog = _run(
            {"A": ["x", "y"], "B": ["y"]},
            CopyToPrototypeDirective(from_interface_name="A", to_interface_names=("B",)),
        )
        assert catalog == {"A": ["x", "y"], "B": ["y", "x"]}

    def test_absent_target_is_created(self):
        catalog = _run({"A": ["x"]}, CopyToPrototypeDirective(from_interface_name="A", to_interface_names=("C",)))
        assert catalog["C"] == ["x"]

    def test_absent_source_is_noop(self):
        catalog = _run({"B": ["y"]}, CopyToPrototypeDirective(from_interface_name="A", to_interface_names=("B",)))
        assert catalog == {"B": ["y"]}

    def test_aliases_are_not_mutated(self):
        shared = ["a"]
        catalog = {"Alias1": shared, "Alias2": shared, "Src": ["b"]}
        _run(catalog, CopyToPrototypeDirective(from_interface_name="Src", to_interface_names=("Alias1",)))

        assert catalog["Alias1"] == ["a", "b"]
        assert catalog["Alias2"] == ["a"]
        assert shared == ["a"]

    def test_graph_targets(self, window_graph):
        catalog = {"window": ["alert", "document"], "Window": ["alert"]}
        PostProcessorPipeline([CopyToPrototypeDirective(from_interface_name="window")], window_graph).apply(catalog)
        assert catalog["Window"] == ["alert", "document"]

    def test_graph_targets_of_constructor_use_parent_prototype(self, window_fixture, window_graph):
        pipeline = PostProcessorPipeline([], window_graph)
        # Node.prototype inherits from EventTarget.prototype
        assert pipeline.prototype_interface_names("Node") == ["EventTarget"]

    def test_graph_targets_without_graph(self):
        catalog = _run({"window": ["a"]}, CopyToPrototypeDirective(from_interface_name="window"))
        assert catalog == {"window": ["a"]}

    def test_copies_provenance(self):
        sources = {"A": {"x": 7}}
        _run(
            {"A": ["x"]},
            CopyToPrototypeDirective(from_interface_name="A", to_interface_names=("B",)),
            sources=sources,
        )
        assert sources["B"] == {"x": 7}


class TestRemove:
    def test_remove_interfaces(self):
        sources = {"A": {"x": 1}}
        catalog = _run({"A": ["x"], "B": ["y"]}, RemoveInterfacesDirective(interface_names=("A", "Z")), sources=sources)
        assert catalog == {"B": ["y"]}
        assert sources == {}

    def test_remove_apis_only_in_named_interfaces(self):
        catalog = _run(
            {"CSSStyleDeclaration": ["color", "font-size", "fontSize"], "Other": ["a-b"]},
            RemoveApisDirective(interface_names=("CSSStyleDeclaration",), api_name_pattern="[-]"),
        )
        assert catalog == {"CSSStyleDeclaration": ["color", "fontSize"], "Other": ["a-b"]}

    def test_remove_apis_missing_interface(self):
        catalog = _run({"A": ["x"]}, RemoveApisDirective(interface_names=("B",), api_name_pattern="x"))
        assert catalog == {"A": ["x"]}


class TestAdd:
    def test_add_creates_interface(self):
        catalog = _run({}, AddApisDirective(interface_name="New", api_names=("a", "b", "a")))
        assert catalog == {"New": ["a", "b"]}

    def test_add_skips_existing(self):
        catalog = _run({"A": ["a"]}, AddApisDirective(interface_name="A", api_names=("a", "b")))
        assert catalog == {"A": ["a", "b"]}


class TestOrdering:
    """copy < remove < add, stable within a phase"""

    def test_phases_reordered(self):
        catalog = _run(
            {"A": ["old"], "B": []},
            AddApisDirective(interface_name="B", api_names=("added",)),
            RemoveInterfacesDirective(interface_names=("A",)),
            CopyToPrototypeDirective(from_interface_name="A", to_interface_names=("B",)),
        )
        # copy saw A before removal; add ran last
        assert catalog == {"B": ["old", "added"]}

    def test_copy_then_remove(self):
        catalog = _run(
            {"Window": [], "window": ["a", "b"]},
            RemoveInterfacesDirective(interface_names=("window",)),
            CopyToPrototypeDirective(from_interface_name="window", to_interface_names=("Window",)),
        )
        assert catalog == {"Window": ["a", "b"]}

    def test_blacklist_runs_after_copies(self, window_graph):
        pipeline = PostProcessorPipeline(ExtractionConfig().pipeline(), window_graph)
        catalog = pipeline.apply({"window": ["document"], "CSS2Properties": ["color"]})
        assert catalog == {"Window": ["document"]}

    def test_pipeline_always_ends_with_blacklist(self):
        directives = ExtractionConfig(post_processors=()).pipeline()
        assert directives == [RemoveInterfacesDirective(interface_names=("CSS2Properties", "window"))]

    def test_empty_blacklist_adds_nothing(self):
        assert ExtractionConfig(post_processors=(), blacklist_interfaces=()).pipeline() == []


class TestIdempotence:
    def test_default_pipeline_twice(self, window_graph):
        pipeline = PostProcessorPipeline(ExtractionConfig().pipeline(), window_graph)
        once = pipeline.apply(
            {
                "window": ["document", "alert"],
                "Window": ["alert"],
                "CSSStyleDeclaration": ["color", "background-color"],
            }
        )
        snapshot = copy.deepcopy(once)
        twice = pipeline.apply(once)

        assert twice == snapshot
        assert snapshot == {"Window": ["alert", "document"], "CSSStyleDeclaration": ["color"]}

    def test_add_into_copy_source_rejected(self):
        """Added members would only reach the copy target on a second run"""
        with pytest.raises(InvalidConfigurationError):
            PostProcessorPipeline(
                [
                    CopyToPrototypeDirective(from_interface_name="A", to_interface_names=("B",)),
                    AddApisDirective(interface_name="A", api_names=("z",)),
                ]
            )

    def test_copy_into_copy_source_rejected(self):
        with pytest.raises(InvalidConfigurationError):
            PostProcessorPipeline(
                [
                    CopyToPrototypeDirective(from_interface_name="B", to_interface_names=("C",)),
                    CopyToPrototypeDirective(from_interface_name="A", to_interface_names=("B",)),
                ]
            )

    def test_config_rejects_add_into_copy_source(self):
        with pytest.raises(InvalidConfigurationError):
            ExtractionConfig(
                post_processors=(
                    CopyToPrototypeDirective(from_interface_name="A", to_interface_names=("B",)),
                    AddApisDirective(interface_name="A", api_names=("z",)),
                )
            )

    def test_add_into_copy_target_twice(self):
        pipeline = PostProcessorPipeline(
            [
                CopyToPrototypeDirective(from_interface_name="A", to_interface_names=("B",)),
                AddApisDirective(interface_name="B", api_names=("z",)),
            ]
        )
        once = pipeline.apply({"A": ["x"]})
        snapshot = copy.deepcopy(once)

        assert pipeline.apply(once) == snapshot
        assert snapshot == {"A": ["x"], "B": ["x", "z"]}
