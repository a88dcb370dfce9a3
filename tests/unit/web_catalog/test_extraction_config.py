"""Tests for ExtractionConfig and directive parsing"""

import json

import pytest
from pydantic import ValidationError

from webcat_engine.web_catalog.domain.directives import (
    AddApisDirective,
    CopyToPrototypeDirective,
    RemoveApisDirective,
    default_post_processors,
)
from webcat_engine.web_catalog.infrastructure.config import ExtractionConfig, load_extraction_config
from webcat_shared.common.exceptions import InvalidConfigurationError


class TestDefaults:
    def test_heuristics_enabled(self):
        config = ExtractionConfig()
        assert config.function_names_from_graph_paths
        assert config.class_names_from_constructor_property
        assert config.class_names_from_graph_paths
        assert config.class_names_from_to_string

    def test_filtering_defaults(self):
        config = ExtractionConfig()
        assert config.constant_types == frozenset({"boolean", "number", "string"})
        assert not config.retain_constant_members
        assert not config.retain_function_prototype_markers
        assert not config.attribute_root_instances
        assert config.blacklist_interfaces == ("CSS2Properties", "window")

    def test_default_post_processors(self):
        kinds = [d.kind for d in ExtractionConfig().post_processors]
        assert kinds == ["copy", "copy", "remove-apis"]
        assert ExtractionConfig().post_processors == default_post_processors()

    def test_frozen(self):
        with pytest.raises(ValidationError):
            ExtractionConfig().retain_constant_members = True


class TestParsing:
    """camelCase option names and tagged directives"""

    def test_camel_case_names(self):
        config = ExtractionConfig.model_validate({"retainConstantMembers": True, "blacklistInterfaces": []})
        assert config.retain_constant_members
        assert config.blacklist_interfaces == ()

    def test_unknown_option_rejected(self):
        with pytest.raises(ValidationError):
            ExtractionConfig.model_validate({"retainEverything": True})

    def test_unknown_constant_type_rejected(self):
        with pytest.raises(ValidationError):
            ExtractionConfig(constant_types=frozenset({"object"}))

    def test_directives_by_kind(self):
        config = ExtractionConfig.model_validate(
            {
                "postProcessors": [
                    {"kind": "copy", "fromInterfaceName": "window", "toInterfaceNames": ["Window"]},
                    {"kind": "remove-apis", "interfaceNames": ["A"], "apiNamePattern": "^x"},
                    {"kind": "add", "interfaceName": "B", "apiNames": ["y"], "specUrl": "https://example.org"},
                ]
            }
        )
        copy_step, remove_step, add_step = config.post_processors
        assert isinstance(copy_step, CopyToPrototypeDirective)
        assert copy_step.to_interface_names == ("Window",)
        assert isinstance(remove_step, RemoveApisDirective)
        assert remove_step.api_name_regex.search("xy")
        assert isinstance(add_step, AddApisDirective)
        assert add_step.spec_url == "https://example.org"

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValidationError):
            ExtractionConfig.model_validate({"postProcessors": [{"kind": "rename"}]})

    def test_invalid_pattern_rejected(self):
        with pytest.raises(ValidationError):
            RemoveApisDirective(interface_names=("A",), api_name_pattern="(")


class TestLoadExtractionConfig:
    def test_yaml(self, tmp_path):
        path = tmp_path / "extraction.yaml"
        path.write_text(
            "retainConstantMembers: true\n"
            "constantTypes: [number]\n"
            "postProcessors:\n"
            "  - kind: remove-interfaces\n"
            "    interfaceNames: [Foo]\n"
        )
        config = load_extraction_config(path)
        assert config.retain_constant_members
        assert config.constant_types == frozenset({"number"})
        assert config.post_processors[0].interface_names == ("Foo",)

    def test_json(self, tmp_path):
        path = tmp_path / "extraction.json"
        path.write_text(json.dumps({"attribute_root_instances": True}))
        assert load_extraction_config(path).attribute_root_instances

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_extraction_config(path) == ExtractionConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(InvalidConfigurationError):
            load_extraction_config(tmp_path / "nope.yaml")

    def test_invalid_options(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("retainConstantMembers: [1, 2]\n")
        with pytest.raises(InvalidConfigurationError) as exc_info:
            load_extraction_config(path)
        assert exc_info.value.details["path"] == str(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("a: [unclosed\n")
        with pytest.raises(InvalidConfigurationError):
            load_extraction_config(path)

    def test_add_into_copy_source(self, tmp_path):
        path = tmp_path / "conflict.json"
        path.write_text(
            json.dumps(
                {
                    "postProcessors": [
                        {"kind": "copy", "fromInterfaceName": "Foo", "toInterfaceNames": ["Bar"]},
                        {"kind": "add", "interfaceName": "Foo", "apiNames": ["z"]},
                    ]
                }
            )
        )
        with pytest.raises(InvalidConfigurationError) as exc_info:
            load_extraction_config(path)
        assert exc_info.value.details == {"interface": "Foo"}
