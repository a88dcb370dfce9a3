"""
Extraction configuration

All switches of an extraction pass live here: naming heuristics, member
filtering and the post-processor pipeline.

Usage:
    from webcat_engine.web_catalog.infrastructure.config import ExtractionConfig

    # Defaults
    config = ExtractionConfig()

    # Override (snake_case or the camelCase option names)
    config = ExtractionConfig(retainConstantMembers=True)

    # From a YAML/JSON file
    config = load_extraction_config("extraction.yaml")
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from webcat_engine.web_catalog.domain.directives import (
    DIRECTIVE_PHASES,
    PostProcessorDirective,
    RemoveInterfacesDirective,
    default_post_processors,
)
from webcat_shared.common.exceptions import InvalidConfigurationError

ConstantType = Literal["boolean", "number", "string"]


class ExtractionConfig(BaseModel):
    """Configuration for one extraction pass."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    # Naming heuristics
    function_names_from_graph_paths: bool = Field(default=True)
    """Deduce function names from graph paths ending in the function's property name"""

    class_names_from_constructor_property: bool = Field(default=True)
    """Deduce class names from "+constructor+"; when found, no other class heuristic runs"""

    class_names_from_graph_paths: bool = Field(default=True)
    """Deduce class names from graph paths like '...<Name>.prototype'"""

    class_names_from_to_string: bool = Field(default=True)
    """Deduce class names from "[object <Name>]" / "<Name>Constructor" / "<Name>Prototype" tags"""

    # Member filtering
    constant_types: frozenset[ConstantType] = Field(default=frozenset({"boolean", "number", "string"}))
    """Primitive types whose non-writable members count as constants"""

    retain_constant_members: bool = Field(default=False)
    """Keep non-writable members of constant_types"""

    retain_function_prototype_markers: bool = Field(default=False)
    """Keep "+name+" members of Function.prototype verbatim instead of dropping them"""

    attribute_root_instances: bool = Field(default=False)
    """Attribute instances whose closest interface prototype is a root prototype (e.g. Object.prototype)"""

    # Post-processing
    blacklist_interfaces: tuple[str, ...] = Field(default=("CSS2Properties", "window"))
    """Interfaces available to post-processors but removed from the final catalog"""

    post_processors: tuple[PostProcessorDirective, ...] = Field(default_factory=default_post_processors)
    """Corrective directives, see PostProcessorPipeline"""

    @model_validator(mode="after")
    def _pipeline_is_rerunnable(self) -> ExtractionConfig:
        check_directive_conflicts(self.pipeline())
        return self

    def pipeline(self) -> list[PostProcessorDirective]:
        """Directives in execution order, ending with the blacklist removal."""
        directives = list(self.post_processors)
        if self.blacklist_interfaces:
            directives.append(RemoveInterfacesDirective(interface_names=self.blacklist_interfaces))
        # sorted() is stable: configured order is kept within a phase.
        return sorted(directives, key=lambda d: DIRECTIVE_PHASES[d.kind])


def load_extraction_config(path: str | Path) -> ExtractionConfig:
    """
    Load an ExtractionConfig from YAML or JSON.

    Raises:
        InvalidConfigurationError: unreadable file or invalid options
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
        if path.suffix == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise InvalidConfigurationError("Cannot read extraction config", {"path": str(path)}) from e

    try:
        return ExtractionConfig.model_validate(data or {})
    except PydanticValidationError as e:
        raise InvalidConfigurationError(
            "Invalid extraction config", {"path": str(path), "errors": e.error_count()}
        ) from e


def check_directive_conflicts(directives: Iterable[PostProcessorDirective]) -> None:
    """
    Reject directive combinations whose result changes when re-applied.

    A copy source must not receive members from another directive: an
    ``add`` into it, or a copy that names it as an explicit target, would
    only reach the copy targets on a second pass.

    Raises:
        InvalidConfigurationError: a copy source is also written to
    """
    directives = list(directives)
    copy_sources = {d.from_interface_name for d in directives if d.kind == "copy"}

    for directive in directives:
        if directive.kind == "add" and directive.interface_name in copy_sources:
            raise InvalidConfigurationError(
                "Add directive targets a copy source",
                {"interface": directive.interface_name},
            )
        if directive.kind == "copy" and directive.to_interface_names:
            chained = copy_sources.intersection(directive.to_interface_names)
            if chained:
                raise InvalidConfigurationError(
                    "Copy directive targets another copy source",
                    {"source": directive.from_interface_name, "targets": sorted(chained)},
                )
