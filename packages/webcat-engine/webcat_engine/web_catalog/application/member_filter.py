"""
Member filtering

Turns a node's own keys into candidate API names.

Default ("class") members exclude:
    (1) object-graph reserved properties "+name+",
    (2) integer keys,
    (3) the "prototype" property,
    (4) constants (non-writable boolean/number/string values).

Object.prototype keeps its reserved built-ins, unwrapped ("+valueOf+" -> "valueOf").
Function.prototype keeps integer keys, "prototype" and constants; its
reserved names are dropped unless retain_function_prototype_markers is set.
Instance members only drop reserved names and integer keys.
"""

from __future__ import annotations

import re

from webcat_engine.web_catalog.application.name_resolver import MARKER_RE, is_marker
from webcat_engine.web_catalog.domain.ports import NodeId, ObjectGraphPort
from webcat_engine.web_catalog.infrastructure.config import ExtractionConfig

_NUMERIC_RE = re.compile(r"^[0-9]+$")


def _unwrap_marker(name: str) -> str:
    if MARKER_RE.match(name):
        return name[1:-1]
    return name


class MemberFilter:
    """Per-pass member filter, memoised by node id."""

    def __init__(
        self,
        graph: ObjectGraphPort,
        config: ExtractionConfig,
        object_prototype_id: NodeId | None,
        function_prototype_id: NodeId | None,
    ):
        self.graph = graph
        self.config = config
        self.object_prototype_id = object_prototype_id
        self.function_prototype_id = function_prototype_id
        self._class_cache: dict[NodeId, list[str]] = {}

    def class_members(self, node_id: NodeId) -> list[str]:
        """API names a constructor, prototype or library exposes directly."""
        if node_id not in self._class_cache:
            self._class_cache[node_id] = self._class_members(node_id)
        return self._class_cache[node_id]

    def instance_members(self, node_id: NodeId) -> list[str]:
        """API names an instance contributes to its interface."""
        return [
            name
            for name in self.graph.get_object_keys(node_id)
            if not is_marker(name) and not _NUMERIC_RE.match(name)
        ]

    def is_constant(self, node_id: NodeId, name: str) -> bool:
        """True when ``name`` holds a non-writable value of a constant type."""
        value_id = self.graph.lookup(name, node_id)
        if value_id is None or self.graph.get_type(value_id) not in self.config.constant_types:
            return False
        writable = self.graph.lookup_metadata(name, node_id).get("writable", True)
        return not writable

    def _keep_constant(self, node_id: NodeId, name: str) -> bool:
        return self.config.retain_constant_members or not self.is_constant(node_id, name)

    def _class_members(self, node_id: NodeId) -> list[str]:
        keys = self.graph.get_object_keys(node_id)

        if node_id == self.object_prototype_id:
            names: list[str] = []
            for key in keys:
                if key == "prototype" or not self._keep_constant(node_id, key):
                    continue
                name = _unwrap_marker(key)
                if name not in names:
                    names.append(name)
            return names

        if node_id == self.function_prototype_id:
            if self.config.retain_function_prototype_markers:
                return list(keys)
            return [key for key in keys if not is_marker(key)]

        return [
            key
            for key in keys
            if not is_marker(key)
            and not _NUMERIC_RE.match(key)
            and key != "prototype"
            and self._keep_constant(node_id, key)
        ]
