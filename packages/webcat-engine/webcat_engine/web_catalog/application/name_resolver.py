"""
Name Resolver

Derives interface names for graph nodes. Each heuristic is a pure function
over the ObjectGraphPort; NameResolver composes them in a fixed order chosen
by the ExtractionConfig flags.

Function names (constructors):
    1. Last segment of every graph path reaching the node ("Node" from
       "Node", "window.Node"), minus "+marker+" segments and "prototype"
    2. Runtime function name, appended when novel

Class names (prototypes):
    0. "+constructor+" present -> function names of that constructor (short-circuits)
    1. "<Name>" from graph paths ending in "<Name>.prototype"
    2. "<Name>" from a "[object <Name>]" toString tag
"""

from __future__ import annotations

import re
from collections.abc import Callable

from webcat_engine.web_catalog.domain.ports import NodeId, ObjectGraphPort
from webcat_engine.web_catalog.infrastructure.config import ExtractionConfig

MARKER_RE = re.compile(r"^[+].*[+]$")
CONSTRUCTOR_MARKER = "+constructor+"

_TO_STRING_TAG_RE = re.compile(r"^\[object ([A-Za-z_$][0-9A-Za-z_$]*)\]$")
_TAG_SUFFIXES = ("Prototype", "Constructor")

NameHeuristic = Callable[[ObjectGraphPort, NodeId], list[str]]


def is_marker(name: str) -> bool:
    """True for reserved names wrapped as "+name+"."""
    return MARKER_RE.match(name) is not None


def _extend_unique(names: list[str], more: list[str]) -> list[str]:
    for name in more:
        if name not in names:
            names.append(name)
    return names


# ============================================================
# Heuristics
# ============================================================


def names_from_graph_paths(graph: ObjectGraphPort, node_id: NodeId) -> list[str]:
    names: list[str] = []
    for path in graph.get_keys(node_id):
        name = path.split(".")[-1]
        if is_marker(name) or name == "prototype":
            continue
        if name not in names:
            names.append(name)
    return names


def name_from_function(graph: ObjectGraphPort, node_id: NodeId) -> list[str]:
    name = graph.get_function_name(node_id)
    return [name] if name else []


def has_constructor_marker(graph: ObjectGraphPort, proto_id: NodeId) -> bool:
    return CONSTRUCTOR_MARKER in graph.get_object_keys(proto_id)


def class_names_from_prototype_paths(graph: ObjectGraphPort, proto_id: NodeId) -> list[str]:
    names: list[str] = []
    for path in graph.get_keys(proto_id):
        parts = path.split(".")
        if len(parts) < 2 or parts[-1] != "prototype":
            continue
        if parts[-2] not in names:
            names.append(parts[-2])
    return names


def class_name_from_to_string(graph: ObjectGraphPort, proto_id: NodeId) -> list[str]:
    """
    "[object HTMLElementPrototype]" -> ["HTMLElement"].

    "Object" is never returned: every plain object reports it.
    """
    tag = graph.get_to_string(proto_id)
    if not tag:
        return []
    match = _TO_STRING_TAG_RE.match(tag)
    if match is None:
        return []
    name = match.group(1)
    for suffix in _TAG_SUFFIXES:
        if name.endswith(suffix):
            name = name[: -len(suffix)]
            break
    if not name or name == "Object":
        return []
    return [name]


# ============================================================
# Resolver
# ============================================================


class NameResolver:
    """
    Composes naming heuristics for one extraction pass.

    Results are memoised per node; the resolver must not outlive the pass.
    """

    def __init__(self, graph: ObjectGraphPort, config: ExtractionConfig):
        self.graph = graph
        self.config = config

        self._function_heuristics: list[NameHeuristic] = []
        if config.function_names_from_graph_paths:
            self._function_heuristics.append(names_from_graph_paths)
        self._function_heuristics.append(name_from_function)

        self._class_heuristics: list[NameHeuristic] = []
        if config.class_names_from_graph_paths:
            self._class_heuristics.append(class_names_from_prototype_paths)
        if config.class_names_from_to_string:
            self._class_heuristics.append(class_name_from_to_string)

        self._function_cache: dict[NodeId, list[str]] = {}
        self._class_cache: dict[NodeId, list[str]] = {}

    def function_names(self, node_id: NodeId) -> list[str]:
        """Names a constructor-like node is exposed under."""
        if node_id not in self._function_cache:
            names: list[str] = []
            for heuristic in self._function_heuristics:
                _extend_unique(names, heuristic(self.graph, node_id))
            self._function_cache[node_id] = names
        return list(self._function_cache[node_id])

    def class_names(self, proto_id: NodeId) -> list[str]:
        """Names of the interface a prototype (or library object) belongs to."""
        if proto_id not in self._class_cache:
            self._class_cache[proto_id] = self._resolve_class_names(proto_id)
        return list(self._class_cache[proto_id])

    def _resolve_class_names(self, proto_id: NodeId) -> list[str]:
        if self.config.class_names_from_constructor_property and has_constructor_marker(self.graph, proto_id):
            ctor_id = self.graph.lookup(CONSTRUCTOR_MARKER, proto_id)
            if ctor_id is not None:
                return self.function_names(ctor_id)

        names: list[str] = []
        for heuristic in self._class_heuristics:
            _extend_unique(names, heuristic(self.graph, proto_id))
        return names
