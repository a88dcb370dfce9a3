"""
JSON snapshot backed ObjectGraph

Snapshot layout (ids are decimal strings in JSON):

    {
      "root": 1,
      "data":      {"<id>": {"<key>": <child id>, ...}},   # object nodes
      "protos":    {"<id>": <prototype id>},
      "types":     {"<id>": "null" | "undefined" | "number" | ...},  # terminal nodes
      "functions": {"<id>": "<function name>"},
      "toStrings": {"<id>": "[object Foo]"},
      "metadata":  {"<id>": {"<key>": {"writable": 0|1, ...}}}
    }

The structure is validated eagerly so classification never starts on a
snapshot that references ids it does not contain.
"""

from __future__ import annotations

import json
from collections import defaultdict, deque
from functools import cached_property
from pathlib import Path
from typing import Any

from webcat_engine.web_catalog.infrastructure.exceptions import MalformedGraphError
from webcat_shared.common.exceptions import SnapshotLoadError
from webcat_shared.common.observability import get_logger

logger = get_logger(__name__)


def _int_keyed(section: str, raw: Any) -> dict[int, Any]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise MalformedGraphError(f"Snapshot section '{section}' must be an object")
    try:
        return {int(k): v for k, v in raw.items()}
    except (TypeError, ValueError) as e:
        raise MalformedGraphError(f"Snapshot section '{section}' has a non-integer id") from e


class ObjectGraph:
    """
    Read-only ObjectGraphPort over a decoded snapshot.

    Graph paths (get_keys) are computed once, breadth-first from the root,
    and cached for the lifetime of the graph.
    """

    def __init__(
        self,
        root: int,
        data: dict[int, dict[str, int]],
        protos: dict[int, int] | None = None,
        types: dict[int, str] | None = None,
        functions: dict[int, str] | None = None,
        to_strings: dict[int, str] | None = None,
        metadata: dict[int, dict[str, dict[str, Any]]] | None = None,
    ):
        self._root = root
        self._data = data
        self._protos = protos or {}
        self._types = types or {}
        self._functions = functions or {}
        self._to_strings = to_strings or {}
        self._metadata = metadata or {}

    # ========================================================================
    # Construction
    # ========================================================================

    @classmethod
    def from_json(cls, payload: dict[str, Any]) -> ObjectGraph:
        """
        Build a graph from a decoded snapshot.

        Raises:
            MalformedGraphError: missing root/data or dangling ids
        """
        if not isinstance(payload, dict):
            raise MalformedGraphError("Snapshot must be a JSON object")
        if "root" not in payload or "data" not in payload:
            raise MalformedGraphError("Snapshot requires 'root' and 'data'")

        try:
            root = int(payload["root"])
        except (TypeError, ValueError) as e:
            raise MalformedGraphError("Snapshot root is not an id", {"root": payload["root"]}) from e

        data = _int_keyed("data", payload["data"])
        protos = _int_keyed("protos", payload.get("protos"))
        types = _int_keyed("types", payload.get("types"))

        if root not in data:
            raise MalformedGraphError("Snapshot root is not an object node", {"root": root})

        for node_id, children in data.items():
            if not isinstance(children, dict):
                raise MalformedGraphError("Node keys must be an object", {"node_id": node_id})
            for key, child in children.items():
                if child not in data and child not in types:
                    raise MalformedGraphError(
                        "Property references unknown node",
                        {"node_id": node_id, "key": key, "child": child},
                    )
        for node_id, proto in protos.items():
            if proto not in data and proto not in types:
                raise MalformedGraphError("Prototype references unknown node", {"node_id": node_id, "proto": proto})

        return cls(
            root=root,
            data=data,
            protos=protos,
            types=types,
            functions=_int_keyed("functions", payload.get("functions")),
            to_strings=_int_keyed("toStrings", payload.get("toStrings")),
            metadata=_int_keyed("metadata", payload.get("metadata")),
        )

    @classmethod
    def load(cls, path: str | Path) -> ObjectGraph:
        """
        Read and decode a snapshot file.

        Raises:
            SnapshotLoadError: unreadable file or invalid JSON
            MalformedGraphError: structurally invalid snapshot
        """
        path = Path(path)
        try:
            with path.open("r", encoding="utf-8") as f:
                payload = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise SnapshotLoadError("Cannot read object graph snapshot", {"path": str(path)}) from e

        graph = cls.from_json(payload)
        logger.debug("object_graph_loaded", path=str(path), nodes=len(graph._data), types=len(graph._types))
        return graph

    # ========================================================================
    # ObjectGraphPort
    # ========================================================================

    def lookup(self, key: str, node_id: int | None = None) -> int | None:
        start = self._root if node_id is None else node_id
        children = self._data.get(start)
        if children is None:
            return None
        # Exact key first: reserved names such as "+constructor+" never need splitting.
        if key in children:
            return children[key]

        current = start
        for part in key.split("."):
            children = self._data.get(current)
            if children is None or part not in children:
                return None
            current = children[part]
        return current

    def get_object_keys(self, node_id: int) -> list[str]:
        return list(self._data.get(node_id, {}))

    def get_keys(self, node_id: int) -> list[str]:
        return list(self._paths.get(node_id, ()))

    def get_prototype(self, node_id: int) -> int | None:
        return self._protos.get(node_id)

    def is_type(self, node_id: int) -> bool:
        return node_id in self._types

    def get_type(self, node_id: int) -> str | None:
        return self._types.get(node_id)

    def get_function_name(self, node_id: int) -> str | None:
        return self._functions.get(node_id) or None

    def get_to_string(self, node_id: int) -> str | None:
        return self._to_strings.get(node_id) or None

    def get_root(self) -> int:
        return self._root

    def get_all_ids(self) -> list[int]:
        return sorted(self._data.keys() | self._types.keys())

    def lookup_metadata(self, name: str, node_id: int) -> dict[str, Any]:
        return dict(self._metadata.get(node_id, {}).get(name, {}))

    # ========================================================================
    # Paths
    # ========================================================================

    @cached_property
    def _paths(self) -> dict[int, list[str]]:
        """node id -> every path reaching it (one per incoming key edge)."""
        primary: dict[int, str] = {self._root: ""}
        paths: dict[int, list[str]] = defaultdict(list)
        queue = deque([self._root])

        while queue:
            parent = queue.popleft()
            prefix = primary[parent]
            for key, child in self._data.get(parent, {}).items():
                path = f"{prefix}.{key}" if prefix else key
                paths[child].append(path)
                if child not in primary:
                    primary[child] = path
                    if child in self._data:
                        queue.append(child)

        return dict(paths)
