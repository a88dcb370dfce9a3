"""
Web Catalog Domain Ports

Read-only query surface over an object graph snapshot.
"""

from typing import Any, Protocol, runtime_checkable

# Graph nodes are addressed by opaque integer ids owned by the accessor.
NodeId = int


@runtime_checkable
class ObjectGraphPort(Protocol):
    """
    Object Graph Port

    Id-based queries over a captured JavaScript global environment. The
    extraction engine never mutates the graph and never holds on to it
    after a pass.

    Key conventions:
        - Reserved (non-enumerable/built-in) property names are wrapped in
          markers: "+constructor+", "+hasOwnProperty+".
        - Graph paths are dotted and relative to the root: "Node.prototype".
        - Primitive/terminal values (null, numbers, strings, ...) are "type"
          nodes and carry no own keys.

    Current Implementation:
        - ObjectGraph (JSON snapshot)
    """

    def lookup(self, key: str, node_id: NodeId | None = None) -> NodeId | None:
        """Node reached by ``key`` from ``node_id`` (root when None)."""
        ...

    def get_object_keys(self, node_id: NodeId) -> list[str]:
        """Own property names of a node, in snapshot order."""
        ...

    def get_keys(self, node_id: NodeId) -> list[str]:
        """Every dotted graph path reaching a node."""
        ...

    def get_prototype(self, node_id: NodeId) -> NodeId | None:
        """Prototype of a node (a type node such as null at the top)."""
        ...

    def is_type(self, node_id: NodeId) -> bool:
        """True for primitive/terminal nodes."""
        ...

    def get_type(self, node_id: NodeId) -> str | None:
        """Primitive type name of a type node ("number", "string", ...)."""
        ...

    def get_function_name(self, node_id: NodeId) -> str | None:
        """Runtime-reported function name, if the node is a function."""
        ...

    def get_to_string(self, node_id: NodeId) -> str | None:
        """Captured toString() tag, e.g. "[object Window]"."""
        ...

    def get_root(self) -> NodeId | None:
        """Id of the global object."""
        ...

    def get_all_ids(self) -> list[NodeId]:
        """Every node id in the graph, in a stable order."""
        ...

    def lookup_metadata(self, name: str, node_id: NodeId) -> dict[str, Any]:
        """Property descriptor flags of ``name`` on ``node_id``."""
        ...
