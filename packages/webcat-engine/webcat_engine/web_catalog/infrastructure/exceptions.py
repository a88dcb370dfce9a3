"""
Exceptions raised by an extraction pass.

Hierarchy:
- ExtractionError (base)
  - MalformedGraphError (snapshot unusable; raised before classification)
  - InvariantViolationError (internal bookkeeping broken; pass aborted)
    - PrototypeCycleError

Heuristic ambiguity (unnamed interfaces, instances with no owning
interface) is never an error.
"""

from __future__ import annotations

from webcat_shared.common.exceptions import WebCatalogError


class ExtractionError(WebCatalogError):
    """Base class for errors raised while extracting a catalog."""

    pass


class MalformedGraphError(ExtractionError):
    """The object graph cannot be classified at all."""

    pass


class InvariantViolationError(ExtractionError):
    """Internal invariant broken; fatal for the pass."""

    def __init__(self, message: str, node_id: int | None = None, **context):
        details = dict(context)
        if node_id is not None:
            details["node_id"] = node_id
        super().__init__(message, details)
        self.node_id = node_id


class PrototypeCycleError(InvariantViolationError):
    """A node appears as its own transitive prototype."""

    def __init__(self, start_id: int, repeated_id: int):
        super().__init__("Prototype chain cycle", node_id=start_id, repeated_id=repeated_id)
        self.repeated_id = repeated_id
