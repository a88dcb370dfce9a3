"""
API Classifier

Walks an object graph and attributes member names to interfaces.

Phases (one pass, fresh state per ApiClassifier):
    1. Constructors: function-like nodes (own "prototype" key) and library
       globals (non-function objects on the root, acting as their own
       prototype). Builds the prototype -> constructor index.
    2. Members:
        a. every constructor stores its own members (minus Function members);
        b. every indexed prototype stores its members on its constructor and
           "pulls up" ancestor prototypes that still belong to the same
           interface family.
    3. Instances: every other object walks its prototype chain to the
       closest interface prototype and stores the members it adds.

Members already exposed higher up a prototype chain are never attributed
to a lower level, and a member is attributed to a constructor at most once
(first writer wins, including for provenance).
"""

from __future__ import annotations

from collections.abc import Iterator

from webcat_engine.web_catalog.application.member_filter import MemberFilter
from webcat_engine.web_catalog.application.name_resolver import NameResolver
from webcat_engine.web_catalog.domain.models import ClassificationResult, ConstructorRecord
from webcat_engine.web_catalog.domain.ports import NodeId, ObjectGraphPort
from webcat_engine.web_catalog.infrastructure.config import ExtractionConfig
from webcat_engine.web_catalog.infrastructure.exceptions import (
    InvariantViolationError,
    PrototypeCycleError,
)
from webcat_shared.common.logging_config import BatchLogger
from webcat_shared.common.observability import get_logger

logger = get_logger(__name__)

# Belong to the Function interface, not to each constructor.
FUNCTION_MEMBERS = frozenset({"arguments", "name", "length", "caller"})


class ApiClassifier:
    """
    Single-use classifier for one object graph.

    Example:
        result = ApiClassifier(graph, ExtractionConfig()).classify()
        for record in result.constructors.values():
            print(record.names, record.member_names)
    """

    def __init__(
        self,
        graph: ObjectGraphPort,
        config: ExtractionConfig,
        resolver: NameResolver | None = None,
    ):
        self.graph = graph
        self.config = config
        self.resolver = resolver or NameResolver(graph, config)
        self.members = MemberFilter(
            graph,
            config,
            object_prototype_id=graph.lookup("Object.prototype"),
            function_prototype_id=graph.lookup("Function.prototype"),
        )

        self._constructors: dict[NodeId, ConstructorRecord] = {}
        self._prototype_index: dict[NodeId, NodeId] = {}
        # Ancestors pulled into a constructor without being its own prototype.
        self._pulled_up: dict[NodeId, NodeId] = {}
        self._member_sets: dict[NodeId, set[str]] = {}
        self._ancestor_cache: dict[NodeId, frozenset[str]] = {}
        self._done = False

    # ========================================================================
    # Entry point
    # ========================================================================

    def classify(self) -> ClassificationResult:
        if self._done:
            raise InvariantViolationError("ApiClassifier is single-use; create one per pass")
        self._done = True

        all_ids = self.graph.get_all_ids()

        self._identify_constructors(all_ids)
        self._identify_libraries()

        for ctor_id in self._constructors:
            self._attribute_constructor(ctor_id)

        for node_id in all_ids:
            if node_id in self._prototype_index and node_id not in self._constructors:
                self._pull_up(node_id)

        with BatchLogger(logger, "instance_attribution") as batch:
            for node_id in all_ids:
                if self._is_instance(node_id) and self._attribute_instance(node_id):
                    batch.record(node_id=node_id)

        logger.debug(
            "classification_complete",
            constructors=len(self._constructors),
            prototypes=len(self._prototype_index),
            pulled_up=len(self._pulled_up),
        )
        return ClassificationResult(
            constructors=self._constructors,
            prototype_index=self._prototype_index,
        )

    # ========================================================================
    # Phase 1: constructors and libraries
    # ========================================================================

    def _is_terminal(self, node_id: NodeId | None) -> bool:
        return node_id is None or self.graph.is_type(node_id)

    def is_function_like(self, node_id: NodeId) -> bool:
        return not self.graph.is_type(node_id) and "prototype" in self.graph.get_object_keys(node_id)

    def _identify_constructors(self, all_ids: list[NodeId]) -> None:
        for node_id in all_ids:
            if not self.is_function_like(node_id):
                continue
            self._constructors[node_id] = ConstructorRecord(
                id=node_id,
                names=self.resolver.function_names(node_id),
            )
            self._member_sets[node_id] = set()
            proto_id = self.graph.lookup("prototype", node_id)
            if not self._is_terminal(proto_id):
                self._prototype_index[proto_id] = node_id

    def _identify_libraries(self) -> None:
        root_id = self.graph.get_root()
        for global_name in self.graph.get_object_keys(root_id):
            node_id = self.graph.lookup(global_name, root_id)
            if self._is_terminal(node_id) or self.is_function_like(node_id):
                continue

            record = self._constructors.get(node_id)
            if record is None:
                # Libraries are constructors that are their own prototype.
                record = ConstructorRecord(id=node_id, names=self.resolver.class_names(node_id))
                self._constructors[node_id] = record
                self._member_sets[node_id] = set()
                self._prototype_index[node_id] = node_id
            record.add_names([global_name])

    # ========================================================================
    # Phase 2: constructor and prototype members
    # ========================================================================

    def _attribute_constructor(self, ctor_id: NodeId) -> None:
        candidates = [name for name in self.members.class_members(ctor_id) if name not in FUNCTION_MEMBERS]
        self._attribute(ctor_id, candidates, dict.fromkeys(candidates, ctor_id))

    def _pull_up(self, proto_id: NodeId) -> None:
        """Store ``proto_id`` and same-family ancestors on its constructor."""
        ctor_id = self._prototype_index[proto_id]
        ctor_names = set(self.resolver.function_names(ctor_id))

        current = proto_id
        visited: set[NodeId] = set()
        while not self._is_terminal(current) and self._continues_chain(ctor_id, ctor_names, current):
            if current in visited:
                raise PrototypeCycleError(proto_id, current)
            visited.add(current)

            self._attribute_prototype(ctor_id, current)
            if current != proto_id:
                self._pulled_up.setdefault(current, ctor_id)
            current = self.graph.get_prototype(current)

    def _continues_chain(self, ctor_id: NodeId, ctor_names: set[str], proto_id: NodeId) -> bool:
        """
        Whether ``proto_id`` still belongs to ``ctor_id``'s interface.

        True when the prototype is the constructor's own, is anonymous, or
        resolves to a class name the constructor is also known by.
        """
        owner = self._prototype_index.get(proto_id)
        if owner is None or owner == ctor_id:
            return True
        return not ctor_names.isdisjoint(self.resolver.class_names(proto_id))

    def _attribute_prototype(self, ctor_id: NodeId, proto_id: NodeId) -> None:
        inherited = self._ancestor_members(proto_id)
        candidates = [name for name in self.members.class_members(proto_id) if name not in inherited]
        self._attribute(ctor_id, candidates, dict.fromkeys(candidates, proto_id))

    # ========================================================================
    # Phase 3: instances
    # ========================================================================

    def _is_instance(self, node_id: NodeId) -> bool:
        return (
            node_id not in self._constructors
            and node_id not in self._prototype_index
            and node_id not in self._pulled_up
            and not self.graph.is_type(node_id)
        )

    def _owner_of(self, node_id: NodeId) -> NodeId | None:
        owner = self._prototype_index.get(node_id)
        if owner is None:
            owner = self._pulled_up.get(node_id)
        return owner

    def _attribute_instance(self, instance_id: NodeId) -> bool:
        """
        Store an instance's new members on the closest interface up its chain.

        Returns:
            True if any member was attributed
        """
        accumulated: list[str] = []
        sources: dict[str, NodeId] = {}

        current = instance_id
        visited: set[NodeId] = set()
        while True:
            if self._is_terminal(current):
                return False
            owner = self._owner_of(current)
            if owner is not None:
                break
            if current in visited:
                raise PrototypeCycleError(instance_id, current)
            visited.add(current)

            inherited = self._ancestor_members(current)
            for name in self.members.instance_members(current):
                if name not in sources and name not in inherited:
                    accumulated.append(name)
                    sources[name] = current
            current = self.graph.get_prototype(current)

        # Plain objects end at a root prototype (e.g. Object.prototype); their
        # keys are data, not API.
        if not self.config.attribute_root_instances and self._is_terminal(self.graph.get_prototype(current)):
            return False
        if not accumulated:
            return False
        return self._attribute(owner, accumulated, sources) > 0

    # ========================================================================
    # Bookkeeping
    # ========================================================================

    def _chain(self, start_id: NodeId) -> Iterator[NodeId]:
        """Prototypes above ``start_id``, nearest first, up to a terminal."""
        visited = {start_id}
        current = self.graph.get_prototype(start_id)
        while not self._is_terminal(current):
            if current in visited:
                raise PrototypeCycleError(start_id, current)
            visited.add(current)
            yield current
            current = self.graph.get_prototype(current)

    def _ancestor_members(self, node_id: NodeId) -> frozenset[str]:
        """Every member exposed by prototypes strictly above ``node_id``."""
        cached = self._ancestor_cache.get(node_id)
        if cached is None:
            names: set[str] = set()
            for proto_id in self._chain(node_id):
                names.update(self.members.class_members(proto_id))
            cached = self._ancestor_cache[node_id] = frozenset(names)
        return cached

    def _attribute(self, ctor_id: NodeId, candidates: list[str], sources: dict[str, NodeId]) -> int:
        """
        Append candidates not yet on the constructor; earlier attributions win.

        Returns:
            Number of names added
        """
        record = self._constructors.get(ctor_id)
        if record is None:
            raise InvariantViolationError("Attribution to unregistered constructor", node_id=ctor_id)
        known = self._member_sets[ctor_id]

        added = 0
        batch: set[str] = set()
        for name in candidates:
            if name in batch:
                raise InvariantViolationError("Duplicate member in one attribution", node_id=ctor_id, api=name)
            batch.add(name)
            if name in known:
                continue
            known.add(name)
            record.member_names.append(name)
            record.sources.setdefault(name, sources[name])
            added += 1
        return added
