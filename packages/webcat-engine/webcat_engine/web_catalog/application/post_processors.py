"""
Post-processor pipeline

Interprets PostProcessorDirective values against an interim catalog.
Copy steps run before remove steps, which run before add steps.

Every handler:
    - treats a missing interface as an empty match (no-op, never an error);
    - replaces member lists instead of mutating them (aliases share lists);
    - is idempotent, so re-running a pipeline on its output changes nothing.

Combinations that would break this (writing into a copy source) are
rejected up front by check_directive_conflicts.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from webcat_engine.web_catalog.application.name_resolver import NameResolver
from webcat_engine.web_catalog.domain.directives import (
    DIRECTIVE_PHASES,
    AddApisDirective,
    CopyToPrototypeDirective,
    PostProcessorDirective,
    RemoveApisDirective,
    RemoveInterfacesDirective,
)
from webcat_engine.web_catalog.domain.models import Catalog, Sources
from webcat_engine.web_catalog.domain.ports import ObjectGraphPort
from webcat_engine.web_catalog.infrastructure.config import ExtractionConfig, check_directive_conflicts
from webcat_shared.common.observability import get_logger

logger = get_logger(__name__)


class PostProcessorPipeline:
    """
    Ordered corrective transforms over ``{interface: [api]}``.

    The graph is optional; without it, copy directives that rely on the
    graph to find their target interfaces do nothing.

    Raises:
        InvalidConfigurationError: directives that write into a copy source

    Example:
        pipeline = PostProcessorPipeline([RemoveInterfacesDirective(interface_names=("A",))])
        pipeline.apply(catalog)
    """

    def __init__(
        self,
        directives: Iterable[PostProcessorDirective],
        graph: ObjectGraphPort | None = None,
        resolver: NameResolver | None = None,
    ):
        self.directives = sorted(directives, key=lambda d: DIRECTIVE_PHASES[d.kind])
        check_directive_conflicts(self.directives)
        self.graph = graph
        self.resolver = resolver
        if graph is not None and resolver is None:
            self.resolver = NameResolver(graph, ExtractionConfig())

        self._handlers: dict[str, Callable[[PostProcessorDirective, Catalog, Sources], None]] = {
            "copy": self._copy,
            "remove-interfaces": self._remove_interfaces,
            "remove-apis": self._remove_apis,
            "add": self._add,
        }

    def apply(self, catalog: Catalog, sources: Sources | None = None) -> Catalog:
        """Run every directive in place on ``catalog`` (and ``sources``)."""
        if sources is None:
            sources = {}
        for directive in self.directives:
            self._handlers[directive.kind](directive, catalog, sources)
        return catalog

    # ========================================================================
    # Handlers
    # ========================================================================

    def _copy(self, directive: CopyToPrototypeDirective, catalog: Catalog, sources: Sources) -> None:
        source_name = directive.from_interface_name
        source_apis = catalog.get(source_name)
        if source_apis is None:
            return

        if directive.to_interface_names is not None:
            targets = list(directive.to_interface_names)
        else:
            targets = self.prototype_interface_names(source_name)

        source_sources = sources.get(source_name, {})
        for target in targets:
            if target == source_name:
                continue
            existing = catalog.get(target, [])
            new_apis = [api for api in source_apis if api not in existing]
            catalog[target] = existing + new_apis

            target_sources = sources.setdefault(target, {})
            for api in new_apis:
                if api in source_sources:
                    target_sources.setdefault(api, source_sources[api])

            logger.debug("post_process_copy", source=source_name, target=target, copied=len(new_apis))

    def _remove_interfaces(self, directive: RemoveInterfacesDirective, catalog: Catalog, sources: Sources) -> None:
        for name in directive.interface_names:
            if catalog.pop(name, None) is not None:
                logger.debug("post_process_remove_interface", interface=name)
            sources.pop(name, None)

    def _remove_apis(self, directive: RemoveApisDirective, catalog: Catalog, sources: Sources) -> None:
        regex = directive.api_name_regex
        for name in directive.interface_names:
            apis = catalog.get(name)
            if apis is None:
                continue
            kept = [api for api in apis if not regex.search(api)]
            if len(kept) == len(apis):
                continue
            catalog[name] = kept
            if name in sources:
                sources[name] = {api: src for api, src in sources[name].items() if not regex.search(api)}
            logger.debug("post_process_remove_apis", interface=name, removed=len(apis) - len(kept))

    def _add(self, directive: AddApisDirective, catalog: Catalog, sources: Sources) -> None:
        existing = catalog.get(directive.interface_name, [])
        new_apis: list[str] = []
        for api in directive.api_names:
            if api not in existing and api not in new_apis:
                new_apis.append(api)
        if new_apis or directive.interface_name not in catalog:
            catalog[directive.interface_name] = existing + new_apis

    # ========================================================================
    # Graph helpers
    # ========================================================================

    def prototype_interface_names(self, interface_name: str) -> list[str]:
        """
        Class names of the prototype behind a global interface object.

        "window" (an instance) -> class names of its prototype ("Window");
        "CSS2Properties" (a constructor) -> class names of the prototype its
        own prototype object inherits from ("CSSStyleDeclaration").
        """
        if self.graph is None or self.resolver is None:
            return []
        graph = self.graph

        node_id = graph.lookup(interface_name)
        if node_id is None or graph.is_type(node_id):
            return []

        base_id = node_id
        if "prototype" in graph.get_object_keys(node_id):
            base_id = graph.lookup("prototype", node_id)
            if base_id is None or graph.is_type(base_id):
                return []

        proto_id = graph.get_prototype(base_id)
        if proto_id is None or graph.is_type(proto_id):
            return []
        return self.resolver.class_names(proto_id)
