"""
Catalog extraction use case

    ObjectGraph -> ApiClassifier (NameResolver, MemberFilter)
                -> assemble_catalog / assemble_sources
                -> PostProcessorPipeline
                -> finalize_catalog

Each call is one self-contained pass: no state survives between graphs, so
passes over different snapshots can run in parallel.
"""

from __future__ import annotations

import time

from webcat_engine.web_catalog.application.assembler import (
    assemble_catalog,
    assemble_sources,
    finalize_catalog,
)
from webcat_engine.web_catalog.application.classifier import ApiClassifier
from webcat_engine.web_catalog.application.name_resolver import NameResolver
from webcat_engine.web_catalog.application.post_processors import PostProcessorPipeline
from webcat_engine.web_catalog.domain.models import Catalog, ExtractionResult
from webcat_engine.web_catalog.domain.ports import ObjectGraphPort
from webcat_engine.web_catalog.infrastructure.config import ExtractionConfig
from webcat_engine.web_catalog.infrastructure.exceptions import MalformedGraphError
from webcat_shared.common.observability import get_logger

logger = get_logger(__name__)


class ApiExtractor:
    """
    Extracts {interface: [api]} catalogs from object graphs.

    Example:
        extractor = ApiExtractor(ExtractionConfig(retain_constant_members=True))
        catalog = extractor.extract_catalog(ObjectGraph.load("window_Chrome_56.0.2924.87_Windows_10.0.json"))
    """

    def __init__(self, config: ExtractionConfig | None = None):
        self.config = config or ExtractionConfig()

    def extract_catalog(self, graph: ObjectGraphPort) -> Catalog:
        return self.extract_catalog_with_provenance(graph).catalog

    def extract_catalog_with_provenance(self, graph: ObjectGraphPort) -> ExtractionResult:
        """
        Run one extraction pass.

        Raises:
            MalformedGraphError: graph has no usable root
            InvariantViolationError: internal bookkeeping broken (no partial result)
        """
        start = time.perf_counter()
        self._validate(graph)

        resolver = NameResolver(graph, self.config)
        classification = ApiClassifier(graph, self.config, resolver).classify()

        catalog = assemble_catalog(classification)
        sources = assemble_sources(classification)
        PostProcessorPipeline(self.config.pipeline(), graph, resolver).apply(catalog, sources)
        result = finalize_catalog(catalog, sources)

        logger.info(
            "catalog_extraction_complete",
            interfaces=result.interface_count,
            apis=result.api_count,
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        return result

    @staticmethod
    def _validate(graph: ObjectGraphPort) -> None:
        root_id = graph.get_root()
        if root_id is None:
            raise MalformedGraphError("Object graph has no root")
        if graph.is_type(root_id):
            raise MalformedGraphError("Object graph root is a primitive", {"root": root_id})


def extract_catalog(graph: ObjectGraphPort, config: ExtractionConfig | None = None) -> Catalog:
    """{interface name: sorted unique api names} for one graph."""
    return ApiExtractor(config).extract_catalog(graph)


def extract_catalog_with_provenance(graph: ObjectGraphPort, config: ExtractionConfig | None = None) -> ExtractionResult:
    """Catalog plus {interface: {api: source node id}}."""
    return ApiExtractor(config).extract_catalog_with_provenance(graph)
