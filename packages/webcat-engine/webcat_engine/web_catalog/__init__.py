"""
Web Catalog

Extracts {interface: [api]} catalogs from captured JavaScript object graphs.

Usage:
    from webcat_engine.web_catalog import ObjectGraph, extract_catalog

    catalog = extract_catalog(ObjectGraph.load("window_Firefox_52.0_OSX_10.12.json"))
"""

from .application.extract_catalog import ApiExtractor, extract_catalog, extract_catalog_with_provenance
from .application.importer import SnapshotImporter
from .domain.ports import ObjectGraphPort
from .infrastructure.config import ExtractionConfig, load_extraction_config
from .infrastructure.object_graph import ObjectGraph

__all__ = [
    "ApiExtractor",
    "ExtractionConfig",
    "ObjectGraph",
    "ObjectGraphPort",
    "SnapshotImporter",
    "extract_catalog",
    "extract_catalog_with_provenance",
    "load_extraction_config",
]
