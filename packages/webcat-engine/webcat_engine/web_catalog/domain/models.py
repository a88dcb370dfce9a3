"""
Web Catalog Domain Models

Per-pass extraction records, catalog results and batch import results.
"""

import re
from dataclasses import dataclass, field
from datetime import date

from .ports import NodeId

# interface name -> member names
Catalog = dict[str, list[str]]
# interface name -> member name -> contributing graph node
Sources = dict[str, dict[str, NodeId]]


@dataclass
class ConstructorRecord:
    """
    Function-like node or library global acting as an interface.

    ``names`` holds every name the interface is exposed under; ``member_names``
    grows during attribution and is frozen once assembly begins.
    """

    id: NodeId
    names: list[str] = field(default_factory=list)
    member_names: list[str] = field(default_factory=list)
    sources: dict[str, NodeId] = field(default_factory=dict)

    def add_names(self, names: list[str]) -> None:
        for name in names:
            if name not in self.names:
                self.names.append(name)


@dataclass
class ClassificationResult:
    """Raw classifier output, keyed by constructor node id."""

    constructors: dict[NodeId, ConstructorRecord]
    prototype_index: dict[NodeId, NodeId]


@dataclass
class ExtractionResult:
    """Final catalog plus member provenance."""

    catalog: Catalog
    sources: Sources

    @property
    def interface_count(self) -> int:
        return len(self.catalog)

    @property
    def api_count(self) -> int:
        return sum(len(apis) for apis in self.catalog.values())


# ============================================================
# Snapshot import
# ============================================================

DEFAULT_SNAPSHOT_PREFIX = "window_"


@dataclass(frozen=True)
class ReleaseInfo:
    """Browser release a snapshot was captured from."""

    browser_name: str
    browser_version: str
    os_name: str
    os_version: str

    @classmethod
    def from_filename(cls, filename: str, prefix: str = DEFAULT_SNAPSHOT_PREFIX) -> "ReleaseInfo":
        """Parse ``<prefix><browser>_<version>_<os>_<osVersion>.json``."""
        pattern = rf"^{re.escape(prefix)}([^_]+)_([^_]+)_([^_]+)_([^_]+)\.json$"
        match = re.match(pattern, filename)
        if match is None:
            raise ValueError(f"Not an object graph snapshot file name: {filename}")
        return cls(*match.groups())

    @property
    def release_id(self) -> str:
        return f"{self.browser_name}_{self.browser_version}_{self.os_name}_{self.os_version}"


@dataclass(frozen=True)
class Release:
    """Entry of the browser version history."""

    browser_name: str
    browser_version: str
    release_date: date


@dataclass
class ImportedRelease:
    """Catalog extracted from one snapshot file."""

    filename: str
    release: ReleaseInfo
    catalog: Catalog

    @property
    def api_count(self) -> int:
        return sum(len(apis) for apis in self.catalog.values())


@dataclass
class ImportResult:
    """Batch import result"""

    imported: list[ImportedRelease]
    failed: list[tuple[str, str]]  # (filename, error_message)
    duration_seconds: float = 0.0

    @property
    def total_files(self) -> int:
        return len(self.imported) + len(self.failed)

    @property
    def is_complete_success(self) -> bool:
        """Check if all snapshots succeeded"""
        return not self.failed

    @property
    def is_partial_success(self) -> bool:
        """Check if some snapshots failed"""
        return bool(self.imported) and bool(self.failed)


# ============================================================
# Diagnostics
# ============================================================


@dataclass(frozen=True)
class CatalogDiff:
    """API ids present in only one of two catalogs."""

    missing: tuple[str, ...]  # in old, not in new
    added: tuple[str, ...]  # in new, not in old

    @property
    def is_empty(self) -> bool:
        return not self.missing and not self.added


@dataclass(frozen=True)
class CandidateNodes:
    """Graph nodes that may explain where an API went, tightest match first."""

    likely: tuple[NodeId, ...] = ()
    possible: tuple[NodeId, ...] = ()
    loose: tuple[NodeId, ...] = ()
