"""
Snapshot importer

Extracts catalogs from a directory of object graph snapshots named
``<prefix><browser>_<version>_<os>_<osVersion>.json`` (prefix ``window_``
by default).

Import order (when a version history is given):
    (1) the newest release of each browser;
    (2) every other release, newest first;
    (3) within a release, non-Windows captures before Windows captures,
        taking one file per release per round.

Each snapshot is an independent pass; a failing snapshot is recorded and
the batch continues.
"""

from __future__ import annotations

import re
import time
from collections.abc import Iterable, Mapping
from concurrent.futures import ProcessPoolExecutor, as_completed
from datetime import date, datetime
from pathlib import Path

from webcat_engine.web_catalog.application.extract_catalog import ApiExtractor
from webcat_engine.web_catalog.domain.models import (
    DEFAULT_SNAPSHOT_PREFIX,
    ImportedRelease,
    ImportResult,
    Release,
    ReleaseInfo,
)
from webcat_engine.web_catalog.infrastructure.config import ExtractionConfig
from webcat_engine.web_catalog.infrastructure.object_graph import ObjectGraph
from webcat_shared.common.observability import get_logger

logger = get_logger(__name__)

# {browser name: {browser version: release date}}
VersionHistory = Mapping[str, Mapping[str, str | date]]

EXCLUDED_BROWSERS = frozenset({"IE"})


def _to_date(value: str | date) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.fromisoformat(value.replace("Z", "+00:00")).date()


def releases_from_history(version_history: VersionHistory) -> list[Release]:
    """Releases newest first, excluded browsers dropped."""
    releases = [
        Release(browser_name=browser, browser_version=version, release_date=_to_date(released))
        for browser, versions in version_history.items()
        if browser not in EXCLUDED_BROWSERS
        for version, released in versions.items()
    ]
    return sorted(releases, key=lambda r: r.release_date, reverse=True)


def order_snapshot_files(
    files: Iterable[str],
    version_history: VersionHistory,
    prefix: str = DEFAULT_SNAPSHOT_PREFIX,
) -> list[str]:
    """
    Order snapshot file names for import.

    Files that match no release in the history are left out.
    """
    releases = releases_from_history(version_history)

    first_releases: list[Release] = []
    seen_browsers: set[str] = set()
    for release in releases:
        if release.browser_name not in seen_browsers:
            seen_browsers.add(release.browser_name)
            first_releases.append(release)
    rest_releases = [r for r in releases if r not in first_releases]

    remaining = sorted(set(files))
    claimed: set[str] = set()
    file_lists: list[list[str]] = []
    for release in first_releases + rest_releases:
        pattern = re.compile(
            rf"^{re.escape(prefix)}{re.escape(release.browser_name)}_{re.escape(release.browser_version)}"
            r"[^_]*_[^_]*_[^_]*[.]json$"
        )
        matches = [f for f in remaining if f not in claimed and pattern.search(f)]
        claimed.update(matches)
        file_lists.append(sorted(matches, key=lambda f: ("Windows" in f, f)))

    ordered: list[str] = []
    while any(file_lists):
        for file_list in file_lists:
            if file_list:
                ordered.append(file_list.pop(0))
    return ordered


def extract_snapshot(
    path: str | Path,
    config: ExtractionConfig | None = None,
    prefix: str = DEFAULT_SNAPSHOT_PREFIX,
) -> ImportedRelease:
    """Load one snapshot file and extract its catalog."""
    path = Path(path)
    release = ReleaseInfo.from_filename(path.name, prefix)
    graph = ObjectGraph.load(path)
    catalog = ApiExtractor(config).extract_catalog(graph)
    return ImportedRelease(filename=path.name, release=release, catalog=catalog)


class SnapshotImporter:
    """
    Batch extraction over a snapshot directory.

    Example:
        importer = SnapshotImporter(workers=4)
        result = importer.import_directory("og/", version_history)
        for imported in result.imported:
            print(imported.release.release_id, imported.api_count)
    """

    def __init__(
        self,
        config: ExtractionConfig | None = None,
        snapshot_prefix: str = DEFAULT_SNAPSHOT_PREFIX,
        workers: int = 1,
    ):
        self.config = config or ExtractionConfig()
        self.snapshot_prefix = snapshot_prefix
        self.workers = max(1, workers)

    def list_snapshot_files(self, directory: str | Path) -> list[str]:
        """Snapshot file names in ``directory``; other files and directories are ignored."""
        directory = Path(directory)
        return sorted(
            entry.name
            for entry in directory.iterdir()
            if entry.is_file() and entry.name.startswith(self.snapshot_prefix) and entry.suffix == ".json"
        )

    def import_directory(
        self,
        directory: str | Path,
        version_history: VersionHistory | None = None,
    ) -> ImportResult:
        directory = Path(directory)
        files = self.list_snapshot_files(directory)
        if version_history is not None:
            files = order_snapshot_files(files, version_history, self.snapshot_prefix)
        logger.info("snapshot_import_started", directory=str(directory), files=len(files), workers=self.workers)
        return self.import_files([directory / name for name in files])

    def import_files(self, paths: Iterable[str | Path]) -> ImportResult:
        """Extract every file; results keep the order of ``paths``."""
        paths = [Path(p) for p in paths]
        start = time.perf_counter()
        outcomes: dict[str, ImportedRelease | str] = {}

        if self.workers > 1 and len(paths) > 1:
            with ProcessPoolExecutor(max_workers=self.workers) as executor:
                futures = {
                    executor.submit(extract_snapshot, path, self.config, self.snapshot_prefix): path for path in paths
                }
                for future in as_completed(futures):
                    path = futures[future]
                    try:
                        outcomes[path.name] = future.result()
                    except Exception as e:
                        outcomes[path.name] = self._failure(path, e)
        else:
            for path in paths:
                try:
                    outcomes[path.name] = extract_snapshot(path, self.config, self.snapshot_prefix)
                except Exception as e:
                    outcomes[path.name] = self._failure(path, e)

        imported: list[ImportedRelease] = []
        failed: list[tuple[str, str]] = []
        for path in paths:
            outcome = outcomes[path.name]
            if isinstance(outcome, ImportedRelease):
                imported.append(outcome)
            else:
                failed.append((path.name, outcome))

        duration = time.perf_counter() - start
        logger.info(
            "snapshot_import_complete",
            imported=len(imported),
            failed=len(failed),
            duration_s=round(duration, 2),
        )
        return ImportResult(imported=imported, failed=failed, duration_seconds=duration)

    @staticmethod
    def _failure(path: Path, error: Exception) -> str:
        logger.warning("snapshot_import_failed", file=path.name, error=str(error))
        return f"{type(error).__name__}: {error}"
