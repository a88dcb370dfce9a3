"""
Web Catalog CLI

Commands:
- extract: catalog of one object graph snapshot
- import-dir: catalogs of every snapshot in a directory
- diff: APIs gained/lost between two catalogs
- locate: graph nodes that may explain an API
"""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from webcat_engine.web_catalog.application.diagnostics import describe_node, diff_catalogs, find_candidate_nodes
from webcat_engine.web_catalog.application.extract_catalog import ApiExtractor
from webcat_engine.web_catalog.application.importer import SnapshotImporter
from webcat_engine.web_catalog.infrastructure.config import ExtractionConfig, load_extraction_config
from webcat_engine.web_catalog.infrastructure.object_graph import ObjectGraph
from webcat_shared.common.exceptions import InvalidInputError, WebCatalogError
from webcat_shared.infra.config import get_settings

app = typer.Typer(name="webcat", help="Web API catalog extraction", add_completion=False)
console = Console()


def _load_config(config_path: Optional[Path]) -> ExtractionConfig:
    path = config_path or get_settings().extraction_config_path
    if path is None:
        return ExtractionConfig()
    return load_extraction_config(path)


def _read_json(path: Path) -> dict:
    """Read a JSON object (catalog or version history)."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise InvalidInputError("Cannot read JSON file", {"path": str(path)}) from e
    if not isinstance(data, dict):
        raise InvalidInputError("Expected a JSON object", {"path": str(path), "found": type(data).__name__})
    return data


def _write_json(data, output: Optional[Path]) -> None:
    text = json.dumps(data, indent=2, sort_keys=True)
    if output is None:
        typer.echo(text)
    else:
        output.write_text(text + "\n", encoding="utf-8")


def _fail(e: Exception):
    console.print(f"[red]❌ Error: {e}[/red]")
    raise typer.Exit(1)


@app.command()
def extract(
    snapshot: Path = typer.Argument(..., help="Object graph snapshot (JSON)"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="ExtractionConfig YAML/JSON"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the catalog here instead of stdout"),
    with_sources: bool = typer.Option(False, "--with-sources", help="Include api -> node id provenance"),
):
    """
    Extract the {interface: [api]} catalog of one snapshot.

    Examples:
        webcat extract window_Chrome_56.0.2924.87_Windows_10.0.json
        webcat extract snapshot.json --with-sources -o catalog.json
    """
    try:
        extractor = ApiExtractor(_load_config(config_path))
        result = extractor.extract_catalog_with_provenance(ObjectGraph.load(snapshot))
    except WebCatalogError as e:
        _fail(e)

    if with_sources:
        _write_json({"catalog": result.catalog, "sources": result.sources}, output)
    else:
        _write_json(result.catalog, output)

    if output is not None:
        console.print(f"[green]✅ {result.interface_count} interfaces, {result.api_count} APIs -> {output}[/green]")


@app.command("import-dir")
def import_dir(
    directory: Path = typer.Argument(..., help="Directory of window_*.json snapshots"),
    history: Optional[Path] = typer.Option(None, "--history", help="Browser version history JSON"),
    output_dir: Path = typer.Option(..., "--output-dir", help="Directory for <release>.json catalogs"),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", help="Parallel extraction passes"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="ExtractionConfig YAML/JSON"),
):
    """
    Extract every snapshot in a directory, newest releases first.

    Examples:
        webcat import-dir data/og --history data/history.json --output-dir out/
    """
    settings = get_settings()
    console.print(f"\n[cyan]🚀 Importing: {directory}[/cyan]\n")

    try:
        version_history = _read_json(history) if history is not None else None
        importer = SnapshotImporter(
            config=_load_config(config_path),
            snapshot_prefix=settings.snapshot_prefix,
            workers=workers or settings.import_workers,
        )
        result = importer.import_directory(directory, version_history)
        output_dir.mkdir(parents=True, exist_ok=True)
        for imported in result.imported:
            _write_json(imported.catalog, output_dir / f"{imported.release.release_id}.json")
    except (WebCatalogError, OSError) as e:
        _fail(e)

    for filename, error in result.failed:
        console.print(f"[yellow]⚠️  {filename}: {error}[/yellow]")

    console.print(f"Imported: {len(result.imported)}/{result.total_files}")
    console.print(f"Duration: {result.duration_seconds:.1f}s\n")
    if not result.imported and result.failed:
        raise typer.Exit(1)


@app.command()
def diff(
    old: Path = typer.Argument(..., help="Previous catalog JSON"),
    new: Path = typer.Argument(..., help="Current catalog JSON"),
    graph_path: Optional[Path] = typer.Option(None, "--graph", help="Snapshot used to locate missing APIs"),
):
    """
    Show APIs missing from or added to a catalog.

    Examples:
        webcat diff old.json new.json
        webcat diff old.json new.json --graph window_Safari_10.1_OSX_10.12.json
    """
    try:
        result = diff_catalogs(_read_json(old), _read_json(new))
        graph = ObjectGraph.load(graph_path) if graph_path is not None else None
    except WebCatalogError as e:
        _fail(e)

    if result.is_empty:
        console.print("[green]✅ Catalogs are identical[/green]")
        return

    for api_id in result.missing:
        console.print(f"[red]- {api_id}[/red]")
        if graph is not None:
            candidates = find_candidate_nodes(graph, api_id)
            if candidates.likely:
                console.print(f"    likely nodes: {list(candidates.likely)}")
    for api_id in result.added:
        console.print(f"[green]+ {api_id}[/green]")

    console.print(f"\nMissing: {len(result.missing)}  Added: {len(result.added)}")


@app.command()
def locate(
    snapshot: Path = typer.Argument(..., help="Object graph snapshot (JSON)"),
    api_id: str = typer.Argument(..., help='API id, "Interface#api"'),
    limit: int = typer.Option(5, "--limit", "-n", help="Paths shown per node"),
):
    """
    Find graph nodes whose paths mention an API.

    Examples:
        webcat locate snapshot.json "Node#appendChild"
    """
    try:
        graph = ObjectGraph.load(snapshot)
        candidates = find_candidate_nodes(graph, api_id)
    except WebCatalogError as e:
        _fail(e)

    table = Table(title=api_id)
    table.add_column("Tier")
    table.add_column("Node", justify="right")
    table.add_column("Paths")
    for tier, node_ids in (
        ("likely", candidates.likely),
        ("possible", candidates.possible),
        ("loose", candidates.loose),
    ):
        for node_id in node_ids:
            table.add_row(tier, str(node_id), ", ".join(describe_node(graph, node_id)[:limit]))

    if table.row_count == 0:
        console.print(f"[yellow]No nodes mention {api_id}[/yellow]")
        return
    console.print(table)


if __name__ == "__main__":
    app()
