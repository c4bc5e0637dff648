"""Click CLI with project and file analysis subcommands."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click

from import_map.layout.engine import SPIRAL, STRATEGIES
from import_map.layout.positions import JsonFilePositionStore, MemoryPositionStore, PositionStore
from import_map.models import AnalysisConfig, Relation
from import_map.pipeline import AnalysisResult, analyze_file, analyze_project

_ROOT_MARKERS = ("package.json", ".git")

_RELATION_COLORS = {
    Relation.ENTRY: "bright_yellow",
    Relation.IMPORTER: "green",
    Relation.DEPENDENCY: "magenta",
    Relation.EXTERNAL: "blue",
    Relation.OTHER: "white",
}


def _layout_options(func):
    func = click.option("--json", "as_json", is_flag=True, help="Print nodes, edges and positions as JSON")(func)
    func = click.option(
        "--positions-file", type=click.Path(dir_okay=False, path_type=Path),
        envvar="IMPORT_MAP_POSITIONS", help="JSON file used to persist node positions",
    )(func)
    func = click.option("--fresh", is_flag=True, help="Discard saved positions and lay out again")(func)
    func = click.option(
        "--layout", "strategy", type=click.Choice(STRATEGIES), default=SPIRAL,
        show_default=True, help="Layout strategy (hierarchical re-organises around the entry file)",
    )(func)
    return func


def _store(positions_file: Path | None) -> PositionStore:
    if positions_file:
        return JsonFilePositionStore(positions_file)
    return MemoryPositionStore()


def _find_project_root(entry: Path) -> Path:
    for parent in entry.resolve().parents:
        if any((parent / marker).exists() for marker in _ROOT_MARKERS):
            return parent
    return entry.resolve().parent


@click.group()
@click.version_option(version="0.1.0")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def cli(verbose: bool):
    """import-map: Map import/require relationships between project files."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("root", type=click.Path(exists=True, file_okay=False, path_type=Path), default=".")
@click.option("--entry", "-e", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="File to highlight at the centre of the map")
@_layout_options
def project(root: Path, entry: Path | None, strategy: str, fresh: bool,
            positions_file: Path | None, as_json: bool):
    """Map every analysable file under ROOT."""
    config = AnalysisConfig(root=root, entry_file=entry)
    result = analyze_project(config, store=_store(positions_file), strategy=strategy, fresh=fresh)
    _report(result, as_json)


@cli.command("file")
@click.argument("entry", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--root", "-r", type=click.Path(exists=True, file_okay=False, path_type=Path),
              help="Project root (default: nearest directory with package.json or .git)")
@_layout_options
def file_command(entry: Path, root: Path | None, strategy: str, fresh: bool,
                 positions_file: Path | None, as_json: bool):
    """Map ENTRY together with its direct importers and dependencies."""
    root = root or _find_project_root(entry)
    config = AnalysisConfig(root=root, entry_file=entry)
    result = analyze_file(config, store=_store(positions_file), strategy=strategy, fresh=fresh)
    _report(result, as_json)


def _report(result: AnalysisResult, as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    if not result.ok:
        click.echo(click.style(f"No map: {result.graph.error}", fg="red"))
        return

    view = result.view
    if not view.nodes:
        click.echo("No analysable files found.")
        return

    stats = result.graph.stats
    dialect = stats.dialect.value if stats.dialect else "unknown"
    click.echo(f"\n{len(view.nodes)} node(s), {len(view.edges)} edge(s) [{dialect}]\n")

    for node in view.nodes:
        placed = result.layout.nodes.get(node.id)
        where = f"({placed.x:.0f}, {placed.y:.0f})" if placed else ""
        click.echo(
            f"  {click.style(node.relation.value, fg=_RELATION_COLORS[node.relation]):>20}  "
            f"{node.label}  {click.style(where, dim=True)}"
        )
    click.echo()

    click.echo("Summary:")
    click.echo(f"  ignore rules: {stats.ignore_rules}")
    click.echo(f"  files discovered: {stats.discovered_files}")
    click.echo(f"  imports resolved: {stats.resolved_imports}")
    click.echo(f"  imports unresolved: {stats.unresolved_imports}")
    click.echo(f"  external imports: {stats.external_imports}")
    if stats.skipped_files:
        click.echo(click.style(f"  skipped (unreadable): {len(stats.skipped_files)}", fg="yellow"))
    if result.layout.fallback_ids:
        click.echo(click.style(f"  fallback placements: {len(result.layout.fallback_ids)}", fg="yellow"))


if __name__ == "__main__":
    cli()
