"""Analysis orchestrator: build graph -> view -> layout -> persist positions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from import_map.analysis.graph_builder import GraphBuilder
from import_map.analysis.view import build_view, view_to_dict
from import_map.layout.engine import SPIRAL, LayoutEngine, MeasureFunc
from import_map.layout.positions import MemoryPositionStore, PositionStore, position_key
from import_map.models import AnalysisConfig, Graph, GraphView, LayoutConfig, LayoutResult


ProgressCallback = Callable[[str, int, int], None]


@dataclass
class AnalysisResult:
    graph: Graph
    view: GraphView = field(default_factory=GraphView)
    layout: LayoutResult = field(default_factory=LayoutResult)
    key: str = ""

    @property
    def ok(self) -> bool:
        return self.graph.ok

    def to_dict(self) -> dict:
        data = view_to_dict(self.view)
        positions = self.layout.nodes
        for node in data["nodes"]:
            placed = positions.get(node["id"])
            if placed is not None:
                node.update(x=placed.x, y=placed.y, width=placed.width, height=placed.height)
        stats = self.graph.stats
        data.update(
            ok=self.ok,
            error=self.graph.error,
            key=self.key,
            stats={
                "dialect": stats.dialect.value if stats.dialect else None,
                "ignoreRules": stats.ignore_rules,
                "discoveredFiles": stats.discovered_files,
                "skippedFiles": list(stats.skipped_files),
                "resolvedImports": stats.resolved_imports,
                "unresolvedImports": stats.unresolved_imports,
                "externalImports": stats.external_imports,
            },
        )
        return data


def analyze_project(
    config: AnalysisConfig,
    store: PositionStore | None = None,
    strategy: str = SPIRAL,
    fresh: bool = False,
    measure: MeasureFunc | None = None,
    layout_config: LayoutConfig | None = None,
    progress: ProgressCallback | None = None,
) -> AnalysisResult:
    """Analyze every file under ``config.root``."""
    if progress:
        progress("Building graph", 0, 1)
    graph = GraphBuilder(config).build_whole_project(config.root, config.entry_file)
    if progress:
        progress("Building graph", 1, 1)

    return _present(
        graph,
        project_wide=True,
        key=position_key(config.root, config.entry_file),
        store=store,
        strategy=strategy,
        fresh=fresh,
        engine=LayoutEngine(measure, layout_config),
        progress=progress,
    )


def analyze_file(
    config: AnalysisConfig,
    store: PositionStore | None = None,
    strategy: str = SPIRAL,
    fresh: bool = False,
    measure: MeasureFunc | None = None,
    layout_config: LayoutConfig | None = None,
    progress: ProgressCallback | None = None,
) -> AnalysisResult:
    """Analyze ``config.entry_file`` and its one-hop neighbourhood."""
    if config.entry_file is None:
        raise ValueError("Focused analysis needs an entry file")

    if progress:
        progress("Building graph", 0, 1)
    graph = GraphBuilder(config).build_focused(config.entry_file, config.root)
    if progress:
        progress("Building graph", 1, 1)

    return _present(
        graph,
        project_wide=False,
        key=position_key(config.root, config.entry_file),
        store=store,
        strategy=strategy,
        fresh=fresh,
        engine=LayoutEngine(measure, layout_config),
        progress=progress,
    )


def _present(
    graph: Graph,
    project_wide: bool,
    key: str,
    store: PositionStore | None,
    strategy: str,
    fresh: bool,
    engine: LayoutEngine,
    progress: ProgressCallback | None,
) -> AnalysisResult:
    result = AnalysisResult(graph=graph, key=key)
    if not graph.ok:
        return result

    store = store if store is not None else MemoryPositionStore()
    result.view = build_view(graph, project_wide=project_wide)

    if progress:
        progress("Layout", 0, 1)
    if fresh:
        store.delete(key)
    persisted = store.get(key) if strategy == SPIRAL and not fresh else None
    result.layout = engine.layout(result.view, persisted, strategy)
    if persisted and not result.layout.reused:
        store.delete(key)
    if result.layout.nodes:
        store.set(key, result.layout.positions())
    if progress:
        progress("Layout", 1, 1)
    return result
