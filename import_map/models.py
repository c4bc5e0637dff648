"""Data models for the import-map analysis pipeline."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path

TEMPLATE_EXTENSIONS: tuple[str, ...] = (".vue", ".svelte")
TYPED_EXTENSIONS: tuple[str, ...] = (".ts", ".tsx", ".mts", ".cts")
PLAIN_EXTENSIONS: tuple[str, ...] = (".js", ".jsx", ".mjs", ".cjs")


class ImportKind(enum.Enum):
    IMPORT = "import"
    REQUIRE = "require"
    DYNAMIC_IMPORT = "dynamic-import"


class Dialect(enum.Enum):
    """Module/type-system flavour of a project, detected once per scan."""

    TYPESCRIPT = "typescript"
    JAVASCRIPT = "javascript"
    MIXED = "mixed"

    @property
    def extensions(self) -> tuple[str, ...]:
        if self is Dialect.TYPESCRIPT:
            return TYPED_EXTENSIONS + TEMPLATE_EXTENSIONS
        if self is Dialect.JAVASCRIPT:
            return PLAIN_EXTENSIONS + TEMPLATE_EXTENSIONS
        return TYPED_EXTENSIONS + PLAIN_EXTENSIONS + TEMPLATE_EXTENSIONS


class Relation(enum.Enum):
    """How a displayed node relates to the entry node."""

    ENTRY = "entry"
    IMPORTER = "importer"
    DEPENDENCY = "dependency"
    EXTERNAL = "external"
    OTHER = "other"


@dataclass(frozen=True)
class IgnoreRule:
    pattern: str
    is_negation: bool = False
    is_directory_only: bool = False


@dataclass(frozen=True)
class ImportReference:
    raw_source: str
    kind: ImportKind
    is_external: bool
    resolved_path: str | None = None


@dataclass
class FileRecord:
    """One analysable source file and its known import relationships."""
    path: str
    name: str
    imports: list[ImportReference] = field(default_factory=list)
    imported_by: set[str] = field(default_factory=set)

    def add_importer(self, path: str) -> None:
        # set semantics: repeated or out-of-order appends converge
        self.imported_by.add(path)

    def resolved_targets(self) -> list[str]:
        return [
            imp.resolved_path for imp in self.imports
            if not imp.is_external and imp.resolved_path
        ]


@dataclass
class AnalysisStats:
    ignore_rules: int = 0
    discovered_files: int = 0
    skipped_files: list[str] = field(default_factory=list)
    resolved_imports: int = 0
    unresolved_imports: int = 0
    external_imports: int = 0
    dialect: Dialect | None = None


@dataclass
class Graph:
    files: dict[str, FileRecord] = field(default_factory=dict)
    entry_file: str | None = None
    error: str | None = None
    stats: AnalysisStats = field(default_factory=AnalysisStats)

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class GraphNode:
    id: str
    label: str
    path: str
    is_external: bool = False
    is_entry: bool = False
    relation: Relation = Relation.OTHER


@dataclass(frozen=True)
class GraphEdge:
    from_id: str  # the dependency
    to_id: str  # the dependent
    kind: ImportKind


@dataclass
class GraphView:
    """Renderer-facing nodes and edges derived from a Graph."""
    nodes: list[GraphNode] = field(default_factory=list)
    edges: list[GraphEdge] = field(default_factory=list)
    entry_id: str | None = None

    def node_ids(self) -> list[str]:
        return [n.id for n in self.nodes]


@dataclass
class LayoutNode:
    id: str
    label: str
    path: str
    is_external: bool
    is_entry: bool
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "label": self.label,
            "path": self.path,
            "isExternal": self.is_external,
            "isEntry": self.is_entry,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
        }


@dataclass
class LayoutResult:
    nodes: dict[str, LayoutNode] = field(default_factory=dict)
    restored_ids: set[str] = field(default_factory=set)
    fallback_ids: set[str] = field(default_factory=set)
    reused: bool = False

    def positions(self) -> dict[str, dict[str, float]]:
        return {nid: {"x": n.x, "y": n.y} for nid, n in self.nodes.items()}


@dataclass
class AnalysisConfig:
    """Configuration for one analysis invocation."""
    root: Path = field(default_factory=lambda: Path("."))
    entry_file: Path | None = None
    ignore_file: str = ".gitignore"
    skip_dirs: list[str] = field(default_factory=lambda: [
        "node_modules", ".git", ".vscode", ".idea", "coverage",
    ])
    build_dirs: list[str] = field(default_factory=lambda: [
        "dist", "build", "out", ".next", ".nuxt", ".output", ".svelte-kit",
    ])
    probe_extensions: list[str] = field(default_factory=lambda: [
        ".ts", ".js", ".tsx", ".jsx", ".vue", ".svelte", ".mjs", ".cjs",
    ])
    type_config_files: list[str] = field(default_factory=lambda: [
        "tsconfig.json", "tsconfig.base.json", "tsconfig.app.json",
    ])
    framework_config_files: list[str] = field(default_factory=lambda: [
        "nuxt.config.ts", "nuxt.config.js", "nuxt.config.mjs",
    ])
    source_dir_name: str = "src"
    max_counted_files: int = 5000
    sample_size: int = 40
    max_workers: int = 8


@dataclass
class LayoutConfig:
    canvas_width: float = 1200.0
    canvas_height: float = 800.0
    margin: float = 100.0
    node_padding: float = 20.0
    min_node_width: float = 60.0
    min_node_height: float = 30.0
    collision_padding: float = 20.0
    min_distance: float = 150.0
    spiral_step: float = 30.0
    base_slots: int = 8
    slots_per_ring: int = 2
    ring_rotation: float = 0.5
    max_attempts: int = 100
    fallback_ring_size: int = 8
    band_width: int = 8
    band_spacing_x: float = 160.0
    band_spacing_y: float = 100.0
    grid_spacing_x: float = 150.0
    grid_spacing_y: float = 80.0
    overlap_threshold: float = 0.70
