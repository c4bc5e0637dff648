"""Source discovery: ignore rules, dialect detection and the tree walker."""

from __future__ import annotations

from pathlib import Path

from import_map.models import AnalysisConfig
from import_map.scanner.dialect import detect_dialect
from import_map.scanner.ignore import PathFilter, parse_rules
from import_map.scanner.source_scanner import SourceScanner


def scan_directory(root: Path, config: AnalysisConfig | None = None) -> list[str]:
    """Scan *root* with fresh ignore rules and return analysable files."""
    config = config or AnalysisConfig(root=Path(root))
    path_filter = PathFilter.from_root(Path(root), config.ignore_file)
    return SourceScanner(root, path_filter, config).scan()


__all__ = [
    "PathFilter",
    "SourceScanner",
    "detect_dialect",
    "parse_rules",
    "scan_directory",
]
