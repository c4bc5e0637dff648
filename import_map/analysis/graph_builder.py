"""Dependency graph builder: two-pass assembly of file records.

Pass 1 reads every candidate file, extracts its imports and resolves them.
Pass 2 fills ``imported_by`` from the resolved imports. Pass 2 never starts
before every pass-1 record is final.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from import_map.errors import RecoverableFileError
from import_map.extractor import extract_imports
from import_map.models import AnalysisConfig, AnalysisStats, FileRecord, Graph
from import_map.resolver import ModuleResolver
from import_map.scanner.ignore import PathFilter
from import_map.scanner.source_scanner import SourceScanner

logger = logging.getLogger(__name__)


@dataclass
class _Session:
    """Per-invocation filter, resolver and scanner; never shared between runs."""
    root: Path
    path_filter: PathFilter
    resolver: ModuleResolver
    scanner: SourceScanner


def link_importers(files: dict[str, FileRecord]) -> None:
    """Pass 2: record every importer on the records its imports resolve to."""
    for path, record in files.items():
        for target in record.resolved_targets():
            target_record = files.get(target)
            if target_record is not None and target != path:
                target_record.add_importer(path)


class GraphBuilder:
    """Build import graphs for a whole project or one file's neighbourhood."""

    def __init__(self, config: AnalysisConfig | None = None):
        self.config = config or AnalysisConfig()

    def build_whole_project(self, root: Path, entry_file: Path | None = None) -> Graph:
        session = self._open(root)
        stats = AnalysisStats(ignore_rules=len(session.path_filter.rules))
        paths = session.scanner.scan()
        stats.dialect = session.scanner.dialect
        stats.discovered_files = len(paths)

        files = self._analyze_all(paths, session, stats)
        link_importers(files)
        self._count_imports(files, stats)

        entry = str(Path(entry_file).resolve()) if entry_file else None
        logger.info("Project graph: %d files, %d skipped", len(files), len(stats.skipped_files))
        return Graph(files=files, entry_file=entry, stats=stats)

    def build_focused(self, entry_file: Path, root: Path) -> Graph:
        """Entry file plus its direct importers and direct dependencies."""
        entry = str(Path(entry_file).resolve())
        session = self._open(root)
        stats = AnalysisStats(ignore_rules=len(session.path_filter.rules))

        if not Path(entry).is_file():
            logger.warning("Entry file %s does not exist", entry)
            return Graph(entry_file=entry, error=f"Entry file not found: {entry}", stats=stats)
        try:
            entry_record = self._analyze_file(entry, session)
        except RecoverableFileError as e:
            logger.warning("Could not analyze entry file: %s", e)
            return Graph(entry_file=entry, error=str(e), stats=stats)

        paths = [p for p in session.scanner.scan() if p != entry]
        stats.dialect = session.scanner.dialect
        stats.discovered_files = len(paths) + 1
        candidates = self._analyze_all(paths, session, stats)

        files: dict[str, FileRecord] = {entry: entry_record}
        for path, record in candidates.items():
            if entry in record.resolved_targets():
                files[path] = record
                logger.debug("Importer: %s", record.name)

        for target in entry_record.resolved_targets():
            if target in files:
                continue
            record = candidates.get(target)
            if record is None:
                # resolved to a file the scan does not cover (e.g. another dialect)
                try:
                    record = self._analyze_file(target, session)
                except RecoverableFileError as e:
                    logger.warning("Skipping dependency: %s", e)
                    stats.skipped_files.append(target)
                    continue
            files[target] = record
            logger.debug("Dependency: %s", record.name)

        link_importers(files)
        self._count_imports(files, stats)
        logger.info("Focused graph for %s: %d files", entry_record.name, len(files))
        return Graph(files=files, entry_file=entry, stats=stats)

    # ── internals ─────────────────────────────────────────────

    def _open(self, root: Path) -> _Session:
        root = Path(root).resolve()
        path_filter = PathFilter.from_root(root, self.config.ignore_file)
        return _Session(
            root=root,
            path_filter=path_filter,
            resolver=ModuleResolver(root, path_filter, config=self.config),
            scanner=SourceScanner(root, path_filter, self.config),
        )

    def _read_source(self, path: str) -> str:
        try:
            return Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise RecoverableFileError(path, f"unreadable: {e}") from e

    def _analyze_file(self, path: str, session: _Session) -> FileRecord:
        text = self._read_source(path)
        try:
            extracted = extract_imports(text, Path(path).suffix)
        except Exception as e:
            raise RecoverableFileError(path, f"extraction failed: {e}") from e

        try:
            imports = [
                session.resolver.reference(source, kind, path)
                for source, kind in extracted
            ]
        except (OSError, RuntimeError, ValueError) as e:
            raise RecoverableFileError(path, f"resolution failed: {e}") from e
        return FileRecord(path=path, name=Path(path).name, imports=imports)

    def _try_analyze(self, path: str, session: _Session) -> FileRecord | RecoverableFileError:
        try:
            return self._analyze_file(path, session)
        except RecoverableFileError as e:
            return e

    def _analyze_all(
        self,
        paths: list[str],
        session: _Session,
        stats: AnalysisStats,
    ) -> dict[str, FileRecord]:
        """Pass 1. Returns only after every file has been processed."""
        files: dict[str, FileRecord] = {}
        workers = max(1, self.config.max_workers)
        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(lambda p: self._try_analyze(p, session), paths))

        for path, result in zip(paths, results):
            if isinstance(result, RecoverableFileError):
                logger.warning("Skipping %s", result)
                stats.skipped_files.append(path)
                continue
            files[path] = result
        return files

    @staticmethod
    def _count_imports(files: dict[str, FileRecord], stats: AnalysisStats) -> None:
        for record in files.values():
            for imp in record.imports:
                if imp.is_external:
                    stats.external_imports += 1
                elif imp.resolved_path:
                    stats.resolved_imports += 1
                else:
                    stats.unresolved_imports += 1
