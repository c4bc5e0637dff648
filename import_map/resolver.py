"""Import source classification and file resolution."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

from import_map.models import AnalysisConfig, ImportKind, ImportReference
from import_map.scanner.ignore import PathFilter

logger = logging.getLogger(__name__)

SOURCE = "source"
ROOT = "root"

# prefix -> (base directory, subdirectory under it); longest prefixes first
ALIAS_PREFIXES: tuple[tuple[str, str, str], ...] = (
    ("#components/", SOURCE, "components"),
    ("#imports", ROOT, ""),
    ("#app/", ROOT, ""),
    ("~~/", ROOT, ""),
    ("@@/", ROOT, ""),
    ("~/", SOURCE, ""),
    ("@/", SOURCE, ""),
)

_SRC_DIR_RE = re.compile(r"""\bsrcDir\s*:\s*(['"`])([^'"`]+)\1""")


def detect_source_dir(root: Path, config: AnalysisConfig | None = None) -> Path:
    """Directory that source aliases such as ``@/`` point at."""
    config = config or AnalysisConfig(root=root)
    root = Path(root)
    for name in config.framework_config_files:
        path = root / name
        if not path.is_file():
            continue
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read %s: %s", path, e)
            continue
        m = _SRC_DIR_RE.search(text)
        if m:
            logger.debug("Source dir %r from %s", m.group(2), name)
            return (root / m.group(2)).resolve()

    conventional = root / config.source_dir_name
    if conventional.is_dir():
        return conventional.resolve()
    return root.resolve()


def alias_for(source: str) -> tuple[str, str, str] | None:
    for prefix, base, subdir in ALIAS_PREFIXES:
        if source.startswith(prefix):
            return prefix, base, subdir
    return None


class ModuleResolver:
    """Resolves import sources against the filesystem and the ignore rules."""

    def __init__(
        self,
        root: Path,
        path_filter: PathFilter | None = None,
        source_dir: Path | None = None,
        config: AnalysisConfig | None = None,
    ):
        self.root = Path(root).resolve()
        self.config = config or AnalysisConfig(root=self.root)
        self.path_filter = path_filter or PathFilter(self.root)
        self.source_dir = Path(source_dir).resolve() if source_dir else detect_source_dir(self.root, self.config)

    def classify(self, source: str) -> str:
        if source.startswith("."):
            return "relative"
        if os.path.isabs(source):
            return "absolute"
        if alias_for(source):
            return "alias"
        return "external"

    def is_external(self, source: str) -> bool:
        return self.classify(source) == "external"

    def resolve(self, source: str, importer: str | Path) -> str | None:
        """Canonical path of the file *source* refers to, or None."""
        kind = self.classify(source)
        if kind == "external":
            return None
        if kind == "relative":
            candidate = Path(importer).parent / source
        elif kind == "absolute":
            candidate = Path(source)
        else:
            prefix, base, subdir = alias_for(source)
            remainder = source[len(prefix):].lstrip("/")
            base_dir = self.source_dir if base == SOURCE else self.root
            candidate = base_dir / subdir / remainder if subdir else base_dir / remainder

        resolved = self._probe(Path(os.path.normpath(candidate)))
        if resolved is None:
            logger.debug("Unresolved import %r from %s", source, importer)
        return resolved

    def reference(self, source: str, kind: ImportKind, importer: str | Path) -> ImportReference:
        external = self.is_external(source)
        return ImportReference(
            raw_source=source,
            kind=kind,
            is_external=external,
            resolved_path=None if external else self.resolve(source, importer),
        )

    def _probe(self, candidate: Path) -> str | None:
        for path in self._candidates(candidate):
            if not path.is_file():
                continue
            if self.path_filter.should_ignore(path, is_dir=False):
                logger.debug("Skipping import to ignored file %s", self.path_filter.relative(path))
                continue
            return str(path.resolve())
        return None

    def _candidates(self, candidate: Path):
        yield candidate
        # the filesystem root has no name to extend
        if candidate.name:
            for ext in self.config.probe_extensions:
                yield candidate.with_name(candidate.name + ext)
        for ext in self.config.probe_extensions:
            yield candidate / f"index{ext}"
