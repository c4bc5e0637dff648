"""Source file discovery for one analysis root."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from import_map.models import AnalysisConfig, Dialect, PLAIN_EXTENSIONS, TYPED_EXTENSIONS
from import_map.scanner.dialect import detect_dialect
from import_map.scanner.ignore import PathFilter

logger = logging.getLogger(__name__)


class SourceScanner:
    """Walks a tree and returns the files the detected dialect can analyse."""

    def __init__(
        self,
        root: Path,
        path_filter: PathFilter | None = None,
        config: AnalysisConfig | None = None,
        dialect: Dialect | None = None,
    ):
        self.root = Path(root).resolve()
        self.config = config or AnalysisConfig(root=self.root)
        self.path_filter = path_filter or PathFilter.from_root(self.root, self.config.ignore_file)
        self._dialect = dialect

    @property
    def dialect(self) -> Dialect:
        if self._dialect is None:
            self._dialect = detect_dialect(self.root, self.config, self.path_filter)
        return self._dialect

    def scan(self) -> list[str]:
        """Return canonical paths of all analysable files, in walk order."""
        extensions = self.dialect.extensions
        skip = set(self.config.skip_dirs)
        build = set(self.config.build_dirs)
        files: list[str] = []

        for dirpath, dirnames, filenames in os.walk(self.root):
            current = Path(dirpath)
            kept: list[str] = []
            for name in sorted(dirnames):
                if name in skip or name in build or name.startswith("."):
                    continue
                if self.path_filter.should_ignore(current / name, is_dir=True):
                    logger.debug("Ignoring directory %s", self.path_filter.relative(current / name))
                    continue
                kept.append(name)
            dirnames[:] = kept

            for name in sorted(filenames):
                path = current / name
                if path.suffix not in extensions:
                    continue
                try:
                    canonical = path.resolve(strict=True)
                except (OSError, RuntimeError) as e:
                    logger.warning("Skipping unresolvable path %s: %s", path, e)
                    continue
                if self.path_filter.should_ignore(path, is_dir=False):
                    logger.debug("Ignoring file %s", self.path_filter.relative(path))
                    continue
                if self.is_compiled_output(path):
                    logger.debug("Skipping compiled output %s", self.path_filter.relative(path))
                    continue
                files.append(str(canonical))

        logger.info("Discovered %d %s files under %s", len(files), self.dialect.value, self.root)
        return files

    def is_compiled_output(self, path: Path) -> bool:
        """A plain JS file whose typed sibling exists, or anything under a build dir."""
        rel = self.path_filter.relative(path)
        if rel is not None:
            build = set(self.config.build_dirs)
            if any(part in build for part in rel.split("/")[:-1]):
                return True
        if path.suffix not in PLAIN_EXTENSIONS:
            return False
        return any(path.with_suffix(ext).is_file() for ext in TYPED_EXTENSIONS)
