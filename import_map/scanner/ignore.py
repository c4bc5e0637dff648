"""Gitignore-style path filtering.

Only the subset of gitignore syntax the analyser needs is supported: comments,
negation (``!``), directory-only rules (trailing ``/``), rooted rules (leading
``/``) and the ``*`` / ``?`` wildcards. ``*`` is not segment-aware.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from import_map.models import IgnoreRule

logger = logging.getLogger(__name__)


def parse_rules(content: str) -> list[IgnoreRule]:
    """Parse ignore-file content into an ordered rule list."""
    rules: list[IgnoreRule] = []
    for line in content.splitlines():
        text = line.strip()
        if not text or text.startswith("#"):
            continue

        is_negation = text.startswith("!")
        if is_negation:
            text = text[1:]
        is_directory_only = text.endswith("/")
        if is_directory_only:
            text = text[:-1]
        if not text:
            continue

        rules.append(IgnoreRule(
            pattern=text.replace("\\", "/"),
            is_negation=is_negation,
            is_directory_only=is_directory_only,
        ))
    return rules


def _glob_to_regex(pattern: str) -> re.Pattern[str]:
    parts: list[str] = []
    for ch in pattern:
        if ch == "*":
            parts.append(".*")
        elif ch == "?":
            parts.append(".")
        else:
            parts.append(re.escape(ch))
    return re.compile("^" + "".join(parts) + "$")


class PathFilter:
    """Answers whether a path is excluded by the project's ignore rules."""

    def __init__(self, root: Path, rules: list[IgnoreRule] | None = None):
        self.root = Path(root).resolve()
        self.rules = list(rules or [])
        self._compiled: list[tuple[IgnoreRule, bool, re.Pattern[str]]] = []
        for rule in self.rules:
            rooted = rule.pattern.startswith("/")
            pattern = rule.pattern[1:] if rooted else rule.pattern
            self._compiled.append((rule, rooted, _glob_to_regex(pattern)))

    @classmethod
    def from_root(cls, root: Path, ignore_file: str = ".gitignore") -> PathFilter:
        """Load rules from ``root/ignore_file``; a missing file means no rules."""
        root = Path(root)
        path = root / ignore_file
        if not path.is_file():
            logger.debug("No %s found in %s", ignore_file, root)
            return cls(root)
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read %s: %s", path, e)
            return cls(root)

        rules = parse_rules(content)
        logger.debug("Loaded %d ignore rules from %s", len(rules), path)
        return cls(root, rules)

    def relative(self, path: Path | str) -> str | None:
        try:
            rel = Path(path).resolve().relative_to(self.root)
        except (ValueError, OSError, RuntimeError):
            # outside the root, or a symlink loop
            return None
        return rel.as_posix()

    def should_ignore(self, path: Path | str, is_dir: bool | None = None) -> bool:
        if not self._compiled:
            return False
        rel = self.relative(path)
        if rel is None or rel in ("", "."):
            return False
        if is_dir is None:
            is_dir = Path(path).is_dir()

        ignored = False
        for rule, rooted, regex in self._compiled:
            if rule.is_directory_only and not is_dir:
                continue
            if self._matches(rel, rooted, regex):
                ignored = not rule.is_negation
        return ignored

    @staticmethod
    def _matches(rel: str, rooted: bool, regex: re.Pattern[str]) -> bool:
        if rooted:
            return regex.match(rel) is not None
        segments = rel.split("/")
        for i in range(len(segments)):
            if regex.match("/".join(segments[i:])):
                return True
        return False
