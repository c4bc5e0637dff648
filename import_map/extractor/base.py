"""Abstract base extractor."""

from __future__ import annotations

import abc

from import_map.models import ImportKind


class BaseImportExtractor(abc.ABC):
    """Turns one file's text into its ordered import statements.

    Implementations only see text; resolution and graph assembly live
    elsewhere, so a syntax-tree based extractor can replace the regex one.
    """

    @abc.abstractmethod
    def extract(self, text: str) -> list[tuple[str, ImportKind]]:
        """Return ``(raw_source, kind)`` pairs in source order."""
