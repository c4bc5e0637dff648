"""Extractor registry."""

from __future__ import annotations

from import_map.extractor.base import BaseImportExtractor
from import_map.extractor.js_extractor import RegexImportExtractor
from import_map.extractor.template import isolate_scripts
from import_map.models import ImportKind, TEMPLATE_EXTENSIONS

_extractor: BaseImportExtractor = RegexImportExtractor()


def extract_imports(text: str, file_kind: str) -> list[tuple[str, ImportKind]]:
    """Extract ``(raw_source, kind)`` pairs from one file's text.

    Args:
        text: Full file content.
        file_kind: The file suffix, e.g. ``".ts"`` or ``".vue"``.
    """
    if file_kind.lower() in TEMPLATE_EXTENSIONS:
        text = isolate_scripts(text)
    return _extractor.extract(text)


__all__ = [
    "BaseImportExtractor",
    "RegexImportExtractor",
    "extract_imports",
    "isolate_scripts",
]
