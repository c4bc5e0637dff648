"""Exceptions raised inside the analysis pipeline."""

from __future__ import annotations


class ImportMapError(Exception):
    """Base class for import-map errors."""


class RecoverableFileError(ImportMapError):
    """A single file could not be read or its imports could not be extracted.

    The graph builder catches this, logs it and skips the file.
    """

    def __init__(self, path: str, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason
