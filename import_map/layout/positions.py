"""Position persistence behind a small key/value interface."""

from __future__ import annotations

import abc
import json
import logging
import os
import tempfile
import threading
from pathlib import Path

logger = logging.getLogger(__name__)

Positions = dict[str, dict[str, float]]


def position_key(root: Path | str, entry_file: Path | str | None = None) -> str:
    """Storage key for one (root, entry file) analysis identity."""
    root_part = str(Path(root).resolve())
    entry_part = str(Path(entry_file).resolve()) if entry_file else "project"
    return f"importMap_positions:{root_part}:{entry_part}"


class PositionStore(abc.ABC):
    """Abstract store of ``{node_id: {"x", "y"}}`` maps keyed by string."""

    @abc.abstractmethod
    def get(self, key: str) -> Positions | None:
        ...

    @abc.abstractmethod
    def set(self, key: str, positions: Positions) -> None:
        ...

    @abc.abstractmethod
    def delete(self, key: str) -> None:
        ...


class MemoryPositionStore(PositionStore):

    def __init__(self):
        self._data: dict[str, Positions] = {}

    def get(self, key: str) -> Positions | None:
        positions = self._data.get(key)
        return {k: dict(v) for k, v in positions.items()} if positions is not None else None

    def set(self, key: str, positions: Positions) -> None:
        self._data[key] = {k: dict(v) for k, v in positions.items()}

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFilePositionStore(PositionStore):
    """All keys in one JSON document, rewritten atomically on each change."""

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _load(self) -> dict[str, Positions]:
        if not self.path.is_file():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable position file %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: dict[str, Positions]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".positions-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, sort_keys=True)
            os.replace(tmp, self.path)
        except OSError:
            Path(tmp).unlink(missing_ok=True)
            raise

    def get(self, key: str) -> Positions | None:
        with self._lock:
            positions = self._load().get(key)
        return positions if isinstance(positions, dict) else None

    def set(self, key: str, positions: Positions) -> None:
        with self._lock:
            data = self._load()
            data[key] = positions
            self._save(data)
        logger.debug("Saved %d positions under %s", len(positions), key)

    def delete(self, key: str) -> None:
        with self._lock:
            data = self._load()
            if data.pop(key, None) is not None:
                self._save(data)
                logger.debug("Cleared saved positions for %s", key)


def record_position(store: PositionStore, key: str, node_id: str, x: float, y: float) -> Positions:
    """Apply a manual node move from the renderer and persist it."""
    positions = store.get(key) or {}
    positions[node_id] = {"x": float(x), "y": float(y)}
    store.set(key, positions)
    return positions
