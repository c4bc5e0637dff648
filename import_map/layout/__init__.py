"""Graph layout and position persistence."""

from __future__ import annotations

from import_map.layout.engine import (
    HIERARCHICAL,
    SPIRAL,
    STRATEGIES,
    LayoutEngine,
    approximate_text_width,
    overlap_ratio,
)
from import_map.layout.positions import (
    JsonFilePositionStore,
    MemoryPositionStore,
    PositionStore,
    position_key,
    record_position,
)

__all__ = [
    "HIERARCHICAL",
    "SPIRAL",
    "STRATEGIES",
    "LayoutEngine",
    "approximate_text_width",
    "overlap_ratio",
    "JsonFilePositionStore",
    "MemoryPositionStore",
    "PositionStore",
    "position_key",
    "record_position",
]
