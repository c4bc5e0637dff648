"""Deterministic 2D layout for import graphs.

Two strategies are available. ``spiral`` is the default: the entry node sits
at the canvas centre and every other node takes the first collision-free slot
on a set of widening rings. ``hierarchical`` is the explicit re-organise
action: importers of the entry in bands above it, its dependencies and then
external modules in bands below, unrelated files in a side grid.
"""

from __future__ import annotations

import logging
import math
from typing import Callable, Mapping

from import_map.models import (
    GraphView,
    LayoutConfig,
    LayoutNode,
    LayoutResult,
    Relation,
)

logger = logging.getLogger(__name__)

SPIRAL = "spiral"
HIERARCHICAL = "hierarchical"
STRATEGIES = (SPIRAL, HIERARCHICAL)

MeasureFunc = Callable[[str], float]


def approximate_text_width(text: str, font_size: float = 11.0) -> float:
    """Rough width of *text* in an 11px sans-serif font."""
    return len(text) * font_size * 0.6


def overlap_ratio(current_ids: set[str], persisted_ids: set[str]) -> float:
    denominator = max(len(current_ids), len(persisted_ids))
    if denominator == 0:
        return 0.0
    return len(current_ids & persisted_ids) / denominator


def boxes_overlap(a: LayoutNode, b: LayoutNode, padding: float) -> bool:
    dx = abs(a.x - b.x)
    dy = abs(a.y - b.y)
    return (
        dx < a.width / 2 + b.width / 2 + padding
        and dy < a.height / 2 + b.height / 2 + padding
    )


class LayoutEngine:
    """Stateless layout computation; safe to call any number of times."""

    def __init__(self, measure: MeasureFunc | None = None, config: LayoutConfig | None = None):
        self.measure = measure or approximate_text_width
        self.config = config or LayoutConfig()

    @property
    def center(self) -> tuple[float, float]:
        return self.config.canvas_width / 2, self.config.canvas_height / 2

    def node_size(self, label: str) -> tuple[float, float]:
        cfg = self.config
        width = max(cfg.min_node_width, self.measure(label) + cfg.node_padding * 2)
        return width, cfg.min_node_height

    def layout(
        self,
        view: GraphView,
        persisted: Mapping[str, Mapping[str, float]] | None = None,
        strategy: str = SPIRAL,
    ) -> LayoutResult:
        if strategy not in STRATEGIES:
            raise ValueError(f"Unknown layout strategy: {strategy!r}")

        result = LayoutResult(nodes=self._sized_nodes(view))
        if not result.nodes:
            return result

        if strategy == HIERARCHICAL:
            self._hierarchical(view, result)
            return result

        if persisted:
            result.restored_ids = self._restore(result.nodes, persisted)
            result.reused = bool(result.restored_ids)

        pending = [nid for nid in result.nodes if nid not in result.restored_ids]
        if pending:
            self._spiral(view, result, pending)
        return result

    # ── sizing & reuse ────────────────────────────────────────

    def _sized_nodes(self, view: GraphView) -> dict[str, LayoutNode]:
        nodes: dict[str, LayoutNode] = {}
        for node in view.nodes:
            width, height = self.node_size(node.label)
            nodes[node.id] = LayoutNode(
                id=node.id,
                label=node.label,
                path=node.path,
                is_external=node.is_external,
                is_entry=node.is_entry,
                width=width,
                height=height,
            )
        return nodes

    def _restore(
        self,
        nodes: dict[str, LayoutNode],
        persisted: Mapping[str, Mapping[str, float]],
    ) -> set[str]:
        ratio = overlap_ratio(set(nodes), set(persisted))
        if ratio < self.config.overlap_threshold:
            logger.info("Node set changed (%d%% match), recomputing layout", round(ratio * 100))
            return set()

        restored: set[str] = set()
        for nid, node in nodes.items():
            pos = persisted.get(nid)
            if not pos:
                continue
            try:
                node.x = float(pos["x"])
                node.y = float(pos["y"])
            except (KeyError, TypeError, ValueError):
                logger.debug("Ignoring malformed saved position for %s", nid)
                continue
            restored.add(nid)
        logger.debug("Restored %d of %d node positions", len(restored), len(nodes))
        return restored

    # ── spiral ────────────────────────────────────────────────

    def _spiral(self, view: GraphView, result: LayoutResult, pending: list[str]) -> None:
        cx, cy = self.center
        nodes = result.nodes
        placed = [nodes[nid] for nid in result.restored_ids]
        entry_id = view.entry_id if view.entry_id in nodes else None

        if entry_id is None and not placed:
            self._grid([nodes[nid] for nid in pending])
            return

        if entry_id in pending:
            entry = nodes[entry_id]
            entry.x, entry.y = cx, cy
            placed.append(entry)

        others = [nodes[nid] for nid in pending if nid != entry_id]
        for index, node in enumerate(others):
            if not self._place_on_rings(node, index, placed):
                self._fallback(node, index, len(others))
                result.fallback_ids.add(node.id)
                logger.warning("No free slot for %s, using fallback position", node.label)
            placed.append(node)

    def _place_on_rings(self, node: LayoutNode, index: int, placed: list[LayoutNode]) -> bool:
        cfg = self.config
        cx, cy = self.center
        attempts = 0
        ring = 0
        while attempts < cfg.max_attempts:
            slots = cfg.base_slots + ring * cfg.slots_per_ring
            radius = cfg.min_distance + ring * cfg.spiral_step
            for k in range(slots):
                if attempts >= cfg.max_attempts:
                    break
                attempts += 1
                slot = (index + k) % slots
                angle = slot * 2 * math.pi / slots + ring * cfg.ring_rotation
                node.x = cx + math.cos(angle) * radius
                node.y = cy + math.sin(angle) * radius
                if not self._in_bounds(node):
                    continue
                if any(boxes_overlap(node, other, cfg.collision_padding) for other in placed):
                    continue
                return True
            ring += 1
        return False

    def _fallback(self, node: LayoutNode, index: int, total: int) -> None:
        cfg = self.config
        cx, cy = self.center
        angle = index / max(total, 1) * 2 * math.pi
        radius = cfg.min_distance + (index // cfg.fallback_ring_size) * cfg.spiral_step
        node.x = cx + math.cos(angle) * radius
        node.y = cy + math.sin(angle) * radius

    def _in_bounds(self, node: LayoutNode) -> bool:
        cfg = self.config
        return (
            node.x - node.width / 2 >= cfg.margin
            and node.x + node.width / 2 <= cfg.canvas_width - cfg.margin
            and node.y - node.height / 2 >= cfg.margin
            and node.y + node.height / 2 <= cfg.canvas_height - cfg.margin
        )

    def _grid(self, nodes: list[LayoutNode]) -> None:
        cfg = self.config
        cols = max(1, int((cfg.canvas_width - cfg.margin * 2) // cfg.grid_spacing_x))
        for index, node in enumerate(nodes):
            col = index % cols
            row = index // cols
            node.x = cfg.margin + col * cfg.grid_spacing_x + cfg.grid_spacing_x / 2
            node.y = cfg.margin + row * cfg.grid_spacing_y + cfg.grid_spacing_y / 2

    # ── hierarchical ──────────────────────────────────────────

    def _hierarchical(self, view: GraphView, result: LayoutResult) -> None:
        cfg = self.config
        cx, cy = self.center
        nodes = result.nodes
        if view.entry_id not in nodes:
            self._spiral(view, result, list(nodes))
            return

        entry = nodes[view.entry_id]
        entry.x, entry.y = cx, cy

        importers: list[LayoutNode] = []
        dependencies: list[LayoutNode] = []
        externals: list[LayoutNode] = []
        others: list[LayoutNode] = []
        for node in view.nodes:
            if node.id == view.entry_id:
                continue
            target = nodes[node.id]
            if node.is_external:
                externals.append(target)
            elif node.relation is Relation.IMPORTER:
                importers.append(target)
            elif node.relation is Relation.DEPENDENCY:
                dependencies.append(target)
            else:
                others.append(target)

        if importers:
            rows_above = math.ceil(len(importers) / cfg.band_width)
            self._bands(importers, cx, cy - cfg.band_spacing_y * rows_above)
        if dependencies:
            self._bands(dependencies, cx, cy + cfg.band_spacing_y)
        if externals:
            rows_below = math.ceil(len(dependencies) / cfg.band_width)
            self._bands(externals, cx, cy + cfg.band_spacing_y * (1 + rows_below))
        if others:
            cols = math.ceil(math.sqrt(len(others)))
            rows = math.ceil(len(others) / cols)
            start_x = cx + cfg.band_spacing_x * 2
            start_y = cy - (rows - 1) * cfg.grid_spacing_y / 2
            for index, node in enumerate(others):
                node.x = start_x + (index % cols) * cfg.grid_spacing_x
                node.y = start_y + (index // cols) * cfg.grid_spacing_y

    def _bands(self, nodes: list[LayoutNode], center_x: float, start_y: float) -> None:
        """Rows of at most ``band_width`` nodes, each centred on *center_x*."""
        cfg = self.config
        for start in range(0, len(nodes), cfg.band_width):
            row = nodes[start:start + cfg.band_width]
            row_y = start_y + (start // cfg.band_width) * cfg.band_spacing_y
            row_start_x = center_x - (len(row) - 1) * cfg.band_spacing_x / 2
            for i, node in enumerate(row):
                node.x = row_start_x + i * cfg.band_spacing_x
                node.y = row_y
