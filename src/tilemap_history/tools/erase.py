"""Drag erasing: clears cells under the brush to the empty tile."""

from __future__ import annotations

from typing import Dict

from tilemap_history.history import OperationType, TileChange
from tilemap_history.scene import EMPTY_TILE, get_tile, in_bounds

from .base import StrokeTool
from .common import TilePoint, brush_footprint


class EraseTool(StrokeTool):
    name = "erase"
    group_label = "Erase tiles"

    def start(self, x: int, y: int, *, layer: str) -> bool:
        if self.context.get_scene() is None or self.context.is_locked(layer):
            return False
        self._begin(x, y, layer)
        return True

    def _apply_points(self, points: list[TilePoint]) -> None:
        scene = self.context.get_scene()
        if scene is None or self._layer is None:
            return
        layer = self._layer
        changes: Dict[TilePoint, TileChange] = {}
        for px, py in points:
            for tx, ty in brush_footprint(px, py, self.brush_size):
                if (tx, ty) in changes or not in_bounds(scene, tx, ty):
                    continue
                old = get_tile(scene, layer, tx, ty)
                if old == EMPTY_TILE:
                    continue
                changes[(tx, ty)] = TileChange(layer, tx, ty, old, EMPTY_TILE)
        self.commit_tile_changes(
            scene,
            changes.values(),
            type=OperationType.ERASE,
            description="Erase tiles",
        )
