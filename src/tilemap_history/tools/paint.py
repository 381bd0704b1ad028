"""Drag painting of tile values onto the active layer."""

from __future__ import annotations

from typing import Dict, Optional

from tilemap_history.history import OperationType, TileChange
from tilemap_history.scene import BINARY_LAYERS, EMPTY_TILE, get_tile, in_bounds

from .base import StrokeTool, ToolContext
from .common import TilePoint, brush_footprint


class PaintTool(StrokeTool):
    name = "paint"
    group_label = "Paint tiles"

    def __init__(self, context: ToolContext, *, brush_size: int = 1) -> None:
        super().__init__(context, brush_size=brush_size)
        self._value: int = EMPTY_TILE

    def start(self, x: int, y: int, *, layer: str, value: Optional[int] = None) -> bool:
        """Begin a stroke. Collision and trigger layers always paint ``1``.

        Returns ``False`` without opening a group when there is nothing to
        paint: no scene, a locked layer, or no tile value on a graphic layer.
        """

        if self.context.get_scene() is None or self.context.is_locked(layer):
            return False
        if layer in BINARY_LAYERS:
            paint_value = 1
        else:
            paint_value = value if value is not None else EMPTY_TILE
        if paint_value == EMPTY_TILE:
            return False
        self._value = paint_value
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
                if old == self._value:
                    continue
                changes[(tx, ty)] = TileChange(layer, tx, ty, old, self._value)
        self.commit_tile_changes(
            scene,
            changes.values(),
            type=OperationType.PAINT,
            description="Paint tiles",
        )
