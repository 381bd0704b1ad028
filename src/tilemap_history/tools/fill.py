"""Flood fill of a contiguous same-valued region."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Optional, Tuple

from tilemap_history.history import OperationType, TileChange
from tilemap_history.runtime import telemetry
from tilemap_history.scene import BINARY_LAYERS, EMPTY_TILE, Scene, in_bounds

from .base import Tool, ToolContext

DEFAULT_MAX_TILES = 10_000


@dataclass(frozen=True, slots=True)
class FloodFillResult:
    changes: Tuple[TileChange, ...]
    target_value: Optional[int]
    limit_reached: bool = False

    @property
    def count(self) -> int:
        return len(self.changes)


def flood_fill(
    scene: Scene,
    layer: str,
    x: int,
    y: int,
    value: int,
    *,
    max_tiles: int = DEFAULT_MAX_TILES,
) -> FloodFillResult:
    """Collect the 4-connected cells matching the start cell's value.

    The scene is not modified. ``limit_reached`` is set when the search
    stopped at ``max_tiles`` with cells still queued.
    """

    grid = scene.layers.get(layer)
    if grid is None or not in_bounds(scene, x, y):
        return FloodFillResult(changes=(), target_value=None)
    target = grid[y][x]
    if target == value:
        return FloodFillResult(changes=(), target_value=target)

    queue: deque[Tuple[int, int]] = deque([(x, y)])
    visited: set[Tuple[int, int]] = set()
    changes: list[TileChange] = []
    while queue and len(changes) < max_tiles:
        cx, cy = queue.popleft()
        if (cx, cy) in visited or not in_bounds(scene, cx, cy):
            continue
        if grid[cy][cx] != target:
            continue
        visited.add((cx, cy))
        changes.append(TileChange(layer, cx, cy, target, value))
        queue.extend(((cx + 1, cy), (cx - 1, cy), (cx, cy + 1), (cx, cy - 1)))

    limit_reached = len(changes) >= max_tiles and any(
        cell not in visited
        and in_bounds(scene, cell[0], cell[1])
        and grid[cell[1]][cell[0]] == target
        for cell in queue
    )
    return FloodFillResult(
        changes=tuple(changes), target_value=target, limit_reached=limit_reached
    )


class FillTool(Tool):
    name = "fill"

    def __init__(
        self, context: ToolContext, *, max_tiles: int = DEFAULT_MAX_TILES
    ) -> None:
        super().__init__(context)
        self.max_tiles = max_tiles

    def fill(
        self, x: int, y: int, *, layer: str, value: Optional[int] = None
    ) -> FloodFillResult:
        scene = self.context.get_scene()
        if scene is None or self.context.is_locked(layer):
            return FloodFillResult(changes=(), target_value=None)
        fill_value = 1 if layer in BINARY_LAYERS else (value or EMPTY_TILE)
        if fill_value == EMPTY_TILE:
            return FloodFillResult(changes=(), target_value=None)

        result = flood_fill(scene, layer, x, y, fill_value, max_tiles=self.max_tiles)
        self.commit_tile_changes(
            scene, result.changes, type=OperationType.FILL, description="Fill tiles"
        )
        if result.limit_reached:
            telemetry.record_event(
                "tools.fill.limit_reached",
                level="warning",
                data={"layer": layer, "x": x, "y": y, "max_tiles": self.max_tiles},
            )
        return result
