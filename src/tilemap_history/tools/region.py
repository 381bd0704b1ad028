"""Rectangular selection edits: delete, paste and move."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence

from tilemap_history.history import OperationType, TileChange, TileChangeOperation
from tilemap_history.scene import EMPTY_TILE, Scene, get_tile, in_bounds

from .base import Tool
from .common import TilePoint

TileGrid = List[List[int]]


@dataclass(frozen=True, slots=True)
class Region:
    layer: str
    x: int
    y: int
    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("region dimensions must be positive")

    def cells(self) -> Iterator[TilePoint]:
        for dy in range(self.height):
            for dx in range(self.width):
                yield (self.x + dx, self.y + dy)

    def offset(self, dx: int, dy: int) -> "Region":
        return Region(self.layer, self.x + dx, self.y + dy, self.width, self.height)


def copy_region(scene: Scene, region: Region) -> TileGrid:
    return [
        [
            get_tile(scene, region.layer, region.x + dx, region.y + dy)
            for dx in range(region.width)
        ]
        for dy in range(region.height)
    ]


class RegionTool(Tool):
    name = "region"

    def delete(self, region: Region) -> Optional[TileChangeOperation]:
        scene = self._editable_scene(region.layer)
        if scene is None:
            return None
        layer = region.layer
        changes = [
            TileChange(layer, x, y, get_tile(scene, layer, x, y), EMPTY_TILE)
            for x, y in region.cells()
            if in_bounds(scene, x, y)
        ]
        return self.commit_tile_changes(
            scene, changes, type=OperationType.DELETE, description="Delete selection"
        )

    def paste(
        self, layer: str, x: int, y: int, tiles: Sequence[Sequence[int]]
    ) -> Optional[TileChangeOperation]:
        """Write ``tiles`` with its top-left at ``(x, y)``.

        Zero cells in ``tiles`` overwrite too.
        """

        scene = self._editable_scene(layer)
        if scene is None:
            return None
        changes = []
        for dy, row in enumerate(tiles):
            for dx, value in enumerate(row):
                tx, ty = x + dx, y + dy
                if in_bounds(scene, tx, ty):
                    old = get_tile(scene, layer, tx, ty)
                    changes.append(TileChange(layer, tx, ty, old, value))
        return self.commit_tile_changes(
            scene, changes, type=OperationType.PASTE, description="Paste tiles"
        )

    def move(self, region: Region, dx: int, dy: int) -> Optional[TileChangeOperation]:
        """Lift the region's tiles and drop them ``(dx, dy)`` cells away.

        Vacated cells become empty; destination cells falling off the scene
        are dropped.
        """

        scene = self._editable_scene(region.layer)
        if scene is None or (dx, dy) == (0, 0):
            return None
        lifted = copy_region(scene, region)
        final: Dict[TilePoint, int] = {}
        for x, y in region.cells():
            if in_bounds(scene, x, y):
                final[(x, y)] = EMPTY_TILE
        for row_index, row in enumerate(lifted):
            for col_index, value in enumerate(row):
                tx = region.x + col_index + dx
                ty = region.y + row_index + dy
                if in_bounds(scene, tx, ty):
                    final[(tx, ty)] = value
        changes = [
            TileChange(region.layer, x, y, get_tile(scene, region.layer, x, y), value)
            for (x, y), value in final.items()
        ]
        return self.commit_tile_changes(
            scene, changes, type=OperationType.MOVE, description="Move selection"
        )

    def _editable_scene(self, layer: str) -> Optional[Scene]:
        if self.context.is_locked(layer):
            return None
        return self.context.get_scene()
