"""Shared plumbing for tools that turn scene edits into history entries."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from tilemap_history.history import (
    Direction,
    HistoryManager,
    OperationType,
    TileChange,
    TileChangeOperation,
    create_tile_change_operation,
)
from tilemap_history.runtime import telemetry
from tilemap_history.scene import Scene

from .common import TilePoint, interpolate_line


def _ignore_scene(scene: Scene) -> None:  # pragma: no cover - default hook
    del scene


@dataclass(slots=True)
class ToolContext:
    """Services every tool needs: history, the live scene, a change hook."""

    history: HistoryManager
    get_scene: Callable[[], Optional[Scene]]
    on_scene_change: Callable[[Scene], None] = _ignore_scene
    locked_layers: set[str] = field(default_factory=set)

    def is_locked(self, layer: str) -> bool:
        return layer in self.locked_layers


class Tool:
    name: str = "tool"

    def __init__(self, context: ToolContext) -> None:
        self.context = context

    def commit_tile_changes(
        self,
        scene: Scene,
        changes: Iterable[TileChange],
        *,
        type: OperationType,
        description: str,
    ) -> Optional[TileChangeOperation]:
        """Apply ``changes`` to ``scene`` and record them as one operation."""

        operation = create_tile_change_operation(
            scene,
            changes,
            type=type,
            description=description,
            on_apply=lambda: self.context.on_scene_change(scene),
        )
        if operation is None:
            return None
        operation.apply(scene, Direction.FORWARD)
        self.context.on_scene_change(scene)
        self.context.history.push(operation)
        return operation


class StrokeTool(Tool):
    """Drag tool: one history group per gesture, one operation per step."""

    group_label: str = "Stroke"

    def __init__(self, context: ToolContext, *, brush_size: int = 1) -> None:
        super().__init__(context)
        self.brush_size = brush_size
        self._stroking = False
        self._last: Optional[TilePoint] = None
        self._layer: Optional[str] = None

    def is_active(self) -> bool:
        return self._stroking

    def _begin(self, x: int, y: int, layer: str) -> None:
        if self._stroking:
            self.end()
        self._stroking = True
        self._layer = layer
        self._last = (x, y)
        self.context.history.begin_group(self.group_label)
        telemetry.record_event(
            f"tools.{self.name}.start",
            level="debug",
            data={"x": x, "y": y, "layer": layer},
        )
        self._apply_points([(x, y)])

    def move(self, x: int, y: int) -> None:
        if not self._stroking:
            return
        if self._last is None:
            points = [(x, y)]
        elif self._last == (x, y):
            return
        else:
            points = interpolate_line(self._last[0], self._last[1], x, y)
        self._apply_points(points)
        self._last = (x, y)

    def end(self) -> None:
        if not self._stroking:
            return
        self._stroking = False
        self._last = None
        self._layer = None
        self.context.history.end_group()
        telemetry.record_event(f"tools.{self.name}.end", level="debug")

    def _apply_points(self, points: list[TilePoint]) -> None:  # pragma: no cover
        raise NotImplementedError
