"""Shape checks for scenes handed to the history engine."""

from __future__ import annotations

from typing import Optional, Tuple

from .model import LAYER_ORDER, Scene


class SceneValidationError(RuntimeError):
    """Raised when a scene's layers or entities are malformed."""

    def __init__(
        self,
        message: str,
        *,
        layer: str | None = None,
        cell: Optional[Tuple[int, int]] = None,
    ) -> None:
        super().__init__(message)
        self.layer = layer
        self.cell = cell


def validate_scene(scene: Scene) -> Scene:
    if scene.width <= 0 or scene.height <= 0:
        raise SceneValidationError("Scene dimensions must be positive")
    for layer in LAYER_ORDER:
        grid = scene.layers.get(layer)
        if grid is None:
            raise SceneValidationError("Missing layer", layer=layer)
        if len(grid) != scene.height:
            raise SceneValidationError("Row count mismatch", layer=layer)
        for y, row in enumerate(grid):
            if len(row) != scene.width:
                raise SceneValidationError(
                    "Column count mismatch", layer=layer, cell=(0, y)
                )
    seen: set[str] = set()
    for entity in scene.entities:
        if entity.id in seen:
            raise SceneValidationError(f"Duplicate entity id '{entity.id}'")
        seen.add(entity.id)
    return scene
