"""In-memory scene data: tile layers plus placed entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Literal, Optional, Sequence, Tuple

LayerType = Literal["ground", "props", "collision", "triggers"]
TileLayer = List[List[int]]

LAYER_ORDER: Tuple[LayerType, ...] = ("ground", "props", "collision", "triggers")
BINARY_LAYERS: frozenset[str] = frozenset({"collision", "triggers"})
EMPTY_TILE = 0


@dataclass(slots=True)
class EntityInstance:
    """Placed entity; ``x``/``y`` are pixel coordinates."""

    id: str
    type: str
    x: float
    y: float
    properties: Dict[str, object] = field(default_factory=dict)

    def copy(self) -> "EntityInstance":
        return EntityInstance(
            id=self.id,
            type=self.type,
            x=self.x,
            y=self.y,
            properties=dict(self.properties),
        )


@dataclass(slots=True)
class Scene:
    """Mutable tilemap scene. Layers are ``height`` rows of ``width`` cells."""

    id: str
    name: str
    width: int
    height: int
    tile_size: int = 16
    layers: Dict[str, TileLayer] = field(default_factory=dict)
    entities: List[EntityInstance] = field(default_factory=list)

    def layer(self, name: str) -> Optional[TileLayer]:
        return self.layers.get(name)


def empty_layer(width: int, height: int) -> TileLayer:
    return [[EMPTY_TILE] * width for _ in range(height)]


def create_scene(
    scene_id: str, name: str, width: int, height: int, tile_size: int = 16
) -> Scene:
    if width <= 0 or height <= 0:
        raise ValueError("scene dimensions must be positive")
    return Scene(
        id=scene_id,
        name=name,
        width=width,
        height=height,
        tile_size=tile_size,
        layers={layer: empty_layer(width, height) for layer in LAYER_ORDER},
    )


def in_bounds(scene: Scene, x: int, y: int) -> bool:
    return 0 <= x < scene.width and 0 <= y < scene.height


def get_tile(scene: Scene, layer: str, x: int, y: int) -> int:
    grid = scene.layers.get(layer)
    if grid is None or not in_bounds(scene, x, y):
        return EMPTY_TILE
    return grid[y][x]


def set_tile(scene: Scene, layer: str, x: int, y: int, value: int) -> bool:
    """Write ``value``; returns ``False`` when the cell does not exist."""

    grid = scene.layers.get(layer)
    if grid is None or not in_bounds(scene, x, y):
        return False
    grid[y][x] = value
    return True


def find_entity(scene: Scene, entity_id: str) -> Optional[EntityInstance]:
    for entity in scene.entities:
        if entity.id == entity_id:
            return entity
    return None


def add_entity(scene: Scene, entity: EntityInstance) -> bool:
    if find_entity(scene, entity.id) is not None:
        return False
    scene.entities.append(entity.copy())
    return True


def remove_entities(scene: Scene, entity_ids: Iterable[str]) -> List[EntityInstance]:
    targets = set(entity_ids)
    removed = [entity for entity in scene.entities if entity.id in targets]
    scene.entities[:] = [e for e in scene.entities if e.id not in targets]
    return removed


def move_entities(
    scene: Scene, positions: Sequence[Tuple[str, float, float]]
) -> int:
    moved = 0
    for entity_id, x, y in positions:
        entity = find_entity(scene, entity_id)
        if entity is None:
            continue
        entity.x = x
        entity.y = y
        moved += 1
    return moved


def set_entity_properties(
    scene: Scene, updates: Sequence[Tuple[str, Dict[str, object]]]
) -> int:
    """Replace each listed entity's properties with a copy of the given dict."""

    updated = 0
    for entity_id, properties in updates:
        entity = find_entity(scene, entity_id)
        if entity is None:
            continue
        entity.properties = dict(properties)
        updated += 1
    return updated


__all__ = [
    "BINARY_LAYERS",
    "EMPTY_TILE",
    "EntityInstance",
    "LAYER_ORDER",
    "LayerType",
    "Scene",
    "TileLayer",
    "add_entity",
    "create_scene",
    "empty_layer",
    "find_entity",
    "get_tile",
    "in_bounds",
    "move_entities",
    "remove_entities",
    "set_entity_properties",
    "set_tile",
]
