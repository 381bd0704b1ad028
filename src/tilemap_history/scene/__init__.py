"""Scene model mutated by history operations."""

from .model import (
    BINARY_LAYERS,
    EMPTY_TILE,
    LAYER_ORDER,
    EntityInstance,
    LayerType,
    Scene,
    add_entity,
    create_scene,
    find_entity,
    get_tile,
    in_bounds,
    move_entities,
    remove_entities,
    set_entity_properties,
    set_tile,
)
from .validation import SceneValidationError, validate_scene

__all__ = [
    "BINARY_LAYERS",
    "EMPTY_TILE",
    "LAYER_ORDER",
    "EntityInstance",
    "LayerType",
    "Scene",
    "SceneValidationError",
    "add_entity",
    "create_scene",
    "find_entity",
    "get_tile",
    "in_bounds",
    "move_entities",
    "remove_entities",
    "set_entity_properties",
    "set_tile",
    "validate_scene",
]
