"""Operations, composites and the undo/redo history manager."""

from .events import HistoryEvents, HistorySnapshot, StateChangeCallback
from .manager import GroupFrame, HistoryManager
from .operations import (
    CompositeOperation,
    Direction,
    EntityMoveOperation,
    EntityPresenceOperation,
    EntityPropertyOperation,
    Operation,
    OperationType,
    TileChange,
    TileChangeOperation,
    create_composite_operation,
    create_entity_move_operation,
    create_entity_presence_operation,
    create_entity_property_operation,
    create_tile_change_operation,
    generate_operation_id,
)

__all__ = [
    "CompositeOperation",
    "Direction",
    "EntityMoveOperation",
    "EntityPresenceOperation",
    "EntityPropertyOperation",
    "GroupFrame",
    "HistoryEvents",
    "HistoryManager",
    "HistorySnapshot",
    "Operation",
    "OperationType",
    "StateChangeCallback",
    "TileChange",
    "TileChangeOperation",
    "create_composite_operation",
    "create_entity_move_operation",
    "create_entity_presence_operation",
    "create_entity_property_operation",
    "create_tile_change_operation",
    "generate_operation_id",
]
