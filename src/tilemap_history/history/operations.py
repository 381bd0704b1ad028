"""Reversible scene operations and the composite that bundles them.

Every concrete operation keeps its delta as plain data and exposes
``apply(scene, direction)``, which touches only the scene passed in. The
``execute``/``undo`` pair used by ``HistoryManager`` applies the same delta to
the scene the producing tool bound at construction time and then fires the
tool's ``on_apply`` hook (re-render, schedule save). That scene reference is
non-owning: the session must ``clear()`` the history before switching scenes.
"""

from __future__ import annotations

import itertools
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import (
    Callable,
    Dict,
    Iterable,
    Optional,
    Protocol,
    Sequence,
    Tuple,
    runtime_checkable,
)

from tilemap_history.scene import (
    EntityInstance,
    Scene,
    add_entity,
    in_bounds,
    move_entities,
    remove_entities,
    set_entity_properties,
)

ApplyHook = Callable[[], None]
EntityPosition = Tuple[str, float, float]
EntityProperties = Tuple[str, Dict[str, object]]

_ids = itertools.count(1)


class OperationType(str, Enum):
    """Closed set of operation tags, used for diagnostics only."""

    PAINT = "paint"
    ERASE = "erase"
    MOVE = "move"
    DELETE = "delete"
    PASTE = "paste"
    FILL = "fill"
    COMPOSITE = "composite"
    ENTITY_ADD = "entity_add"
    ENTITY_DELETE = "entity_delete"
    ENTITY_MOVE = "entity_move"
    ENTITY_DUPLICATE = "entity_duplicate"
    ENTITY_PROPERTY_CHANGE = "entity_property_change"


TILE_OPERATION_TYPES = frozenset(
    {
        OperationType.PAINT,
        OperationType.ERASE,
        OperationType.MOVE,
        OperationType.DELETE,
        OperationType.PASTE,
        OperationType.FILL,
    }
)
ENTITY_PRESENCE_TYPES = frozenset(
    {
        OperationType.ENTITY_ADD,
        OperationType.ENTITY_DELETE,
        OperationType.ENTITY_DUPLICATE,
    }
)


class Direction(str, Enum):
    FORWARD = "forward"
    BACKWARD = "backward"


def generate_operation_id() -> str:
    return f"{int(time.time() * 1000)}-{next(_ids)}"


@runtime_checkable
class Operation(Protocol):
    """Anything the history manager can store: an id, tags and two verbs."""

    id: str
    type: OperationType
    description: str

    def execute(self) -> None:
        """Re-apply the change."""
        ...

    def undo(self) -> None:
        """Apply the exact inverse of ``execute``."""
        ...


@dataclass(frozen=True, slots=True)
class TileChange:
    """Single cell delta on one layer."""

    layer: str
    x: int
    y: int
    old_value: int
    new_value: int

    @property
    def is_noop(self) -> bool:
        return self.old_value == self.new_value

    def value_for(self, direction: Direction) -> int:
        if direction is Direction.FORWARD:
            return self.new_value
        return self.old_value


def _run_hook(hook: Optional[ApplyHook]) -> None:
    if hook is not None:
        hook()


@dataclass(eq=False, slots=True)
class TileChangeOperation:
    """Bundle of tile deltas applied atomically (one stroke step, one fill)."""

    scene: Scene
    changes: Tuple[TileChange, ...]
    type: OperationType = OperationType.PAINT
    description: str = ""
    on_apply: Optional[ApplyHook] = None
    id: str = field(default_factory=generate_operation_id)

    def apply(self, scene: Scene, direction: Direction) -> int:
        """Write the delta into ``scene``; returns the number of cells written.

        Cells outside the scene bounds or on unknown layers are skipped.
        """

        written = 0
        for change in self.changes:
            if not in_bounds(scene, change.x, change.y):
                continue
            grid = scene.layers.get(change.layer)
            if grid is None:
                continue
            grid[change.y][change.x] = change.value_for(direction)
            written += 1
        return written

    def execute(self) -> None:
        self.apply(self.scene, Direction.FORWARD)
        _run_hook(self.on_apply)

    def undo(self) -> None:
        self.apply(self.scene, Direction.BACKWARD)
        _run_hook(self.on_apply)


@dataclass(eq=False, slots=True)
class EntityMoveOperation:
    scene: Scene
    before: Tuple[EntityPosition, ...]
    after: Tuple[EntityPosition, ...]
    description: str = "Move entity"
    on_apply: Optional[ApplyHook] = None
    type: OperationType = OperationType.ENTITY_MOVE
    id: str = field(default_factory=generate_operation_id)

    def apply(self, scene: Scene, direction: Direction) -> int:
        positions = self.after if direction is Direction.FORWARD else self.before
        return move_entities(scene, positions)

    def execute(self) -> None:
        self.apply(self.scene, Direction.FORWARD)
        _run_hook(self.on_apply)

    def undo(self) -> None:
        self.apply(self.scene, Direction.BACKWARD)
        _run_hook(self.on_apply)


@dataclass(eq=False, slots=True)
class EntityPresenceOperation:
    """Adds or removes entity snapshots.

    ``entity_add`` and ``entity_duplicate`` make the entities present on
    ``execute``; ``entity_delete`` makes them absent.
    """

    scene: Scene
    entities: Tuple[EntityInstance, ...]
    type: OperationType = OperationType.ENTITY_ADD
    description: str = "Add entity"
    on_apply: Optional[ApplyHook] = None
    id: str = field(default_factory=generate_operation_id)

    @property
    def present_after_execute(self) -> bool:
        return self.type is not OperationType.ENTITY_DELETE

    def apply(self, scene: Scene, direction: Direction) -> int:
        present = (direction is Direction.FORWARD) == self.present_after_execute
        if present:
            return sum(1 for entity in self.entities if add_entity(scene, entity))
        return len(remove_entities(scene, (entity.id for entity in self.entities)))

    def execute(self) -> None:
        self.apply(self.scene, Direction.FORWARD)
        _run_hook(self.on_apply)

    def undo(self) -> None:
        self.apply(self.scene, Direction.BACKWARD)
        _run_hook(self.on_apply)


@dataclass(eq=False, slots=True)
class EntityPropertyOperation:
    """Swaps whole property snapshots so added and removed keys round-trip."""

    scene: Scene
    before: Tuple[EntityProperties, ...]
    after: Tuple[EntityProperties, ...]
    description: str = "Edit entity properties"
    on_apply: Optional[ApplyHook] = None
    type: OperationType = OperationType.ENTITY_PROPERTY_CHANGE
    id: str = field(default_factory=generate_operation_id)

    def apply(self, scene: Scene, direction: Direction) -> int:
        updates = self.after if direction is Direction.FORWARD else self.before
        return set_entity_properties(scene, updates)

    def execute(self) -> None:
        self.apply(self.scene, Direction.FORWARD)
        _run_hook(self.on_apply)

    def undo(self) -> None:
        self.apply(self.scene, Direction.BACKWARD)
        _run_hook(self.on_apply)


@dataclass(eq=False, slots=True)
class CompositeOperation:
    """Ordered children replayed forward on execute and in reverse on undo."""

    operations: Tuple[Operation, ...]
    description: str = ""
    type: OperationType = OperationType.COMPOSITE
    id: str = field(default_factory=generate_operation_id)

    def __len__(self) -> int:
        return len(self.operations)

    def execute(self) -> None:
        for operation in self.operations:
            operation.execute()

    def undo(self) -> None:
        # later children may overwrite cells written by earlier ones
        for operation in reversed(self.operations):
            operation.undo()

    def apply(self, scene: Scene, direction: Direction) -> int:
        ordered: Iterable[Operation] = self.operations
        if direction is Direction.BACKWARD:
            ordered = reversed(self.operations)
        written = 0
        for operation in ordered:
            apply = getattr(operation, "apply", None)
            if apply is None:
                raise TypeError(
                    f"Operation '{operation.id}' cannot be applied to an explicit scene"
                )
            written += apply(scene, direction)
        return written

    def flatten(self) -> Tuple[Operation, ...]:
        """Leaf operations in execution order."""

        leaves: list[Operation] = []
        for operation in self.operations:
            if isinstance(operation, CompositeOperation):
                leaves.extend(operation.flatten())
            else:
                leaves.append(operation)
        return tuple(leaves)


def create_tile_change_operation(
    scene: Scene,
    changes: Iterable[TileChange],
    *,
    type: OperationType = OperationType.PAINT,
    description: str = "",
    on_apply: Optional[ApplyHook] = None,
) -> Optional[TileChangeOperation]:
    """Build a tile operation from ``changes``, dropping no-op deltas.

    Returns ``None`` when no change would alter the scene.
    """

    if type not in TILE_OPERATION_TYPES:
        raise ValueError(f"'{type.value}' is not a tile operation type")
    effective = tuple(change for change in changes if not change.is_noop)
    if not effective:
        return None
    return TileChangeOperation(
        scene=scene,
        changes=effective,
        type=type,
        description=description,
        on_apply=on_apply,
    )


def create_composite_operation(
    operations: Sequence[Operation], description: str
) -> Optional[CompositeOperation]:
    if not operations:
        return None
    return CompositeOperation(operations=tuple(operations), description=description)


def create_entity_move_operation(
    scene: Scene,
    before: Sequence[EntityPosition],
    after: Sequence[EntityPosition],
    *,
    description: str | None = None,
    on_apply: Optional[ApplyHook] = None,
) -> Optional[EntityMoveOperation]:
    if not after or tuple(before) == tuple(after):
        return None
    if description is None:
        description = "Move entities" if len(after) > 1 else "Move entity"
    return EntityMoveOperation(
        scene=scene,
        before=tuple(before),
        after=tuple(after),
        description=description,
        on_apply=on_apply,
    )


def create_entity_presence_operation(
    scene: Scene,
    entities: Sequence[EntityInstance],
    *,
    type: OperationType,
    description: str = "",
    on_apply: Optional[ApplyHook] = None,
) -> Optional[EntityPresenceOperation]:
    if type not in ENTITY_PRESENCE_TYPES:
        raise ValueError(f"'{type.value}' is not an entity presence type")
    if not entities:
        return None
    return EntityPresenceOperation(
        scene=scene,
        entities=tuple(entity.copy() for entity in entities),
        type=type,
        description=description,
        on_apply=on_apply,
    )


def create_entity_property_operation(
    scene: Scene,
    before: Sequence[EntityProperties],
    after: Sequence[EntityProperties],
    *,
    description: str = "Edit entity properties",
    on_apply: Optional[ApplyHook] = None,
) -> Optional[EntityPropertyOperation]:
    previous = tuple((entity_id, dict(props)) for entity_id, props in before)
    following = tuple((entity_id, dict(props)) for entity_id, props in after)
    if not following or previous == following:
        return None
    return EntityPropertyOperation(
        scene=scene,
        before=previous,
        after=following,
        description=description,
        on_apply=on_apply,
    )


__all__ = [
    "ApplyHook",
    "CompositeOperation",
    "Direction",
    "EntityMoveOperation",
    "EntityPosition",
    "EntityProperties",
    "EntityPropertyOperation",
    "EntityPresenceOperation",
    "Operation",
    "OperationType",
    "TileChange",
    "TileChangeOperation",
    "create_composite_operation",
    "create_entity_move_operation",
    "create_entity_presence_operation",
    "create_entity_property_operation",
    "create_tile_change_operation",
    "generate_operation_id",
]
