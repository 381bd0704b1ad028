"""Entity placement edits recorded as history operations."""

from __future__ import annotations

import itertools
from typing import Callable, Mapping, Optional, Sequence

from tilemap_history.history import (
    EntityMoveOperation,
    EntityPresenceOperation,
    EntityPropertyOperation,
    OperationType,
    create_entity_move_operation,
    create_entity_presence_operation,
    create_entity_property_operation,
)
from tilemap_history.history.operations import EntityPosition, EntityProperties
from tilemap_history.scene import (
    EntityInstance,
    Scene,
    add_entity,
    find_entity,
    move_entities,
    remove_entities,
    set_entity_properties,
)

from .base import Tool, ToolContext

_duplicate_ids = itertools.count(1)


def default_entity_id() -> str:
    return f"e_{next(_duplicate_ids)}"


class EntityTool(Tool):
    name = "entity"

    def __init__(
        self,
        context: ToolContext,
        *,
        id_factory: Callable[[], str] = default_entity_id,
    ) -> None:
        super().__init__(context)
        self.id_factory = id_factory

    def add(self, entity: EntityInstance) -> Optional[EntityPresenceOperation]:
        scene = self.context.get_scene()
        if scene is None or not add_entity(scene, entity):
            return None
        return self._record_presence(
            scene, [entity], OperationType.ENTITY_ADD, "Add entity"
        )

    def delete(self, entity_ids: Sequence[str]) -> Optional[EntityPresenceOperation]:
        scene = self.context.get_scene()
        if scene is None:
            return None
        removed = remove_entities(scene, entity_ids)
        if not removed:
            return None
        description = "Delete entities" if len(removed) > 1 else "Delete entity"
        return self._record_presence(
            scene, removed, OperationType.ENTITY_DELETE, description
        )

    def duplicate(
        self,
        entity_ids: Sequence[str],
        *,
        offset: Optional[tuple[float, float]] = None,
    ) -> Optional[EntityPresenceOperation]:
        """Clone entities under fresh ids, shifted by ``offset``.

        The offset defaults to one tile in each direction.
        """

        scene = self.context.get_scene()
        if scene is None:
            return None
        if offset is None:
            offset = (scene.tile_size, scene.tile_size)
        duplicates = []
        for entity_id in entity_ids:
            source = find_entity(scene, entity_id)
            if source is None:
                continue
            clone = source.copy()
            clone.id = self.id_factory()
            clone.x += offset[0]
            clone.y += offset[1]
            if add_entity(scene, clone):
                duplicates.append(clone)
        if not duplicates:
            return None
        if len(duplicates) > 1:
            description = "Duplicate entities"
        else:
            description = "Duplicate entity"
        return self._record_presence(
            scene, duplicates, OperationType.ENTITY_DUPLICATE, description
        )

    def move(
        self, positions: Sequence[EntityPosition]
    ) -> Optional[EntityMoveOperation]:
        """Move entities to absolute pixel ``positions``."""

        scene = self.context.get_scene()
        if scene is None:
            return None
        before: list[EntityPosition] = []
        after: list[EntityPosition] = []
        for entity_id, x, y in positions:
            entity = find_entity(scene, entity_id)
            if entity is None:
                continue
            before.append((entity_id, entity.x, entity.y))
            after.append((entity_id, x, y))
        operation = create_entity_move_operation(
            scene,
            before,
            after,
            on_apply=lambda: self.context.on_scene_change(scene),
        )
        if operation is None:
            return None
        move_entities(scene, after)
        self.context.on_scene_change(scene)
        self.context.history.push(operation)
        return operation

    def update_properties(
        self,
        entity_ids: Sequence[str],
        properties: Mapping[str, object],
        *,
        description: Optional[str] = None,
    ) -> Optional[EntityPropertyOperation]:
        """Merge ``properties`` into each entity and record the edit."""

        scene = self.context.get_scene()
        if scene is None:
            return None
        before: list[EntityProperties] = []
        after: list[EntityProperties] = []
        for entity_id in entity_ids:
            entity = find_entity(scene, entity_id)
            if entity is None:
                continue
            before.append((entity_id, dict(entity.properties)))
            after.append((entity_id, {**entity.properties, **properties}))
        if description is None:
            names = ", ".join(sorted(properties))
            description = f"Edit {names}" if names else "Edit entity properties"
        operation = create_entity_property_operation(
            scene,
            before,
            after,
            description=description,
            on_apply=lambda: self.context.on_scene_change(scene),
        )
        if operation is None:
            return None
        set_entity_properties(scene, operation.after)
        self.context.on_scene_change(scene)
        self.context.history.push(operation)
        return operation

    def _record_presence(
        self,
        scene: Scene,
        entities: Sequence[EntityInstance],
        type: OperationType,
        description: str,
    ) -> Optional[EntityPresenceOperation]:
        operation = create_entity_presence_operation(
            scene,
            entities,
            type=type,
            description=description,
            on_apply=lambda: self.context.on_scene_change(scene),
        )
        if operation is None:
            return None
        self.context.on_scene_change(scene)
        self.context.history.push(operation)
        return operation
