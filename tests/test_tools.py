from __future__ import annotations

from typing import Optional

import pytest

from tilemap_history.history import HistoryManager, OperationType
from tilemap_history.scene import (
    EntityInstance,
    Scene,
    create_scene,
    find_entity,
    get_tile,
    set_tile,
)
from tilemap_history.tools import (
    EntityTool,
    EraseTool,
    FillTool,
    PaintTool,
    Region,
    RegionTool,
    ToolContext,
    brush_footprint,
    copy_region,
    flood_fill,
    interpolate_line,
)


def make_context(
    scene: Optional[Scene] = None, *, locked: tuple[str, ...] = ()
) -> tuple[ToolContext, Scene, list[Scene]]:
    scene = scene or create_scene("s", "Scene", 8, 6)
    changes: list[Scene] = []
    context = ToolContext(
        history=HistoryManager(),
        get_scene=lambda: scene,
        on_scene_change=changes.append,
        locked_layers=set(locked),
    )
    return context, scene, changes


def row(scene: Scene, y: int, layer: str = "ground") -> list[int]:
    return [get_tile(scene, layer, x, y) for x in range(scene.width)]


def test_interpolate_line_is_inclusive() -> None:
    assert interpolate_line(0, 0, 3, 0) == [(0, 0), (1, 0), (2, 0), (3, 0)]
    assert interpolate_line(2, 2, 2, 2) == [(2, 2)]
    assert interpolate_line(0, 0, 2, 2) == [(0, 0), (1, 1), (2, 2)]


def test_brush_footprints() -> None:
    assert brush_footprint(1, 1, 1) == [(1, 1)]
    assert len(brush_footprint(1, 1, 2)) == 4
    assert (0, 0) in brush_footprint(1, 1, 3)
    with pytest.raises(ValueError):
        brush_footprint(0, 0, 4)


def test_paint_stroke_is_one_undo_entry() -> None:
    context, scene, changes = make_context()
    tool = PaintTool(context)

    assert tool.start(0, 2, layer="ground", value=5) is True
    tool.move(4, 2)
    tool.end()

    assert row(scene, 2)[:5] == [5] * 5
    assert context.history.get_undo_count() == 1
    assert context.history.peek_undo() == "Paint tiles"
    assert changes

    context.history.undo()
    assert row(scene, 2) == [0] * 8

    context.history.redo()
    assert row(scene, 2)[:5] == [5] * 5


def test_paint_collision_layer_uses_binary_value() -> None:
    context, scene, _ = make_context()
    tool = PaintTool(context)

    tool.start(1, 1, layer="collision", value=42)
    tool.end()

    assert get_tile(scene, "collision", 1, 1) == 1


def test_paint_without_value_on_graphic_layer_does_nothing() -> None:
    context, _, _ = make_context()
    tool = PaintTool(context)

    assert tool.start(1, 1, layer="props") is False
    assert context.history.group_depth == 0


def test_paint_on_locked_layer_is_refused() -> None:
    context, scene, _ = make_context(locked=("ground",))
    tool = PaintTool(context)

    assert tool.start(0, 0, layer="ground", value=3) is False
    assert get_tile(scene, "ground", 0, 0) == 0


def test_erase_stroke_skips_empty_cells() -> None:
    context, scene, _ = make_context()
    set_tile(scene, "ground", 2, 0, 3)
    tool = EraseTool(context)

    tool.start(0, 0, layer="ground")
    tool.move(3, 0)
    tool.end()

    assert get_tile(scene, "ground", 2, 0) == 0
    assert context.history.get_undo_count() == 1
    context.history.undo()
    assert get_tile(scene, "ground", 2, 0) == 3


def test_erase_stroke_over_empty_cells_leaves_no_entry() -> None:
    context, _, _ = make_context()
    tool = EraseTool(context)

    tool.start(0, 0, layer="ground")
    tool.end()

    assert context.history.get_undo_count() == 0


def test_brush_size_three_erases_block() -> None:
    context, scene, _ = make_context()
    for y in range(3):
        for x in range(3):
            set_tile(scene, "props", x, y, 2)
    tool = EraseTool(context, brush_size=3)

    tool.start(1, 1, layer="props")
    tool.end()

    assert all(get_tile(scene, "props", x, y) == 0 for x in range(3) for y in range(3))


def test_flood_fill_collects_connected_region() -> None:
    scene = create_scene("s", "Scene", 4, 4)
    for y in range(4):
        set_tile(scene, "ground", 2, y, 9)

    result = flood_fill(scene, "ground", 0, 0, 1)

    assert result.count == 8
    assert result.target_value == 0
    assert result.limit_reached is False
    assert get_tile(scene, "ground", 0, 0) == 0


def test_flood_fill_limit() -> None:
    scene = create_scene("s", "Scene", 5, 5)

    result = flood_fill(scene, "ground", 0, 0, 1, max_tiles=3)

    assert result.count == 3
    assert result.limit_reached is True


def test_fill_tool_pushes_single_fill_operation() -> None:
    context, scene, _ = make_context()
    tool = FillTool(context)

    result = tool.fill(0, 0, layer="ground", value=4)

    assert result.count == scene.width * scene.height
    assert context.history.get_undo_count() == 1
    context.history.undo()
    assert row(scene, 0) == [0] * scene.width


def test_fill_same_value_is_noop() -> None:
    context, _, _ = make_context()
    tool = FillTool(context)

    result = tool.fill(0, 0, layer="ground", value=0)

    assert result.count == 0
    assert context.history.can_undo() is False


def test_region_delete_and_undo() -> None:
    context, scene, _ = make_context()
    set_tile(scene, "ground", 1, 1, 7)
    set_tile(scene, "ground", 2, 1, 8)
    tool = RegionTool(context)

    operation = tool.delete(Region("ground", 1, 1, 2, 1))

    assert operation is not None
    assert operation.type is OperationType.DELETE
    assert row(scene, 1)[1:3] == [0, 0]
    context.history.undo()
    assert row(scene, 1)[1:3] == [7, 8]


def test_region_paste_writes_grid() -> None:
    context, scene, _ = make_context()
    tool = RegionTool(context)

    operation = tool.paste("ground", 6, 0, [[1, 2, 3]])

    assert operation is not None
    assert operation.type is OperationType.PASTE
    assert row(scene, 0)[6:] == [1, 2]


def test_region_move_vacates_source() -> None:
    context, scene, _ = make_context()
    set_tile(scene, "ground", 0, 0, 5)
    set_tile(scene, "ground", 1, 0, 6)
    tool = RegionTool(context)
    region = Region("ground", 0, 0, 2, 1)

    operation = tool.move(region, 1, 0)

    assert operation is not None
    assert row(scene, 0)[:3] == [0, 5, 6]
    assert copy_region(scene, region.offset(1, 0)) == [[5, 6]]
    context.history.undo()
    assert row(scene, 0)[:3] == [5, 6, 0]


def test_entity_tool_add_duplicate_delete_move() -> None:
    context, scene, _ = make_context()
    ids = iter(["copy-1"])
    tool = EntityTool(context, id_factory=lambda: next(ids))
    history = context.history

    tool.add(EntityInstance(id="e1", type="coin", x=0, y=0))
    tool.duplicate(["e1"], offset=(16, 0))
    tool.move([("e1", 8, 8)])
    tool.delete(["e1", "copy-1"])

    assert scene.entities == []
    assert history.get_undo_count() == 4
    assert [op.type for op in history._undo_stack] == [
        OperationType.ENTITY_ADD,
        OperationType.ENTITY_DUPLICATE,
        OperationType.ENTITY_MOVE,
        OperationType.ENTITY_DELETE,
    ]

    history.undo()
    assert {entity.id for entity in scene.entities} == {"e1", "copy-1"}
    history.undo()
    moved = find_entity(scene, "e1")
    assert moved is not None and (moved.x, moved.y) == (0, 0)
    history.undo()
    assert find_entity(scene, "copy-1") is None
    history.undo()
    assert scene.entities == []


def test_entity_tool_update_properties_round_trip() -> None:
    context, scene, changes = make_context()
    tool = EntityTool(context)
    tool.add(EntityInstance(id="e1", type="door", x=0, y=0, properties={"hp": 3}))
    tool.add(EntityInstance(id="e2", type="door", x=16, y=0))
    history = context.history

    operation = tool.update_properties(["e1", "e2", "missing"], {"locked": True})

    assert operation is not None
    assert operation.type is OperationType.ENTITY_PROPERTY_CHANGE
    assert operation.description == "Edit locked"
    first = find_entity(scene, "e1")
    second = find_entity(scene, "e2")
    assert first is not None and first.properties == {"hp": 3, "locked": True}
    assert second is not None and second.properties == {"locked": True}
    assert history.get_undo_count() == 3

    assert history.undo() is True
    assert first.properties == {"hp": 3}
    assert second.properties == {}
    assert history.redo() is True
    assert first.properties == {"hp": 3, "locked": True}
    assert changes[-1] is scene


def test_entity_tool_update_properties_without_change_records_nothing() -> None:
    context, _, _ = make_context()
    tool = EntityTool(context)
    tool.add(EntityInstance(id="e1", type="door", x=0, y=0, properties={"hp": 3}))

    assert tool.update_properties(["e1"], {"hp": 3}) is None
    assert tool.update_properties(["missing"], {"hp": 1}) is None
    assert context.history.get_undo_count() == 1


def test_entity_duplicate_offsets_by_tile_size() -> None:
    scene = create_scene("s", "Scene", 8, 6, tile_size=32)
    context, _, _ = make_context(scene)
    tool = EntityTool(context, id_factory=lambda: "copy")
    tool.add(EntityInstance(id="e1", type="coin", x=8, y=4))

    tool.duplicate(["e1"])

    clone = find_entity(scene, "copy")
    assert clone is not None and (clone.x, clone.y) == (40, 36)
