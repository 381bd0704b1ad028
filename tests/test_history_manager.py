from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from tilemap_history.history import (
    HistoryManager,
    OperationType,
    TileChange,
    create_tile_change_operation,
    generate_operation_id,
)
from tilemap_history.runtime import HistoryConfig
from tilemap_history.scene import Scene, create_scene, get_tile, set_tile


@dataclass(eq=False)
class RecordingOperation:
    name: str
    log: list[str]
    type: OperationType = OperationType.PAINT
    description: str = ""
    id: str = field(default_factory=generate_operation_id)

    def execute(self) -> None:
        self.log.append(f"execute:{self.name}")

    def undo(self) -> None:
        self.log.append(f"undo:{self.name}")


@dataclass(eq=False)
class ExplodingOperation:
    fail_on: str
    type: OperationType = OperationType.PAINT
    description: str = "explodes"
    id: str = field(default_factory=generate_operation_id)

    def execute(self) -> None:
        if self.fail_on == "execute":
            raise RuntimeError("execute failed")

    def undo(self) -> None:
        if self.fail_on == "undo":
            raise RuntimeError("undo failed")


def make_scene() -> Scene:
    return create_scene("s1", "Scene", 8, 8)


def paint(scene: Scene, x: int, y: int, value: int, layer: str = "ground"):
    old = get_tile(scene, layer, x, y)
    operation = create_tile_change_operation(
        scene,
        [TileChange(layer, x, y, old, value)],
        type=OperationType.PAINT,
        description=f"paint {x},{y}",
    )
    assert operation is not None
    set_tile(scene, layer, x, y, value)
    return operation


def test_new_manager_is_empty() -> None:
    history = HistoryManager()

    assert history.can_undo() is False
    assert history.can_redo() is False
    assert history.get_undo_count() == 0
    assert history.get_redo_count() == 0
    assert history.max_size == 50


def test_undo_and_redo_on_empty_stacks_return_false() -> None:
    notifications: list[tuple[bool, bool]] = []
    history = HistoryManager(on_state_change=lambda u, r: notifications.append((u, r)))

    assert history.undo() is False
    assert history.redo() is False
    assert notifications == []


def test_stack_balance_after_n_undos_and_redos() -> None:
    log: list[str] = []
    history = HistoryManager()
    for index in range(4):
        history.push(RecordingOperation(str(index), log))

    for _ in range(4):
        assert history.undo() is True

    assert history.can_undo() is False
    assert history.can_redo() is True
    assert history.get_redo_count() == 4

    for _ in range(4):
        assert history.redo() is True

    assert history.get_undo_count() == 4
    assert history.can_redo() is False
    assert log == [
        "undo:3",
        "undo:2",
        "undo:1",
        "undo:0",
        "execute:0",
        "execute:1",
        "execute:2",
        "execute:3",
    ]


def test_push_after_undo_invalidates_redo() -> None:
    log: list[str] = []
    history = HistoryManager()
    history.push(RecordingOperation("a", log))
    history.undo()
    assert history.can_redo() is True

    history.push(RecordingOperation("b", log))

    assert history.can_redo() is False
    assert history.get_undo_count() == 1


def test_eviction_drops_oldest_entry() -> None:
    log: list[str] = []
    history = HistoryManager(max_size=2)
    for name in ("first", "second", "third"):
        history.push(RecordingOperation(name, log))

    assert history.get_undo_count() == 2
    assert history.undo() is True
    assert history.undo() is True
    assert history.undo() is False
    assert log == ["undo:third", "undo:second"]


def test_config_max_size_is_respected() -> None:
    history = HistoryManager(config=HistoryConfig(max_size=3))
    log: list[str] = []
    for index in range(10):
        history.push(RecordingOperation(str(index), log))

    assert history.get_undo_count() == 3


def test_invalid_max_size_rejected() -> None:
    with pytest.raises(ValueError):
        HistoryManager(max_size=0)


def test_notifications_fire_after_each_change() -> None:
    notifications: list[tuple[bool, bool]] = []
    history = HistoryManager(on_state_change=lambda u, r: notifications.append((u, r)))
    log: list[str] = []

    history.push(RecordingOperation("a", log))
    history.undo()
    history.redo()
    history.clear()

    assert notifications == [
        (True, False),
        (False, True),
        (True, False),
        (False, False),
    ]


def test_multiple_subscribers_and_unsubscribe() -> None:
    history = HistoryManager()
    toolbar: list[tuple[bool, bool]] = []
    shortcuts: list[tuple[bool, bool]] = []
    history.events.subscribe(lambda u, r: toolbar.append((u, r)))
    stop = history.events.subscribe(lambda u, r: shortcuts.append((u, r)))

    history.push(RecordingOperation("a", []))
    stop()
    history.undo()

    assert toolbar == [(True, False), (False, True)]
    assert shortcuts == [(True, False)]


def test_clear_wipes_all_stacks() -> None:
    log: list[str] = []
    history = HistoryManager()
    history.push(RecordingOperation("a", log))
    history.push(RecordingOperation("b", log))
    history.undo()
    history.begin_group("open")
    history.begin_group("nested")

    history.clear()

    assert history.get_undo_count() == 0
    assert history.get_redo_count() == 0
    assert history.group_depth == 0
    assert history.is_grouping() is False


def test_erase_then_undo_and_redo_restores_tile() -> None:
    scene = make_scene()
    set_tile(scene, "ground", 2, 3, 3)
    history = HistoryManager()
    operation = create_tile_change_operation(
        scene,
        [TileChange("ground", 2, 3, 3, 0)],
        type=OperationType.ERASE,
        description="Erase tiles",
    )
    assert operation is not None
    set_tile(scene, "ground", 2, 3, 0)
    history.push(operation)

    history.undo()
    assert get_tile(scene, "ground", 2, 3) == 3

    history.redo()
    assert get_tile(scene, "ground", 2, 3) == 0


def test_peek_and_snapshot_report_top_entries() -> None:
    scene = make_scene()
    history = HistoryManager()
    history.push(paint(scene, 0, 0, 1))
    history.push(paint(scene, 1, 0, 1))
    history.undo()

    snapshot = history.snapshot()

    assert snapshot.undo_count == 1
    assert snapshot.redo_count == 1
    assert snapshot.next_undo == "paint 0,0"
    assert snapshot.next_redo == "paint 1,0"
    assert snapshot.group_depth == 0


def test_failing_undo_rolls_back_stack_move() -> None:
    notifications: list[tuple[bool, bool]] = []
    history = HistoryManager(on_state_change=lambda u, r: notifications.append((u, r)))
    operation = ExplodingOperation(fail_on="undo")
    history.push(operation)
    notifications.clear()

    with pytest.raises(RuntimeError, match="undo failed"):
        history.undo()

    assert history.get_undo_count() == 1
    assert history.get_redo_count() == 0
    assert notifications == []


def test_failing_redo_rolls_back_stack_move() -> None:
    history = HistoryManager()
    history.push(ExplodingOperation(fail_on="execute"))
    assert history.undo() is True

    with pytest.raises(RuntimeError, match="execute failed"):
        history.redo()

    assert history.get_undo_count() == 0
    assert history.get_redo_count() == 1
