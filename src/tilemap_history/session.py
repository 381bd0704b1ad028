"""Editor session: one live scene bound to one history."""

from __future__ import annotations

from typing import Optional

from tilemap_history.history import HistoryManager
from tilemap_history.runtime import telemetry
from tilemap_history.runtime.config import HistoryConfig
from tilemap_history.scene import Scene, validate_scene
from tilemap_history.tools import ToolContext


class EditorSession:
    """Owns the history for an editing session and tracks the active scene.

    Installing a different scene object clears the history first, even when it
    shares the previous scene's id, since stored operations reference the
    object they were computed against.
    """

    def __init__(
        self,
        *,
        history: Optional[HistoryManager] = None,
        config: Optional[HistoryConfig] = None,
        scene: Optional[Scene] = None,
    ) -> None:
        self.history = history or HistoryManager(config=config)
        self._scene: Optional[Scene] = None
        self._revision = 0
        if scene is not None:
            self.set_scene(scene)

    @property
    def scene(self) -> Optional[Scene]:
        return self._scene

    @property
    def revision(self) -> int:
        """Bumped whenever an operation or tool reports a scene change."""

        return self._revision

    def set_scene(self, scene: Optional[Scene], *, clear_history: bool = True) -> None:
        if scene is not None:
            validate_scene(scene)
        previous = self._scene
        switching = scene is not previous
        if clear_history and switching:
            self.history.clear()
        self._scene = scene
        telemetry.record_event(
            "session.scene",
            level="debug",
            data={
                "scene": scene.id if scene else None,
                "cleared": clear_history and switching,
            },
        )

    def mark_changed(self, scene: Scene) -> None:
        if scene is self._scene:
            self._revision += 1

    def tool_context(self, *, locked_layers: Optional[set[str]] = None) -> ToolContext:
        return ToolContext(
            history=self.history,
            get_scene=lambda: self._scene,
            on_scene_change=self.mark_changed,
            locked_layers=set(locked_layers or ()),
        )

    def undo(self) -> bool:
        return self.history.undo()

    def redo(self) -> bool:
        return self.history.redo()


__all__ = ["EditorSession"]
