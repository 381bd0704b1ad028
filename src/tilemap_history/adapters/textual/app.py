"""Executable Textual demo: paint a tilemap layer and undo/redo the edits."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

try:  # pragma: no cover - imported only when the demo runs
    from textual import events
    from textual.app import App, ComposeResult
    from textual.containers import Vertical
    from textual.widgets import Footer, Header, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use tilemap_history.adapters.textual.app"
    ) from exc

from tilemap_history.runtime.config import HistoryConfig
from tilemap_history.scene import Scene, create_scene, get_tile
from tilemap_history.session import EditorSession
from tilemap_history.tools import EraseTool, FillTool, PaintTool

from .controller import TextualHistoryAdapter, TextualUIHooks

MOVES = {"up": (0, -1), "down": (0, 1), "left": (-1, 0), "right": (1, 0)}
GLYPHS = ".123456789"


@dataclass
class CursorState:
    x: int = 0
    y: int = 0
    value: int = 1
    layer: str = "ground"


def render_layer(scene: Scene, layer: str, cursor: CursorState) -> str:
    rows = []
    for y in range(scene.height):
        cells = []
        for x in range(scene.width):
            value = get_tile(scene, layer, x, y)
            glyph = GLYPHS[value] if 0 <= value < len(GLYPHS) else "#"
            at_cursor = (x, y) == (cursor.x, cursor.y)
            cells.append(f"[{glyph}]" if at_cursor else f" {glyph} ")
        rows.append("".join(cells))
    return "\n".join(rows)


class TilemapHistoryApp(App[None]):
    """Single-layer editor: arrows move, p toggles the pen, x erases, f fills."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#scene-view {
		height: 1fr;
		border: round $accent;
		padding: 0 1;
	}

	#toolbar {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}

	#status-line {
		height: 1;
		background: $surface-darken-2;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self, *, width: int = 16, height: int = 10, max_size: int = 50
    ) -> None:
        super().__init__()
        self.session = EditorSession(
            config=HistoryConfig(max_size=max_size),
            scene=create_scene("demo", "Demo", width, height),
        )
        context = self.session.tool_context()
        self.paint = PaintTool(context)
        self.erase = EraseTool(context)
        self.filler = FillTool(context)
        self.cursor = CursorState()
        self.adapter: TextualHistoryAdapter | None = None
        self._scene_widget: Static | None = None
        self._toolbar_widget: Static | None = None
        self._status_widget: Static | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="scene-area"):
            self._scene_widget = Static("", id="scene-view")
            yield self._scene_widget
        self._toolbar_widget = Static("", id="toolbar")
        self._status_widget = Static("", id="status-line")
        yield self._toolbar_widget
        yield self._status_widget
        yield Footer()

    def on_mount(self) -> None:
        hooks = TextualUIHooks(
            update_toolbar=self._update_toolbar,
            update_status=self._update_status,
            update_scene=lambda scene: self._redraw(),
        )
        self.adapter = TextualHistoryAdapter(self.session, hooks)
        self._redraw()

    def on_unmount(self) -> None:
        if self.adapter:
            self.adapter.detach()

    def on_key(self, event: events.Key) -> None:
        if self.adapter is None:
            return
        if self.adapter.handle_textual_key(event.key) is not None:
            event.stop()
            return
        if self._handle_edit_key(event.key, event.character):
            self._redraw()
            event.stop()

    def _handle_edit_key(self, key: str, character: Optional[str]) -> bool:
        cursor = self.cursor
        scene = self.session.scene
        if scene is None:
            return False
        if key in MOVES:
            dx, dy = MOVES[key]
            cursor.x = min(max(cursor.x + dx, 0), scene.width - 1)
            cursor.y = min(max(cursor.y + dy, 0), scene.height - 1)
            self.paint.move(cursor.x, cursor.y)
            return True
        if key == "p":
            if self.paint.is_active():
                self.paint.end()
                self._update_status("pen up")
            else:
                self.paint.start(
                    cursor.x, cursor.y, layer=cursor.layer, value=cursor.value
                )
                self._update_status(f"pen down ({cursor.value})")
            return True
        if key == "x":
            self.erase.start(cursor.x, cursor.y, layer=cursor.layer)
            self.erase.end()
            return True
        if key == "f":
            result = self.filler.fill(
                cursor.x, cursor.y, layer=cursor.layer, value=cursor.value
            )
            self._update_status(f"filled {result.count} tiles")
            return True
        if character and character in GLYPHS[1:]:
            cursor.value = int(character)
            self._update_status(f"tile {cursor.value}")
            return True
        return False

    def _redraw(self) -> None:
        scene = self.session.scene
        if self._scene_widget and scene is not None:
            text = render_layer(scene, self.cursor.layer, self.cursor)
            self._scene_widget.update(text)

    def _update_toolbar(self, can_undo: bool, can_redo: bool) -> None:
        if self._toolbar_widget is None:
            return
        undo = "[b]undo[/b]" if can_undo else "[dim]undo[/dim]"
        redo = "[b]redo[/b]" if can_redo else "[dim]redo[/dim]"
        self._toolbar_widget.update(f"{undo}  {redo}")

    def _update_status(self, status: str) -> None:
        if self._status_widget:
            self._status_widget.update(status)


def _parse_args(
    argv: Optional[Sequence[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> argparse.Namespace:
    defaults = HistoryConfig.from_env(environ)
    parser = argparse.ArgumentParser(description="Run the tilemap history demo.")
    parser.add_argument("--width", type=int, default=16, help="Scene width in tiles")
    parser.add_argument("--height", type=int, default=10, help="Scene height in tiles")
    parser.add_argument(
        "--max-history",
        type=int,
        default=defaults.max_size,
        help="Undo depth (default: TILEMAP_HISTORY_MAX_SIZE or 50)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    app = TilemapHistoryApp(
        width=args.width, height=args.height, max_size=args.max_history
    )
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
