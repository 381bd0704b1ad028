"""Adapter wiring an ``EditorSession`` history into Textual UI callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from tilemap_history.scene import Scene
from tilemap_history.session import EditorSession

MODIFIER_ORDER = ("ctrl", "alt", "shift")
UNDO_KEYS = frozenset({"ctrl+z"})
REDO_KEYS = frozenset({"ctrl+y", "ctrl+shift+z"})


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks the adapter uses to update Textual widgets."""

    update_toolbar: Callable[[bool, bool], None]
    update_status: Callable[[str], None] = _noop
    update_scene: Callable[[Scene], None] = _noop
    log: Callable[[str], None] = _noop


def normalize_key(key: str, modifiers: Iterable[str] = ()) -> str:
    """Fold ``key`` and ``modifiers`` into a Textual-style ``ctrl+shift+z`` token."""

    parts = [part for part in key.lower().split("+") if part]
    if not parts:
        return ""
    base = parts[-1]
    mods = set(parts[:-1])
    mods.update(str(mod).lower() for mod in modifiers)
    if "meta" in mods:
        mods.discard("meta")
        mods.add("alt")
    ordered = [mod for mod in MODIFIER_ORDER if mod in mods]
    return "+".join([*ordered, base])


class TextualHistoryAdapter:
    """Keeps toolbar state in sync and routes undo/redo shortcuts."""

    def __init__(self, session: EditorSession, hooks: TextualUIHooks) -> None:
        self.session = session
        self.hooks = hooks
        self._unsubscribe: Optional[Callable[[], None]] = (
            session.history.events.subscribe(self._on_state_change)
        )
        snapshot = session.history.snapshot()
        self.hooks.update_toolbar(snapshot.can_undo, snapshot.can_redo)

    def handle_textual_key(
        self, key: str, *, modifiers: Iterable[str] = ()
    ) -> Optional[bool]:
        """Run the history command bound to ``key``.

        Returns ``None`` when the key is not a history shortcut, otherwise
        whether the undo or redo took effect.
        """

        token = normalize_key(key, modifiers)
        if token in UNDO_KEYS:
            return self.undo()
        if token in REDO_KEYS:
            return self.redo()
        return None

    def undo(self) -> bool:
        label = self.session.history.peek_undo()
        done = self.session.undo()
        self._after_command("undo", label, done)
        return done

    def redo(self) -> bool:
        label = self.session.history.peek_redo()
        done = self.session.redo()
        self._after_command("redo", label, done)
        return done

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _after_command(self, verb: str, label: Optional[str], done: bool) -> None:
        if done:
            self.hooks.update_status(f"{verb}: {label}" if label else verb)
            scene = self.session.scene
            if scene is not None:
                self.hooks.update_scene(scene)
        else:
            self.hooks.update_status(f"nothing to {verb}")
        self._log("command ->", verb=verb, label=label, done=done)

    def _on_state_change(self, can_undo: bool, can_redo: bool) -> None:
        self.hooks.update_toolbar(can_undo, can_redo)
        self._log("history ->", can_undo=can_undo, can_redo=can_redo)

    def _log(self, prefix: str, **fields: object) -> None:
        history = self.session.history
        snapshot = {
            "undo": history.get_undo_count(),
            "redo": history.get_redo_count(),
            "depth": history.group_depth,
        }
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix] + [f"{key}={value!r}" for key, value in snapshot.items()]
        self.hooks.log(" ".join(parts))


__all__ = ["TextualHistoryAdapter", "TextualUIHooks", "normalize_key"]
