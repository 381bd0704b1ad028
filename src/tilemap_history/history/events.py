"""Availability notifications for undo/redo controls."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List

StateChangeCallback = Callable[[bool, bool], None]


@dataclass(frozen=True, slots=True)
class HistorySnapshot:
    """Point-in-time view of the manager, for toolbars and diagnostics."""

    can_undo: bool
    can_redo: bool
    undo_count: int
    redo_count: int
    group_depth: int
    next_undo: str | None = None
    next_redo: str | None = None


class HistoryEvents:
    """Subscriber list receiving ``(can_undo, can_redo)`` after each change."""

    def __init__(self) -> None:
        self._subscribers: List[StateChangeCallback] = []

    def subscribe(self, callback: StateChangeCallback) -> Callable[[], None]:
        """Register ``callback``; returns a function that unsubscribes it."""

        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            self.unsubscribe(callback)

        return _unsubscribe

    def unsubscribe(self, callback: StateChangeCallback) -> bool:
        try:
            self._subscribers.remove(callback)
        except ValueError:
            return False
        return True

    def emit(self, can_undo: bool, can_redo: bool) -> None:
        # copy: a subscriber may unsubscribe itself
        for callback in list(self._subscribers):
            callback(can_undo, can_redo)

    def __len__(self) -> int:
        return len(self._subscribers)


__all__ = ["HistoryEvents", "HistorySnapshot", "StateChangeCallback"]
