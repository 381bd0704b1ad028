"""Undo/redo stacks with nested grouping and availability notifications."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from typing import Iterator, List, Optional

from tilemap_history.runtime import telemetry
from tilemap_history.runtime.config import HistoryConfig

from .events import HistoryEvents, HistorySnapshot, StateChangeCallback
from .operations import CompositeOperation, Operation, create_composite_operation


@dataclass(slots=True)
class GroupFrame:
    """Operations collected since the matching ``begin_group``."""

    description: str
    operations: List[Operation] = field(default_factory=list)


class HistoryManager:
    """Owns the undo stack, the redo stack and the grouping stack.

    All methods run synchronously on the caller's thread. The manager never
    touches the scene itself; stored operations do, when undone or redone.
    """

    def __init__(
        self,
        *,
        max_size: Optional[int] = None,
        on_state_change: Optional[StateChangeCallback] = None,
        config: Optional[HistoryConfig] = None,
        events: Optional[HistoryEvents] = None,
    ) -> None:
        config = config or HistoryConfig()
        if max_size is not None:
            config = replace(config, max_size=max_size)
        self.config = config
        self.events = events or HistoryEvents()
        if on_state_change is not None:
            self.events.subscribe(on_state_change)
        self._undo_stack: List[Operation] = []
        self._redo_stack: List[Operation] = []
        self._groups: List[GroupFrame] = []

    @property
    def max_size(self) -> int:
        return self.config.max_size

    @property
    def group_depth(self) -> int:
        return len(self._groups)

    def is_grouping(self) -> bool:
        return bool(self._groups)

    def push(self, operation: Operation) -> None:
        if self._groups:
            self._push_to_group(operation)
            self._notify()
            return
        self._push_to_undo(operation)

    def begin_group(self, description: str) -> None:
        self._groups.append(GroupFrame(description=description))
        self._trace("history.group_begin", description=description)

    def end_group(self) -> None:
        """Close the innermost group.

        An empty group vanishes. Otherwise its operations become one
        composite, pushed into the enclosing group if any, else onto the
        undo stack.
        """

        if not self._groups:
            return
        frame = self._groups.pop()
        composite = create_composite_operation(frame.operations, frame.description)
        if composite is None:
            self._trace("history.group_discarded", description=frame.description)
            return

        with telemetry.span(
            "history::end_group",
            logger_name=self.config.logger_name,
            component="history",
            metadata={
                "description": frame.description,
                "operations": len(composite),
                "depth": len(self._groups),
            },
        ):
            if self._groups:
                self._push_to_group(composite)
                self._notify()
            else:
                self._push_to_undo(composite)

    @contextmanager
    def group(self, description: str) -> Iterator["HistoryManager"]:
        """``begin_group``/``end_group`` around a block, closing on error too."""

        self.begin_group(description)
        try:
            yield self
        finally:
            self.end_group()

    def undo(self) -> bool:
        if not self._undo_stack:
            return False
        operation = self._undo_stack.pop()
        with telemetry.span(
            "history::undo",
            logger_name=self.config.logger_name,
            component="history",
            metadata=_describe(operation),
        ) as handle:
            try:
                operation.undo()
            except Exception:
                self._undo_stack.append(operation)
                handle.add_metadata("rolled_back", True)
                raise
        self._redo_stack.append(operation)
        self._notify()
        return True

    def redo(self) -> bool:
        if not self._redo_stack:
            return False
        operation = self._redo_stack.pop()
        with telemetry.span(
            "history::redo",
            logger_name=self.config.logger_name,
            component="history",
            metadata=_describe(operation),
        ) as handle:
            try:
                operation.execute()
            except Exception:
                self._redo_stack.append(operation)
                handle.add_metadata("rolled_back", True)
                raise
        self._undo_stack.append(operation)
        self._notify()
        return True

    def can_undo(self) -> bool:
        return bool(self._undo_stack)

    def can_redo(self) -> bool:
        return bool(self._redo_stack)

    def get_undo_count(self) -> int:
        return len(self._undo_stack)

    def get_redo_count(self) -> int:
        return len(self._redo_stack)

    def peek_undo(self) -> Optional[str]:
        """Description of the entry ``undo`` would reverse."""

        return self._undo_stack[-1].description if self._undo_stack else None

    def peek_redo(self) -> Optional[str]:
        return self._redo_stack[-1].description if self._redo_stack else None

    def clear(self) -> None:
        with telemetry.span(
            "history::clear",
            logger_name=self.config.logger_name,
            component="history",
            metadata={
                "undo": len(self._undo_stack),
                "redo": len(self._redo_stack),
                "groups": len(self._groups),
            },
        ):
            self._undo_stack.clear()
            self._redo_stack.clear()
            self._groups.clear()
        self._notify()

    def snapshot(self) -> HistorySnapshot:
        return HistorySnapshot(
            can_undo=self.can_undo(),
            can_redo=self.can_redo(),
            undo_count=len(self._undo_stack),
            redo_count=len(self._redo_stack),
            group_depth=len(self._groups),
            next_undo=self.peek_undo(),
            next_redo=self.peek_redo(),
        )

    def _push_to_group(self, operation: Operation) -> None:
        frame = self._groups[-1]
        if not frame.operations:
            # new editing intent invalidates redo before the group completes
            self._redo_stack.clear()
        frame.operations.append(operation)
        self._trace("history.group_push", **_describe(operation))

    def _push_to_undo(self, operation: Operation) -> None:
        self._undo_stack.append(operation)
        self._redo_stack.clear()
        while len(self._undo_stack) > self.config.max_size:
            evicted = self._undo_stack.pop(0)
            telemetry.record_event(
                "history.evicted",
                level="debug",
                data=_describe(evicted),
                logger_name=self.config.logger_name,
            )
        self._trace("history.push", **_describe(operation))
        self._notify()

    def _notify(self) -> None:
        self.events.emit(bool(self._undo_stack), bool(self._redo_stack))

    def _trace(self, name: str, **data: object) -> None:
        if self.config.trace_pushes:
            telemetry.record_event(
                name, level="debug", data=data, logger_name=self.config.logger_name
            )


def _describe(operation: Operation) -> dict[str, object]:
    tag = getattr(operation.type, "value", operation.type)
    details: dict[str, object] = {
        "operation_id": operation.id,
        "type": tag,
        "description": operation.description,
    }
    if isinstance(operation, CompositeOperation):
        details["children"] = len(operation)
    return details


__all__ = ["GroupFrame", "HistoryManager"]
