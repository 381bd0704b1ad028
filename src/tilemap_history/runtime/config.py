"""Construction-time settings for the history engine."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .telemetry import ENV_PREFIX

DEFAULT_MAX_SIZE = 50
DEFAULT_LOGGER_NAME = "tilemap_history.history"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True, slots=True)
class HistoryConfig:
    """Bounds and logging knobs for a ``HistoryManager``."""

    max_size: int = DEFAULT_MAX_SIZE
    logger_name: str = DEFAULT_LOGGER_NAME
    trace_pushes: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.max_size, bool) or not isinstance(self.max_size, int):
            raise ValueError("max_size must be an integer")
        if self.max_size <= 0:
            raise ValueError("max_size must be positive")
        if not self.logger_name:
            raise ValueError("logger_name cannot be empty")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "HistoryConfig":
        env = os.environ if environ is None else environ
        raw_size = env.get(f"{ENV_PREFIX}MAX_SIZE")
        if raw_size is None or not raw_size.strip():
            max_size = DEFAULT_MAX_SIZE
        else:
            try:
                max_size = int(raw_size)
            except ValueError as exc:
                raise ValueError(
                    f"{ENV_PREFIX}MAX_SIZE must be an integer, got {raw_size!r}"
                ) from exc
        logger_name = env.get(f"{ENV_PREFIX}LOGGER") or DEFAULT_LOGGER_NAME
        trace = env.get(f"{ENV_PREFIX}TRACE_PUSHES", "").strip().lower() in _TRUTHY
        return cls(max_size=max_size, logger_name=logger_name, trace_pushes=trace)


__all__ = ["DEFAULT_MAX_SIZE", "HistoryConfig"]
