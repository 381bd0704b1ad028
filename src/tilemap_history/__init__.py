"""Undo/redo history engine for an in-memory tilemap scene editor."""

__all__ = [
    "adapters",
    "history",
    "runtime",
    "scene",
    "session",
    "tools",
]

__version__ = "0.1.0"
