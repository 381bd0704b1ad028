"""Textual bridge: keyboard shortcuts in, toolbar availability out."""

from .controller import TextualHistoryAdapter, TextualUIHooks, normalize_key

__all__ = ["TextualHistoryAdapter", "TextualUIHooks", "normalize_key"]
