"""Menustage - hierarchical menu editor built on a flat depth sequence."""

from menustage.editor import EditorHandlers, MenuEditor
from menustage.reorder import ListReorderable

__all__ = ["EditorHandlers", "ListReorderable", "MenuEditor"]
