"""Reorderable-list capability.

Drag-and-drop itself is provided outside the editor. The editor only needs
something that reports "item moved from one position to another"; this
module defines that contract and an in-process implementation used by the
CLI, the HTTP API and tests.
"""

from collections.abc import Callable
from typing import Protocol

MoveHandler = Callable[[int, int], bool]


class Reorderable(Protocol):
    """Drag-and-drop provider bound to a single editor."""

    @property
    def attached(self) -> bool: ...

    def attach(self, on_move: MoveHandler) -> None: ...


class ListReorderable:
    """In-process reorderable list that forwards moves to its editor."""

    def __init__(self) -> None:
        self._on_move: MoveHandler | None = None

    @property
    def attached(self) -> bool:
        return self._on_move is not None

    def attach(self, on_move: MoveHandler) -> None:
        """Bind the move handler.

        Raises:
            ValueError: If already bound to another handler
        """
        if self._on_move is not None and self._on_move != on_move:
            raise ValueError("reorderable list is already bound to an editor")
        self._on_move = on_move

    def move(self, old_index: int, new_index: int) -> bool:
        """Report that the item at ``old_index`` was dropped at ``new_index``.

        Returns:
            False when nothing is attached yet or the move was rejected
        """
        if self._on_move is None:
            return False
        return self._on_move(old_index, new_index)
