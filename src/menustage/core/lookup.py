"""Depth-based parent lookup over the flat item sequence.

Parents are derived on demand by scanning backward from an item; no
parent pointer is ever stored, so arbitrary reorders cannot leave a
dangling reference behind.
"""

from collections.abc import Sequence

from menustage.core.item import MenuItem
from menustage.core.types import Position


def _scan_stop(index: int, max_steps: int | None) -> int:
    """Exclusive lower bound of a backward scan starting at ``index - 1``."""
    if max_steps is None:
        return -1
    return max(index - 1 - max_steps, -1)


def find_parent(
    items: Sequence[MenuItem],
    index: int,
    max_steps: int | None = None,
) -> Position | None:
    """Find the nearest preceding item with a strictly smaller depth.

    A malformed prefix (no shallower item before the start of the
    sequence or within the scan bound) yields None instead of an error.

    Args:
        items: Flat item sequence
        index: Position of the item whose parent is wanted
        max_steps: Maximum number of items to scan backward; the scan
            is bounded by the start of the sequence when None

    Returns:
        Position of the parent, or None for top-level or orphaned items
    """
    if not 0 <= index < len(items):
        return None

    depth = items[index].depth
    if depth <= 0:
        return None

    for candidate in range(index - 1, _scan_stop(index, max_steps), -1):
        if items[candidate].depth < depth:
            return Position(candidate)
    return None


def find_indent_target(
    items: Sequence[MenuItem],
    index: int,
    max_steps: int | None = None,
) -> Position | None:
    """Find the item that would become the parent if ``index`` were indented.

    That is the nearest preceding sibling: the first earlier item at the
    same depth, provided no shallower item comes first. Deeper items in
    between (a predecessor's own subtree) are skipped.

    Args:
        items: Flat item sequence
        index: Position of the item to indent
        max_steps: Maximum number of items to scan backward

    Returns:
        Position of the preceding sibling, or None when there is none
    """
    if not 0 < index < len(items):
        return None

    depth = items[index].depth
    for candidate in range(index - 1, _scan_stop(index, max_steps), -1):
        candidate_depth = items[candidate].depth
        if candidate_depth == depth:
            return Position(candidate)
        if candidate_depth < depth:
            return None
    return None
