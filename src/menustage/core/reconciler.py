"""Tree reconciler.

Normalizes depths and recomputes the per-item affordances over the whole
flat sequence after any structural edit. Reconciliation always covers the
full sequence; menus are UI-sized, so there is no incremental variant.
"""

import logging
from collections.abc import Sequence

from menustage.core.item import Affordances, MenuItem
from menustage.core.lookup import find_indent_target, find_parent

logger = logging.getLogger(__name__)


def reconcile(
    items: Sequence[MenuItem],
    max_depth: int,
    moved_index: int | None = None,
) -> None:
    """Normalize depths and affordances of every item in place.

    Runs a single forward pass, so each item is checked against
    predecessors that have already been corrected:

    - the first item is forced to depth 0
    - an item without a shallower predecessor is healed to depth 0
    - an item more than one level below its parent is pulled up to
      ``parent + 1`` (drag-and-drop can leave such gaps)
    - no item goes deeper than ``max_depth``

    Args:
        items: Flat item sequence to normalize
        max_depth: Deepest allowed level
        moved_index: Position of the item that was just dragged, if any
    """
    count = len(items)
    if count == 0:
        return

    limit = max(max_depth, 0)
    for index, item in enumerate(items):
        affordances = Affordances(
            can_move_up=index > 0,
            can_move_down=index < count - 1,
        )

        if index == 0:
            if item.depth != 0:
                logger.debug(f"Reset first item depth {item.depth} -> 0")
            item.depth = 0
            item.affordances = affordances
            continue

        if index == moved_index:
            _snap_between_siblings(items, index)

        _repair_depth(items, index, limit)

        if item.depth > 0:
            parent = find_parent(items, index)
            if parent is not None:
                affordances.can_outdent = True
                affordances.outdent_label = f"Out from {items[parent].title}"

        if item.depth < limit:
            target = find_indent_target(items, index)
            if target is not None:
                affordances.can_indent = True
                affordances.indent_label = f"Under {items[target].title}"

        item.affordances = affordances

    logger.debug(f"Reconciled {count} items (max_depth={limit})")


def _repair_depth(items: Sequence[MenuItem], index: int, limit: int) -> None:
    """Heal orphaned depths and gaps for the item at ``index``."""
    item = items[index]
    if item.depth <= 0:
        item.depth = 0
        return

    parent = find_parent(items, index)
    if parent is None:
        logger.debug(f"No parent for item {index} at depth {item.depth}, reset to 0")
        item.depth = 0
        return

    parent_depth = items[parent].depth
    if item.depth - parent_depth > 1:
        logger.debug(
            f"Item {index} depth {item.depth} pulled up under parent {parent}",
        )
        item.depth = parent_depth + 1

    if item.depth > limit:
        item.depth = limit


def _snap_between_siblings(items: Sequence[MenuItem], index: int) -> None:
    """Adopt the depth shared by both neighbours of a dragged item.

    A drop between two items at the same positive depth lands inside
    their subtree. Drops between items of different depths are left to
    the generic repair; the intended parent there is ambiguous.
    """
    if not 0 < index < len(items) - 1:
        return

    previous_depth = items[index - 1].depth
    next_depth = items[index + 1].depth
    if previous_depth == next_depth and previous_depth > 0:
        items[index].depth = previous_depth
