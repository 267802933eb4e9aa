"""Menu editor: action dispatch over the flat item sequence.

Each editor instance owns one flat sequence of menu items. Every
structural action is followed by a full reconciliation pass, except
``add``, which defers it to the next ``flush()`` so a bulk add reconciles
once.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Literal

import click

from menustage.config import EditorConfig
from menustage.core.converter import MenuNode, dump_tree, from_tree, parse_tree, to_tree
from menustage.core.item import MenuItem, MenuItemDict
from menustage.core.reconciler import reconcile
from menustage.core.types import ItemType
from menustage.reorder import Reorderable

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("text", "url", "new_tab")


def prompt_confirm_remove(item: MenuItem) -> bool:
    """Ask on the terminal before removing an item."""
    return click.confirm(f'Remove menu "{item.title}"?', default=False)


@dataclass
class EditorHandlers:
    """Optional collaborator callbacks.

    A missing handler means "do nothing", except ``on_confirm_remove``,
    which falls back to a terminal prompt when removal confirmation is
    enabled.
    """

    on_menu_added: Callable[[MenuItem], None] | None = None
    on_menu_removed: Callable[[], None] | None = None
    on_confirm_remove: Callable[[MenuItem], bool] | None = None
    template: Callable[[MenuItem], Sequence[str]] | None = None
    collect_add_data: Callable[[list[dict[str, Any]]], list[dict[str, Any]]] | None = None


class MenuEditor:
    """Editor for one menu, built on a flat depth-annotated sequence.

    Operations never raise on bad input: rejected or impossible actions
    return False and leave the sequence untouched.
    """

    def __init__(
        self,
        config: EditorConfig | None = None,
        handlers: EditorHandlers | None = None,
        reorderable: Reorderable | None = None,
        menus: object = None,
    ) -> None:
        """Initialize the editor.

        Args:
            config: Editor options (defaults when None)
            handlers: Collaborator callbacks
            reorderable: Drag-and-drop provider; the editor is disabled
                without one
            menus: Initial menu document (list of nested nodes)

        Raises:
            ValueError: If the reorderable is already bound to another editor
        """
        self._config = config or EditorConfig()
        self._handlers = handlers or EditorHandlers()
        self._reorderable = reorderable
        self._items: list[MenuItem] = []
        self._pending_attach = True
        self._pending_reconcile = False
        self.focused_index: int | None = None

        if reorderable is None:
            logger.error("Missing required reorderable-list capability, editor disabled")
            self.enabled = False
            return
        if reorderable.attached:
            raise ValueError("reorderable list is already bound to an editor")

        self.enabled = True
        if menus:
            self.add(menus)
        self._pending_reconcile = True

    @property
    def config(self) -> EditorConfig:
        return self._config

    @property
    def items(self) -> Sequence[MenuItem]:
        """Current flat sequence."""
        return self._items

    def __len__(self) -> int:
        return len(self._items)

    def add(self, items: object, depth: int = 0) -> bool:
        """Append menu nodes, recursing into their ``submenu``.

        Reconciliation is deferred until the next ``flush()``.

        Args:
            items: List of node mappings
            depth: Depth of the top-level nodes

        Returns:
            False for an empty or invalid payload, True otherwise
        """
        if not self.enabled or not items:
            return False

        try:
            nodes = parse_tree(items)
        except ValueError as e:
            logger.warning(f"Rejected menu payload: {e}")
            return False

        added = from_tree(nodes, max(depth, 0))
        for item in added:
            self._items.append(item)
            if self._handlers.on_menu_added is not None:
                self._handlers.on_menu_added(item)

        self._pending_reconcile = True
        logger.info(f"Added {len(added)} menu items")
        return True

    def load(self, items: object) -> bool:
        """Load a menu document at the root (alias for ``add``)."""
        return self.add(items)

    def flush(self) -> bool:
        """Run deferred work: bind the reorderable and reconcile.

        Safe to call repeatedly; a flush with nothing pending reconciles
        already-correct state again.

        Returns:
            False when the editor is disabled
        """
        if not self.enabled:
            return False

        if self._pending_attach and self._reorderable is not None:
            self._reorderable.attach(self.drag_drop)
            self._pending_attach = False

        self._reconcile()
        return True

    def quick_add(self) -> bool:
        """Append an "Untitled" link, opened for editing when configured."""
        if not self._config.inline_addmenu:
            return False

        if not self.add([{"url": "", "text": "Untitled", "type": ItemType.LINK.value}]):
            return False

        if self._config.focus_after_add:
            last = len(self._items) - 1
            self._items[last].expanded = True
            self.focused_index = last
        return True

    def add_from_inserter(
        self,
        fields: Sequence[dict[str, Any]],
        menu_type: str = ItemType.LINK.value,
    ) -> bool:
        """Add items collected by an external add-menu panel.

        Entries without text are dropped. The ``collect_add_data`` handler
        may rewrite the collected list before it is added.

        Args:
            fields: Field mappings gathered from the panel
            menu_type: Item type of the panel

        Returns:
            True if anything was added
        """
        data: list[dict[str, Any]] = [
            {"type": menu_type, **entry}
            for entry in fields
            if isinstance(entry, dict) and entry.get("text")
        ]

        if self._handlers.collect_add_data is not None:
            data = self._handlers.collect_add_data(data)

        if not data:
            return False
        return self.add(data)

    def remove(self, index: int) -> bool:
        """Remove a single item; its children are re-parented by reconciliation.

        Returns:
            False if the index is invalid or removal was vetoed
        """
        item = self._get(index)
        if item is None:
            return False

        if self._config.confirm_remove:
            confirm = self._handlers.on_confirm_remove or prompt_confirm_remove
            if not confirm(item):
                logger.info(f"Removal of item {index} vetoed")
                return False

        del self._items[index]
        self.focused_index = None
        if self._handlers.on_menu_removed is not None:
            self._handlers.on_menu_removed()

        logger.info(f"Removed item {index} ({item.title})")
        self._reconcile()
        return True

    def move_up(self, index: int) -> bool:
        """Swap an item with its predecessor."""
        return self._swap(index, index - 1)

    def move_down(self, index: int) -> bool:
        """Swap an item with its successor."""
        return self._swap(index, index + 1)

    def indent(self, index: int) -> bool:
        """Make an item a child of its preceding sibling."""
        item = self._get(index)
        if item is None or not item.affordances.can_indent:
            return False

        item.depth += 1
        logger.info(f"Indented item {index} to depth {item.depth}")
        self._reconcile()
        return True

    def outdent(self, index: int) -> bool:
        """Move an item one level up, out of its parent."""
        item = self._get(index)
        if item is None or not item.affordances.can_outdent:
            return False

        item.depth -= 1
        logger.info(f"Outdented item {index} to depth {item.depth}")
        self._reconcile()
        return True

    def drag_drop(self, old_index: int, new_index: int) -> bool:
        """Apply a move reported by the reorderable list.

        The dropped item may snap to the depth of the siblings it landed
        between.
        """
        if self._get(old_index) is None or not 0 <= new_index < len(self._items):
            return False

        item = self._items.pop(old_index)
        self._items.insert(new_index, item)
        self.focused_index = None
        logger.info(f"Dragged item {old_index} to {new_index}")
        self._reconcile(moved_index=new_index)
        return True

    def toggle(self, index: int) -> bool:
        """Open or close the item's edit panel."""
        item = self._get(index)
        if item is None:
            return False
        item.expanded = not item.expanded
        self._reconcile()
        return True

    def cancel(self, index: int) -> bool:
        """Close the item's edit panel if open."""
        item = self._get(index)
        if item is None:
            return False
        item.expanded = False
        self._reconcile()
        return True

    def dispatch(self, index: int, action: str) -> bool:
        """Run an item action by name.

        Known actions: ``up``, ``down``, ``child-in``, ``child-out``,
        ``remove``, ``cancel``, ``toggle``.
        """
        actions: dict[str, Callable[[int], bool]] = {
            "up": self.move_up,
            "down": self.move_down,
            "child-in": self.indent,
            "child-out": self.outdent,
            "remove": self.remove,
            "cancel": self.cancel,
            "toggle": self.toggle,
        }
        handler = actions.get(action)
        if handler is None:
            logger.warning(f"Unknown menu action: {action}")
            return False
        return handler(index)

    def update_field(self, index: int, field: str, value: object) -> bool:
        """Set an editable field (text, url or new_tab) of an item."""
        item = self._get(index)
        if item is None or field not in EDITABLE_FIELDS:
            return False

        if field == "text":
            if not isinstance(value, str):
                return False
            item.text = value
        elif field == "url":
            if value is not None and not isinstance(value, str):
                return False
            item.url = value
        else:
            if not isinstance(value, bool):
                return False
            item.new_tab = value

        # Neighbour labels reference titles
        self._reconcile()
        return True

    def fields_for(self, index: int) -> list[str]:
        """Editable field names shown for an item."""
        item = self._get(index)
        if item is None:
            return []

        if self._handlers.template is not None:
            return list(self._handlers.template(item))

        fields = ["text"]
        if self._config.always_show_url or item.type != ItemType.CATEGORY:
            fields.append("url")
        fields.append("new_tab")
        return fields

    def tree(self) -> list[MenuNode]:
        """Nested snapshot of the current sequence."""
        if not self.enabled:
            return []
        self._settle()
        return to_tree(self._items)

    def data(self, fmt: Literal["object", "string"] | str = "object") -> list[MenuItemDict] | str:
        """Export the menu as a nested document.

        Args:
            fmt: "object" for a list of dicts, "string" for JSON text

        Returns:
            Menu document
        """
        document = dump_tree(self.tree())
        if fmt == "object":
            return document
        return json.dumps(document)

    def state(self) -> list[dict[str, Any]]:
        """Flat sequence with depths, affordances and display state."""
        self._settle()
        return [
            {
                "position": position,
                "depth": item.depth,
                "expanded": item.expanded,
                "fields": self.fields_for(position),
                "item": item.to_dict(),
                "affordances": item.affordances.to_dict(),
            }
            for position, item in enumerate(self._items)
        ]

    def _swap(self, index: int, target: int) -> bool:
        if self._get(index) is None or self._get(target) is None:
            return False

        self._items[index], self._items[target] = self._items[target], self._items[index]
        self.focused_index = None
        logger.info(f"Moved item {index} to {target}")
        self._reconcile()
        return True

    def _get(self, index: int) -> MenuItem | None:
        """Return the item at ``index`` with pending work settled."""
        if not self.enabled or not 0 <= index < len(self._items):
            return None
        self._settle()
        return self._items[index]

    def _settle(self) -> None:
        """Run a reconcile deferred by ``add``."""
        if self.enabled and self._pending_reconcile:
            self._reconcile()

    def _reconcile(self, moved_index: int | None = None) -> None:
        reconcile(self._items, self._config.max_depth, moved_index)
        self._pending_reconcile = False
