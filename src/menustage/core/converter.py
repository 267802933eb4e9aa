"""Flat/nested menu conversion.

Converts between the flat depth-annotated item sequence used for editing
and the nested tree document used for loading and export.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, cast

from menustage.core.item import MenuItem, MenuItemDict
from menustage.core.lookup import find_parent
from menustage.core.types import ItemType


@dataclass
class MenuNode:
    """Menu tree node with ordered children."""

    text: str = ""
    url: str | None = None
    type: str = ItemType.LINK.value
    new_tab: bool = False
    extra: dict[str, Any] = field(default_factory=dict)
    children: list[MenuNode] = field(default_factory=list)

    @classmethod
    def from_item(cls, item: MenuItem) -> MenuNode:
        """Create a childless node from a flat item's payload."""
        return cls(
            text=item.text,
            url=item.url,
            type=item.type,
            new_tab=item.new_tab,
            extra=dict(item.extra),
        )

    @classmethod
    def from_dict(cls, data: object) -> MenuNode:
        """Parse a node and its ``submenu`` at any nesting depth.

        Nesting is walked with an explicit stack, so deep documents are
        bounded by memory rather than the interpreter's recursion limit.

        Raises:
            ValueError: If the node or any nested node is malformed
        """
        root, submenu = cls._parse_one(data)
        pending = [(root, submenu)]
        while pending:
            node, submenu = pending.pop()
            for child_data in submenu:
                child, child_submenu = cls._parse_one(child_data)
                node.children.append(child)
                pending.append((child, child_submenu))
        return root

    @classmethod
    def _parse_one(cls, data: object) -> tuple[MenuNode, list[object]]:
        """Parse a single node, returning it with its raw ``submenu``."""
        item = MenuItem.from_dict(data)
        submenu = cast(dict[str, Any], data).get("submenu")
        if submenu is None:
            submenu = []
        if not isinstance(submenu, list):
            raise ValueError("menu item submenu must be a list")
        return cls.from_item(item), submenu

    def to_item(self, depth: int) -> MenuItem:
        """Create a flat item carrying this node's payload at ``depth``."""
        return MenuItem(
            text=self.text,
            url=self.url,
            type=self.type,
            new_tab=self.new_tab,
            depth=depth,
            extra=dict(self.extra),
        )

    def to_dict(self) -> MenuItemDict:
        """Convert to dictionary for JSON serialization.

        ``submenu`` is present only when the node has children.
        """
        result = self.to_item(0).to_dict()
        pending: list[tuple[MenuNode, MenuItemDict]] = [(self, result)]
        while pending:
            node, output = pending.pop()
            if not node.children:
                continue
            submenu: list[MenuItemDict] = []
            for child in node.children:
                child_output = child.to_item(0).to_dict()
                submenu.append(child_output)
                pending.append((child, child_output))
            output["submenu"] = submenu
        return result


def to_tree(items: Sequence[MenuItem]) -> list[MenuNode]:
    """Build the nested menu tree from the flat sequence.

    Items are grouped back-to-front: each item with a parent is attached
    to its parent's child list, which is then ordered by original
    position. Items at depth 0, and items whose parent cannot be found,
    stay at the top level. The input is not modified.

    Args:
        items: Flat item sequence

    Returns:
        Top-level nodes, each holding its ordered children
    """
    nodes = [MenuNode.from_item(item) for item in items]
    children: list[list[int]] = [[] for _ in items]
    roots: list[int] = []

    for index in range(len(items) - 1, -1, -1):
        parent = find_parent(items, index)
        if parent is None:
            roots.append(index)
        else:
            children[parent].append(index)
            children[parent].sort()

    for index, child_indices in enumerate(children):
        nodes[index].children = [nodes[i] for i in child_indices]

    return [nodes[i] for i in sorted(roots)]


def from_tree(nodes: Sequence[MenuNode], depth: int = 0) -> list[MenuItem]:
    """Flatten a menu tree into a depth-annotated sequence (pre-order).

    Args:
        nodes: Top-level nodes
        depth: Depth assigned to the top-level nodes

    Returns:
        Flat item sequence
    """
    items: list[MenuItem] = []
    pending = [(node, depth) for node in reversed(nodes)]
    while pending:
        node, level = pending.pop()
        items.append(node.to_item(level))
        pending.extend((child, level + 1) for child in reversed(node.children))
    return items

def parse_tree(data: object) -> list[MenuNode]:
    """Parse an external menu document.

    Args:
        data: List of node mappings, nested through ``submenu``

    Returns:
        Parsed top-level nodes

    Raises:
        ValueError: If the document is not a list of valid nodes
    """
    if not isinstance(data, list):
        raise ValueError("menu document must be a list")
    return [MenuNode.from_dict(node) for node in data]


def dump_tree(nodes: Sequence[MenuNode]) -> list[MenuItemDict]:
    """Serialize a menu tree to the external document shape."""
    return [node.to_dict() for node in nodes]
