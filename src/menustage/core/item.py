"""Flat menu item representation.

A menu is edited as a flat ordered list of items, each carrying only its
depth. Parent/child relationships are never stored; they are re-derived
from the depths on every pass.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, TypedDict

from menustage.core.types import ItemType

UNTITLED = "Untitled"

# Keys of the external document handled explicitly; everything else is
# carried through opaquely in MenuItem.extra.
_KNOWN_KEYS = frozenset({"text", "url", "type", "newTab", "new_tab", "submenu"})


class MenuItemDict(TypedDict, total=False):
    """Dictionary representation of a menu node in the external document."""

    text: str
    url: str
    type: str
    newTab: bool
    submenu: list[MenuItemDict]


@dataclass
class Affordances:
    """Actions offered for an item after reconciliation."""

    can_move_up: bool = False
    can_move_down: bool = False
    can_indent: bool = False
    can_outdent: bool = False
    indent_label: str | None = None
    outdent_label: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "canMoveUp": self.can_move_up,
            "canMoveDown": self.can_move_down,
            "canIndent": self.can_indent,
            "canOutdent": self.can_outdent,
            "indentLabel": self.indent_label,
            "outdentLabel": self.outdent_label,
        }


@dataclass
class MenuItem:
    """Menu item in the flat sequence."""

    text: str = ""
    url: str | None = None
    type: str = ItemType.LINK.value
    new_tab: bool = False
    depth: int = 0
    extra: dict[str, Any] = field(default_factory=dict)
    affordances: Affordances = field(default_factory=Affordances)
    # Display state only, never serialized
    expanded: bool = False

    @property
    def title(self) -> str:
        """Title shown in labels, falls back to "Untitled" for empty text."""
        return self.text or UNTITLED

    @classmethod
    def from_dict(cls, data: object, depth: int = 0) -> MenuItem:
        """Create an item from an external document node.

        The ``submenu`` key is ignored here; nesting is handled by the
        converter.

        Args:
            data: Node mapping with text, url, type, newTab and extra keys
            depth: Depth to assign to the item

        Returns:
            MenuItem instance

        Raises:
            ValueError: If the node is not a mapping or has invalid fields
        """
        if not isinstance(data, dict):
            raise ValueError("menu item must be a dictionary")

        text = data.get("text", "")
        if text is None:
            text = ""
        if not isinstance(text, str):
            raise ValueError("menu item text must be a string")

        url = data.get("url")
        if url is not None and not isinstance(url, str):
            raise ValueError("menu item url must be a string")

        item_type = data.get("type") or ItemType.LINK.value
        if not isinstance(item_type, str):
            raise ValueError("menu item type must be a string")

        new_tab = data.get("newTab", data.get("new_tab", False))

        extra = {key: value for key, value in data.items() if key not in _KNOWN_KEYS}

        return cls(
            text=text,
            url=url,
            type=item_type,
            new_tab=bool(new_tab),
            depth=max(depth, 0),
            extra=extra,
        )

    def to_dict(self) -> MenuItemDict:
        """Convert to the external node shape, without ``submenu``."""
        result: dict[str, Any] = {"text": self.text}
        if self.url is not None:
            result["url"] = self.url
        result["type"] = self.type
        if self.new_tab:
            result["newTab"] = True
        for key, value in self.extra.items():
            result.setdefault(key, value)
        return result  # type: ignore[return-value]

