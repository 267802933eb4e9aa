"""Shared test fixtures."""

import string
from pathlib import Path

import pytest
from menustage.config import Config, EditorConfig, ServerConfig
from menustage.core.item import MenuItem
from menustage.editor import EditorHandlers, MenuEditor
from menustage.reorder import ListReorderable


def _label(i: int) -> str:
    """Spreadsheet-style label: A, B, ..., Z, AA, AB, ..."""
    label = ""
    i += 1
    while i:
        i, rem = divmod(i - 1, 26)
        label = string.ascii_uppercase[rem] + label
    return label


def make_items(*depths: int) -> list[MenuItem]:
    """Create items titled A, B, C, ... at the given depths."""
    return [
        MenuItem(text=_label(i), depth=depth)
        for i, depth in enumerate(depths)
    ]


def depths_of(items) -> list[int]:
    return [item.depth for item in items]


def nested_chain(levels: int) -> list[dict]:
    """Build a document where each node is the only child of the previous one."""
    document: list[dict] = []
    siblings = document
    for level in range(levels):
        node: dict = {"text": f"Level {level}"}
        siblings.append(node)
        node["submenu"] = siblings = []
    return document


def make_editor(
    menus: object = None,
    *,
    max_depth: int = 2,
    handlers: EditorHandlers | None = None,
    **options: object,
) -> MenuEditor:
    """Create a flushed editor with an in-process reorderable list."""
    config = EditorConfig(max_depth=max_depth, **options)  # type: ignore[arg-type]
    if handlers is None:
        handlers = EditorHandlers(on_confirm_remove=lambda item: True)
    editor = MenuEditor(config, handlers, ListReorderable(), menus=menus)
    editor.flush()
    return editor


@pytest.fixture
def sample_menu() -> list[dict]:
    """Nested menu document two levels deep."""
    return [
        {
            "text": "Home",
            "url": "/",
            "type": "link",
        },
        {
            "text": "Products",
            "type": "category",
            "submenu": [
                {"text": "Shoes", "url": "/shoes", "type": "link"},
                {
                    "text": "Bags",
                    "url": "/bags",
                    "type": "link",
                    "submenu": [
                        {"text": "Backpacks", "url": "/bags/backpacks", "type": "link"},
                    ],
                },
            ],
        },
        {"text": "Contact", "url": "/contact", "type": "link", "newTab": True},
    ]


@pytest.fixture
def test_config(tmp_path: Path) -> Config:
    """Create a test configuration with no menu file."""
    return Config(server=ServerConfig(), editor=EditorConfig())
