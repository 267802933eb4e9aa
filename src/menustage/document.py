"""Reading menu documents from disk."""

import json
from pathlib import Path

from menustage.core.converter import MenuNode, parse_tree


def read_menu_file(path: Path) -> list[MenuNode]:
    """Read and parse a JSON menu document.

    Args:
        path: Path to a JSON file holding a list of nested menu nodes

    Returns:
        Parsed top-level nodes

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is not valid JSON or not a menu document
    """
    text = path.read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, RecursionError) as e:
        raise ValueError(f"Invalid JSON in {path}: {e}") from e
    return parse_tree(data)
