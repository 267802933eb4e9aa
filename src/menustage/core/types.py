"""Core type definitions."""

from enum import StrEnum
from typing import NewType

# Index of an item in the flat sequence (derived, never stored)
Position = NewType("Position", int)


class ItemType(StrEnum):
    """Well-known menu item types."""

    LINK = "link"
    CATEGORY = "category"
    CUSTOM = "custom"
