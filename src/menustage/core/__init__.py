"""Menu structure core: depth lookup, reconciliation and tree conversion."""

from menustage.core.converter import MenuNode, dump_tree, from_tree, parse_tree, to_tree
from menustage.core.item import Affordances, MenuItem
from menustage.core.lookup import find_indent_target, find_parent
from menustage.core.reconciler import reconcile

__all__ = [
    "Affordances",
    "MenuItem",
    "MenuNode",
    "dump_tree",
    "find_indent_target",
    "find_parent",
    "from_tree",
    "parse_tree",
    "reconcile",
    "to_tree",
]
