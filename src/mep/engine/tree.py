"""Hierarchical data as a tagged Leaf/Node variant, flattened for display.

``flatten`` turns a tree into the rows a :class:`NavigableList` scrolls
through; a node's children only appear when its path is expanded.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Collection, Iterable, NamedTuple, Union

Path = tuple[str, ...]


@dataclass
class Leaf:
    label: str
    value: Any = None


@dataclass
class Node:
    label: str
    children: list[TreeItem] = field(default_factory=list)
    expanded: bool = False


TreeItem = Union[Leaf, Node]


class TreeRow(NamedTuple):
    depth: int
    path: Path
    label: str
    is_node: bool
    expanded: bool
    item: TreeItem


def from_data(obj: Any, label: str = "root") -> TreeItem:
    """Convert nested dicts/lists/scalars into Leaf and Node items.

    Dict keys become labels; list entries are labelled by their index.
    """
    if isinstance(obj, dict):
        return Node(label, [from_data(v, str(k)) for k, v in obj.items()])
    if isinstance(obj, (list, tuple)):
        return Node(label, [from_data(v, str(i)) for i, v in enumerate(obj)])
    return Leaf(label, obj)


def flatten(
    roots: TreeItem | Iterable[TreeItem],
    expanded: Collection[Path] | None = None,
) -> list[TreeRow]:
    """Rows in display order.

    A node's children are listed when its path is in *expanded*, or, when
    *expanded* is ``None``, when the node's own ``expanded`` flag is set.
    Nodes without children are never shown as expanded.
    """
    if isinstance(roots, (Leaf, Node)):
        roots = [roots]

    rows: list[TreeRow] = []

    def visit(item: TreeItem, depth: int, parent: Path) -> None:
        path = parent + (item.label,)
        if isinstance(item, Node):
            is_open = bool(item.children) and (
                item.expanded if expanded is None else path in expanded
            )
            rows.append(TreeRow(depth, path, item.label, True, is_open, item))
            if is_open:
                for child in item.children:
                    visit(child, depth + 1, path)
        else:
            rows.append(TreeRow(depth, path, item.label, False, False, item))

    for root in roots:
        visit(root, 0, ())
    return rows


def expand_path_to(
    roots: TreeItem | Iterable[TreeItem],
    predicate: Callable[[Leaf], bool],
) -> set[Path]:
    """Paths of every node on the way to the first leaf matching *predicate*."""
    if isinstance(roots, (Leaf, Node)):
        roots = [roots]

    def find(item: TreeItem, parent: Path) -> list[Path] | None:
        path = parent + (item.label,)
        if isinstance(item, Leaf):
            return [] if predicate(item) else None
        for child in item.children:
            found = find(child, path)
            if found is not None:
                return [path] + found
        return None

    for root in roots:
        found = find(root, ())
        if found is not None:
            return set(found)
    return set()


def toggle(expanded: set[Path], row: TreeRow) -> None:
    """Open or close the node on *row*; leaves are ignored."""
    if not row.is_node:
        return
    if row.path in expanded:
        expanded.discard(row.path)
    else:
        expanded.add(row.path)


def render_row(row: TreeRow, icons: tuple[str, str, str] = ("▸", "▾", " "), indent: int = 2) -> str:
    """Indentation, open/closed icon and label for one row."""
    closed, opened, leaf = icons
    if row.is_node and isinstance(row.item, Node) and row.item.children:
        icon = opened if row.expanded else closed
    else:
        icon = leaf
    return f"{' ' * (row.depth * indent)}{icon} {row.label}"
