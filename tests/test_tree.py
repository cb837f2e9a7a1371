"""Tests for mep.engine.tree -- Leaf/Node data and flattening."""

from __future__ import annotations

from mep.engine.navigable_list import NavigableList
from mep.engine.tree import (
    Leaf,
    Node,
    expand_path_to,
    flatten,
    from_data,
    render_row,
    toggle,
)

DATA = {
    "src": {"main.py": 1, "util.py": 2},
    "README": 3,
    "tags": ["a", "b"],
}


class TestFromData:
    def test_dicts_and_lists_become_nodes(self) -> None:
        root = from_data(DATA)
        assert isinstance(root, Node)
        assert [child.label for child in root.children] == ["src", "README", "tags"]
        tags = root.children[2]
        assert isinstance(tags, Node)
        assert tags.children == [Leaf("0", "a"), Leaf("1", "b")]

    def test_scalar_is_leaf(self) -> None:
        assert from_data(5, "n") == Leaf("n", 5)


class TestFlatten:
    def test_collapsed_root(self) -> None:
        rows = flatten(from_data(DATA), expanded=set())
        assert [row.label for row in rows] == ["root"]
        assert rows[0].is_node and not rows[0].expanded

    def test_expanded_paths(self) -> None:
        rows = flatten(from_data(DATA), expanded={("root",), ("root", "src")})
        assert [(row.depth, row.label) for row in rows] == [
            (0, "root"),
            (1, "src"),
            (2, "main.py"),
            (2, "util.py"),
            (1, "README"),
            (1, "tags"),
        ]
        assert rows[2].path == ("root", "src", "main.py")

    def test_node_flag_used_without_expanded_set(self) -> None:
        tree = Node("top", [Node("a", [Leaf("x")], expanded=True), Leaf("b")], expanded=True)
        assert [row.label for row in flatten(tree)] == ["top", "a", "x", "b"]

    def test_childless_node_never_expanded(self) -> None:
        rows = flatten(Node("empty", expanded=True))
        assert rows[0].expanded is False

    def test_multiple_roots(self) -> None:
        rows = flatten([Leaf("a"), Leaf("b")])
        assert [row.path for row in rows] == [("a",), ("b",)]


class TestExpansion:
    def test_expand_path_to(self) -> None:
        root = from_data(DATA)
        paths = expand_path_to(root, lambda leaf: leaf.value == 2)
        assert paths == {("root",), ("root", "src")}
        labels = [row.label for row in flatten(root, paths)]
        assert "util.py" in labels

    def test_expand_path_to_missing(self) -> None:
        assert expand_path_to(from_data(DATA), lambda leaf: False) == set()

    def test_toggle(self) -> None:
        root = from_data(DATA)
        expanded: set[tuple[str, ...]] = set()
        toggle(expanded, flatten(root, expanded)[0])
        assert expanded == {("root",)}
        toggle(expanded, flatten(root, expanded)[0])
        assert expanded == set()

    def test_toggle_leaf_is_ignored(self) -> None:
        expanded: set[tuple[str, ...]] = set()
        toggle(expanded, flatten(Leaf("x"))[0])
        assert expanded == set()


class TestRenderRow:
    def test_icons_and_indent(self) -> None:
        rows = flatten(from_data(DATA), expanded={("root",)})
        assert render_row(rows[0]) == "▾ root"
        assert render_row(rows[1]) == "  ▸ src"
        assert render_row(rows[2]) == "    README"

    def test_ascii_icons(self) -> None:
        rows = flatten(from_data(DATA), expanded=set())
        assert render_row(rows[0], icons=("+", "-", " ")) == "+ root"

    def test_rows_feed_navigable_list(self) -> None:
        rows = flatten(from_data(DATA), expanded={("root",)})
        nav = NavigableList(rows, page_size=2)
        nav.select_last()
        assert nav.current is not None
        assert nav.current.label == "tags"
        assert nav.scroll_top == 2
