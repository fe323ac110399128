"""Tests for read-only tree traversals."""

import types

from orgchart_tree import (
    DEFAULT_FIELD_MAPPING,
    FieldMapping,
    build_tree,
    collapsed_ids_for_level,
    collapsible_ids,
    find_node,
    flatten_tree,
    get_path_to_root,
    iter_tree,
)

# Keep input order: no order column
MAPPING = FieldMapping(role_type="role_type")


def create_tree():
    """Tree mixing assistants, transversals and children on two levels."""
    #              1
    #   a:2 ─ 6     t:3     c:4 ─ a:7     c:5
    records = [
        {"id": 1, "parent_id": None},
        {"id": 2, "parent_id": 1, "role_type": "assistant"},
        {"id": 3, "parent_id": 1, "role_type": "transversal"},
        {"id": 4, "parent_id": 1},
        {"id": 5, "parent_id": 1},
        {"id": 6, "parent_id": 2},
        {"id": 7, "parent_id": 4, "role_type": "assistant"},
    ]
    return build_tree(records, MAPPING)


class TestFlatten:
    """Tests for flatten_tree and iter_tree."""

    def test_pre_order(self):
        """Assistants' subtrees, then transversals', then children's."""
        tree = create_tree()
        assert [n.id for n in flatten_tree(tree)] == [1, 2, 6, 3, 4, 7, 5]

    def test_single_node(self):
        """A lone root flattens to itself."""
        tree = build_tree([{"id": "x", "parent_id": None}], MAPPING)
        assert flatten_tree(tree) == [tree]

    def test_iter_tree_is_lazy(self):
        """iter_tree is a generator matching flatten_tree."""
        tree = create_tree()
        walker = iter_tree(tree)
        assert isinstance(walker, types.GeneratorType)
        assert next(walker) is tree
        assert [n.id for n in walker] == [2, 6, 3, 4, 7, 5]

    def test_sorted_tree_order(self):
        """Flatten follows the sorted partitions."""
        records = [
            {"id": 1, "parent_id": None},
            {"id": 2, "parent_id": 1, "ordre": 2},
            {"id": 3, "parent_id": 1, "ordre": 1},
            {"id": 4, "parent_id": 2},
        ]
        tree = build_tree(records, DEFAULT_FIELD_MAPPING)
        assert [n.id for n in flatten_tree(tree)] == [1, 3, 2, 4]


class TestFindNode:
    """Tests for find_node."""

    def test_found(self):
        """Nodes at any depth and partition are found."""
        tree = create_tree()
        assert find_node(tree, 7).id == 7
        assert find_node(tree, 1) is tree

    def test_missing(self):
        """Unknown ids return None."""
        assert find_node(create_tree(), 42) is None


class TestPathToRoot:
    """Tests for get_path_to_root."""

    def test_root(self):
        """The root's path is itself."""
        tree = create_tree()
        assert get_path_to_root(tree, 1) == {1}

    def test_nested(self):
        """Path runs through every ancestor."""
        tree = create_tree()
        assert get_path_to_root(tree, 7) == {1, 4, 7}
        assert get_path_to_root(tree, 6) == {1, 2, 6}

    def test_unknown(self):
        """Unknown ids give an empty set."""
        assert get_path_to_root(create_tree(), "nope") == set()

    def test_path_size_matches_depth(self):
        """Every path has depth + 1 ids."""
        tree = create_tree()
        for node in flatten_tree(tree):
            assert len(get_path_to_root(tree, node.id)) == node.depth + 1

    def test_deep_chain(self):
        """Deep chains are walked without recursion."""
        n = 3000
        records = [{"id": i, "parent_id": i - 1 if i else None} for i in range(n)]
        tree = build_tree(records, MAPPING)
        assert get_path_to_root(tree, n - 1) == set(range(n))


class TestCollapseHelpers:
    """Tests for collapse-set helpers."""

    def test_collapsible_ids(self):
        """Every non-leaf node is collapsible."""
        assert collapsible_ids(create_tree()) == frozenset({1, 2, 4})

    def test_collapsed_for_level(self):
        """Non-leaf nodes at or below the level are collapsed."""
        tree = create_tree()
        assert collapsed_ids_for_level(tree, 1) == frozenset({2, 4})
        assert collapsed_ids_for_level(tree, 2) == frozenset()

    def test_level_zero_collapses_nothing(self):
        """Level 0 means fully expanded."""
        assert collapsed_ids_for_level(create_tree(), 0) == frozenset()
