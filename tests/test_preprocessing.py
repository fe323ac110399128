"""Tests for record preprocessing utilities."""

from orgchart_tree import (
    find_cycle_members,
    has_parent_cycle,
    is_root_value,
    parent_map,
)
from orgchart_tree.preprocessing import normalize_parent


class TestRootValues:
    """Tests for root detection helpers."""

    def test_none_and_empty_string_are_root(self):
        """None and '' mark a root."""
        assert is_root_value(None)
        assert is_root_value("")

    def test_other_values_are_not_root(self):
        """Falsy ids like 0 or False are still parent references."""
        assert not is_root_value(0)
        assert not is_root_value(False)
        assert not is_root_value(" ")
        assert not is_root_value("1")

    def test_normalize_parent(self):
        """Empty parents normalize to None."""
        assert normalize_parent("") is None
        assert normalize_parent(None) is None
        assert normalize_parent(0) == 0


class TestParentMap:
    """Tests for parent map extraction."""

    def test_parent_map(self):
        """Maps ids to parents, preserving record order."""
        records = [
            {"id": "b", "parent": "a"},
            {"id": "a", "parent": ""},
            {"id": "c"},
        ]
        parents = parent_map(records, "id", "parent")
        assert parents == {"b": "a", "a": None, "c": None}
        assert list(parents) == ["b", "a", "c"]


class TestCycleDetection:
    """Tests for cycle detection over parent chains."""

    def test_acyclic(self):
        """A tree has no cycle members."""
        parents = {1: None, 2: 1, 3: 1, 4: 2}
        assert find_cycle_members(parents) == []
        assert has_parent_cycle(parents) is False

    def test_two_node_cycle(self):
        """A mutual pair is found."""
        assert find_cycle_members({1: None, 2: 3, 3: 2}) == [2, 3]

    def test_self_loop(self):
        """A node that is its own parent is found."""
        assert find_cycle_members({1: 1}) == [1]
        assert has_parent_cycle({1: 1}) is True

    def test_chain_into_cycle(self):
        """A tail leading into a loop is reported with the loop."""
        members = find_cycle_members({1: None, 2: 3, 3: 4, 4: 3})
        assert {3, 4} <= set(members)
        assert 1 not in members

    def test_unknown_parent_ends_chain(self):
        """A parent missing from the mapping is not a cycle."""
        assert find_cycle_members({1: 99, 2: 1}) == []

    def test_two_separate_cycles(self):
        """Independent loops are both reported."""
        members = find_cycle_members({1: 2, 2: 1, 3: 4, 4: 3, 5: None})
        assert set(members) == {1, 2, 3, 4}

    def test_long_chain(self):
        """A very deep chain is handled without recursion."""
        n = 100_000
        parents = {i: (i - 1 if i else None) for i in range(n)}
        assert find_cycle_members(parents) == []

    def test_empty(self):
        """Empty mapping has no cycle."""
        assert find_cycle_members({}) == []
