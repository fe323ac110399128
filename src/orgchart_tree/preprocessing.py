"""
Record preprocessing utilities.

This module provides reusable functions for inspecting the parent links of
flat records before a tree is built:
- Root detection
- Parent map extraction
- Cycle detection over parent chains

These utilities are used internally by the validator but can also be
used directly for data analysis.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, Mapping, Optional

if TYPE_CHECKING:
    from .types import NodeId, Record


def is_root_value(value: Any) -> bool:
    """Check if a parent cell marks its record as the root (None or empty string)."""
    return value is None or (isinstance(value, str) and value == "")


def normalize_parent(value: Any) -> Optional[NodeId]:
    """Map empty parent cells to None; keep any other value as-is."""
    return None if is_root_value(value) else value


def parent_map(
    records: Iterable[Record],
    id_field: str,
    parent_field: str,
) -> dict[NodeId, Optional[NodeId]]:
    """
    Build an id -> parent id mapping from records.

    Args:
        records: Flat records
        id_field: Column holding the record id
        parent_field: Column holding the parent id

    Returns:
        Dict preserving record order. Root records map to None.
        When ids repeat, the last record wins.
    """
    return {
        record.get(id_field): normalize_parent(record.get(parent_field))
        for record in records
    }


# =============================================================================
# Cycle Detection
# =============================================================================


def find_cycle_members(parents: Mapping[NodeId, Optional[NodeId]]) -> list[NodeId]:
    """
    Find the ids caught in a cycle of parent links.

    Walks each id's parent chain upward. Every id becomes resolved once a
    chain has passed through it, so each id is walked at most once and the
    whole scan is linear. When an id reappears on the chain being walked,
    every id of that chain is reported.

    Reported membership is best effort: a chain that leads into a cycle
    from outside is reported along with the cycle itself. Whether a cycle
    exists is always detected exactly.

    Args:
        parents: Mapping of id -> parent id (None for roots). Parents that
            are not keys of the mapping end the chain.

    Returns:
        Ids involved in cycles, in discovery order. Empty if acyclic.

    Example:
        >>> find_cycle_members({1: None, 2: 3, 3: 2})
        [2, 3]
    """
    resolved: set[NodeId] = set()
    members: list[NodeId] = []

    for start in parents:
        if start in resolved:
            continue

        # dict as an insertion-ordered set
        chain: dict[NodeId, None] = {}
        current: Optional[NodeId] = start

        while current is not None and current not in resolved:
            if current in chain:
                members.extend(chain)
                break
            chain[current] = None
            current = parents.get(current)

        resolved.update(chain)

    return members


def has_parent_cycle(parents: Mapping[NodeId, Optional[NodeId]]) -> bool:
    """
    Check if any parent chain loops back on itself.

    Args:
        parents: Mapping of id -> parent id (None for roots)

    Returns:
        True if a cycle exists, False otherwise.
    """
    return len(find_cycle_members(parents)) > 0


__all__ = [
    "is_root_value",
    "normalize_parent",
    "parent_map",
    "find_cycle_members",
    "has_parent_cycle",
]
