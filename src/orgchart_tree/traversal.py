"""
Read-only traversals over a built org chart tree.

Every walk uses the same pre-order: a node, then the full subtree of each
assistant, then of each transversal, then of each standard child. Callers
rely on a node's assistants and transversals being listed right after it.
Walks use an explicit stack so deep hierarchies do not hit the recursion
limit.
"""

from __future__ import annotations

from typing import Iterator, Optional

from .types import NodeId, OrgNode


def iter_tree(root: OrgNode) -> Iterator[OrgNode]:
    """
    Yield every node of the tree in pre-order.

    Args:
        root: Tree root

    Yields:
        Nodes: root first, then assistants', transversals' and children's
        subtrees in turn.
    """
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.all_children()))


def flatten_tree(root: OrgNode) -> list[OrgNode]:
    """Collect every node of the tree into a list, in pre-order."""
    return list(iter_tree(root))


def find_node(root: OrgNode, node_id: NodeId) -> Optional[OrgNode]:
    """Find the node with the given id, or None if absent."""
    for node in iter_tree(root):
        if node.id == node_id:
            return node
    return None


def get_path_to_root(root: OrgNode, target_id: NodeId) -> set[NodeId]:
    """
    Get the ids on the path from the root to a node.

    Args:
        root: Tree root
        target_id: Id of the node to reach

    Returns:
        Set of ids from root to target, both included.
        Empty set if target_id is not in the tree.

    Example:
        >>> path = get_path_to_root(tree, "dev-1")
        >>> tree.id in path
        True
    """
    parent_of: dict[int, Optional[OrgNode]] = {id(root): None}
    target: Optional[OrgNode] = None

    stack = [root]
    while stack:
        node = stack.pop()
        if node.id == target_id:
            target = node
            break
        for child in reversed(node.all_children()):
            parent_of[id(child)] = node
            stack.append(child)

    path: set[NodeId] = set()
    current = target
    while current is not None:
        path.add(current.id)
        current = parent_of[id(current)]
    return path


def collapsible_ids(root: OrgNode) -> frozenset[NodeId]:
    """Ids of every node that has at least one descendant."""
    return frozenset(node.id for node in iter_tree(root) if not node.is_leaf)


def collapsed_ids_for_level(root: OrgNode, expand_level: int) -> frozenset[NodeId]:
    """
    Ids to collapse so that only the first levels of the tree are open.

    Args:
        root: Tree root
        expand_level: Non-leaf nodes at this depth or deeper are collapsed.
            0 means no limit: nothing is collapsed.

    Returns:
        Frozen set of ids to collapse
    """
    if expand_level == 0:
        return frozenset()
    return frozenset(
        node.id
        for node in iter_tree(root)
        if node.depth >= expand_level and not node.is_leaf
    )


__all__ = [
    "iter_tree",
    "flatten_tree",
    "find_node",
    "get_path_to_root",
    "collapsible_ids",
    "collapsed_ids_for_level",
]
