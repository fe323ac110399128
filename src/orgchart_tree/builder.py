"""
Org chart tree construction.

Turns validated flat records into a single rooted tree of OrgNode. Each
node's direct descendants are split into three partitions by the node's
own role type (assistants, transversals, standard children), depths are
assigned from the root, and every partition is optionally sorted by an
order column.
"""

from __future__ import annotations

import math
import warnings
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from .preprocessing import normalize_parent
from .types import FieldMapping, NodeId, OrgNode, Record, RoleType
from .validation import TreeBuildError, ValidationIssue, validate_records


class OrderValueWarning(UserWarning):
    """Warning issued when an order cell cannot be read as a number."""

    pass


@dataclass
class BuildResult:
    """
    Outcome of try_build_tree: either a tree or the reasons there is none.

    Attributes:
        tree: Root of the built tree, None on failure
        issues: Validation issues that prevented the build
        message: Failure description (joined issue messages), empty on success
    """

    tree: Optional[OrgNode] = None
    issues: list[ValidationIssue] = field(default_factory=list)
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.tree is not None


def build_tree(records: Sequence[Record], field_mapping: FieldMapping) -> OrgNode:
    """
    Build an org chart tree from flat records.

    Records are validated first; the builder never produces a partial tree.

    Args:
        records: Flat records, one per position
        field_mapping: Column bindings

    Returns:
        The root OrgNode

    Raises:
        TreeBuildError: If validation fails (message joins every issue with
            " | ", and ``issues`` holds them), or if a root or parent cannot
            be located
    """
    issues = validate_records(records, field_mapping)
    if issues:
        raise TreeBuildError(" | ".join(issue.message for issue in issues), issues)

    id_field = field_mapping.id
    parent_field = field_mapping.parent
    role_type_field = field_mapping.role_type

    # 1. One node per record
    node_map: dict[NodeId, OrgNode] = {}
    for record in records:
        node_id = record.get(id_field)
        role_type = (
            RoleType.from_value(record.get(role_type_field))
            if role_type_field
            else RoleType.STANDARD
        )
        node_map[node_id] = OrgNode(
            node_id,
            parent_id=normalize_parent(record.get(parent_field)),
            data=record,
            role_type=role_type,
        )

    # 2. Attach every node to the partition its role type selects
    root: Optional[OrgNode] = None
    for node in node_map.values():
        if node.parent_id is None:
            root = node
            continue

        parent = node_map.get(node.parent_id)
        if parent is None:
            raise TreeBuildError(f"Parent {node.parent_id} not found for node {node.id}")

        if node.role_type is RoleType.ASSISTANT:
            parent.assistants.append(node)
        elif node.role_type is RoleType.TRANSVERSAL:
            parent.transversals.append(node)
        else:
            parent.children.append(node)
        parent.is_leaf = False

    if root is None:
        raise TreeBuildError("No root node found.")

    # 3. Depths
    _assign_depths(root)

    # 4. Ordering
    if field_mapping.order:
        _sort_partitions(root, field_mapping.order)

    # 5. Leaf status
    _update_leaf_status(root)

    return root


def try_build_tree(records: Sequence[Record], field_mapping: FieldMapping) -> BuildResult:
    """
    Build an org chart tree without raising on invalid records.

    Args:
        records: Flat records, one per position
        field_mapping: Column bindings

    Returns:
        BuildResult holding either the tree or the issues found
    """
    try:
        tree = build_tree(records, field_mapping)
    except TreeBuildError as exc:
        return BuildResult(issues=exc.issues, message=str(exc))
    return BuildResult(tree=tree)


def _assign_depths(root: OrgNode) -> None:
    """Set depth = parent depth + 1, walking assistants, transversals, then children."""
    root.depth = 0
    stack = [root]
    while stack:
        node = stack.pop()
        for child in node.all_children():
            child.depth = node.depth + 1
            stack.append(child)


def _sort_partitions(root: OrgNode, order_field: str) -> None:
    """Sort each child partition ascending by its order column, at every level."""
    unreadable: list[NodeId] = []

    def sort_key(node: OrgNode) -> float:
        value, readable = _order_value(node.data.get(order_field))
        if not readable:
            unreadable.append(node.id)
        return value

    stack = [root]
    while stack:
        node = stack.pop()
        # sorted() is stable: ties keep their input order
        node.children = sorted(node.children, key=sort_key)
        node.assistants = sorted(node.assistants, key=sort_key)
        node.transversals = sorted(node.transversals, key=sort_key)
        stack.extend(node.all_children())

    if unreadable:
        ids = ", ".join(str(i) for i in dict.fromkeys(unreadable))
        warnings.warn(
            f"Order column '{order_field}' holds non-numeric values for node(s) {ids}. "
            "These nodes are sorted as if their order were 0.",
            OrderValueWarning,
            stacklevel=3,
        )


def _order_value(value: Any) -> tuple[float, bool]:
    """
    Read an order cell as a number.

    Returns:
        (numeric value, readable). Missing cells read as (0, True);
        cells that are present but not numeric read as (0, False).
    """
    if value is None or isinstance(value, bool):
        return 0.0, value is None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        if not value.strip():
            return 0.0, True
        try:
            number = float(value)
        except ValueError:
            return 0.0, False
    else:
        return 0.0, False

    if math.isnan(number):
        return 0.0, False
    return number, True


def _update_leaf_status(root: OrgNode) -> None:
    """Recompute is_leaf for every node."""
    stack = [root]
    while stack:
        node = stack.pop()
        node.is_leaf = not (node.children or node.assistants or node.transversals)
        stack.extend(node.all_children())


__all__ = ["build_tree", "try_build_tree", "BuildResult", "OrderValueWarning"]
