"""
Input validation utilities for org chart records.

Provides the structural validator run before a tree is built, the loader
that accepts records as Python sequences or JSON text, and validators for
chart options. The record validator reports problems as a list of
ValidationIssue values; the other helpers raise descriptive exceptions.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional, Sequence

from .preprocessing import find_cycle_members, is_root_value, parent_map

if TYPE_CHECKING:
    from .types import FieldMapping, NodeId, Record, RecordsLike


class ValidationError(ValueError):
    """Base exception for org chart validation errors."""

    pass


class InvalidFieldMappingError(ValidationError):
    """Raised when a field mapping is malformed."""

    pass


class InvalidOptionError(ValidationError):
    """Raised when a chart option is out of range."""

    pass


class InvalidRecordsError(ValidationError):
    """Raised when records are structurally unfit to build a tree."""

    def __init__(self, message: str, issues: Sequence[ValidationIssue] = ()) -> None:
        super().__init__(message)
        self.issues: list[ValidationIssue] = list(issues)


class TreeBuildError(ValidationError):
    """Raised when a tree cannot be built from the given records."""

    def __init__(self, message: str, issues: Sequence[ValidationIssue] = ()) -> None:
        super().__init__(message)
        self.issues: list[ValidationIssue] = list(issues)


class NodeNotFoundError(ValidationError, KeyError):
    """Raised when a node id is not present in the tree."""

    def __str__(self) -> str:
        # KeyError would repr() the message
        return str(self.args[0]) if self.args else ""


class SearchDisabledError(ValidationError):
    """Raised when searching a chart built with searchable=False."""

    pass


class ErrorKind(Enum):
    """Kinds of structural defect found in a record set."""

    EMPTY_DATA = "empty-data"
    DUPLICATE_ID = "duplicate-id"
    NO_ROOT = "no-root"
    MULTIPLE_ROOTS = "multiple-roots"
    ORPHAN = "orphan"
    CYCLE = "cycle"


@dataclass(frozen=True)
class ValidationIssue:
    """
    One structural defect of a record set.

    Attributes:
        kind: Defect category
        message: Human-readable description naming the offending ids
        detail: Offending ids for programmatic use, if any
    """

    kind: ErrorKind
    message: str
    detail: Optional[dict[str, Any]] = None

    def __str__(self) -> str:
        return self.message


def _format_ids(ids: Sequence[Any]) -> str:
    return ", ".join(str(i) for i in ids)


def validate_records(
    records: Optional[Sequence[Record]],
    field_mapping: FieldMapping,
    strict: bool = False,
) -> list[ValidationIssue]:
    """
    Check that flat records describe exactly one tree.

    All checks run against the whole record set. Cycle detection only runs
    when every other check passed, since it assumes a clean graph shape.

    Args:
        records: Flat records
        field_mapping: Column bindings; only ``id`` and ``parent`` are read
        strict: If True, raises on any issue. If False, returns the issues.

    Returns:
        List of issues, empty when the records can be built into a tree.

    Raises:
        InvalidRecordsError: If strict=True and issues were found
    """
    issues: list[ValidationIssue] = []

    if not records:
        issues.append(ValidationIssue(ErrorKind.EMPTY_DATA, "No data provided."))
        return _finish(issues, strict)

    id_field = field_mapping.id
    parent_field = field_mapping.parent

    # Duplicate ids
    seen: set[NodeId] = set()
    duplicates: list[NodeId] = []
    for record in records:
        node_id = record.get(id_field)
        if node_id in seen and node_id not in duplicates:
            duplicates.append(node_id)
        seen.add(node_id)

    if duplicates:
        issues.append(
            ValidationIssue(
                ErrorKind.DUPLICATE_ID,
                f"Duplicate ids: {_format_ids(duplicates)}",
                {"duplicates": duplicates},
            )
        )

    # Roots and orphans
    roots: list[NodeId] = []
    orphans: list[dict[str, Any]] = []
    for record in records:
        node_id = record.get(id_field)
        parent_id = record.get(parent_field)
        if is_root_value(parent_id):
            roots.append(node_id)
        elif parent_id not in seen:
            orphans.append({"id": node_id, "parent_id": parent_id})

    if not roots:
        issues.append(
            ValidationIssue(
                ErrorKind.NO_ROOT,
                f"No root node found (no record with an empty or null '{parent_field}').",
            )
        )
    elif len(roots) > 1:
        issues.append(
            ValidationIssue(
                ErrorKind.MULTIPLE_ROOTS,
                f"Multiple roots found: {_format_ids(roots)}. Exactly one root node is expected.",
                {"roots": roots},
            )
        )

    if orphans:
        described = ", ".join(f"{o['id']} -> parent {o['parent_id']}" for o in orphans)
        issues.append(
            ValidationIssue(
                ErrorKind.ORPHAN,
                f"Orphan nodes (parent id references a missing id): {described}",
                {"orphans": orphans},
            )
        )

    if not issues:
        cycle_nodes = find_cycle_members(parent_map(records, id_field, parent_field))
        if cycle_nodes:
            issues.append(
                ValidationIssue(
                    ErrorKind.CYCLE,
                    f"Cycle detected involving nodes: {_format_ids(cycle_nodes)}",
                    {"cycle_nodes": cycle_nodes},
                )
            )

    return _finish(issues, strict)


def _finish(issues: list[ValidationIssue], strict: bool) -> list[ValidationIssue]:
    if strict and issues:
        msg = "Invalid records:\n" + "\n".join(issue.message for issue in issues)
        raise InvalidRecordsError(msg, issues)
    return issues


def load_records(data: RecordsLike) -> list[dict[str, Any]]:
    """
    Normalize records given as a sequence of mappings or as JSON text.

    Args:
        data: Sequence of mappings, a JSON array of objects, or None

    Returns:
        List of plain dicts (empty for None or an empty sequence)

    Raises:
        InvalidRecordsError: If JSON text is malformed or is not an array of objects
    """
    if data is None:
        return []

    if isinstance(data, (str, bytes)):
        try:
            decoded = json.loads(data)
        except ValueError as exc:
            raise _invalid_json() from exc
        if not isinstance(decoded, list):
            raise _invalid_json()
        data = decoded

    records: list[dict[str, Any]] = []
    for item in data:
        if not hasattr(item, "keys"):
            raise _invalid_json()
        records.append(dict(item))
    return records


def _invalid_json() -> InvalidRecordsError:
    issue = ValidationIssue(ErrorKind.EMPTY_DATA, "Invalid JSON format for data.")
    return InvalidRecordsError(issue.message, [issue])


def validate_expand_level(level: int) -> int:
    """
    Validate the initial expansion depth of a chart.

    Args:
        level: Depth from which nodes start collapsed (0 expands everything)

    Returns:
        Validated level

    Raises:
        InvalidOptionError: If level is negative or not an integer
    """
    if isinstance(level, bool) or not isinstance(level, int):
        raise InvalidOptionError(f"expand_level must be an integer, got {type(level).__name__}")
    if level < 0:
        raise InvalidOptionError(f"expand_level must be >= 0, got {level}")
    return level


__all__ = [
    "ValidationError",
    "InvalidFieldMappingError",
    "InvalidOptionError",
    "InvalidRecordsError",
    "TreeBuildError",
    "NodeNotFoundError",
    "SearchDisabledError",
    "ErrorKind",
    "ValidationIssue",
    "validate_records",
    "load_records",
    "validate_expand_level",
]
