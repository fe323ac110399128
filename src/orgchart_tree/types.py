"""
Common types for org chart trees.

This module provides the fundamental types shared by every stage of the
pipeline:
- FieldMapping: Binding from logical roles to source column names
- OrgNode: One position of the organization tree
- RoleType: How a node is attached to its parent
- SearchResult: A node matched by a text search
- ChartEventType / ChartEvent: View-state events for callbacks
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Sequence, TypedDict, Union

from .validation import InvalidFieldMappingError

NodeId = Union[str, int]
"""Node identifier: whatever scalar the id column holds."""

Record = Mapping[str, Any]
"""Input record: flat mapping of column name to scalar value."""

RecordsLike = Union[Sequence[Record], str, None]
"""Input records: a sequence of mappings, or a JSON array string."""


class RoleType(Enum):
    """
    How a node hangs off its parent.

    - standard: line-management child
    - assistant: supporting staff, tracked apart from line children
    - transversal: cross-functional / dotted-line relationship
    - vacant: open position, laid out like a standard child
    """

    STANDARD = "standard"
    ASSISTANT = "assistant"
    TRANSVERSAL = "transversal"
    VACANT = "vacant"

    @classmethod
    def from_value(cls, value: Any) -> RoleType:
        """Classify a raw role-type cell; anything unknown is standard."""
        if isinstance(value, str):
            try:
                return cls(value)
            except ValueError:
                return cls.STANDARD
        return cls.STANDARD


# Logical roles that must always be bound to a column
_REQUIRED_ROLES = ("id", "parent")

# camelCase spellings accepted by FieldMapping.from_dict
_ROLE_ALIASES = {
    "roleType": "role_type",
    "badgeType": "badge_type",
}


@dataclass(frozen=True)
class FieldMapping:
    """
    Binding from logical roles to the column names of the input records.

    Only ``id`` and ``parent`` are required; every other role defaults to
    unbound (None). Columns not named here are carried through untouched in
    ``OrgNode.data``.
    """

    id: str = "id"
    parent: str = "parent_id"
    name: Optional[str] = None
    firstname: Optional[str] = None
    role: Optional[str] = None
    direction: Optional[str] = None
    role_type: Optional[str] = None
    image: Optional[str] = None
    badge: Optional[str] = None
    badge_type: Optional[str] = None
    link: Optional[str] = None
    order: Optional[str] = None
    vacant: Optional[str] = None
    interim: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    def __post_init__(self) -> None:
        for role in _REQUIRED_ROLES:
            value = getattr(self, role)
            if not isinstance(value, str) or not value:
                raise InvalidFieldMappingError(
                    f"Field mapping role '{role}' must be bound to a column name, got {value!r}"
                )
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not None and not isinstance(value, str):
                raise InvalidFieldMappingError(
                    f"Field mapping role '{f.name}' must be a string or None, "
                    f"got {type(value).__name__}"
                )

    @classmethod
    def from_dict(cls, mapping: Mapping[str, Optional[str]]) -> FieldMapping:
        """
        Build a mapping from a plain dict.

        Keys may be snake_case (``role_type``) or camelCase (``roleType``).
        Empty strings are treated as unbound.

        Raises:
            InvalidFieldMappingError: If a key is not a known role
        """
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Optional[str]] = {}
        for key, value in mapping.items():
            role = _ROLE_ALIASES.get(key, key)
            if role not in known:
                raise InvalidFieldMappingError(f"Unknown field mapping role: {key!r}")
            kwargs[role] = value or None
        return cls(**kwargs)  # type: ignore[arg-type]

    def with_overrides(self, **overrides: Optional[str]) -> FieldMapping:
        """Return a copy with some roles rebound."""
        return replace(self, **overrides)

    def field(self, role: str) -> Optional[str]:
        """
        Get the column bound to a logical role, or None if unbound.

        Raises:
            InvalidFieldMappingError: If role is not a known role
        """
        name = _ROLE_ALIASES.get(role, role)
        if name not in {f.name for f in fields(self)}:
            raise InvalidFieldMappingError(f"Unknown field mapping role: {role!r}")
        return getattr(self, name)

    def to_dict(self) -> dict[str, str]:
        """Return the bound roles as a plain dict."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


DEFAULT_FIELD_MAPPING = FieldMapping(
    id="id",
    parent="parent_id",
    name="nom",
    firstname="prenom",
    role="fonction",
    direction="direction",
    role_type="role_type",
    image="image",
    badge="badge",
    badge_type="badge_type",
    link="lien",
    order="ordre",
    vacant="vacant",
    interim="interim",
    email="email",
    phone="telephone",
)
"""Column names used by the spreadsheet template the org chart ships with."""


class OrgNode:
    """
    One position of the organization tree.

    Attributes:
        id: Identifier, unique across the tree
        parent_id: Identifier of the parent, None for the root
        data: Copy of the originating record
        children: Standard (line-management) children
        assistants: Children classified as assistants
        transversals: Children classified as transversal
        depth: Distance from the root (root is 0)
        is_leaf: True iff the three child collections are empty
    """

    def __init__(
        self,
        id: NodeId,
        parent_id: Optional[NodeId] = None,
        data: Optional[Mapping[str, Any]] = None,
        role_type: RoleType = RoleType.STANDARD,
    ) -> None:
        self.id = id
        self.parent_id = parent_id
        self.data: dict[str, Any] = dict(data) if data is not None else {}
        self.children: list[OrgNode] = []
        self.assistants: list[OrgNode] = []
        self.transversals: list[OrgNode] = []
        self.depth: int = 0
        self.is_leaf: bool = True
        self._role_type = role_type

    @property
    def role_type(self) -> RoleType:
        """Role type the node was classified with when attached."""
        return self._role_type

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    def all_children(self) -> list[OrgNode]:
        """Direct descendants in traversal order: assistants, transversals, children."""
        return [*self.assistants, *self.transversals, *self.children]

    def get(self, role: str, field_mapping: FieldMapping, default: Any = None) -> Any:
        """Read the value of a logical role from this node's record."""
        column = field_mapping.field(role)
        if column is None:
            return default
        return self.data.get(column, default)

    def __repr__(self) -> str:
        return (
            f"OrgNode(id={self.id!r}, depth={self.depth}, "
            f"children={len(self.children)}, assistants={len(self.assistants)}, "
            f"transversals={len(self.transversals)})"
        )


@dataclass(frozen=True)
class SearchResult:
    """A node matched by a search, with the role and raw value that matched."""

    node: OrgNode
    match_field: str
    match_value: str


class ChartEventType(Enum):
    """
    View-state events.

    - node_click: A node was clicked (path highlighted)
    - node_expand: A node was collapsed or expanded
    - search_result: A search completed
    - data_error: Loaded records failed validation
    """

    node_click = "node-click"
    node_expand = "node-expand"
    search_result = "search-result"
    data_error = "data-error"


class ChartEvent(TypedDict, total=False):
    """Event payload passed to chart listeners."""

    type: ChartEventType
    node: Optional[OrgNode]
    expanded: bool
    query: str
    results: list[OrgNode]
    kind: str
    message: str


ChartListener = Callable[[ChartEvent], None]


__all__ = [
    "NodeId",
    "Record",
    "RecordsLike",
    "RoleType",
    "FieldMapping",
    "DEFAULT_FIELD_MAPPING",
    "OrgNode",
    "SearchResult",
    "ChartEventType",
    "ChartEvent",
    "ChartListener",
]
