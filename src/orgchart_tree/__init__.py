"""
orgchart-tree: Build validated organization chart trees from flat records.

This package turns tabular person/position records (id, parent id and
descriptive columns) into a navigable tree, and provides the operations a
presentation layer needs on top of it.

Available modules:
- validation: Structural checks (duplicates, roots, orphans, cycles)
- builder: Tree construction with assistant/transversal partitions
- traversal: Flatten, find, path-to-root
- search: Accent-insensitive text search
- chart: View state (collapsed nodes, highlighted path, search cursor)
"""

__version__ = "0.1.0"

# Tree construction
from .builder import (
    BuildResult,
    OrderValueWarning,
    build_tree,
    try_build_tree,
)

# View state
from .chart import OrgChart

# Preprocessing utilities
from .preprocessing import (
    find_cycle_members,
    has_parent_cycle,
    is_root_value,
    parent_map,
)

# Search
from .search import SEARCH_FIELDS, normalize_text, search

# Tree queries
from .traversal import (
    collapsed_ids_for_level,
    collapsible_ids,
    find_node,
    flatten_tree,
    get_path_to_root,
    iter_tree,
)
from .types import (
    DEFAULT_FIELD_MAPPING,
    ChartEvent,
    ChartEventType,
    FieldMapping,
    NodeId,
    OrgNode,
    Record,
    RecordsLike,
    RoleType,
    SearchResult,
)

# Validation utilities
from .validation import (
    ErrorKind,
    InvalidFieldMappingError,
    InvalidOptionError,
    InvalidRecordsError,
    NodeNotFoundError,
    SearchDisabledError,
    TreeBuildError,
    ValidationError,
    ValidationIssue,
    load_records,
    validate_expand_level,
    validate_records,
)

__all__ = [
    # Version
    "__version__",
    # Shared types
    "FieldMapping",
    "DEFAULT_FIELD_MAPPING",
    "OrgNode",
    "RoleType",
    "SearchResult",
    "ChartEventType",
    "ChartEvent",
    # Type aliases for API
    "NodeId",
    "Record",
    "RecordsLike",
    # Validation
    "ErrorKind",
    "ValidationIssue",
    "ValidationError",
    "InvalidFieldMappingError",
    "InvalidOptionError",
    "InvalidRecordsError",
    "TreeBuildError",
    "NodeNotFoundError",
    "SearchDisabledError",
    "validate_records",
    "load_records",
    "validate_expand_level",
    # Preprocessing
    "is_root_value",
    "parent_map",
    "find_cycle_members",
    "has_parent_cycle",
    # Tree construction
    "build_tree",
    "try_build_tree",
    "BuildResult",
    "OrderValueWarning",
    # Tree queries
    "iter_tree",
    "flatten_tree",
    "find_node",
    "get_path_to_root",
    "collapsible_ids",
    "collapsed_ids_for_level",
    # Search
    "SEARCH_FIELDS",
    "normalize_text",
    "search",
    # View state
    "OrgChart",
]
