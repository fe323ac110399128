"""
Text search over org chart nodes.

Matching is a case- and accent-insensitive substring test against a fixed
list of descriptive roles. Results follow tree pre-order, not relevance.
"""

from __future__ import annotations

import unicodedata

from .traversal import iter_tree
from .types import FieldMapping, OrgNode, SearchResult

SEARCH_FIELDS: tuple[str, ...] = ("name", "firstname", "role", "direction")
"""Roles compared against the query, highest priority first."""


def normalize_text(text: str) -> str:
    """
    Fold case and strip combining diacritics.

    Example:
        >>> normalize_text("École Supérieure")
        'ecole superieure'
    """
    decomposed = unicodedata.normalize("NFD", text.lower())
    return "".join(ch for ch in decomposed if not "\u0300" <= ch <= "\u036f")


def search(tree: OrgNode, query: str, field_mapping: FieldMapping) -> list[SearchResult]:
    """
    Find nodes whose descriptive fields contain the query.

    Args:
        tree: Tree root
        query: Free text; blank queries match nothing
        field_mapping: Column bindings; unbound search roles are skipped

    Returns:
        At most one SearchResult per node, naming the first role in
        SEARCH_FIELDS that matched. Ordered like flatten_tree().
    """
    if not query or not query.strip():
        return []

    needle = normalize_text(query)
    columns: list[tuple[str, str]] = []
    for role in SEARCH_FIELDS:
        column = field_mapping.field(role)
        if column is not None:
            columns.append((role, column))

    results: list[SearchResult] = []
    for node in iter_tree(tree):
        for role, column in columns:
            value = node.data.get(column)
            if isinstance(value, str) and value and needle in normalize_text(value):
                results.append(SearchResult(node, role, value))
                break

    return results


__all__ = ["SEARCH_FIELDS", "normalize_text", "search"]
