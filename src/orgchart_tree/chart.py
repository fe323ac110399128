"""
Caller-side view state for an org chart.

OrgChart loads records, builds the tree and keeps the state a presentation
layer needs on top of it:

- collapsed node ids
- highlighted path
- search results and the find-next/previous cursor

View state is held as frozen sets of node ids next to the tree, never on the
nodes themselves, so the tree stays a pure function of the records. Every
change replaces the set, so callers can detect changes by comparison.
"""

from __future__ import annotations

from typing import Optional, Sequence

from typing_extensions import Self

from .builder import try_build_tree
from .search import search as search_tree
from .traversal import (
    collapsed_ids_for_level,
    collapsible_ids,
    find_node,
    get_path_to_root,
    iter_tree,
)
from .types import (
    DEFAULT_FIELD_MAPPING,
    ChartEvent,
    ChartEventType,
    ChartListener,
    FieldMapping,
    NodeId,
    OrgNode,
    RecordsLike,
    SearchResult,
)
from .validation import (
    ErrorKind,
    InvalidOptionError,
    InvalidRecordsError,
    NodeNotFoundError,
    SearchDisabledError,
    ValidationIssue,
    load_records,
    validate_expand_level,
)


class OrgChart:
    """
    Org chart tree plus the view state layered on it.

    Example:
        chart = OrgChart(expand_level=1, on_data_error=print)
        chart.load(records)
        for node in chart.search("dupont"):
            print(node.id)
        chart.search_next()
    """

    def __init__(
        self,
        *,
        field_mapping: FieldMapping = DEFAULT_FIELD_MAPPING,
        expand_level: int = 2,
        searchable: bool = True,
        collapsible: bool = True,
        highlight_path: bool = True,
        on_node_click: Optional[ChartListener] = None,
        on_node_expand: Optional[ChartListener] = None,
        on_search_result: Optional[ChartListener] = None,
        on_data_error: Optional[ChartListener] = None,
    ) -> None:
        """
        Initialize an empty chart.

        Args:
            field_mapping: Column bindings for the records
            expand_level: Depth from which non-leaf nodes start collapsed
                (0 expands everything)
            searchable: Whether search() is allowed
            collapsible: Whether toggle_node() changes anything
            highlight_path: Whether click_node() highlights the path to root
            on_node_click: Callback for node-click events
            on_node_expand: Callback for node-expand events
            on_search_result: Callback for search-result events
            on_data_error: Callback for data-error events (one per issue)
        """
        self._field_mapping: FieldMapping = field_mapping
        self._expand_level: int = validate_expand_level(expand_level)
        self._searchable: bool = bool(searchable)
        self._collapsible: bool = bool(collapsible)
        self._highlight_path: bool = bool(highlight_path)
        self._events: dict[ChartEventType, ChartListener] = {}

        self._records: list[dict] = []
        self._tree: Optional[OrgNode] = None
        self._errors: list[ValidationIssue] = []
        self._collapsed: frozenset[NodeId] = frozenset()
        self._highlighted: frozenset[NodeId] = frozenset()
        self._search_results: list[SearchResult] = []
        self._search_index: int = -1
        self._search_match_ids: frozenset[NodeId] = frozenset()

        if on_node_click:
            self._events[ChartEventType.node_click] = on_node_click
        if on_node_expand:
            self._events[ChartEventType.node_expand] = on_node_expand
        if on_search_result:
            self._events[ChartEventType.search_result] = on_search_result
        if on_data_error:
            self._events[ChartEventType.data_error] = on_data_error

    # -------------------------------------------------------------------------
    # Options
    # -------------------------------------------------------------------------

    @property
    def field_mapping(self) -> FieldMapping:
        """Get the column bindings."""
        return self._field_mapping

    @field_mapping.setter
    def field_mapping(self, value: FieldMapping) -> None:
        """Set the column bindings and rebuild from the loaded records."""
        if not isinstance(value, FieldMapping):
            raise InvalidOptionError(
                f"field_mapping must be a FieldMapping, got {type(value).__name__}"
            )
        self._field_mapping = value
        if self._records:
            self._rebuild()

    @property
    def expand_level(self) -> int:
        """Get the depth from which nodes start collapsed."""
        return self._expand_level

    @expand_level.setter
    def expand_level(self, value: int) -> None:
        """
        Set the depth from which nodes start collapsed.

        Raises:
            InvalidOptionError: If value is negative or not an integer.
        """
        self._expand_level = validate_expand_level(value)

    @property
    def searchable(self) -> bool:
        return self._searchable

    @searchable.setter
    def searchable(self, value: bool) -> None:
        self._searchable = bool(value)
        if not self._searchable:
            self._clear_search()

    @property
    def collapsible(self) -> bool:
        return self._collapsible

    @collapsible.setter
    def collapsible(self, value: bool) -> None:
        self._collapsible = bool(value)

    @property
    def highlight_path(self) -> bool:
        return self._highlight_path

    @highlight_path.setter
    def highlight_path(self, value: bool) -> None:
        self._highlight_path = bool(value)

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def tree(self) -> Optional[OrgNode]:
        """Root of the current tree, None if nothing valid is loaded."""
        return self._tree

    @property
    def errors(self) -> list[ValidationIssue]:
        """Issues found by the last load."""
        return list(self._errors)

    @property
    def collapsed(self) -> frozenset[NodeId]:
        return self._collapsed

    @property
    def highlighted_path(self) -> frozenset[NodeId]:
        return self._highlighted

    @property
    def selected_nodes(self) -> list[OrgNode]:
        """Nodes on the highlighted path, in tree order."""
        if self._tree is None:
            return []
        return [node for node in iter_tree(self._tree) if node.id in self._highlighted]

    @property
    def search_results(self) -> list[SearchResult]:
        return list(self._search_results)

    @property
    def search_index(self) -> int:
        """Cursor into search_results, -1 when there are none."""
        return self._search_index

    @property
    def search_match_ids(self) -> frozenset[NodeId]:
        return self._search_match_ids

    @property
    def current_result(self) -> Optional[SearchResult]:
        if self._search_index < 0:
            return None
        return self._search_results[self._search_index]

    # -------------------------------------------------------------------------
    # Event System
    # -------------------------------------------------------------------------

    def on(self, event: ChartEventType | str, callback: ChartListener) -> Self:
        """
        Subscribe to a chart event.

        Args:
            event: Event type (ChartEventType, its name, or its value)
            callback: Function to call when the event fires

        Returns:
            self (for chaining)
        """
        if isinstance(event, str):
            if event in ChartEventType.__members__:
                event = ChartEventType[event]
            else:
                event = ChartEventType(event)
        self._events[event] = callback
        return self

    def trigger(self, event: ChartEvent) -> None:
        """
        Trigger an event, calling the registered callback.

        Args:
            event: Event payload with type and optional data
        """
        event_type = event.get("type")
        if event_type is not None and event_type in self._events:
            self._events[event_type](event)

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def load(self, records: RecordsLike) -> Self:
        """
        Load records and rebuild the tree.

        Invalid records leave the chart without a tree; their issues are
        stored in ``errors`` and reported through data-error events.

        Args:
            records: Sequence of mappings, or JSON text holding an array of objects

        Returns:
            self (for chaining)
        """
        self._records = []
        self._reset()

        try:
            loaded = load_records(records)
        except InvalidRecordsError as exc:
            self._fail(exc.issues)
            return self

        if not loaded:
            return self
        self._records = loaded
        self._rebuild()
        return self

    def _rebuild(self) -> None:
        self._reset()
        result = try_build_tree(self._records, self._field_mapping)
        if not result.ok:
            issues = result.issues or [ValidationIssue(ErrorKind.EMPTY_DATA, result.message)]
            self._fail(issues)
            return
        self._tree = result.tree
        self._init_collapsed_state()

    def _reset(self) -> None:
        self._tree = None
        self._errors = []
        self._collapsed = frozenset()
        self._highlighted = frozenset()
        self._clear_search()

    def _fail(self, issues: Sequence[ValidationIssue]) -> None:
        self._errors = list(issues)
        for issue in self._errors:
            self.trigger(
                {
                    "type": ChartEventType.data_error,
                    "kind": issue.kind.value,
                    "message": issue.message,
                }
            )

    def _init_collapsed_state(self) -> None:
        if self._tree is None:
            self._collapsed = frozenset()
            return
        self._collapsed = collapsed_ids_for_level(self._tree, self._expand_level)

    # -------------------------------------------------------------------------
    # Expansion
    # -------------------------------------------------------------------------

    def expand_all(self) -> Self:
        self._collapsed = frozenset()
        return self

    def collapse_all(self) -> Self:
        """Collapse every node that has descendants."""
        if self._tree is not None:
            self._collapsed = collapsible_ids(self._tree)
        return self

    def expand_to_level(self, level: int) -> Self:
        """
        Reset expansion so that only the first levels are open.

        Args:
            level: New expand_level (0 expands everything)

        Returns:
            self (for chaining)
        """
        self.expand_level = level
        self._init_collapsed_state()
        return self

    def toggle_node(self, node_id: NodeId) -> Self:
        """
        Collapse an expanded node or expand a collapsed one.

        Does nothing when the chart is not collapsible.

        Raises:
            NodeNotFoundError: If node_id is not in the tree.
        """
        if not self._collapsible:
            return self
        node = self._require_node(node_id)

        was_collapsed = node.id in self._collapsed
        if was_collapsed:
            self._collapsed = self._collapsed - {node.id}
        else:
            self._collapsed = self._collapsed | {node.id}

        self.trigger(
            {
                "type": ChartEventType.node_expand,
                "node": node,
                "expanded": was_collapsed,
            }
        )
        return self

    def is_collapsed(self, node_id: NodeId) -> bool:
        return node_id in self._collapsed

    def focus_node(self, node_id: NodeId) -> Self:
        """Expand every ancestor of a node so that it becomes visible."""
        if self._tree is not None:
            path = get_path_to_root(self._tree, node_id)
            self._collapsed = self._collapsed - path
        return self

    def visible_nodes(self) -> list[OrgNode]:
        """
        Nodes a renderer would show, in tree order.

        A collapsed node hides its standard children (and their subtrees);
        its assistants and transversals stay visible beside it.
        """
        if self._tree is None:
            return []

        visible: list[OrgNode] = []
        stack = [self._tree]
        while stack:
            node = stack.pop()
            visible.append(node)
            shown = [*node.assistants, *node.transversals]
            if node.id not in self._collapsed:
                shown.extend(node.children)
            stack.extend(reversed(shown))
        return visible

    def is_visible(self, node_id: NodeId) -> bool:
        return any(node.id == node_id for node in self.visible_nodes())

    # -------------------------------------------------------------------------
    # Highlighting
    # -------------------------------------------------------------------------

    def highlight_node_path(self, node_id: NodeId) -> Self:
        """Highlight the ids from the root to a node."""
        if self._tree is not None:
            self._highlighted = frozenset(get_path_to_root(self._tree, node_id))
        return self

    def clear_highlight(self) -> Self:
        self._highlighted = frozenset()
        return self

    def click_node(self, node_id: NodeId) -> Self:
        """
        Handle a click on a node: highlight its path and fire node-click.

        Raises:
            NodeNotFoundError: If node_id is not in the tree.
        """
        node = self._require_node(node_id)
        if self._highlight_path:
            self.highlight_node_path(node.id)
        self.trigger({"type": ChartEventType.node_click, "node": node})
        return self

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    def search(self, query: str) -> list[OrgNode]:
        """
        Search the tree and reveal every match.

        A blank query clears the previous results. Otherwise the ancestors
        of every matched node are expanded, the cursor moves to the first
        match and a search-result event fires.

        Args:
            query: Free text, compared without case or accents

        Returns:
            Matched nodes in tree order

        Raises:
            SearchDisabledError: If the chart is not searchable.
        """
        if not self._searchable:
            raise SearchDisabledError("Search is disabled for this chart")

        if self._tree is None or not query or not query.strip():
            self._clear_search()
            return []

        results = search_tree(self._tree, query, self._field_mapping)
        self._search_results = results
        self._search_match_ids = frozenset(r.node.id for r in results)
        self._search_index = 0 if results else -1

        if results:
            revealed: set[NodeId] = set()
            for result in results:
                revealed |= get_path_to_root(self._tree, result.node.id)
            self._collapsed = self._collapsed - revealed
            self.focus_node(results[0].node.id)

        nodes = [r.node for r in results]
        self.trigger(
            {
                "type": ChartEventType.search_result,
                "query": query,
                "results": nodes,
            }
        )
        return nodes

    def search_next(self) -> Optional[OrgNode]:
        """Move the cursor to the next match, wrapping around; None without results."""
        return self._step_search(1)

    def search_prev(self) -> Optional[OrgNode]:
        """Move the cursor to the previous match, wrapping around; None without results."""
        return self._step_search(-1)

    def _step_search(self, step: int) -> Optional[OrgNode]:
        if not self._search_results:
            return None
        self._search_index = (self._search_index + step) % len(self._search_results)
        node = self._search_results[self._search_index].node
        self.focus_node(node.id)
        return node

    def _clear_search(self) -> None:
        self._search_results = []
        self._search_index = -1
        self._search_match_ids = frozenset()

    # -------------------------------------------------------------------------
    # Utility Methods
    # -------------------------------------------------------------------------

    def _require_node(self, node_id: NodeId) -> OrgNode:
        node = find_node(self._tree, node_id) if self._tree is not None else None
        if node is None:
            raise NodeNotFoundError(f"Node {node_id!r} not found in the chart")
        return node

    def __repr__(self) -> str:
        size = sum(1 for _ in iter_tree(self._tree)) if self._tree is not None else 0
        return f"OrgChart(nodes={size}, errors={len(self._errors)}, collapsed={len(self._collapsed)})"


__all__ = ["OrgChart"]
