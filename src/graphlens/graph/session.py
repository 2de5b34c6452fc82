"""Graph view session - the state machine behind one opened graph view.

States: CLOSED -> LOADING -> READY | EMPTY | ERROR, back to CLOSED on
close. Each session owns its canonical graph, scheme and view state;
nothing is shared between sessions or kept after close.
"""

import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from graphlens.exceptions import GraphFetchError, InvalidTransitionError, UnknownElementError
from graphlens.graph.aggregation import ChipSummary, TableView, chip_summary
from graphlens.graph.classifier import classify, default_bucket
from graphlens.graph.config import GraphViewConfig
from graphlens.graph.models import DisplayMode, FetchScope, GraphType, Viewpoint, ViewStatus
from graphlens.graph.normalizer import GraphNormalizer
from graphlens.graph.search import (
    Debouncer,
    highlight_label,
    highlight_relationship_caption,
    search,
)
from graphlens.graph.view_filter import project
from graphlens.models.graph import ElementKind, Graph, Node, Relationship, Selection
from graphlens.models.raw import GraphPayload

logger = logging.getLogger(__name__)

# Async callable returning a {"nodes": [...], "relationships": [...]} response
GraphFetcher = Callable[[FetchScope], Awaitable[Any]]


class GraphViewSession:
    """Owns the canonical graph of a view and arbitrates view transitions."""

    def __init__(
        self,
        fetcher: GraphFetcher | None = None,
        config: GraphViewConfig | None = None,
        on_fit: Callable[[list[str]], None] | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.config = config or GraphViewConfig()
        self.on_fit = on_fit
        self._normalizer = GraphNormalizer(self.config)
        self._debouncer: Debouncer[str] = Debouncer(
            self.config.search_debounce_ms / 1000, self.apply_search
        )
        # Bumped on every open/close; responses from an older generation are stale
        self._generation = 0
        self._reset()

    def _reset(self) -> None:
        self.status = ViewStatus.CLOSED
        self.message = ""
        self.scope: FetchScope | None = None
        self.canonical = Graph()
        self.displayed = Graph()
        self.active_buckets: tuple[GraphType, ...] = ()
        self.display_mode = DisplayMode.CANVAS
        self.selection: Selection | None = None
        self.search_query = ""
        self.refreshing = False

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    @property
    def is_open(self) -> bool:
        return self.status != ViewStatus.CLOSED

    @property
    def can_refresh(self) -> bool:
        return (
            self.scope is not None
            and self.scope.viewpoint != Viewpoint.PROVIDED
            and not self.refreshing
            and self.status in (ViewStatus.READY, ViewStatus.ERROR, ViewStatus.EMPTY)
        )

    @property
    def available_buckets(self) -> list[GraphType]:
        """Buckets present in the canonical graph, in priority order."""
        return classify(self.canonical.nodes, self.config.buckets)

    @property
    def selected_item(self) -> Node | Relationship | None:
        """The displayed element the current selection points at."""
        if self.selection is None:
            return None
        if self.selection.kind == ElementKind.NODE:
            return self.displayed.get_node(self.selection.id)
        return self.displayed.get_relationship(self.selection.id)

    def chips(self) -> ChipSummary:
        return chip_summary(self.displayed)

    def table_view(self) -> TableView:
        return TableView(self.displayed)

    def to_dict(self) -> dict:
        """Snapshot of the view for rendering collaborators."""
        return {
            "status": self.status.value,
            "message": self.message,
            "display_mode": self.display_mode.value,
            "active_buckets": [b.value for b in self.active_buckets],
            "available_buckets": [b.value for b in self.available_buckets],
            "search_query": self.search_query,
            "selection": (
                {"kind": self.selection.kind.value, "id": self.selection.id}
                if self.selection else None
            ),
            "can_refresh": self.can_refresh,
            **self.displayed.to_dict(),
        }

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def open(self, scope: FetchScope) -> None:
        """Open the view and load the graph for scope."""
        self._require_closed("open")
        self._generation += 1
        self.scope = scope
        self.status = ViewStatus.LOADING
        logger.info(f"Opening graph view for {scope.viewpoint.value}: {scope.label}")
        await self._load(self._generation, refresh=False)

    def open_with_records(
        self,
        nodes: Iterable[Any],
        relationships: Iterable[Any],
    ) -> None:
        """Open the view on records the caller already holds (no fetch, no refresh)."""
        self._require_closed("open")
        self._generation += 1
        self.scope = FetchScope(viewpoint=Viewpoint.PROVIDED)
        self.status = ViewStatus.LOADING
        payload = GraphPayload.from_response(
            {"nodes": list(nodes), "relationships": list(relationships)}
        )
        graph = self._normalizer.normalize(payload.nodes, payload.relationships)
        self._apply_loaded(graph, refresh=False)

    async def refresh(self) -> bool:
        """Re-fetch and replace the canonical graph, keeping the active buckets.

        Returns:
            False if the refresh was not started (one already in flight,
            no fetch scope, or view not loaded)
        """
        if not self.can_refresh:
            logger.debug(f"Ignoring refresh while view is {self.status.value}")
            return False
        generation = self._generation
        self.refreshing = True
        if self.status != ViewStatus.READY:
            self.status = ViewStatus.LOADING
        logger.info(f"Refreshing graph view: {self.scope.label}")
        try:
            await self._load(generation, refresh=True)
        finally:
            if generation == self._generation:
                self.refreshing = False
                if self.status == ViewStatus.LOADING:
                    # Cancelled or failed outside the fetch; leave a refreshable state
                    self._fail("Refresh did not complete")
        return True

    def close(self) -> None:
        """Close the view; all derived state is discarded."""
        self._generation += 1
        self._debouncer.cancel()
        if self.is_open:
            logger.info("Closing graph view")
        self._reset()

    async def _fetch(self) -> Graph:
        if self.fetcher is None:
            raise GraphFetchError("No graph fetcher configured")
        try:
            response = await self.fetcher(self.scope)
        except GraphFetchError:
            raise
        except Exception as e:
            raise GraphFetchError(str(e)) from e
        payload = GraphPayload.from_response(response)
        return self._normalizer.normalize(payload.nodes, payload.relationships)

    async def _load(self, generation: int, refresh: bool) -> None:
        try:
            graph = await self._fetch()
        except GraphFetchError as e:
            if generation != self._generation:
                logger.debug("Discarding failed fetch of a closed view")
                return
            logger.error(f"Graph fetch failed: {e}")
            self._fail(str(e))
            return

        if generation != self._generation:
            logger.debug("Discarding late graph response for a closed view")
            return
        self._apply_loaded(graph, refresh=refresh)

    def _fail(self, message: str) -> None:
        """Enter ERROR; the previous graph is not shown alongside the error."""
        self.status = ViewStatus.ERROR
        self.message = message
        self.canonical = Graph()
        self.displayed = Graph()
        self.selection = None

    def _apply_loaded(self, graph: Graph, refresh: bool) -> None:
        self.canonical = graph
        if graph.is_empty:
            self.status = ViewStatus.EMPTY
            self.message = f"No nodes and relationships found for {self.scope.label}"
            self.displayed = graph
            self.selection = None
            logger.info(self.message)
            return

        present = classify(graph.nodes, self.config.buckets)
        if self.scope.viewpoint == Viewpoint.PROVIDED:
            # Pre-supplied records have no bucket tabs: show everything
            self.active_buckets = tuple(present)
        elif not refresh or not self.active_buckets:
            self.active_buckets = (default_bucket(graph.nodes, self.config.buckets),)
        if not refresh:
            self.display_mode = DisplayMode.CANVAS
            self.search_query = ""

        self.status = ViewStatus.READY
        self.message = ""
        self._render()
        if self.selection is not None and self.selected_item is None:
            self.selection = None
        logger.info(
            f"Graph view ready: {len(graph.nodes)} nodes, "
            f"{len(graph.relationships)} relationships, buckets={[b.value for b in present]}"
        )
        if self.display_mode == DisplayMode.CANVAS:
            self._request_fit()

    # ------------------------------------------------------------------
    # Ready -> Ready transitions
    # ------------------------------------------------------------------

    def select_bucket(self, bucket: GraphType) -> None:
        self.select_buckets([bucket])

    def select_buckets(self, buckets: Iterable[GraphType]) -> None:
        """Switch bucket tab: re-filter, clear search and selection."""
        self._require_ready("change bucket")
        self.active_buckets = tuple(buckets)
        self._debouncer.cancel()
        self.search_query = ""
        self.selection = None
        self._render()
        if self.display_mode == DisplayMode.CANVAS:
            self._request_fit()

    def set_display_mode(self, mode: DisplayMode) -> None:
        """Toggle canvas/table.

        Table mode shows the full canonical graph; canvas mode shows the
        projection of the active buckets.
        """
        self._require_ready("change display mode")
        if mode == self.display_mode:
            return
        self.display_mode = mode
        if mode == DisplayMode.TABLE:
            # The properties panel is not shown in table mode
            self.selection = None
        self._render()

    def click_node(self, node_id: str) -> None:
        self._require_ready("select node")
        if self.displayed.get_node(node_id) is None:
            raise UnknownElementError(ElementKind.NODE.value, node_id)
        self.selection = Selection(kind=ElementKind.NODE, id=node_id)

    def click_relationship(self, rel_id: str) -> None:
        self._require_ready("select relationship")
        if self.displayed.get_relationship(rel_id) is None:
            raise UnknownElementError(ElementKind.RELATIONSHIP.value, rel_id)
        self.selection = Selection(kind=ElementKind.RELATIONSHIP, id=rel_id)

    def click_canvas(self) -> None:
        self.selection = None

    # ------------------------------------------------------------------
    # Search and legend highlighting
    # ------------------------------------------------------------------

    def type_search(self, query: str) -> None:
        """Feed a keystroke; the query is applied after the debounce delay."""
        self._require_ready("search")
        self._debouncer.push(query)

    async def flush_search(self) -> None:
        await self._debouncer.flush()

    def apply_search(self, query: str) -> None:
        """Apply an (already debounced) query to the displayed graph."""
        if self.status != ViewStatus.READY:
            return
        self.search_query = query
        if self.display_mode == DisplayMode.TABLE:
            return
        self.displayed = search(
            query, self.displayed, self.config.node_size, self.config.caption.id_property
        )

    def highlight_label(self, label: str) -> None:
        """Legend click on a node label."""
        self._require_ready("highlight label")
        self._clear_query()
        self.displayed = highlight_label(label, self.displayed)

    def highlight_relationship_caption(self, caption: str) -> None:
        """Legend click on a relationship caption."""
        self._require_ready("highlight relationships")
        self._clear_query()
        self.displayed = highlight_relationship_caption(
            caption, self.displayed, self.config.node_size
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _clear_query(self) -> None:
        self._debouncer.cancel()
        self.search_query = ""

    def _render(self) -> None:
        if self.display_mode == DisplayMode.TABLE:
            self.displayed = self.canonical
            return
        projected = project(self.active_buckets, self.canonical, self.config.buckets)
        if self.search_query:
            projected = search(
                self.search_query,
                projected,
                self.config.node_size,
                self.config.caption.id_property,
            )
        self.displayed = projected

    def _request_fit(self) -> None:
        if self.on_fit is not None:
            self.on_fit([n.id for n in self.displayed.nodes])

    def _require_closed(self, operation: str) -> None:
        if self.status != ViewStatus.CLOSED:
            raise InvalidTransitionError(operation, self.status.value)

    def _require_ready(self, operation: str) -> None:
        if self.status != ViewStatus.READY:
            raise InvalidTransitionError(operation, self.status.value)
