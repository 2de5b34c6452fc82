"""Graph view endpoints.

Every request opens its own view session; nothing is shared between
requests except the collections store.
"""

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Query, Request
from pydantic import BaseModel

from graphlens.graph.aggregation import TableTab
from graphlens.graph.models import DisplayMode, FetchScope, GraphType, Viewpoint, ViewStatus
from graphlens.graph.session import GraphFetcher, GraphViewSession
from graphlens.graph.store import CollectionsGraphStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/graph", tags=["graph"])


# ============================================================================
# Models
# ============================================================================


class GraphViewResponse(BaseModel):
    """A rendered graph view."""

    status: ViewStatus
    message: str = ""
    display_mode: DisplayMode = DisplayMode.CANVAS
    active_buckets: list[GraphType] = []
    available_buckets: list[GraphType] = []
    search_query: str = ""
    nodes: list[dict[str, Any]] = []
    relationships: list[dict[str, Any]] = []
    scheme: dict[str, str] = {}
    chips: dict[str, Any] = {}


class GraphRecordsRequest(BaseModel):
    """Records already held by the caller (e.g. the sources of a chat answer)."""

    nodes: list[dict[str, Any]]
    relationships: list[dict[str, Any]] = []
    query: str = ""
    highlight_label: str | None = None


class TableViewResponse(BaseModel):
    """Grouped rows for the table view."""

    status: ViewStatus
    message: str = ""
    available: dict[TableTab, bool] = {}
    default_tab: TableTab = TableTab.DOCUMENTS
    documents: list[dict[str, Any]] = []
    chunks: list[dict[str, Any]] = []
    entities: list[dict[str, Any]] = []
    relationships: list[dict[str, Any]] = []


class CollectionsResponse(BaseModel):
    """Graph of the selected collections."""

    error: str | None = None
    is_loading: bool = False
    graph_types: list[GraphType] = []
    nodes: list[dict[str, Any]] = []
    relationships: list[dict[str, Any]] = []
    scheme: dict[str, str] = {}


# ============================================================================
# Helpers
# ============================================================================


def get_fetcher(request: Request) -> GraphFetcher:
    """Get the graph fetcher from app state."""
    fetcher = getattr(request.app.state, "fetcher", None)
    if fetcher is None:
        raise HTTPException(status_code=503, detail="Graph backend not initialized")
    return fetcher


def get_collections_store(request: Request) -> CollectionsGraphStore:
    store = getattr(request.app.state, "collections_store", None)
    if store is None:
        raise HTTPException(status_code=503, detail="Graph backend not initialized")
    return store


def parse_names(names: str) -> list[str]:
    """Split a comma-separated document name list."""
    return [n.strip() for n in names.split(",") if n.strip()]


def build_scope(viewpoint: Viewpoint, names: list[str]) -> FetchScope:
    if viewpoint == Viewpoint.SELECTED_ITEMS:
        return FetchScope.selected_items(names)
    if viewpoint == Viewpoint.SINGLE_ITEM:
        return FetchScope.single_item(names[0] if names else "")
    raise HTTPException(
        status_code=422,
        detail="Provided records must be posted, not fetched",
    )


def view_response(session: GraphViewSession) -> GraphViewResponse:
    data = session.to_dict()
    data.pop("selection")
    data.pop("can_refresh")
    return GraphViewResponse(**data, chips=session.chips().to_dict())


def raise_on_error(session: GraphViewSession) -> None:
    if session.status == ViewStatus.ERROR:
        raise HTTPException(status_code=502, detail=session.message)


# ============================================================================
# Endpoints
# ============================================================================


@router.get("/view", response_model=GraphViewResponse)
async def get_graph_view(
    request: Request,
    names: str = Query("", description="Comma-separated document names"),
    viewpoint: Viewpoint = Query(Viewpoint.SELECTED_ITEMS),
    bucket: GraphType | None = Query(None, description="Bucket tab; default is the first present"),
    mode: DisplayMode = Query(DisplayMode.CANVAS),
    query: str = Query("", description="Node search query"),
) -> GraphViewResponse:
    """Fetch, normalize and project a graph view."""
    session = GraphViewSession(fetcher=get_fetcher(request))
    await session.open(build_scope(viewpoint, parse_names(names)))
    try:
        raise_on_error(session)
        if session.status == ViewStatus.READY:
            if bucket is not None:
                session.select_bucket(bucket)
            session.set_display_mode(mode)
            if query:
                session.apply_search(query)
        return view_response(session)
    finally:
        session.close()


@router.post("/view", response_model=GraphViewResponse)
async def post_graph_view(body: GraphRecordsRequest) -> GraphViewResponse:
    """Normalize records supplied by the caller, without a fetch."""
    session = GraphViewSession()
    session.open_with_records(body.nodes, body.relationships)
    try:
        if session.status == ViewStatus.READY:
            if body.highlight_label:
                session.highlight_label(body.highlight_label)
            elif body.query:
                session.apply_search(body.query)
        return view_response(session)
    finally:
        session.close()


@router.get("/tables", response_model=TableViewResponse)
async def get_table_view(
    request: Request,
    names: str = Query("", description="Comma-separated document names"),
    viewpoint: Viewpoint = Query(Viewpoint.SELECTED_ITEMS),
    documents_filter: str = Query(""),
    chunks_filter: str = Query(""),
    entities_filter: str = Query(""),
    relationships_filter: str = Query(""),
) -> TableViewResponse:
    """Fetch a graph and group it for the table view."""
    session = GraphViewSession(fetcher=get_fetcher(request))
    await session.open(build_scope(viewpoint, parse_names(names)))
    try:
        raise_on_error(session)
        if session.status != ViewStatus.READY:
            return TableViewResponse(status=session.status, message=session.message)

        session.set_display_mode(DisplayMode.TABLE)
        table = session.table_view()
        filters = {
            TableTab.DOCUMENTS: documents_filter,
            TableTab.CHUNKS: chunks_filter,
            TableTab.ENTITIES: entities_filter,
            TableTab.RELATIONSHIPS: relationships_filter,
        }
        for tab, term in filters.items():
            table.set_filter(tab, term)

        return TableViewResponse(
            status=session.status,
            available=table.groups.available,
            default_tab=table.groups.default_tab,
            **{tab.value: [row.to_dict() for row in table.rows(tab)] for tab in TableTab},
        )
    finally:
        session.close()


@router.get("/collections", response_model=CollectionsResponse)
async def get_collections_graph(
    request: Request,
    names: str = Query("", description="Comma-separated document names"),
    graph_types: list[GraphType] = Query([], description="Bucket filter; empty means all"),
) -> CollectionsResponse:
    """Load the collections store and return its projection."""
    store = get_collections_store(request)
    started = await store.fetch_collections_graph(parse_names(names))
    if not started:
        logger.debug("Collections graph is loading in another request")

    graph = store.filtered(graph_types)
    return CollectionsResponse(
        error=store.error,
        is_loading=store.is_loading,
        graph_types=graph_types,
        **graph.to_dict(),
    )
