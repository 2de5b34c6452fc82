"""Process-wide graph store for the collections view.

Follows the same normalize/project contract as a view session but owns
its own copy of the graph. Only one fetch may be in flight at a time.
"""

import logging
from collections.abc import Iterable

from graphlens.graph.config import GraphViewConfig
from graphlens.graph.models import FetchScope, GraphType
from graphlens.graph.normalizer import GraphNormalizer
from graphlens.graph.session import GraphFetcher
from graphlens.graph.view_filter import project
from graphlens.models.graph import Graph
from graphlens.models.raw import GraphPayload

logger = logging.getLogger(__name__)

EMPTY_COLLECTION_MESSAGE = "No nodes and relationships found"


class CollectionsGraphStore:
    """Single-writer store holding the graph of the selected collections."""

    def __init__(self, fetcher: GraphFetcher, config: GraphViewConfig | None = None) -> None:
        self.fetcher = fetcher
        self.config = config or GraphViewConfig()
        self._normalizer = GraphNormalizer(self.config)
        self.graph = Graph()
        self.is_loading = False
        self.error: str | None = None

    async def fetch_collections_graph(self, selected_rows: Iterable[str] | None = None) -> bool:
        """Fetch and normalize the graph of the selected documents.

        Returns:
            False if another fetch is already in flight (the call is ignored)
        """
        if self.is_loading:
            logger.debug("Collections fetch already in flight, ignoring")
            return False

        self.is_loading = True
        self.error = None
        scope = FetchScope.selected_items(list(selected_rows or []))
        try:
            response = await self.fetcher(scope)
            payload = GraphPayload.from_response(response)
        except Exception as e:
            logger.error(f"Collections fetch failed: {e}")
            self.error = str(e)
            return True
        finally:
            self.is_loading = False

        graph = self._normalizer.normalize(payload.nodes, payload.relationships)
        if graph.is_empty:
            self.graph = Graph()
            self.error = EMPTY_COLLECTION_MESSAGE
        else:
            self.graph = graph
        logger.info(f"Collections graph loaded: {len(graph.nodes)} nodes")
        return True

    def reset(self) -> None:
        """Drop the stored graph and any error."""
        self.graph = Graph()
        self.is_loading = False
        self.error = None

    def filtered(self, graph_types: Iterable[GraphType]) -> Graph:
        """Projection of the stored graph; no types means the whole graph."""
        graph_types = list(graph_types)
        if not graph_types:
            return self.graph
        return project(graph_types, self.graph, self.config.buckets)
