"""Neo4j client - the graph-query collaborator of graph views."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from neo4j import AsyncDriver, AsyncGraphDatabase, AsyncSession
from neo4j.exceptions import Neo4jError, ServiceUnavailable

from graphlens.config import settings
from graphlens.exceptions import GraphFetchError
from graphlens.graph.models import FetchScope
from graphlens.models.graph import to_property_value
from graphlens.storage.queries import QUERY_MAP, scope_parameters

logger = logging.getLogger(__name__)


def node_record(node: Any) -> dict[str, Any]:
    """Convert a driver node into the wire shape of a raw node."""
    return {
        "element_id": node.element_id,
        # Driver labels are an unordered set
        "labels": sorted(node.labels),
        "properties": {k: to_property_value(v) for k, v in dict(node).items()},
    }


def relationship_record(rel: Any) -> dict[str, Any]:
    """Convert a driver relationship into the wire shape of a raw relationship."""
    return {
        "element_id": rel.element_id,
        "type": rel.type,
        "start_node_element_id": rel.start_node.element_id if rel.start_node is not None else None,
        "end_node_element_id": rel.end_node.element_id if rel.end_node is not None else None,
        "properties": {k: to_property_value(v) for k, v in dict(rel).items()},
    }


class Neo4jClient:
    """Async Neo4j client for graph view fetches."""

    def __init__(
        self,
        uri: str | None = None,
        user: str | None = None,
        password: str | None = None,
        database: str | None = None,
        max_graph_nodes: int | None = None,
    ) -> None:
        self.uri = uri or settings.neo4j_uri
        self.user = user or settings.neo4j_user
        self.password = password or settings.neo4j_password
        self.database = database or settings.neo4j_database
        self.max_graph_nodes = max_graph_nodes or settings.max_graph_nodes
        self._driver: AsyncDriver | None = None

    async def connect(self) -> None:
        """Establish connection to Neo4j."""
        if self._driver is None:
            self._driver = AsyncGraphDatabase.driver(
                self.uri,
                auth=(self.user, self.password),
            )
            # Verify connectivity
            try:
                await self._driver.verify_connectivity()
                logger.info(f"Connected to Neo4j at {self.uri}")
            except ServiceUnavailable as e:
                logger.error(f"Failed to connect to Neo4j: {e}")
                raise

    async def close(self) -> None:
        """Close the database connection."""
        if self._driver is not None:
            await self._driver.close()
            self._driver = None
            logger.info("Disconnected from Neo4j")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get a database session."""
        if self._driver is None:
            await self.connect()
        assert self._driver is not None
        async with self._driver.session(database=self.database) as session:
            yield session

    async def execute_query(self, query: str, **params: Any) -> list[dict[str, Any]]:
        """Execute a raw Cypher query."""
        results: list[dict[str, Any]] = []
        async with self.session() as session:
            result = await session.run(query, **params)
            async for record in result:
                results.append(dict(record))
        return results

    async def execute_graph_query(self, query: str, **params: Any) -> dict[str, list]:
        """Execute a Cypher query and collect every node/relationship it returns."""
        async with self.session() as session:
            result = await session.run(query, **params)
            graph = await result.graph()
        return {
            "nodes": [node_record(n) for n in graph.nodes],
            "relationships": [relationship_record(r) for r in graph.relationships],
        }

    async def fetch_graph(
        self, scope: FetchScope, query_name: str = "DocChunkEntities"
    ) -> dict[str, list]:
        """Fetch the raw graph of a scope.

        Usable directly as the fetcher of a graph view session.

        Raises:
            GraphFetchError: if the query fails or Neo4j is unreachable
        """
        query = QUERY_MAP[query_name]
        params = scope_parameters(scope, self.max_graph_nodes)
        logger.debug(f"Fetching {query_name} for {params['document_names']}")
        try:
            payload = await self.execute_graph_query(query, **params)
        except (Neo4jError, ServiceUnavailable) as e:
            raise GraphFetchError(f"Graph query failed: {e}") from e
        logger.info(
            f"Fetched {len(payload['nodes'])} nodes, "
            f"{len(payload['relationships'])} relationships"
        )
        return payload


# Global client instance
_client: Neo4jClient | None = None


async def get_client() -> Neo4jClient:
    """Get or create the global Neo4j client."""
    global _client
    if _client is None:
        _client = Neo4jClient()
        await _client.connect()
    return _client


async def close_client() -> None:
    """Close the global Neo4j client."""
    global _client
    if _client is not None:
        await _client.close()
        _client = None
