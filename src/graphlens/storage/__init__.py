"""Storage layer for Graphlens."""

from graphlens.storage.neo4j_client import Neo4jClient, close_client, get_client
from graphlens.storage.queries import QUERY_MAP, scope_parameters

__all__ = [
    "Neo4jClient",
    "get_client",
    "close_client",
    "QUERY_MAP",
    "scope_parameters",
]
