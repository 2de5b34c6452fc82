"""Cypher templates used to fetch graph views."""

from graphlens.graph.models import FetchScope

# Documents with their chunks, the entities mentioned in those chunks,
# entity-to-entity relationships and extracted tables.
DOC_CHUNK_ENTITIES = """
MATCH (d:Document)
WHERE d.fileName IN $document_names
OPTIONAL MATCH chunk_path = (d)<-[:PART_OF]-(c:Chunk)
OPTIONAL MATCH next_path = (c)-[:NEXT_CHUNK]->(:Chunk)
OPTIONAL MATCH entity_path = (c)-[:HAS_ENTITY]->(e)
OPTIONAL MATCH entity_rel_path = (e)-[r]->(e2)
WHERE NOT e2:Chunk AND NOT e2:Document
OPTIONAL MATCH table_path = (d)-[:HAS_TABLE]->(:Table)-[:HAS_ROW]->(:TableRow)-[:HAS_CELL]->(:TableCell)
RETURN d, chunk_path, next_path, entity_path, entity_rel_path, table_path
LIMIT $limit
"""

QUERY_MAP = {
    "DocChunkEntities": DOC_CHUNK_ENTITIES,
}


def scope_parameters(scope: FetchScope, limit: int) -> dict:
    """Query parameters for a fetch scope.

    Both scopes run the same query; the single-item scope just narrows
    the document list to the inspected name.
    """
    names = [n for n in scope.document_names if n]
    return {"document_names": names, "limit": limit}
