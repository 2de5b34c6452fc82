"""Projection of a graph onto a set of buckets."""

import logging
from collections.abc import Iterable

from graphlens.graph.classifier import bucket_of
from graphlens.graph.config import BucketConfig
from graphlens.graph.models import GraphType
from graphlens.models.graph import Graph

logger = logging.getLogger(__name__)


def project(
    buckets: Iterable[GraphType],
    graph: Graph,
    config: BucketConfig | None = None,
) -> Graph:
    """Restrict a graph to nodes of the selected buckets.

    Relationships survive only when both endpoints survive. The scheme is
    passed through unfiltered; stale entries are display-only.

    If the input has no nodes or no relationships it is returned
    unchanged, so a view is never collapsed while data is still arriving.
    """
    if not graph.nodes or not graph.relationships:
        return graph

    config = config or BucketConfig()
    selected = set(buckets)
    nodes = tuple(n for n in graph.nodes if bucket_of(n, config) in selected)
    kept_ids = {n.id for n in nodes}
    relationships = tuple(
        r for r in graph.relationships
        if r.from_id in kept_ids and r.to_id in kept_ids
    )

    logger.debug(
        f"Projected {len(graph.nodes)} -> {len(nodes)} nodes onto "
        f"{sorted(b.value for b in selected)}"
    )
    return Graph(nodes=nodes, relationships=relationships, scheme=graph.scheme)
