"""Turns raw backend records into the canonical graph of one fetch."""

import logging
from collections.abc import Iterable

from graphlens.graph.config import CaptionConfig, GraphViewConfig
from graphlens.graph.scheme import SchemeAssigner
from graphlens.models.graph import Graph, Node, PropertyValue, Relationship
from graphlens.models.raw import RawNode, RawRelationship

logger = logging.getLogger(__name__)


def derive_caption(
    labels: tuple[str, ...] | list[str],
    properties: dict[str, PropertyValue],
    config: CaptionConfig,
) -> str:
    """Derive the display caption of a node.

    Walks the label-specific (or default) property precedence and returns
    the first non-empty value, falling back to the first label.
    """
    for key in config.properties_for(labels):
        value = properties.get(key)
        if value is None or value == "" or isinstance(value, (dict, list)):
            continue
        return str(value)
    return labels[0] if labels else ""


def dedupe_nodes(raw_nodes: Iterable[RawNode]) -> list[RawNode]:
    """Deduplicate by element id.

    The position of a node is where its id was first seen; its content
    is the last record seen for that id.
    """
    by_id: dict[str, RawNode] = {}
    for raw in raw_nodes:
        by_id[raw.element_id] = raw
    return list(by_id.values())


def dedupe_relationships(raw_rels: Iterable[RawRelationship]) -> list[RawRelationship]:
    by_id: dict[str, RawRelationship] = {}
    for raw in raw_rels:
        by_id[raw.element_id] = raw
    return list(by_id.values())


class GraphNormalizer:
    """Builds canonical graphs with a stable color scheme."""

    def __init__(self, config: GraphViewConfig | None = None) -> None:
        self.config = config or GraphViewConfig()

    def normalize(
        self,
        raw_nodes: Iterable[RawNode],
        raw_relationships: Iterable[RawRelationship],
    ) -> Graph:
        """Deduplicate, drop dangling relationships and assign colors.

        An empty result is a valid outcome ("nothing to display"),
        not an error.

        Args:
            raw_nodes: Node records in arrival order
            raw_relationships: Relationship records in arrival order

        Returns:
            Canonical Graph
        """
        nodes_in = dedupe_nodes(raw_nodes)
        node_ids = {raw.element_id for raw in nodes_in}

        rels_in = dedupe_relationships(raw_relationships)
        resolved = [
            raw for raw in rels_in
            if raw.start_element_id in node_ids and raw.end_element_id in node_ids
        ]
        dropped = len(rels_in) - len(resolved)
        if dropped:
            logger.debug(f"Dropped {dropped} relationships with missing endpoints")

        # One palette counter: labels first, then relationship types.
        # The published scheme holds the labels only.
        assigner = SchemeAssigner(self.config.palette)
        for raw in nodes_in:
            assigner.assign_all(raw.labels)
        scheme = assigner.scheme
        for raw in resolved:
            assigner.assign(raw.type)

        nodes = tuple(self._build_node(raw, assigner) for raw in nodes_in)
        relationships = tuple(
            Relationship(
                id=raw.element_id,
                type=raw.type,
                from_id=raw.start_element_id,
                to_id=raw.end_element_id,
                caption=raw.type,
                captions=dict(raw.properties),
                color=assigner.color_of(raw.type),
            )
            for raw in resolved
        )

        logger.debug(
            f"Normalized {len(nodes)} nodes, {len(relationships)} relationships, "
            f"{len(scheme)} scheme entries"
        )
        return Graph(nodes=nodes, relationships=relationships, scheme=scheme)

    def _build_node(self, raw: RawNode, assigner: SchemeAssigner) -> Node:
        labels = tuple(raw.labels)
        return Node(
            id=raw.element_id,
            labels=labels,
            caption=derive_caption(labels, raw.properties, self.config.caption),
            properties=dict(raw.properties),
            size=self.config.node_size,
            color=assigner.color_of(labels[0]) if labels else "",
        )


def normalize(
    raw_nodes: Iterable[RawNode],
    raw_relationships: Iterable[RawRelationship],
    config: GraphViewConfig | None = None,
) -> Graph:
    """Normalize raw records with the given (or default) configuration."""
    return GraphNormalizer(config).normalize(raw_nodes, raw_relationships)
