"""Summary counts for the legend and grouping for the table view."""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum

from graphlens.graph.config import CHUNK_LABEL, DOCUMENT_LABEL
from graphlens.models.graph import Graph, Node, PropertyValue, Relationship

logger = logging.getLogger(__name__)


# ============================================================================
# Chip summary
# ============================================================================


@dataclass
class NodeChip:
    """Legend entry for a node label."""

    label: str
    count: int
    color: str = ""

    def to_dict(self) -> dict:
        return {"label": self.label, "count": self.count, "color": self.color}


@dataclass
class RelationshipChip:
    """Legend entry for a relationship caption."""

    caption: str
    count: int
    color: str = ""

    def to_dict(self) -> dict:
        return {"caption": self.caption, "count": self.count, "color": self.color}


@dataclass
class ChipSummary:
    """Legend of a displayed graph."""

    node_chips: list[NodeChip] = field(default_factory=list)
    relationship_chips: list[RelationshipChip] = field(default_factory=list)
    total_nodes: int = 0
    total_relationships: int = 0

    def node_count(self, label: str) -> int:
        for chip in self.node_chips:
            if chip.label == label:
                return chip.count
        return 0

    def relationship_count(self, caption: str) -> int:
        for chip in self.relationship_chips:
            if chip.caption == caption:
                return chip.count
        return 0

    def to_dict(self) -> dict:
        return {
            "nodes": [c.to_dict() for c in self.node_chips],
            "relationships": [c.to_dict() for c in self.relationship_chips],
            "total_nodes": self.total_nodes,
            "total_relationships": self.total_relationships,
        }


def _label_sort_key(label: str) -> tuple[int, str]:
    # Document and Chunk lead the legend, the rest is alphabetical
    if label == DOCUMENT_LABEL:
        return (0, "")
    if label == CHUNK_LABEL:
        return (1, "")
    return (2, label.lower())


def chip_summary(graph: Graph) -> ChipSummary:
    """Count distinct nodes per scheme label and relationships per caption.

    Scheme labels no displayed node carries (filtered out by a
    projection) get no node chip.
    """
    ids_by_label: dict[str, set[str]] = {}
    for node in graph.nodes:
        for label in node.labels:
            ids_by_label.setdefault(label, set()).add(node.id)

    node_chips = [
        NodeChip(label=label, count=len(ids_by_label[label]), color=color)
        for label, color in sorted(graph.scheme.items(), key=lambda kv: _label_sort_key(kv[0]))
        if ids_by_label.get(label)
    ]

    ids_by_caption: dict[str, set[str]] = {}
    color_by_caption: dict[str, str] = {}
    for rel in graph.relationships:
        ids_by_caption.setdefault(rel.caption, set()).add(rel.id)
        color_by_caption.setdefault(rel.caption, rel.color)

    relationship_chips = [
        RelationshipChip(
            caption=caption,
            count=len(ids),
            color=color_by_caption[caption],
        )
        for caption, ids in sorted(ids_by_caption.items(), key=lambda kv: kv[0].lower())
    ]

    return ChipSummary(
        node_chips=node_chips,
        relationship_chips=relationship_chips,
        total_nodes=len({n.id for n in graph.nodes}),
        total_relationships=len({r.id for r in graph.relationships}),
    )


# ============================================================================
# Table grouping
# ============================================================================


def search_in_properties(obj: Mapping[str, PropertyValue] | list, term: str) -> bool:
    """Recursive case-insensitive search through property values.

    Strings are matched case-insensitively, numbers by their string
    form, nested mappings and lists recursively. Booleans and nulls
    never match.
    """
    needle = term.lower()
    values = obj.values() if isinstance(obj, Mapping) else obj
    for value in values:
        if isinstance(value, bool) or value is None:
            continue
        if isinstance(value, str):
            if needle in value.lower():
                return True
        elif isinstance(value, (int, float)):
            if needle in str(value):
                return True
        elif isinstance(value, (Mapping, list)):
            if search_in_properties(value, term):
                return True
    return False


class TableTab(str, Enum):
    """Tabs of the table view, in default-selection order."""

    DOCUMENTS = "documents"
    CHUNKS = "chunks"
    ENTITIES = "entities"
    RELATIONSHIPS = "relationships"


def _position_key(node: Node) -> tuple[int, float]:
    position = node.properties.get("position")
    if isinstance(position, (int, float)) and not isinstance(position, bool):
        return (0, float(position))
    return (1, 0.0)


@dataclass
class TableGroups:
    """Nodes partitioned for tabular presentation."""

    documents: list[Node] = field(default_factory=list)
    chunks: list[Node] = field(default_factory=list)
    entities: list[Node] = field(default_factory=list)
    relationships: list[Relationship] = field(default_factory=list)

    def rows(self, tab: TableTab) -> list[Node] | list[Relationship]:
        if tab == TableTab.DOCUMENTS:
            return self.documents
        if tab == TableTab.CHUNKS:
            return self.chunks
        if tab == TableTab.ENTITIES:
            return self.entities
        return self.relationships

    @property
    def available(self) -> dict[TableTab, bool]:
        return {tab: bool(self.rows(tab)) for tab in TableTab}

    @property
    def default_tab(self) -> TableTab:
        for tab, has_rows in self.available.items():
            if has_rows:
                return tab
        return TableTab.DOCUMENTS


def group_for_table(graph: Graph) -> TableGroups:
    """Partition nodes into document, chunk and entity groups.

    Document wins over Chunk for a node carrying both; everything that is
    neither (table-family nodes included) is an entity. Chunks are
    ordered by their ``position`` property.
    """
    groups = TableGroups(relationships=list(graph.relationships))
    for node in graph.nodes:
        if node.has_label(DOCUMENT_LABEL):
            groups.documents.append(node)
        elif node.has_label(CHUNK_LABEL):
            groups.chunks.append(node)
        else:
            groups.entities.append(node)
    groups.chunks.sort(key=_position_key)
    return groups


def _node_row_matches(node: Node, term: str, with_labels: bool) -> bool:
    needle = term.lower()
    if search_in_properties(node.properties, term) or needle in node.id.lower():
        return True
    return with_labels and any(needle in label.lower() for label in node.labels)


def _relationship_row_matches(rel: Relationship, term: str) -> bool:
    needle = term.lower()
    return (
        needle in rel.type.lower()
        or needle in rel.from_id.lower()
        or needle in rel.to_id.lower()
        or search_in_properties(rel.captions, term)
    )


def filter_rows(
    tab: TableTab, rows: Iterable[Node] | Iterable[Relationship], term: str
) -> list:
    """Apply a table's own free-text filter to its rows."""
    rows = list(rows)
    if not term:
        return rows
    if tab == TableTab.RELATIONSHIPS:
        return [r for r in rows if _relationship_row_matches(r, term)]
    with_labels = tab == TableTab.ENTITIES
    return [n for n in rows if _node_row_matches(n, term, with_labels)]


class TableView:
    """Grouped table presentation with an independent filter per tab."""

    def __init__(self, graph: Graph) -> None:
        self.groups = group_for_table(graph)
        self.active_tab = self.groups.default_tab
        self._filters: dict[TableTab, str] = {tab: "" for tab in TableTab}

    def set_filter(self, tab: TableTab, term: str) -> None:
        self._filters[tab] = term

    def filter_of(self, tab: TableTab) -> str:
        return self._filters[tab]

    def select_tab(self, tab: TableTab) -> None:
        if not self.groups.available[tab]:
            logger.debug(f"Ignoring switch to empty table tab {tab.value}")
            return
        self.active_tab = tab

    def rows(self, tab: TableTab | None = None) -> list:
        tab = tab or self.active_tab
        return filter_rows(tab, self.groups.rows(tab), self._filters[tab])
