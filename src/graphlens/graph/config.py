"""Configuration tables for graph normalization and classification."""

from dataclasses import dataclass, field

from graphlens.config import settings
from graphlens.graph.models import GraphType

# Fixed palette; assignment cycles when exhausted
DEFAULT_PALETTE: tuple[str, ...] = (
    "#588c7e",
    "#f2e394",
    "#f2ae72",
    "#d96459",
    "#8c4646",
    "#4c7bd9",
    "#9b59b6",
    "#1abc9c",
    "#e67e22",
    "#3498db",
    "#2ecc71",
    "#e74c3c",
    "#f1c40f",
    "#16a085",
    "#c0392b",
    "#8e44ad",
    "#7f8c8d",
    "#d35400",
    "#27ae60",
    "#2c3e50",
)

DOCUMENT_LABEL = "Document"
CHUNK_LABEL = "Chunk"
TABLE_LABELS = ("Table", "TableRow", "TableCell")


@dataclass
class CaptionConfig:
    """Property precedence used to derive a node's display caption."""

    # Checked when no label-specific rule applies
    default_properties: tuple[str, ...] = ("name", "fileName", "title", "id")

    # Rules keyed by label; the first label of a node with a rule wins
    label_properties: dict[str, tuple[str, ...]] = field(
        default_factory=lambda: {
            DOCUMENT_LABEL: ("fileName", "name", "id"),
            CHUNK_LABEL: ("id", "text"),
            "__Community__": ("title", "id"),
        }
    )

    # Property carrying the identifying value searched by text search
    id_property: str = "id"

    def properties_for(self, labels: tuple[str, ...] | list[str]) -> tuple[str, ...]:
        for label in labels:
            if label in self.label_properties:
                return self.label_properties[label]
        return self.default_properties


@dataclass(frozen=True)
class BucketRule:
    """Predicate over a node's label set.

    Matches when the node has any of ``any_of`` (or ``any_of`` is empty)
    and none of ``none_of``.
    """

    bucket: GraphType
    any_of: frozenset[str] = frozenset()
    none_of: frozenset[str] = frozenset()

    def matches(self, labels: tuple[str, ...] | list[str]) -> bool:
        label_set = set(labels)
        if self.none_of & label_set:
            return False
        return not self.any_of or bool(self.any_of & label_set)


@dataclass
class BucketConfig:
    """Ordered bucket rules; a node belongs to the first rule it matches."""

    rules: tuple[BucketRule, ...] = (
        BucketRule(GraphType.DOCUMENT_CHUNK, any_of=frozenset({DOCUMENT_LABEL, CHUNK_LABEL})),
        BucketRule(GraphType.TABLES, any_of=frozenset(TABLE_LABELS)),
        BucketRule(GraphType.ENTITIES),
    )

    @property
    def priority(self) -> tuple[GraphType, ...]:
        return tuple(rule.bucket for rule in self.rules)


@dataclass
class GraphViewConfig:
    """Combined configuration for a graph view."""

    caption: CaptionConfig = field(default_factory=CaptionConfig)
    buckets: BucketConfig = field(default_factory=BucketConfig)
    palette: tuple[str, ...] = DEFAULT_PALETTE

    node_size: int = field(default_factory=lambda: settings.node_size)
    search_debounce_ms: int = field(default_factory=lambda: settings.search_debounce_ms)
