"""Graph view engine.

Provides:
- Normalization of raw records into a canonical graph with a color scheme
- Bucket classification and projection (DocumentChunk, Tables, Entities)
- Text search and legend highlighting
- Chip summary and table grouping
- The view session state machine and the collections store
"""

from graphlens.graph.aggregation import (
    ChipSummary,
    NodeChip,
    RelationshipChip,
    TableGroups,
    TableTab,
    TableView,
    chip_summary,
    group_for_table,
    search_in_properties,
)
from graphlens.graph.classifier import bucket_of, classify, default_bucket, group_by_bucket
from graphlens.graph.config import (
    DEFAULT_PALETTE,
    BucketConfig,
    BucketRule,
    CaptionConfig,
    GraphViewConfig,
)
from graphlens.graph.models import DisplayMode, FetchScope, GraphType, Viewpoint, ViewStatus
from graphlens.graph.normalizer import GraphNormalizer, normalize
from graphlens.graph.scheme import SchemeAssigner
from graphlens.graph.search import Debouncer
from graphlens.graph.session import GraphFetcher, GraphViewSession
from graphlens.graph.store import CollectionsGraphStore
from graphlens.graph.view_filter import project

__all__ = [
    # Config
    "DEFAULT_PALETTE",
    "BucketConfig",
    "BucketRule",
    "CaptionConfig",
    "GraphViewConfig",
    # Models
    "DisplayMode",
    "FetchScope",
    "GraphType",
    "Viewpoint",
    "ViewStatus",
    # Engine
    "SchemeAssigner",
    "GraphNormalizer",
    "normalize",
    "bucket_of",
    "classify",
    "default_bucket",
    "group_by_bucket",
    "project",
    "Debouncer",
    # Aggregation
    "ChipSummary",
    "NodeChip",
    "RelationshipChip",
    "TableGroups",
    "TableTab",
    "TableView",
    "chip_summary",
    "group_for_table",
    "search_in_properties",
    # State
    "GraphFetcher",
    "GraphViewSession",
    "CollectionsGraphStore",
]
