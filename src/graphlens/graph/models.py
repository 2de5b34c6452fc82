"""Enums and value types for graph views."""

from dataclasses import dataclass, field
from enum import Enum


class GraphType(str, Enum):
    """Classification bucket a node falls into."""

    DOCUMENT_CHUNK = "DocumentChunk"  # Document/chunk structure
    TABLES = "Tables"  # Tabular data extracted from documents
    ENTITIES = "Entities"  # Extracted entities (everything else)


class DisplayMode(str, Enum):
    """Mutually exclusive display projections."""

    CANVAS = "canvas"
    TABLE = "table"


class ViewStatus(str, Enum):
    """Lifecycle state of a graph view."""

    CLOSED = "closed"
    LOADING = "loading"
    ERROR = "error"  # Fetch failed; message is shown raw
    EMPTY = "empty"  # Valid "nothing found" outcome
    READY = "ready"


class Viewpoint(str, Enum):
    """Which caller triggered the fetch."""

    SELECTED_ITEMS = "selectedItems"  # Graph of the selected documents
    SINGLE_ITEM = "singleItem"  # Graph of one inspected document
    PROVIDED = "provided"  # Records supplied by the caller, no fetch


@dataclass(frozen=True)
class FetchScope:
    """Outbound parameters handed to the graph-query collaborator."""

    viewpoint: Viewpoint
    document_names: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def selected_items(cls, names: list[str] | tuple[str, ...]) -> "FetchScope":
        return cls(viewpoint=Viewpoint.SELECTED_ITEMS, document_names=tuple(names))

    @classmethod
    def single_item(cls, inspected_name: str | None) -> "FetchScope":
        return cls(viewpoint=Viewpoint.SINGLE_ITEM, document_names=(inspected_name or "",))

    @property
    def label(self) -> str:
        """Human-readable scope name for status messages."""
        return ", ".join(n for n in self.document_names if n) or "selected"
