"""Canonical graph model - what the canvas and table views render."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

# Closed value union for node/relationship properties
PropertyValue = Union[
    str, int, float, bool, None, dict[str, "PropertyValue"], list["PropertyValue"]
]

Scheme = dict[str, str]


def to_property_value(value: Any) -> PropertyValue:
    """Coerce a backend value into the property value union.

    Temporal values (anything with ``isoformat``) become ISO strings,
    tuples/sets become lists, unknown objects their string form.
    """
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, dict):
        return {str(k): to_property_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_property_value(v) for v in value]
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


class ElementKind(str, Enum):
    """Kind of graph element that can be inspected."""

    NODE = "node"
    RELATIONSHIP = "relationship"


@dataclass(frozen=True)
class Node:
    """A deduplicated, renderable node."""

    id: str
    labels: tuple[str, ...]
    caption: str
    properties: dict[str, PropertyValue] = field(default_factory=dict)
    size: int = 20
    selected: bool = False
    color: str = ""

    def has_label(self, label: str) -> bool:
        return label in self.labels

    def to_dict(self) -> dict:
        """Convert to dictionary for the rendering collaborator."""
        return {
            "id": self.id,
            "labels": list(self.labels),
            "caption": self.caption,
            "properties": self.properties,
            "size": self.size,
            "selected": self.selected,
            "color": self.color,
        }


@dataclass(frozen=True)
class Relationship:
    """A relationship whose endpoints are both present in the node set."""

    id: str
    type: str
    from_id: str
    to_id: str
    caption: str
    captions: dict[str, PropertyValue] = field(default_factory=dict)
    selected: bool = False
    color: str = ""

    def to_dict(self) -> dict:
        """Convert to dictionary for the rendering collaborator."""
        return {
            "id": self.id,
            "type": self.type,
            "from": self.from_id,
            "to": self.to_id,
            "caption": self.caption,
            "captions": self.captions,
            "selected": self.selected,
            "color": self.color,
        }


@dataclass(frozen=True)
class Graph:
    """
    Nodes, relationships and color scheme of one view.

    The canonical graph of a fetch and every projection of it share this
    shape. Instances are never mutated; operations return new graphs.
    """

    nodes: tuple[Node, ...] = ()
    relationships: tuple[Relationship, ...] = ()
    scheme: Scheme = field(default_factory=dict)

    @property
    def node_ids(self) -> frozenset[str]:
        return frozenset(n.id for n in self.nodes)

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def get_node(self, node_id: str) -> Node | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def get_relationship(self, rel_id: str) -> Relationship | None:
        for rel in self.relationships:
            if rel.id == rel_id:
                return rel
        return None

    def to_dict(self) -> dict:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "relationships": [r.to_dict() for r in self.relationships],
            "scheme": dict(self.scheme),
        }


@dataclass(frozen=True)
class Selection:
    """The single element currently inspected in the properties panel."""

    kind: ElementKind
    id: str
