"""Graphlens data models."""

from graphlens.models.graph import (
    ElementKind,
    Graph,
    Node,
    PropertyValue,
    Relationship,
    Scheme,
    Selection,
    to_property_value,
)
from graphlens.models.raw import GraphPayload, RawNode, RawRelationship

__all__ = [
    "Node",
    "Relationship",
    "Graph",
    "Scheme",
    "Selection",
    "ElementKind",
    "PropertyValue",
    "to_property_value",
    "RawNode",
    "RawRelationship",
    "GraphPayload",
]
