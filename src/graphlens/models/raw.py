"""Raw graph records as returned by the graph-query backend."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from graphlens.exceptions import MalformedPayloadError
from graphlens.models.graph import PropertyValue, to_property_value

logger = logging.getLogger(__name__)


def _first_present(data: Mapping[str, Any], *keys: str) -> Any:
    """Return the value of the first key present in data (camelCase or wire shape)."""
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


def _coerce_properties(raw: Any) -> dict[str, PropertyValue]:
    if not isinstance(raw, Mapping):
        return {}
    return {str(k): to_property_value(v) for k, v in raw.items()}


def _coerce_labels(raw: Any) -> list[str]:
    if raw is None or isinstance(raw, str):
        return [raw] if raw else []
    if isinstance(raw, (set, frozenset)):
        # Unordered collections have no first-seen order of their own
        raw = sorted(raw)
    labels: list[str] = []
    for label in raw:
        label = str(label)
        if label not in labels:
            labels.append(label)
    return labels


@dataclass
class RawNode:
    """A node record from the backend, not retained after normalization."""

    element_id: str
    labels: list[str] = field(default_factory=list)
    properties: dict[str, PropertyValue] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RawNode":
        """Create from a backend record.

        Accepts both ``elementId`` and the ``element_id`` wire key.
        Missing labels/properties fall back to empty values.

        Raises:
            ValueError: if the record carries no element id.
        """
        element_id = _first_present(data, "elementId", "element_id")
        if element_id is None or element_id == "":
            raise ValueError("node record has no element id")
        return cls(
            element_id=str(element_id),
            labels=_coerce_labels(data.get("labels")),
            properties=_coerce_properties(data.get("properties")),
        )


@dataclass
class RawRelationship:
    """A relationship record from the backend."""

    element_id: str
    type: str
    start_element_id: str
    end_element_id: str
    properties: dict[str, PropertyValue] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RawRelationship":
        """Create from a backend record.

        Raises:
            ValueError: if the record carries no element id.
        """
        element_id = _first_present(data, "elementId", "element_id")
        if element_id is None or element_id == "":
            raise ValueError("relationship record has no element id")
        start = _first_present(data, "startElementId", "start_node_element_id")
        end = _first_present(data, "endElementId", "end_node_element_id")
        return cls(
            element_id=str(element_id),
            type=str(data.get("type") or ""),
            start_element_id="" if start is None else str(start),
            end_element_id="" if end is None else str(end),
            properties=_coerce_properties(data.get("properties")),
        )


@dataclass
class GraphPayload:
    """Inbound response of the graph-query collaborator."""

    nodes: list[RawNode] = field(default_factory=list)
    relationships: list[RawRelationship] = field(default_factory=list)

    @classmethod
    def from_response(cls, response: Any) -> "GraphPayload":
        """Parse a fetch response into raw records.

        A single ``data`` envelope is unwrapped. Individual records that
        cannot be identified are skipped with a warning; anything that is
        not a nodes/relationships mapping is a fetch failure.

        Raises:
            MalformedPayloadError: if the response has the wrong shape.
        """
        if isinstance(response, GraphPayload):
            return response
        if not isinstance(response, Mapping):
            raise MalformedPayloadError(f"expected a mapping, got {type(response).__name__}")
        if "nodes" not in response and isinstance(response.get("data"), Mapping):
            response = response["data"]

        raw_nodes = response.get("nodes")
        raw_rels = response.get("relationships")
        if not isinstance(raw_nodes, list):
            raise MalformedPayloadError("'nodes' must be a list")
        if not isinstance(raw_rels, list):
            raise MalformedPayloadError("'relationships' must be a list")

        payload = cls()
        for record in raw_nodes:
            if isinstance(record, RawNode):
                payload.nodes.append(record)
                continue
            if not isinstance(record, Mapping):
                logger.warning(f"Skipping node record of type {type(record).__name__}")
                continue
            try:
                payload.nodes.append(RawNode.from_dict(record))
            except ValueError as e:
                logger.warning(f"Skipping node record: {e}")

        for record in raw_rels:
            if isinstance(record, RawRelationship):
                payload.relationships.append(record)
                continue
            if not isinstance(record, Mapping):
                logger.warning(f"Skipping relationship record of type {type(record).__name__}")
                continue
            try:
                payload.relationships.append(RawRelationship.from_dict(record))
            except ValueError as e:
                logger.warning(f"Skipping relationship record: {e}")

        return payload
