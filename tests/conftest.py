"""Pytest configuration and fixtures."""

from typing import Any
from unittest.mock import AsyncMock

import pytest

from graphlens.config import Settings
from graphlens.graph.config import GraphViewConfig
from graphlens.graph.models import FetchScope


def raw_node(element_id: str, labels: list[str], **properties: Any) -> dict[str, Any]:
    """Build a raw node record in the backend wire shape."""
    return {"elementId": element_id, "labels": labels, "properties": properties}


def raw_rel(
    element_id: str, rel_type: str, start: str, end: str, **properties: Any
) -> dict[str, Any]:
    """Build a raw relationship record in the backend wire shape."""
    return {
        "elementId": element_id,
        "type": rel_type,
        "startElementId": start,
        "endElementId": end,
        "properties": properties,
    }


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with defaults."""
    return Settings(
        neo4j_uri="bolt://localhost:7687",
        neo4j_user="neo4j",
        neo4j_password="test_password",
        search_debounce_ms=10,
    )


@pytest.fixture
def view_config() -> GraphViewConfig:
    """View configuration with a short debounce."""
    return GraphViewConfig(node_size=20, search_debounce_ms=10)


@pytest.fixture
def mixed_response() -> dict[str, list]:
    """A document with two chunks, two entities and a table."""
    return {
        "nodes": [
            raw_node("d1", ["Document"], fileName="invoices.pdf", status="Completed"),
            raw_node("c1", ["Chunk"], id="chunk-1", text="Invoice #44 for ACME", position=1),
            raw_node("c2", ["Chunk"], id="chunk-2", text="Paid in full", position=2),
            raw_node("e1", ["Person", "__Entity__"], id="Alice", description="Accountant"),
            raw_node("e2", ["Organization", "__Entity__"], id="ACME"),
            raw_node("t1", ["Table"], id="table-1", title="Line items"),
        ],
        "relationships": [
            raw_rel("r1", "PART_OF", "c1", "d1"),
            raw_rel("r2", "PART_OF", "c2", "d1"),
            raw_rel("r3", "NEXT_CHUNK", "c1", "c2"),
            raw_rel("r4", "HAS_ENTITY", "c1", "e1"),
            raw_rel("r5", "WORKS_FOR", "e1", "e2", since=2019),
            raw_rel("r6", "HAS_TABLE", "d1", "t1"),
        ],
    }


@pytest.fixture
def entities_response() -> dict[str, list]:
    """A graph with entities only."""
    return {
        "nodes": [
            raw_node("p1", ["Person"], id="Alice"),
            raw_node("p2", ["Person"], id="Bob"),
            raw_node("o1", ["Organization"], id="Invoice #44 Ltd"),
        ],
        "relationships": [
            raw_rel("k1", "KNOWS", "p1", "p2"),
            raw_rel("w1", "WORKS_FOR", "p2", "o1"),
        ],
    }


@pytest.fixture
def mock_fetcher(mixed_response: dict[str, list]) -> AsyncMock:
    """Async graph fetcher returning the mixed graph."""
    return AsyncMock(return_value=mixed_response)


@pytest.fixture
def selected_scope() -> FetchScope:
    """Selected-items scope over one document."""
    return FetchScope.selected_items(["invoices.pdf"])
