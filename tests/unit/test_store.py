"""Unit tests for the collections graph store."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from graphlens.graph.models import FetchScope, GraphType
from graphlens.graph.store import EMPTY_COLLECTION_MESSAGE, CollectionsGraphStore


class TestCollectionsGraphStore:
    """Tests for the single-writer collections store."""

    @pytest.mark.asyncio
    async def test_fetch(self, mock_fetcher, view_config) -> None:
        """Test fetching the graph of the selected rows."""
        store = CollectionsGraphStore(mock_fetcher, view_config)
        assert await store.fetch_collections_graph(["invoices.pdf"]) is True

        mock_fetcher.assert_awaited_once_with(FetchScope.selected_items(["invoices.pdf"]))
        assert len(store.graph.nodes) == 6
        assert store.error is None
        assert not store.is_loading

    @pytest.mark.asyncio
    async def test_filtered(self, mock_fetcher, view_config) -> None:
        """Test projections of the stored graph."""
        store = CollectionsGraphStore(mock_fetcher, view_config)
        await store.fetch_collections_graph(["invoices.pdf"])

        assert store.filtered([]) is store.graph
        tables = store.filtered([GraphType.TABLES])
        assert [n.id for n in tables.nodes] == ["t1"]
        assert tables.scheme == store.graph.scheme

    @pytest.mark.asyncio
    async def test_empty_result(self, view_config) -> None:
        """Test an empty fetch is reported as a message."""
        store = CollectionsGraphStore(
            AsyncMock(return_value={"nodes": [], "relationships": []}), view_config
        )
        await store.fetch_collections_graph([])
        assert store.graph.is_empty
        assert store.error == EMPTY_COLLECTION_MESSAGE

    @pytest.mark.asyncio
    async def test_fetch_failure(self, view_config) -> None:
        """Test a failed fetch keeps the message and clears the loading flag."""
        store = CollectionsGraphStore(AsyncMock(side_effect=RuntimeError("boom")), view_config)
        assert await store.fetch_collections_graph(["a.pdf"]) is True
        assert store.error == "boom"
        assert not store.is_loading

    @pytest.mark.asyncio
    async def test_single_writer(self, mixed_response, view_config) -> None:
        """Test a second fetch is ignored while one is in flight."""
        gate = asyncio.Event()
        fetcher = AsyncMock()

        async def slow(scope):
            await gate.wait()
            return mixed_response

        fetcher.side_effect = slow
        store = CollectionsGraphStore(fetcher, view_config)

        first = asyncio.create_task(store.fetch_collections_graph(["a.pdf"]))
        await asyncio.sleep(0)
        assert store.is_loading
        assert await store.fetch_collections_graph(["b.pdf"]) is False

        gate.set()
        assert await first is True
        assert fetcher.await_count == 1

    @pytest.mark.asyncio
    async def test_reset(self, mock_fetcher, view_config) -> None:
        """Test reset drops the stored graph."""
        store = CollectionsGraphStore(mock_fetcher, view_config)
        await store.fetch_collections_graph(["invoices.pdf"])
        store.reset()
        assert store.graph.is_empty
        assert store.error is None
