"""Search-driven and legend-driven highlighting.

Text search only ever highlights nodes; relationship highlighting comes
from clicking a relationship chip in the legend.
"""

import asyncio
import inspect
import logging
from collections.abc import Callable
from dataclasses import replace
from typing import Any, Generic, TypeVar

from graphlens.models.graph import Graph, Node, PropertyValue

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _matchable(value: PropertyValue) -> str | None:
    if value is None or isinstance(value, (dict, list)):
        return None
    return str(value).lower()


def node_matches(node: Node, query: str, id_property: str = "id") -> bool:
    """Case-insensitive substring match on id, caption or the identifying property."""
    needle = query.lower()
    if needle in node.id.lower() or needle in node.caption.lower():
        return True
    prop = _matchable(node.properties.get(id_property))
    return prop is not None and needle in prop


def search(query: str, graph: Graph, node_size: int, id_property: str = "id") -> Graph:
    """Mark matching nodes as selected.

    An empty query clears every selection and resets node size. A
    non-empty query leaves size untouched. Relationships are always
    deselected.
    """
    if query == "":
        nodes = tuple(replace(n, selected=False, size=node_size) for n in graph.nodes)
    else:
        nodes = tuple(
            replace(n, selected=node_matches(n, query, id_property)) for n in graph.nodes
        )
    relationships = tuple(replace(r, selected=False) for r in graph.relationships)
    return Graph(nodes=nodes, relationships=relationships, scheme=graph.scheme)


def highlight_label(label: str, graph: Graph) -> Graph:
    """Select every node carrying label and deselect all relationships."""
    nodes = tuple(replace(n, selected=n.has_label(label)) for n in graph.nodes)
    relationships = tuple(replace(r, selected=False) for r in graph.relationships)
    return Graph(nodes=nodes, relationships=relationships, scheme=graph.scheme)


def highlight_relationship_caption(caption: str, graph: Graph, node_size: int) -> Graph:
    """Select relationships with the given caption; clear node selection and size."""
    nodes = tuple(replace(n, selected=False, size=node_size) for n in graph.nodes)
    relationships = tuple(replace(r, selected=r.caption == caption) for r in graph.relationships)
    return Graph(nodes=nodes, relationships=relationships, scheme=graph.scheme)


class Debouncer(Generic[T]):
    """Delays a callback until input has been quiet for ``delay`` seconds.

    Every push restarts the countdown; only the last value pushed before
    a quiet period reaches the callback. Needs a running event loop.
    """

    def __init__(self, delay: float, callback: Callable[[T], Any]) -> None:
        self.delay = delay
        self.callback = callback
        self._task: asyncio.Task | None = None
        self._value: T | None = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def push(self, value: T) -> None:
        self.cancel()
        self._value = value
        self._task = asyncio.get_running_loop().create_task(self._fire())

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def flush(self) -> None:
        """Fire immediately with the pending value, if any."""
        if not self.pending:
            return
        self.cancel()
        await self._invoke()

    async def _fire(self) -> None:
        await asyncio.sleep(self.delay)
        self._task = None
        await self._invoke()

    async def _invoke(self) -> None:
        value = self._value
        self._value = None
        result = self.callback(value)
        if inspect.isawaitable(result):
            await result
