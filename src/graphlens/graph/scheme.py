"""Label/type to color assignment.

Colors are handed out in first-seen order from a fixed palette, so the
same stream of labels always yields the same scheme. A differently
ordered stream of the same labels yields a different one.
"""

from collections.abc import Iterable

from graphlens.graph.config import DEFAULT_PALETTE
from graphlens.models.graph import Scheme


class SchemeAssigner:
    """Incremental color registry."""

    def __init__(self, palette: tuple[str, ...] = DEFAULT_PALETTE) -> None:
        if not palette:
            raise ValueError("palette must contain at least one color")
        self.palette = palette
        self._scheme: Scheme = {}

    def assign(self, key: str) -> str:
        """Return the color for key, assigning the next palette color on first sight."""
        color = self._scheme.get(key)
        if color is None:
            color = self.palette[len(self._scheme) % len(self.palette)]
            self._scheme[key] = color
        return color

    def assign_all(self, keys: Iterable[str]) -> None:
        for key in keys:
            self.assign(key)

    def color_of(self, key: str) -> str:
        return self._scheme.get(key, "")

    @property
    def scheme(self) -> Scheme:
        """Snapshot of the registry (insertion order = first-seen order)."""
        return dict(self._scheme)

    def __contains__(self, key: str) -> bool:
        return key in self._scheme

    def __len__(self) -> int:
        return len(self._scheme)
