"""Layering engine protocol and the shapes passed across it."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from table_depgraph.types import AnchorSides, Direction, Side


@dataclass(frozen=True)
class NodeBox:
    """A node as the layering engine sees it: an id and a fixed box size."""

    id: str
    width: float
    height: float


@dataclass(frozen=True)
class Spacing:
    """Global spacing for a layered drawing.

    node_gap: gap between neighbours in the same rank.
    rank_gap: gap between adjacent ranks.
    margin: offset of the whole drawing from the origin on both axes.
    """

    node_gap: float
    rank_gap: float
    margin: float


class LayeringEngine(Protocol):
    """Protocol that all layered layout engines must implement."""

    def layout(
        self,
        boxes: Sequence[NodeBox],
        edges: Sequence[tuple[str, str]],
        direction: Direction,
        spacing: Spacing,
    ) -> dict[str, tuple[float, float]]:
        """Return the center (x, y) of every box, keyed by node id."""
        ...


def anchor_sides(direction: Direction) -> AnchorSides:
    """Where edges enter (target) and leave (source) a node box."""
    if direction is Direction.LR:
        return AnchorSides(target=Side.LEFT, source=Side.RIGHT)
    return AnchorSides(target=Side.TOP, source=Side.BOTTOM)
