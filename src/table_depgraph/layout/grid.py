"""Grid packing for nodes that have no edges."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace

from table_depgraph.config import DEFAULT_SETTINGS, LayoutSettings
from table_depgraph.layout.base import anchor_sides
from table_depgraph.types import BoundingBox, Direction, Node, Position


def bounding_box(nodes: Sequence[Node], settings: LayoutSettings = DEFAULT_SETTINGS) -> BoundingBox:
    """Max x+width and max y+height over positioned nodes."""
    placed = [n.position for n in nodes if n.position is not None]
    if not placed:
        return BoundingBox()
    return BoundingBox(
        max_x=max(p.x for p in placed) + settings.node_width,
        max_y=max(p.y for p in placed) + settings.node_height,
        empty=False,
    )


def grid_columns(direction: Direction, settings: LayoutSettings = DEFAULT_SETTINGS) -> int:
    return settings.grid_columns_lr if direction is Direction.LR else settings.grid_columns_tb


def pack_isolated(
    nodes: Sequence[Node],
    bounds: BoundingBox,
    direction: Direction,
    settings: LayoutSettings = DEFAULT_SETTINGS,
) -> list[Node]:
    """Place isolated nodes row by row in a fixed-column grid.

    The grid starts below ``bounds`` (plus the section gap) when the layered
    drawing is non-empty, otherwise at the origin. Cells are one box plus one
    grid gap apart on both axes, so no two boxes overlap.
    """
    columns = grid_columns(direction, settings)
    start_x = 0.0
    start_y = bounds.max_y + settings.section_gap if not bounds.empty else 0.0
    step_x = settings.node_width + settings.grid_gap
    step_y = settings.node_height + settings.grid_gap

    anchors = anchor_sides(direction)

    packed: list[Node] = []
    for i, node in enumerate(nodes):
        col = i % columns
        row = i // columns
        position = Position(x=start_x + col * step_x, y=start_y + row * step_y)
        packed.append(replace(node, position=position, anchors=anchors))
    return packed
