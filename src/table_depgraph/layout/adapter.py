"""Adapter between the graph model and a layered layout engine.

The engine speaks in box centers; the rest of the pipeline uses top-left
corners. The conversion subtracts exactly half the box width and height.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace

from table_depgraph.config import DEFAULT_SETTINGS, LayoutSettings
from table_depgraph.errors import LayeringError
from table_depgraph.layout.base import LayeringEngine, NodeBox, Spacing, anchor_sides
from table_depgraph.layout.grid import bounding_box
from table_depgraph.layout.sugiyama import SugiyamaEngine
from table_depgraph.styles import engine_category
from table_depgraph.types import BoundingBox, Direction, Edge, Node, Position


@dataclass(frozen=True)
class LayeredLayout:
    nodes: tuple[Node, ...]
    bounds: BoundingBox


def _rank_order_key(node: Node) -> tuple[str, str, str]:
    return (engine_category(node.engine), node.table, node.id)


def layout_connected(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    direction: Direction,
    settings: LayoutSettings = DEFAULT_SETTINGS,
    engine: LayeringEngine | None = None,
) -> LayeredLayout:
    """Position connected nodes with the layering engine.

    Returned nodes keep the order of ``nodes``. With no nodes the engine is
    not called and the bounds are empty.
    """
    if not nodes:
        return LayeredLayout(nodes=(), bounds=BoundingBox())

    engine = engine if engine is not None else SugiyamaEngine()
    width, height = settings.node_width, settings.node_height

    boxes = [NodeBox(id=n.id, width=width, height=height) for n in sorted(nodes, key=_rank_order_key)]
    known = {n.id for n in nodes}

    pairs: list[tuple[str, str]] = []
    seen: set[tuple[str, str]] = set()
    for e in edges:
        pair = (e.source, e.target)
        if pair in seen or e.source not in known or e.target not in known:
            continue
        seen.add(pair)
        pairs.append(pair)

    spacing = Spacing(node_gap=settings.node_gap, rank_gap=settings.rank_gap, margin=settings.margin)
    centers = engine.layout(boxes, pairs, direction, spacing)

    anchors = anchor_sides(direction)
    positioned: list[Node] = []
    for node in nodes:
        if node.id not in centers:
            raise LayeringError(f"layering engine returned no position for {node.id!r}")
        cx, cy = centers[node.id]
        position = Position(x=cx - width / 2, y=cy - height / 2)
        positioned.append(replace(node, position=position, anchors=anchors))

    return LayeredLayout(nodes=tuple(positioned), bounds=bounding_box(positioned, settings))
