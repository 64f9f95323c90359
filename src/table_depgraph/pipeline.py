"""Layout orchestration: build, partition, lay out, pack, merge.

Stateless: every call recomputes everything from its arguments.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from table_depgraph.config import DEFAULT_SETTINGS, LayoutSettings
from table_depgraph.graph import build_graph, count_components, partition
from table_depgraph.layout.adapter import layout_connected
from table_depgraph.layout.base import LayeringEngine
from table_depgraph.layout.grid import pack_isolated
from table_depgraph.types import DependencyEdge, Direction, LayoutResult, LayoutStats

logger = logging.getLogger(__name__)


def full_layout(
    records: Sequence[DependencyEdge],
    current_table: str | None = None,
    current_database: str | None = None,
    direction: Direction | str = Direction.TB,
    settings: LayoutSettings = DEFAULT_SETTINGS,
    engine: LayeringEngine | None = None,
) -> LayoutResult:
    """Run the full pipeline and return positioned nodes plus styled edges.

    Connected nodes come first in layered order of appearance, then isolated
    nodes in grid order. An empty ``records`` list returns an empty result
    without touching the layout stages. Errors from the layering engine
    propagate.
    """
    direction = Direction.parse(direction)
    if not records:
        return LayoutResult.empty(direction)

    graph = build_graph(records, current_table, current_database)
    parts = partition(graph.nodes, graph.edges)

    layered = layout_connected(parts.connected, graph.edges, direction, settings, engine)
    packed = pack_isolated(parts.isolated, layered.bounds, direction, settings)

    stats = LayoutStats(
        node_count=len(graph.nodes),
        edge_count=graph.edge_count,
        component_count=count_components(graph.nodes, graph.edges),
    )
    logger.debug(
        "laid out %d connected and %d isolated nodes, %d edges (%s)",
        len(layered.nodes),
        len(packed),
        stats.edge_count,
        direction.value,
    )
    return LayoutResult(
        nodes=layered.nodes + tuple(packed),
        edges=graph.edges,
        stats=stats,
        direction=direction,
    )
