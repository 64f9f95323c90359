"""Graph construction from relationship rows, and node partitioning.

Nodes live in an insertion-ordered dict keyed by ``database.table``; edges
reference those keys. Node order is first-seen order and drives the
isolated-node grid order downstream.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, replace

import networkx as nx

from table_depgraph.config import PLACEHOLDER_ENGINE
from table_depgraph.styles import classify
from table_depgraph.types import DependencyEdge, Edge, Node

logger = logging.getLogger(__name__)


def node_key(database: str, table: str) -> str:
    return f"{database}.{table}"


def edge_id(source: str, target: str, dependency_type: str | None) -> str:
    return f"{source}->{target}-{dependency_type or 'dep'}"


@dataclass(frozen=True)
class Graph:
    """Deduplicated nodes and styled edges."""

    nodes: tuple[Node, ...]
    edges: tuple[Edge, ...]

    @property
    def edge_count(self) -> int:
        return len(self.edges)


def build_graph(
    records: Iterable[DependencyEdge],
    current_table: str | None = None,
    current_database: str | None = None,
) -> Graph:
    """Build the node set and styled edge list from relationship rows.

    A node's engine comes from its first sighting as a source. A node first
    seen only as a target gets ``PLACEHOLDER_ENGINE`` until a later row names
    it as a source. Rows with identical (source, target, type) collapse onto
    one edge; rows with a missing source database or table are skipped.
    """
    nodes: dict[str, Node] = {}
    placeholders: set[str] = set()
    edges: dict[str, Edge] = {}

    def is_current(database: str, table: str) -> bool:
        return current_table is not None and table == current_table and database == current_database

    for index, dep in enumerate(records):
        if not dep.source_database or not dep.source_table:
            logger.warning("skipping dependency row %d without source database/table: %r", index, dep)
            continue

        source = node_key(dep.source_database, dep.source_table)
        if source not in nodes:
            nodes[source] = Node(
                id=source,
                database=dep.source_database,
                table=dep.source_table,
                engine=dep.source_engine,
                is_current=is_current(dep.source_database, dep.source_table),
            )
        elif source in placeholders:
            nodes[source] = replace(nodes[source], engine=dep.source_engine)
            placeholders.discard(source)

        if not dep.has_target:
            continue

        target = node_key(dep.target_database, dep.target_table)
        if target not in nodes:
            nodes[target] = Node(
                id=target,
                database=dep.target_database,
                table=dep.target_table,
                engine=PLACEHOLDER_ENGINE,
                is_current=is_current(dep.target_database, dep.target_table),
            )
            placeholders.add(target)

        eid = edge_id(source, target, dep.dependency_type)
        edges[eid] = Edge(
            id=eid,
            source=source,
            target=target,
            dependency_type=dep.dependency_type,
            style=classify(dep.dependency_type),
        )

    return Graph(nodes=tuple(nodes.values()), edges=tuple(edges.values()))


# ─── Partitioning ─────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Partition:
    connected: tuple[Node, ...]
    isolated: tuple[Node, ...]


def partition(nodes: Iterable[Node], edges: Iterable[Edge]) -> Partition:
    """Split nodes into edge endpoints and nodes with no edges, keeping order."""
    endpoints: set[str] = set()
    for e in edges:
        endpoints.add(e.source)
        endpoints.add(e.target)

    connected: list[Node] = []
    isolated: list[Node] = []
    for node in nodes:
        (connected if node.id in endpoints else isolated).append(node)
    return Partition(connected=tuple(connected), isolated=tuple(isolated))


def count_components(nodes: Iterable[Node], edges: Iterable[Edge]) -> int:
    """Number of weakly connected components; each isolated node counts as one."""
    g: nx.DiGraph = nx.DiGraph()
    g.add_nodes_from(n.id for n in nodes)
    g.add_edges_from((e.source, e.target) for e in edges if e.source in g and e.target in g)
    if g.number_of_nodes() == 0:
        return 0
    return nx.number_weakly_connected_components(g)
