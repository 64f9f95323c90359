"""Sugiyama-style layered layout engine.

Phases:
  1. Cycle removal  (greedy-FAS approach)
  2. Layer assignment (longest path, fixed-point)
  3. Dummy node insertion for edges spanning several layers
  4. Crossing minimization (barycenter heuristic)
  5. Coordinate assignment (x/y positions in pixels)

All phases work in a top-to-bottom frame. For LR the node boxes are rotated
before layout and the resulting coordinates transposed afterwards.

Every loop iterates insertion-ordered containers, never sets, so the same
input produces the same drawing in every process.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

import networkx as nx

from table_depgraph.layout.base import NodeBox, Spacing
from table_depgraph.types import Direction

# ─── Cycle Removal (Greedy-FAS) ───────────────────────────────────────────────


def greedy_fas_ordering(graph: nx.DiGraph) -> list[str]:
    """Compute a node ordering using the greedy-FAS heuristic.

    Returns a list of node ids in an ordering that minimizes back-edges.
    Nodes earlier in the ordering should have outgoing edges going forward.

    Algorithm (Eades, Lin, Smyth 1993):
    - Maintain dynamic in/out degree counters updated as nodes are removed.
    - Repeatedly:
        1. Move all sinks (out_deg == 0) to s2.
        2. Move all sources (in_deg == 0) to s1.
        3. Of remaining nodes in cycles, pick max (out - in) and add to s1.
    - Final ordering: s1 + reversed(s2).
    """
    # dict as an ordered set: ties resolve by graph insertion order.
    active: dict[str, None] = dict.fromkeys(graph.nodes)

    out_deg: dict[str, int] = {}
    in_deg: dict[str, int] = {}
    for node in graph.nodes:
        out_deg[node] = graph.out_degree(node)
        in_deg[node] = graph.in_degree(node)

    s1: list[str] = []
    s2: list[str] = []

    while active:
        changed = True
        while changed:
            changed = False
            sinks = [n for n in active if out_deg[n] == 0]
            if sinks:
                changed = True
                for sink in sinks:
                    del active[sink]
                    s2.append(sink)
                    for pred in graph.predecessors(sink):
                        if pred in active:
                            out_deg[pred] -= 1

        changed = True
        while changed:
            changed = False
            sources = [n for n in active if in_deg[n] == 0]
            if sources:
                changed = True
                for source in sources:
                    del active[source]
                    s1.append(source)
                    for succ in graph.successors(source):
                        if succ in active:
                            in_deg[succ] -= 1

        if active:
            best = max(active, key=lambda n: out_deg[n] - in_deg[n])
            del active[best]
            s1.append(best)
            for succ in graph.successors(best):
                if succ in active:
                    in_deg[succ] -= 1
            for pred in graph.predecessors(best):
                if pred in active:
                    out_deg[pred] -= 1

    s2.reverse()
    s1.extend(s2)
    return s1


def remove_cycles(graph: nx.DiGraph) -> tuple[nx.DiGraph, set[tuple[str, str]]]:
    """Remove cycles from a copy of the DiGraph using the greedy-FAS heuristic.

    Returns a tuple of:
    - new_graph: copy of graph with back-edges reversed (self-loops removed)
    - reversed_edges: set of (src_id, tgt_id) tuples that were reversed
      (identified relative to the ORIGINAL graph's edge directions)
    """
    if graph.number_of_nodes() == 0:
        return graph.copy(), set()

    ordering = greedy_fas_ordering(graph)
    position: dict[str, int] = {node: pos for pos, node in enumerate(ordering)}

    reversed_edges: set[tuple[str, str]] = set()
    for src, tgt in graph.edges():
        if src == tgt or position[src] > position[tgt]:
            reversed_edges.add((src, tgt))

    new_graph: nx.DiGraph = nx.DiGraph()
    for node_id in graph.nodes:
        new_graph.add_node(node_id, **graph.nodes[node_id])

    for src, tgt, edge_attrs in graph.edges(data=True):
        if src == tgt:
            continue
        if (src, tgt) in reversed_edges:
            new_graph.add_edge(tgt, src, **edge_attrs)
        else:
            new_graph.add_edge(src, tgt, **edge_attrs)

    return new_graph, reversed_edges


# ─── Layer Assignment ─────────────────────────────────────────────────────────


def assign_layers(dag: nx.DiGraph) -> dict[str, int]:
    """Rank every node of a DAG by longest path from a source.

    For each edge u→v: rank[v] = max(rank[v], rank[u] + 1), repeated until
    stable. Layer 0 is the first rank (top for TB, left for LR).
    """
    layers: dict[str, int] = {node_id: 0 for node_id in dag.nodes}

    changed = True
    while changed:
        changed = False
        for src, tgt in dag.edges():
            if layers[tgt] < layers[src] + 1:
                layers[tgt] = layers[src] + 1
                changed = True

    return layers


# ─── Dummy Node Insertion ─────────────────────────────────────────────────────

DUMMY_PREFIX = "__dummy_"


@dataclass
class DummyEdge:
    """A long edge replaced by a chain of zero-size dummy nodes."""

    original_src: str
    original_tgt: str
    dummy_ids: list[str]


@dataclass
class AugmentedGraph:
    """A layered graph where every edge connects adjacent layers.

    Node attributes ``width`` and ``height`` carry box sizes in the
    top-to-bottom frame; dummy nodes have zero size.
    """

    graph: nx.DiGraph
    layers: dict[str, int]
    layer_count: int
    dummy_edges: list[DummyEdge] = field(default_factory=list)


def insert_dummy_nodes(dag: nx.DiGraph, layers: dict[str, int]) -> AugmentedGraph:
    """Replace each edge u → v with layer[v] - layer[u] > 1 by the chain
    u → d₁ → … → dₖ → v, one dummy per intermediate layer.
    """
    g: nx.DiGraph = nx.DiGraph()
    for node_id in dag.nodes:
        g.add_node(node_id, **dag.nodes[node_id])

    aug_layers: dict[str, int] = dict(layers)
    dummy_edges: list[DummyEdge] = []

    for src_id, tgt_id in list(dag.edges()):
        src_layer = aug_layers[src_id]
        span = aug_layers[tgt_id] - src_layer

        if span <= 1:
            g.add_edge(src_id, tgt_id)
            continue

        this_edge = len(dummy_edges)
        dummy_ids: list[str] = []
        chain_prev = src_id
        for i in range(span - 1):
            dummy_id = f"{DUMMY_PREFIX}{this_edge}_{i}"
            g.add_node(dummy_id, width=0.0, height=0.0)
            aug_layers[dummy_id] = src_layer + i + 1
            dummy_ids.append(dummy_id)
            g.add_edge(chain_prev, dummy_id)
            chain_prev = dummy_id
        g.add_edge(chain_prev, tgt_id)

        dummy_edges.append(DummyEdge(original_src=src_id, original_tgt=tgt_id, dummy_ids=dummy_ids))

    layer_count = (max(aug_layers.values()) + 1) if aug_layers else 0
    return AugmentedGraph(graph=g, layers=aug_layers, layer_count=layer_count, dummy_edges=dummy_edges)


# ─── Crossing Minimization (Barycenter) ───────────────────────────────────────


def minimise_crossings(aug: AugmentedGraph, max_passes: int = 24) -> list[list[str]]:
    """Minimise edge crossings using the barycenter heuristic.

    The initial order inside each layer is graph insertion order, so callers
    control tie-breaking by the order they add nodes in. Top-down and
    bottom-up sweeps repeat until the crossing count stops improving.

    Returns one inner list per layer, in minimised order.
    """
    layer_count = aug.layer_count

    ordering: list[list[str]] = [[] for _ in range(layer_count)]
    for node_id in aug.graph.nodes:
        ordering[aug.layers[node_id]].append(node_id)

    best = count_crossings(ordering, aug.graph)
    best_ordering = [list(layer) for layer in ordering]

    for _pass in range(max_passes):
        for layer_idx in range(1, layer_count):
            prev: dict[str, float] = {nid: float(i) for i, nid in enumerate(ordering[layer_idx - 1])}
            ordering[layer_idx].sort(key=lambda a, p=prev: _barycenter(a, aug.graph, p, "incoming"))

        for layer_idx in range(layer_count - 2, -1, -1):
            nxt: dict[str, float] = {nid: float(i) for i, nid in enumerate(ordering[layer_idx + 1])}
            ordering[layer_idx].sort(key=lambda a, n=nxt: _barycenter(a, aug.graph, n, "outgoing"))

        new = count_crossings(ordering, aug.graph)
        if new >= best:
            break
        best = new
        best_ordering = [list(layer) for layer in ordering]

    return best_ordering


def _barycenter(
    node_id: str,
    graph: nx.DiGraph,
    neighbor_pos: dict[str, float],
    direction: str,
) -> float:
    """Average position of a node's neighbours in the adjacent layer.

    direction: "incoming" to look at predecessors, "outgoing" for successors.
    Returns float('inf') if the node has no neighbours in the adjacent layer.
    """
    neighbors = graph.predecessors(node_id) if direction == "incoming" else graph.successors(node_id)
    positions = [neighbor_pos[nb] for nb in neighbors if nb in neighbor_pos]
    if not positions:
        return float("inf")
    return sum(positions) / len(positions)


def count_crossings(ordering: list[list[str]], graph: nx.DiGraph) -> int:
    """Count edge crossings between consecutive layers (inversion count)."""
    total = 0
    for l_idx in range(len(ordering) - 1):
        tgt_pos: dict[str, int] = {nid: i for i, nid in enumerate(ordering[l_idx + 1])}
        edges: list[tuple[int, int]] = []
        for sp, src_id in enumerate(ordering[l_idx]):
            if src_id in graph:
                for nb in graph.successors(src_id):
                    if nb in tgt_pos:
                        edges.append((sp, tgt_pos[nb]))
        for i in range(len(edges)):
            for j in range(i + 1, len(edges)):
                ei, ej = edges[i], edges[j]
                if (ei[0] < ej[0] and ei[1] > ej[1]) or (ei[0] > ej[0] and ei[1] < ej[1]):
                    total += 1
    return total


# ─── Coordinate Assignment ────────────────────────────────────────────────────


@dataclass
class LayoutNode:
    """A positioned box in the top-to-bottom frame (top-left anchored)."""

    id: str
    layer: int
    order: int
    x: float
    y: float
    width: float
    height: float

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2


def assign_coordinates(ordering: list[list[str]], aug: AugmentedGraph, node_gap: float, rank_gap: float) -> list[LayoutNode]:
    """Assign top-left (x, y) coordinates to every node, dummies included.

    Each layer is a row whose height is its tallest box; boxes are centered
    vertically inside their row and the row is centered horizontally on the
    widest layer. Two alignment sweeps then shift whole layers toward their
    parents' and children's centers.
    """

    def node_dims(node_id: str) -> tuple[float, float]:
        attrs = aug.graph.nodes[node_id]
        return (attrs.get("width", 0.0), attrs.get("height", 0.0))

    layer_height: list[float] = [max((node_dims(nid)[1] for nid in layer), default=0.0) for layer in ordering]

    layer_y: list[float] = []
    y = 0.0
    for h in layer_height:
        layer_y.append(y)
        y += h + rank_gap

    layer_widths: list[float] = []
    for layer_nodes in ordering:
        w_sum = sum(node_dims(nid)[0] for nid in layer_nodes)
        gaps = (len(layer_nodes) - 1) * node_gap if len(layer_nodes) > 1 else 0
        layer_widths.append(w_sum + gaps)

    max_layer_w = max(layer_widths, default=0.0)

    nodes: list[LayoutNode] = []
    for layer_idx, layer_nodes in enumerate(ordering):
        x = (max_layer_w - layer_widths[layer_idx]) / 2
        for order, node_id in enumerate(layer_nodes):
            width, height = node_dims(node_id)
            nodes.append(
                LayoutNode(
                    id=node_id,
                    layer=layer_idx,
                    order=order,
                    x=x,
                    y=layer_y[layer_idx] + (layer_height[layer_idx] - height) / 2,
                    width=width,
                    height=height,
                )
            )
            x += width + node_gap

    # ── Barycenter refinement: align layers with parent/child centers ──
    #
    # A layer moves as a block, so gaps inside it never shrink. Shifts larger
    # than node_gap are skipped.

    node_map: dict[str, LayoutNode] = {n.id: n for n in nodes}

    def shift_layer(layer_idx: int, neighbours_of, neighbour_layer: int) -> None:
        sum_own = 0.0
        sum_other = 0.0
        count = 0
        for node_id in ordering[layer_idx]:
            own = node_map[node_id]
            for nb in neighbours_of(node_id):
                if nb.startswith(DUMMY_PREFIX):
                    continue
                other = node_map[nb]
                if other.layer == neighbour_layer:
                    sum_own += own.center_x
                    sum_other += other.center_x
                    count += 1
        if count == 0:
            return
        shift = (sum_other - sum_own) / count
        if abs(shift) > node_gap:
            return
        for node_id in ordering[layer_idx]:
            node_map[node_id].x += shift

    for layer_idx in range(1, len(ordering)):
        shift_layer(layer_idx, aug.graph.predecessors, layer_idx - 1)

    for layer_idx in range(len(ordering) - 2, -1, -1):
        shift_layer(layer_idx, aug.graph.successors, layer_idx + 1)

    if nodes:
        min_x = min(n.x for n in nodes)
        for n in nodes:
            n.x -= min_x

    return nodes


# ─── Engine ───────────────────────────────────────────────────────────────────


class SugiyamaEngine:
    """Layered layout engine returning box centers, margins included."""

    def __init__(self, max_passes: int = 24) -> None:
        self.max_passes = max_passes

    def layout(
        self,
        boxes: Sequence[NodeBox],
        edges: Sequence[tuple[str, str]],
        direction: Direction,
        spacing: Spacing,
    ) -> dict[str, tuple[float, float]]:
        horizontal = direction is Direction.LR

        graph: nx.DiGraph = nx.DiGraph()
        for box in boxes:
            # LR rotates boxes so ranks run along x after transposing.
            if horizontal:
                graph.add_node(box.id, width=float(box.height), height=float(box.width))
            else:
                graph.add_node(box.id, width=float(box.width), height=float(box.height))
        for src, tgt in edges:
            graph.add_edge(src, tgt)

        dag, _reversed = remove_cycles(graph)
        aug = insert_dummy_nodes(dag, assign_layers(dag))
        ordering = minimise_crossings(aug, self.max_passes)
        placed = assign_coordinates(ordering, aug, spacing.node_gap, spacing.rank_gap)

        centers: dict[str, tuple[float, float]] = {}
        for n in placed:
            if n.id not in graph:
                continue
            if horizontal:
                centers[n.id] = (spacing.margin + n.center_y, spacing.margin + n.center_x)
            else:
                centers[n.id] = (spacing.margin + n.center_x, spacing.margin + n.center_y)
        return centers
