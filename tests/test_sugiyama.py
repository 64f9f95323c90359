"""Tests for layout/sugiyama.py — cycle removal, layer assignment, dummy nodes,
crossing minimization, coordinate assignment and the engine entry point.
"""

from __future__ import annotations

import networkx as nx

from table_depgraph.layout.base import NodeBox, Spacing
from table_depgraph.layout.sugiyama import (
    DUMMY_PREFIX,
    AugmentedGraph,
    LayoutNode,
    SugiyamaEngine,
    assign_coordinates,
    assign_layers,
    count_crossings,
    greedy_fas_ordering,
    insert_dummy_nodes,
    minimise_crossings,
    remove_cycles,
)
from table_depgraph.types import Direction

# ─── Helpers ──────────────────────────────────────────────────────────────────

W, H = 200.0, 55.0
SPACING = Spacing(node_gap=50, rank_gap=80, margin=20)


def make_graph(*edges: tuple[str, str]) -> nx.DiGraph:
    """Build a DiGraph from a list of (src, tgt) string pairs."""
    g: nx.DiGraph = nx.DiGraph()
    for src, tgt in edges:
        g.add_edge(src, tgt)
    return g


def make_graph_nodes(*nodes: str) -> nx.DiGraph:
    """Build a DiGraph with only nodes (no edges)."""
    g: nx.DiGraph = nx.DiGraph()
    for node in nodes:
        g.add_node(node)
    return g


def make_augmented_graph(
    edges: list[tuple[str, str]],
    layers: dict[str, int],
) -> AugmentedGraph:
    """Build a minimal AugmentedGraph from (src, tgt) edges and explicit layers.

    Nodes are added in the key order of ``layers``; all get a W x H box.
    """
    g: nx.DiGraph = nx.DiGraph()
    for nid in layers:
        g.add_node(nid, width=W, height=H)
    for src, tgt in edges:
        g.add_edge(src, tgt)
    layer_count = (max(layers.values()) + 1) if layers else 0
    return AugmentedGraph(graph=g, layers=layers, layer_count=layer_count, dummy_edges=[])


def boxes(*ids: str) -> list[NodeBox]:
    return [NodeBox(id=i, width=W, height=H) for i in ids]


def overlaps(a: tuple[float, float], b: tuple[float, float], w: float, h: float) -> bool:
    """True when two w x h boxes centered at a and b intersect."""
    return abs(a[0] - b[0]) < w and abs(a[1] - b[1]) < h


# ─── Cycle Removal Tests ──────────────────────────────────────────────────────


class TestCycleRemoval:
    def test_dag_has_no_reversed_edges(self):
        """A → B → C (simple DAG, no cycles) — should have zero reversed edges."""
        g = make_graph(("A", "B"), ("B", "C"))
        dag, reversed_edges = remove_cycles(g)
        assert len(reversed_edges) == 0
        assert nx.is_directed_acyclic_graph(dag)

    def test_single_cycle_reversed(self):
        """A → B → A (2-cycle) — should reverse exactly one edge, result is a DAG."""
        g = make_graph(("A", "B"), ("B", "A"))
        dag, reversed_edges = remove_cycles(g)
        assert len(reversed_edges) == 1
        assert nx.is_directed_acyclic_graph(dag)

    def test_self_loop_removed(self):
        """A → A — self-loop counted as reversed and dropped from the DAG."""
        g = make_graph(("A", "A"))
        dag, reversed_edges = remove_cycles(g)
        assert reversed_edges == {("A", "A")}
        assert dag.number_of_edges() == 0
        assert list(dag.nodes) == ["A"]

    def test_complex_cycle(self):
        """A → B → C → A plus D → B — result must be a DAG."""
        g = make_graph(("A", "B"), ("B", "C"), ("C", "A"), ("D", "B"))
        dag, reversed_edges = remove_cycles(g)
        assert nx.is_directed_acyclic_graph(dag)
        assert len(reversed_edges) >= 1

    def test_empty_graph(self):
        """Empty graph — should return empty graph with no reversed edges."""
        dag, reversed_edges = remove_cycles(nx.DiGraph())
        assert dag.number_of_nodes() == 0
        assert reversed_edges == set()

    def test_node_attributes_preserved(self):
        g = make_graph(("A", "B"), ("B", "A"))
        g.nodes["A"]["width"] = 10.0
        dag, _ = remove_cycles(g)
        assert dag.nodes["A"]["width"] == 10.0


class TestGreedyFasOrdering:
    def test_chain_ordering(self):
        """A → B → C — ordering should put A before B before C."""
        ordering = greedy_fas_ordering(make_graph(("A", "B"), ("B", "C")))
        assert ordering == ["A", "B", "C"]

    def test_single_node(self):
        assert greedy_fas_ordering(make_graph_nodes("A")) == ["A"]

    def test_empty_graph(self):
        assert greedy_fas_ordering(nx.DiGraph()) == []

    def test_all_nodes_present(self):
        """Ordering must contain all nodes exactly once."""
        ordering = greedy_fas_ordering(make_graph(("A", "B"), ("B", "C"), ("C", "A")))
        assert sorted(ordering) == ["A", "B", "C"]

    def test_cycle_ordering_is_deterministic(self):
        """Ties between cycle members resolve by insertion order, not set order."""
        g = make_graph(("A", "B"), ("B", "C"), ("C", "A"))
        first = greedy_fas_ordering(g)
        assert all(greedy_fas_ordering(g) == first for _ in range(5))
        assert first[0] == "A"


# ─── Layer Assignment Tests ───────────────────────────────────────────────────


class TestAssignLayers:
    def test_chain(self):
        layers = assign_layers(make_graph(("A", "B"), ("B", "C")))
        assert layers == {"A": 0, "B": 1, "C": 2}

    def test_longest_path_wins(self):
        """A → C directly and A → B → C — C sits below B, not next to it."""
        layers = assign_layers(make_graph(("A", "C"), ("A", "B"), ("B", "C")))
        assert layers["C"] == 2

    def test_disconnected_nodes_stay_at_zero(self):
        layers = assign_layers(make_graph_nodes("A", "B"))
        assert layers == {"A": 0, "B": 0}


# ─── Dummy Node Tests ─────────────────────────────────────────────────────────


class TestInsertDummyNodes:
    def test_adjacent_edge_untouched(self):
        dag = make_graph(("A", "B"))
        aug = insert_dummy_nodes(dag, {"A": 0, "B": 1})
        assert aug.dummy_edges == []
        assert list(aug.graph.edges()) == [("A", "B")]

    def test_long_edge_gets_chain(self):
        """A → C spanning two layers gets one dummy in layer 1."""
        dag = make_graph(("A", "B"), ("B", "C"), ("A", "C"))
        aug = insert_dummy_nodes(dag, assign_layers(dag))
        assert len(aug.dummy_edges) == 1
        dummy = aug.dummy_edges[0].dummy_ids[0]
        assert dummy.startswith(DUMMY_PREFIX)
        assert aug.layers[dummy] == 1
        assert aug.graph.has_edge("A", dummy)
        assert aug.graph.has_edge(dummy, "C")
        assert not aug.graph.has_edge("A", "C")

    def test_dummy_has_zero_size(self):
        dag = make_graph(("A", "B"), ("B", "C"), ("A", "C"))
        aug = insert_dummy_nodes(dag, assign_layers(dag))
        dummy = aug.dummy_edges[0].dummy_ids[0]
        assert aug.graph.nodes[dummy]["width"] == 0.0
        assert aug.graph.nodes[dummy]["height"] == 0.0

    def test_every_edge_spans_one_layer(self):
        dag = make_graph(("A", "B"), ("B", "C"), ("C", "D"), ("A", "D"))
        aug = insert_dummy_nodes(dag, assign_layers(dag))
        for src, tgt in aug.graph.edges():
            assert aug.layers[tgt] - aug.layers[src] == 1


# ─── count_crossings Tests ────────────────────────────────────────────────────


class TestCountCrossings:
    def test_no_crossings_parallel(self):
        """Two parallel edges (A→C, B→D) with natural ordering — zero crossings."""
        aug = make_augmented_graph([("A", "C"), ("B", "D")], {"A": 0, "B": 0, "C": 1, "D": 1})
        assert count_crossings([["A", "B"], ["C", "D"]], aug.graph) == 0

    def test_one_crossing(self):
        """A→D and B→C with A before B in layer 0 — one crossing because D after C."""
        aug = make_augmented_graph([("A", "D"), ("B", "C")], {"A": 0, "B": 0, "C": 1, "D": 1})
        assert count_crossings([["A", "B"], ["C", "D"]], aug.graph) == 1
        assert count_crossings([["A", "B"], ["D", "C"]], aug.graph) == 0

    def test_empty_graph_no_crossings(self):
        assert count_crossings([], nx.DiGraph()) == 0


# ─── minimise_crossings Tests ─────────────────────────────────────────────────


class TestMinimiseCrossings:
    def test_returns_all_nodes_once(self):
        layers = {"A": 0, "B": 1, "C": 1, "D": 2, "E": 2}
        aug = make_augmented_graph([("A", "B"), ("A", "C"), ("B", "D"), ("C", "E")], layers)
        result = minimise_crossings(aug)
        all_ids = [nid for layer in result for nid in layer]
        assert sorted(all_ids) == ["A", "B", "C", "D", "E"]

    def test_each_node_in_correct_layer(self):
        layers = {"A": 0, "B": 1, "C": 1, "D": 2}
        aug = make_augmented_graph([("A", "B"), ("A", "C"), ("B", "D"), ("C", "D")], layers)
        result = minimise_crossings(aug)
        for node_id, expected_layer in layers.items():
            assert node_id in result[expected_layer]

    def test_removes_simple_crossing(self):
        """A→D, B→C starts with one crossing and ends with none."""
        aug = make_augmented_graph([("A", "D"), ("B", "C")], {"A": 0, "B": 0, "C": 1, "D": 1})
        result = minimise_crossings(aug)
        assert count_crossings(result, aug.graph) == 0

    def test_initial_order_is_insertion_order(self):
        """Without edges to sort by, layers keep graph insertion order."""
        aug = make_augmented_graph([], {"Z": 0, "A": 0, "M": 0})
        assert minimise_crossings(aug) == [["Z", "A", "M"]]

    def test_empty_graph(self):
        aug = AugmentedGraph(graph=nx.DiGraph(), layers={}, layer_count=0)
        assert minimise_crossings(aug) == []


# ─── assign_coordinates Tests ─────────────────────────────────────────────────


class TestAssignCoordinates:
    def test_layer_y_gap_is_height_plus_rank_gap(self):
        aug = make_augmented_graph([("A", "B")], {"A": 0, "B": 1})
        result = {n.id: n for n in assign_coordinates([["A"], ["B"]], aug, 50, 80)}
        assert result["A"].y == 0
        assert result["B"].y - result["A"].y == H + 80

    def test_same_layer_no_overlap(self):
        aug = make_augmented_graph([], {"A": 0, "B": 0, "C": 0})
        result = sorted(assign_coordinates([["A", "B", "C"]], aug, 50, 80), key=lambda n: n.x)
        for left, right in zip(result, result[1:]):
            assert left.x + left.width + 50 <= right.x + 1e-9

    def test_child_centered_under_parents(self):
        """A and B both feed C — C ends up centered under them."""
        aug = make_augmented_graph([("A", "C"), ("B", "C")], {"A": 0, "B": 0, "C": 1})
        result = {n.id: n for n in assign_coordinates([["A", "B"], ["C"]], aug, 50, 80)}
        mid = (result["A"].center_x + result["B"].center_x) / 2
        assert abs(result["C"].center_x - mid) < 1e-9

    def test_normalized_to_zero(self):
        aug = make_augmented_graph([("A", "B"), ("A", "C")], {"A": 0, "B": 1, "C": 1})
        result = assign_coordinates([["A"], ["B", "C"]], aug, 50, 80)
        assert min(n.x for n in result) == 0
        assert all(n.y >= 0 for n in result)

    def test_order_field_matches_position_in_layer(self):
        aug = make_augmented_graph([("A", "C"), ("B", "C")], {"A": 0, "B": 0, "C": 1})
        result = {n.id: n for n in assign_coordinates([["A", "B"], ["C"]], aug, 50, 80)}
        assert (result["A"].order, result["B"].order, result["C"].order) == (0, 1, 0)

    def test_layout_node_centers(self):
        node = LayoutNode(id="A", layer=0, order=0, x=10, y=20, width=200, height=55)
        assert node.center_x == 110
        assert node.center_y == 47.5


# ─── Engine Tests ─────────────────────────────────────────────────────────────


class TestSugiyamaEngine:
    def test_places_every_box(self):
        centers = SugiyamaEngine().layout(boxes("A", "B", "C"), [("A", "B"), ("B", "C")], Direction.TB, SPACING)
        assert set(centers) == {"A", "B", "C"}

    def test_dummy_nodes_not_returned(self):
        edges = [("A", "B"), ("B", "C"), ("A", "C")]
        centers = SugiyamaEngine().layout(boxes("A", "B", "C"), edges, Direction.TB, SPACING)
        assert not any(k.startswith(DUMMY_PREFIX) for k in centers)

    def test_tb_ranks_flow_down(self):
        centers = SugiyamaEngine().layout(boxes("A", "B"), [("A", "B")], Direction.TB, SPACING)
        assert centers["A"][0] == centers["B"][0]
        assert centers["B"][1] - centers["A"][1] == H + SPACING.rank_gap

    def test_lr_ranks_flow_right(self):
        centers = SugiyamaEngine().layout(boxes("A", "B"), [("A", "B")], Direction.LR, SPACING)
        assert centers["A"][1] == centers["B"][1]
        assert centers["B"][0] - centers["A"][0] == W + SPACING.rank_gap

    def test_margin_applied(self):
        """A lone box's top-left corner lands on (margin, margin)."""
        centers = SugiyamaEngine().layout(boxes("A"), [], Direction.TB, SPACING)
        assert centers["A"] == (SPACING.margin + W / 2, SPACING.margin + H / 2)

    def test_lr_margin_applied(self):
        centers = SugiyamaEngine().layout(boxes("A"), [], Direction.LR, SPACING)
        assert centers["A"] == (SPACING.margin + W / 2, SPACING.margin + H / 2)

    def test_cycle_still_laid_out(self):
        edges = [("A", "B"), ("B", "C"), ("C", "A")]
        centers = SugiyamaEngine().layout(boxes("A", "B", "C"), edges, Direction.TB, SPACING)
        assert set(centers) == {"A", "B", "C"}

    def test_no_overlapping_boxes(self):
        ids = ("A", "B", "C", "D", "E", "F")
        edges = [("A", "B"), ("A", "C"), ("A", "D"), ("B", "E"), ("C", "E"), ("D", "F"), ("A", "F")]
        for direction in (Direction.TB, Direction.LR):
            centers = SugiyamaEngine().layout(boxes(*ids), edges, direction, SPACING)
            pts = [centers[i] for i in ids]
            for i in range(len(pts)):
                for j in range(i + 1, len(pts)):
                    assert not overlaps(pts[i], pts[j], W, H), f"{ids[i]} and {ids[j]} overlap ({direction})"

    def test_deterministic(self):
        edges = [("A", "D"), ("B", "C"), ("C", "A"), ("D", "B")]
        first = SugiyamaEngine().layout(boxes("A", "B", "C", "D"), edges, Direction.TB, SPACING)
        second = SugiyamaEngine().layout(boxes("A", "B", "C", "D"), edges, Direction.TB, SPACING)
        assert first == second
