"""Layered layout of connected nodes and grid packing of isolated ones."""

from table_depgraph.layout.adapter import LayeredLayout, layout_connected
from table_depgraph.layout.base import LayeringEngine, NodeBox, Spacing, anchor_sides
from table_depgraph.layout.grid import bounding_box, grid_columns, pack_isolated
from table_depgraph.layout.sugiyama import SugiyamaEngine

__all__ = [
    "LayeredLayout",
    "LayeringEngine",
    "NodeBox",
    "Spacing",
    "SugiyamaEngine",
    "anchor_sides",
    "bounding_box",
    "grid_columns",
    "layout_connected",
    "pack_isolated",
]
