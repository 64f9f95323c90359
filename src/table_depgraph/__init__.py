"""Dependency graph construction and layered layout for database tables."""

from table_depgraph.config import DEFAULT_SETTINGS, LayoutSettings
from table_depgraph.errors import (
    DepGraphError,
    InvalidDirectionError,
    InvalidPayloadError,
    InvalidSettingsError,
    LayeringError,
)
from table_depgraph.graph import Graph, Partition, build_graph, count_components, partition
from table_depgraph.pipeline import full_layout
from table_depgraph.styles import classify, engine_category, legend
from table_depgraph.types import (
    AnchorSides,
    BoundingBox,
    DependencyEdge,
    DependencyType,
    Direction,
    Edge,
    EdgeStyle,
    LayoutResult,
    LayoutStats,
    Node,
    Position,
    Side,
)

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_SETTINGS",
    "AnchorSides",
    "BoundingBox",
    "DepGraphError",
    "DependencyEdge",
    "DependencyType",
    "Direction",
    "Edge",
    "EdgeStyle",
    "Graph",
    "InvalidDirectionError",
    "InvalidPayloadError",
    "InvalidSettingsError",
    "LayeringError",
    "LayoutResult",
    "LayoutSettings",
    "LayoutStats",
    "Node",
    "Partition",
    "Position",
    "Side",
    "build_graph",
    "classify",
    "count_components",
    "engine_category",
    "full_layout",
    "legend",
    "partition",
]
