"""Data model shared by every stage of the dependency graph pipeline.

Nodes and edges are flat records keyed by id strings; edges reference node
ids rather than node objects, so every structure here serializes directly.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from table_depgraph.errors import InvalidDirectionError

# ─── Enumerations ─────────────────────────────────────────────────────────────


class DependencyType(str, Enum):
    """Kind of relationship between two database objects."""

    DEPENDENCY = "dependency"  # MV/View dependency from system.tables
    DICT_GET = "dictGet"  # dictGet() call in the definition
    JOIN_GET = "joinGet"  # joinGet() call in the definition
    MV_TARGET = "mv_target"  # MV writes TO this table
    DICT_SOURCE = "dict_source"  # dictionary source table
    EXTERNAL = "external"  # external engine (PostgreSQL, Kafka, ...)


class Direction(str, Enum):
    """Layout direction: ranks flow top-to-bottom or left-to-right."""

    TB = "TB"
    LR = "LR"

    @classmethod
    def parse(cls, value: Direction | str) -> Direction:
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                pass
        raise InvalidDirectionError(f"unknown layout direction {value!r}, expected 'TB' or 'LR'")


class Side(str, Enum):
    """Side of a node box where edges attach."""

    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"


# ─── Input ────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class DependencyEdge:
    """One relationship row as delivered by the data-fetch layer.

    Only the source side is mandatory; a row without a target introduces a
    standalone table. ``dependency_type`` is kept as the raw string so that
    unknown kinds still produce stable edge ids.
    """

    source_database: str
    source_table: str
    source_engine: str = ""
    target_database: str | None = None
    target_table: str | None = None
    dependency_type: str | None = None
    extra_info: str | None = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> DependencyEdge:
        """Build from a raw row mapping; unknown keys are ignored."""

        def text(key: str) -> str | None:
            value = record.get(key)
            if value is None:
                return None
            return str(value)

        return cls(
            source_database=text("source_database") or "",
            source_table=text("source_table") or "",
            source_engine=text("source_engine") or "",
            target_database=text("target_database"),
            target_table=text("target_table"),
            dependency_type=text("dependency_type"),
            extra_info=text("extra_info"),
        )

    @property
    def has_target(self) -> bool:
        return bool(self.target_database) and bool(self.target_table)


# ─── Geometry ─────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Position:
    """Top-left corner of a node box."""

    x: float
    y: float


@dataclass(frozen=True)
class AnchorSides:
    """Sides where incoming (target) and outgoing (source) edges attach."""

    target: Side
    source: Side


@dataclass(frozen=True)
class BoundingBox:
    """Extent of a set of positioned boxes, measured from the origin."""

    max_x: float = 0.0
    max_y: float = 0.0
    empty: bool = True


# ─── Derived graph ────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Node:
    """A table, view or dictionary, identified by ``database.table``."""

    id: str
    database: str
    table: str
    engine: str
    is_current: bool = False
    position: Position | None = None
    anchors: AnchorSides | None = None

    @property
    def label(self) -> str:
        return self.table

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "label": self.label,
            "database": self.database,
            "engine": self.engine,
            "isCurrent": self.is_current,
        }
        if self.position is not None:
            data["position"] = {"x": self.position.x, "y": self.position.y}
        if self.anchors is not None:
            data["anchorSides"] = {"target": self.anchors.target.value, "source": self.anchors.source.value}
        return data


@dataclass(frozen=True)
class EdgeStyle:
    """Visual treatment of an edge, resolved from its dependency type."""

    color: str
    label: str | None = None
    dashed: bool = False
    animated: bool = False
    marker: str = "arrowclosed"
    stroke_width: int = 2


@dataclass(frozen=True)
class Edge:
    """A styled, directed relationship between two node ids."""

    id: str
    source: str
    target: str
    dependency_type: str | None
    style: EdgeStyle

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "dependencyType": self.dependency_type,
            "color": self.style.color,
            "dashed": self.style.dashed,
            "animated": self.style.animated,
            "marker": self.style.marker,
            "strokeWidth": self.style.stroke_width,
        }
        if self.style.label is not None:
            data["label"] = self.style.label
        return data


# ─── Output ───────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class LayoutStats:
    node_count: int = 0
    edge_count: int = 0
    component_count: int = 0


@dataclass(frozen=True)
class LayoutResult:
    """Positioned nodes plus styled edges for one layout pass.

    Produced fresh on every run; connected nodes come first, followed by the
    grid-packed isolated nodes.
    """

    nodes: tuple[Node, ...] = ()
    edges: tuple[Edge, ...] = ()
    stats: LayoutStats = field(default_factory=LayoutStats)
    direction: Direction = Direction.TB

    @classmethod
    def empty(cls, direction: Direction = Direction.TB) -> LayoutResult:
        return cls(direction=direction)

    @property
    def edge_count(self) -> int:
        return self.stats.edge_count

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def summary(self) -> str:
        """Short caption, e.g. ``"3 tables, 2 dependencies"``."""
        if self.is_empty:
            return "No tables found"
        text = f"{self.stats.node_count} tables"
        if self.edge_count > 0:
            text += f", {self.edge_count} dependencies"
        return text

    def to_dict(self) -> dict[str, Any]:
        return {
            "direction": self.direction.value,
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
            "stats": {
                "nodeCount": self.stats.node_count,
                "edgeCount": self.stats.edge_count,
                "componentCount": self.stats.component_count,
            },
        }
