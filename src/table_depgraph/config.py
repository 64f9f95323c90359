"""Layout geometry constants and the settings object that carries them."""

from __future__ import annotations

from dataclasses import dataclass, fields

from table_depgraph.errors import InvalidSettingsError

# ─── Geometry (pixels) ────────────────────────────────────────────────────────

NODE_WIDTH: int = 200  # fixed node box width
NODE_HEIGHT: int = 55  # fixed node box height
NODE_GAP: int = 50  # gap between nodes in the same rank
RANK_GAP: int = 80  # gap between adjacent ranks
MARGIN: int = 20  # margin around the layered drawing

# ─── Isolated-node grid ───────────────────────────────────────────────────────

GRID_GAP: int = 30  # gap between grid cells, both axes
SECTION_GAP: int = 60  # gap between the layered drawing and the grid
GRID_COLUMNS_TB: int = 4
GRID_COLUMNS_LR: int = 3

# Engine shown for a node only ever seen as a relationship target.
PLACEHOLDER_ENGINE: str = "Table"


@dataclass(frozen=True)
class LayoutSettings:
    """All tunable geometry for one layout pass.

    Defaults mirror the module constants. Instances are immutable and are
    passed explicitly through the pipeline.
    """

    node_width: int = NODE_WIDTH
    node_height: int = NODE_HEIGHT
    node_gap: int = NODE_GAP
    rank_gap: int = RANK_GAP
    margin: int = MARGIN
    grid_gap: int = GRID_GAP
    section_gap: int = SECTION_GAP
    grid_columns_tb: int = GRID_COLUMNS_TB
    grid_columns_lr: int = GRID_COLUMNS_LR

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise InvalidSettingsError(f"{f.name} must be an integer, got {value!r}")
        for name in ("node_width", "node_height", "grid_columns_tb", "grid_columns_lr"):
            if getattr(self, name) < 1:
                raise InvalidSettingsError(f"{name} must be positive, got {getattr(self, name)}")
        for name in ("node_gap", "rank_gap", "margin", "grid_gap", "section_gap"):
            if getattr(self, name) < 0:
                raise InvalidSettingsError(f"{name} must not be negative, got {getattr(self, name)}")


DEFAULT_SETTINGS = LayoutSettings()
