"""Edge classification — dependency type to visual treatment.

Also holds the legend rows and the engine categories used to order nodes
inside a rank.
"""

from __future__ import annotations

from dataclasses import dataclass

from table_depgraph.types import DependencyType, EdgeStyle

DEFAULT_COLOR = "#3b82f6"  # blue-500, MV/View dependency

_STYLES: dict[str, EdgeStyle] = {
    DependencyType.DICT_GET.value: EdgeStyle(color="#f97316", label="dictGet"),
    DependencyType.JOIN_GET.value: EdgeStyle(color="#8b5cf6", label="joinGet"),
    DependencyType.MV_TARGET.value: EdgeStyle(color="#22c55e", label="TO", animated=True),
    DependencyType.DICT_SOURCE.value: EdgeStyle(color="#f59e0b", label="source"),
    DependencyType.EXTERNAL.value: EdgeStyle(color="#94a3b8", dashed=True),
}

_DEFAULT_STYLE = EdgeStyle(color=DEFAULT_COLOR)


def classify(dependency_type: DependencyType | str | None = None) -> EdgeStyle:
    """Return the style for a dependency type.

    Absent, ``"dependency"`` and unknown types all get the plain style.
    """
    if isinstance(dependency_type, DependencyType):
        dependency_type = dependency_type.value
    if not dependency_type:
        return _DEFAULT_STYLE
    return _STYLES.get(dependency_type, _DEFAULT_STYLE)


# ─── Legend ───────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class LegendEntry:
    dependency_type: DependencyType
    label: str
    color: str
    dashed: bool = False


def legend() -> list[LegendEntry]:
    """One legend row per dependency type, in display order."""
    entries = []
    for dep_type, label in (
        (DependencyType.DEPENDENCY, "MV/View"),
        (DependencyType.DICT_GET, "dictGet"),
        (DependencyType.JOIN_GET, "joinGet"),
        (DependencyType.MV_TARGET, "TO"),
        (DependencyType.DICT_SOURCE, "source"),
        (DependencyType.EXTERNAL, "external"),
    ):
        style = classify(dep_type)
        entries.append(LegendEntry(dependency_type=dep_type, label=label, color=style.color, dashed=style.dashed))
    return entries


# ─── Engine categories ────────────────────────────────────────────────────────


def engine_category(engine: str) -> str:
    """Coarse grouping of a storage engine name."""
    if engine == "Dictionary":
        return "dict"
    if engine == "MaterializedView":
        return "mv"
    if engine == "View":
        return "view"
    if "PostgreSQL" in engine or "MySQL" in engine:
        return "external"
    return "table"
