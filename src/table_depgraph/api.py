"""JSON entry points: rows in, layout description out."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from table_depgraph.config import DEFAULT_SETTINGS, LayoutSettings
from table_depgraph.errors import InvalidPayloadError
from table_depgraph.pipeline import full_layout
from table_depgraph.types import DependencyEdge, Direction

logger = logging.getLogger(__name__)


def load_records(payload: Any) -> list[DependencyEdge]:
    """Turn decoded JSON into dependency rows.

    Accepts a list of row objects, or an object whose ``data`` key holds
    that list (the dashboard API envelope). Rows that are not objects are
    skipped.
    """
    if isinstance(payload, Mapping):
        if "data" not in payload:
            raise InvalidPayloadError("expected a list of rows or an object with a 'data' list")
        payload = payload["data"]
    if not isinstance(payload, list):
        raise InvalidPayloadError(f"expected a list of rows, got {type(payload).__name__}")

    records: list[DependencyEdge] = []
    for index, row in enumerate(payload):
        if not isinstance(row, Mapping):
            logger.warning("skipping row %d: expected an object, got %s", index, type(row).__name__)
            continue
        records.append(DependencyEdge.from_record(row))
    return records


def layout_json(
    text: str,
    current_table: str | None = None,
    current_database: str | None = None,
    direction: Direction | str = Direction.TB,
    settings: LayoutSettings = DEFAULT_SETTINGS,
    indent: int | None = None,
) -> str:
    """Lay out a JSON document of dependency rows and return the result as JSON."""
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidPayloadError(f"invalid JSON: {exc}") from exc

    result = full_layout(load_records(payload), current_table, current_database, direction, settings)
    return json.dumps(result.to_dict(), indent=indent)
