"""Exception hierarchy for dependency graph layout."""

from __future__ import annotations


class DepGraphError(Exception):
    """Base class for all errors raised by table_depgraph."""


class InvalidDirectionError(DepGraphError, ValueError):
    """Raised when a layout direction is neither TB nor LR."""


class InvalidSettingsError(DepGraphError, ValueError):
    """Raised when LayoutSettings carry non-positive sizes or column counts."""


class InvalidPayloadError(DepGraphError):
    """Raised when a JSON payload does not hold a list of dependency rows."""


class LayeringError(DepGraphError):
    """Raised when the layering engine does not place every node it was given."""
