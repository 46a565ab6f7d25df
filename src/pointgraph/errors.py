"""Exceptions raised by pointgraph.

Both concrete errors also derive from :class:`ValueError`, so callers that
already guard graph construction with ``except ValueError`` keep working.
"""

from __future__ import annotations


class PointGraphError(Exception):
    """Base class for pointgraph errors."""


class ConfigurationError(PointGraphError, ValueError):
    """An option has an unknown or out-of-range value (e.g. ``type='grid'``)."""


class DimensionError(PointGraphError, ValueError):
    """An array or matrix does not have the expected shape."""
