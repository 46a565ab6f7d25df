"""pointgraph.

Graph signal processing helpers for point clouds:

- Nearest-neighbour graphs (k nearest neighbours or epsilon radius) with
  kernel edge weights, see :func:`pointgraph.graph.nn_graph`
- Graph decoration (degrees, edge count, Laplacian)
- kNN label propagation / classification over such graphs, see
  :mod:`pointgraph.learning`

Dependencies:
- Base installation depends on NumPy and SciPy (sparse matrices, k-d trees).
- Extras:
  - `pointgraph[test]` installs `pytest`
"""

from __future__ import annotations

from .errors import ConfigurationError, DimensionError, PointGraphError

__all__ = ["__version__", "ConfigurationError", "DimensionError", "PointGraphError"]

__version__ = "0.1.0"
