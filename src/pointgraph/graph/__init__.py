"""Nearest-neighbour graphs on point clouds.

- Neighbour search between point sets (k-d tree or dense distances)
- Kernel weight matrices with duplicate accumulation and symmetrization
- The :class:`Graph` record with default/lightweight parameter decoration
- Combinatorial / normalized graph Laplacians
"""

from __future__ import annotations

from .params import NNGraphParams
from .distances import nn_distances
from .adjacency import is_symmetric, symmetrize, weights_from_distances
from .laplacian import laplacian_from_weights
from .structure import Graph, default_parameters, lightweight_parameters
from .nn_graph import estimate_sigma, nn_graph

__all__ = [
    "NNGraphParams",
    "nn_distances",
    "is_symmetric",
    "symmetrize",
    "weights_from_distances",
    "laplacian_from_weights",
    "Graph",
    "default_parameters",
    "lightweight_parameters",
    "estimate_sigma",
    "nn_graph",
]
