"""Nearest-neighbour graphs from point clouds.

Points are connected to their k nearest neighbours (``type='knn'``) or to all
points within a radius (``type='radius'``). Edge weights come from a kernel
on the neighbour distance:

    L2 (default): w = exp(-dist**2 / sigma)
    L1:           w = exp(-dist / sigma)

When ``sigma`` is not given it is derived from the search output:

    knn,    L1: mean(dist)       knn,    L2: mean(dist)**2
    radius, L1: epsilon / 2      radius, L2: epsilon**2 / 2

The self-match returned by the search counts towards ``mean(dist)``; it is
removed afterwards together with the rest of the diagonal.

Example::

    from pointgraph.graph import nn_graph

    G = nn_graph(points, type="knn", k=6)
    G.W        # (N, N) symmetric CSR weight matrix
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import numpy as np

from ..errors import DimensionError
from .adjacency import is_symmetric, symmetrize, weights_from_distances, zero_diagonal
from .distances import as_points, nn_distances
from .params import NNGraphParams, resolve_params
from .structure import Graph, default_parameters, lightweight_parameters

logger = logging.getLogger(__name__)

# Smallest bandwidth used when the derived one is zero.
MIN_SIGMA = float(np.finfo(np.float64).eps)


def estimate_sigma(
    dist: np.ndarray,
    *,
    type: str = "knn",
    use_l1: bool = False,
    epsilon: Optional[float] = None,
) -> float:
    """Kernel bandwidth derived from neighbour distances or the search radius.

    A zero result (no distances, or all of them zero) is clamped to
    :data:`MIN_SIGMA` with a warning.
    """
    if type == "knn":
        mean = float(np.mean(dist)) if np.size(dist) > 0 else 0.0
        sigma = mean if use_l1 else mean ** 2
    else:
        if epsilon is None:
            raise ValueError("epsilon is required to derive sigma in radius mode")
        sigma = epsilon / 2.0 if use_l1 else epsilon ** 2 / 2.0

    if not sigma > 0:
        logger.warning(
            "Derived kernel bandwidth is %r (coincident points?); using %g instead",
            sigma,
            MIN_SIGMA,
        )
        sigma = MIN_SIGMA
    return float(sigma)


def nn_graph(points: Any, params: Optional[NNGraphParams] = None, **overrides: Any) -> Graph:
    """Create a nearest-neighbour graph from a point cloud.

    Args:
        points: array of shape (N, d) (1D input is read as (N, 1)).
        params: graph options, see :class:`~pointgraph.graph.params.NNGraphParams`.
        **overrides: option overrides, e.g. ``nn_graph(X, type='radius', epsilon=0.5)``.

    Returns:
        G: :class:`~pointgraph.graph.structure.Graph` with a symmetric weight
        matrix without self-loops. ``G.coords`` holds the points after the
        optional centering/rescaling.

    Raises:
        ConfigurationError: unknown graph or symmetrization type, or an
            out-of-range option.
        DimensionError: malformed point array or non-square weight matrix.
    """
    prm = resolve_params(params, **overrides)
    X = as_points(points)
    n = X.shape[0]

    # One extra neighbour for the self-match.
    search = prm.with_overrides(k=prm.k + 1)
    rows, cols, dist, coords, _, epsilon = nn_distances(X, X, search)

    if prm.sigma is not None:
        sigma = float(prm.sigma)
    else:
        sigma = estimate_sigma(dist, type=prm.type, use_l1=prm.use_l1, epsilon=epsilon)

    W = weights_from_distances(rows, cols, dist, sigma, n, use_l1=prm.use_l1)
    W = zero_diagonal(W)

    if prm.type == "radius" and n > 0:
        logger.info("Average number of connections = %g", W.nnz / W.shape[0])

    if W.shape[0] != W.shape[1]:
        raise DimensionError(f"Weight matrix W is not square, got shape={W.shape}")

    if is_symmetric(W):
        logger.debug("The matrix W is symmetric")
    else:
        W = symmetrize(W, prm.symmetrize_type)

    G = Graph(
        N=n,
        W=W,
        coords=coords,
        type="nearest neighbors l1" if prm.use_l1 else "nearest neighbors",
        sigma=sigma,
    )

    if prm.light:
        return lightweight_parameters(G)
    return default_parameters(G)
