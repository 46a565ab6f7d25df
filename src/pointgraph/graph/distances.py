"""Nearest-neighbour queries on point clouds.

Its job is only to produce neighbour triples between two point sets, without
building any graph objects:

    rows[e], cols[e], dist[e]   (query index, reference index, distance)

Two search back-ends are available:

- ``scipy.spatial.cKDTree`` (default), optionally approximate (``use_flann``)
- a dense distance matrix via ``scipy.spatial.distance.cdist`` (``use_full``)

Both use the Minkowski L1 metric when ``use_l1`` is set and L2 otherwise.
Indices are 0-based. A point queried against itself is always returned as its
own neighbour at distance 0; callers decide what to do with it.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Tuple

import numpy as np

try:
    from scipy.spatial import cKDTree
    from scipy.spatial.distance import cdist
except Exception as e:  # pragma: no cover
    raise ImportError(
        "scipy is required for neighbour search. Install with `pip install pointgraph`."
    ) from e

from ..errors import DimensionError
from .params import NNGraphParams, resolve_params

logger = logging.getLogger(__name__)

# Relative tolerance of the approximate tree search (cKDTree ``eps``).
APPROX_EPS = 0.1

NeighborTriples = Tuple[np.ndarray, np.ndarray, np.ndarray]


def as_points(X: Any, *, name: str = "points") -> np.ndarray:
    """Return ``X`` as a float64 array of shape (N, d).

    1D input is read as N points in one dimension.
    """
    arr = np.asarray(X, dtype=np.float64)
    if arr.ndim == 1:
        arr = arr.reshape(-1, 1)
    if arr.ndim != 2:
        raise DimensionError(f"{name} must be 1D or 2D of shape (N, d), got shape={arr.shape}")
    return arr


def _transform(
    X: np.ndarray, Y: np.ndarray, *, center: bool, rescale: bool
) -> Tuple[np.ndarray, np.ndarray]:
    """Center and/or rescale both sets using statistics of the reference set Y."""
    X = X.copy()
    Y = Y.copy()
    if Y.shape[0] == 0:
        return X, Y

    if center:
        mean = Y.mean(axis=0)
        X -= mean
        Y -= mean

    if rescale:
        n, d = Y.shape
        bounding_radius = 0.5 * np.linalg.norm(Y.max(axis=0) - Y.min(axis=0), 2)
        if bounding_radius > 0:
            scale = np.power(n, 1.0 / min(d, 3)) / 10.0
            X *= scale / bounding_radius
            Y *= scale / bounding_radius

    return X, Y


def _empty_triples() -> NeighborTriples:
    return (
        np.zeros(0, dtype=np.int64),
        np.zeros(0, dtype=np.int64),
        np.zeros(0, dtype=np.float64),
    )


def _knn_tree(tree: "cKDTree", X: np.ndarray, k: int, *, p: int, eps: float) -> NeighborTriples:
    dist, idx = tree.query(X, k=k, p=p, eps=eps)
    # cKDTree drops the neighbour axis when k == 1
    dist = np.asarray(dist, dtype=np.float64).reshape(X.shape[0], k)
    idx = np.asarray(idx, dtype=np.int64).reshape(X.shape[0], k)

    rows = np.repeat(np.arange(X.shape[0], dtype=np.int64), k)
    return rows, idx.reshape(-1), dist.reshape(-1)


def _knn_dense(D: np.ndarray, k: int) -> NeighborTriples:
    idx = np.argsort(D, axis=1, kind="stable")[:, :k].astype(np.int64)
    dist = np.take_along_axis(D, idx, axis=1)

    rows = np.repeat(np.arange(D.shape[0], dtype=np.int64), k)
    return rows, idx.reshape(-1), dist.reshape(-1)


def _radius_tree(
    tree: "cKDTree", X: np.ndarray, Y: np.ndarray, r: float, *, p: int, eps: float
) -> NeighborTriples:
    hits = tree.query_ball_point(X, r=r, p=p, eps=eps, return_sorted=True)

    counts = np.fromiter((len(h) for h in hits), dtype=np.int64, count=len(hits))
    if counts.sum() == 0:
        return _empty_triples()

    rows = np.repeat(np.arange(X.shape[0], dtype=np.int64), counts)
    cols = np.concatenate([np.asarray(h, dtype=np.int64) for h in hits])
    dist = np.linalg.norm(X[rows] - Y[cols], ord=p, axis=1)

    # The approximate search may return points slightly beyond r.
    keep = dist <= r
    return rows[keep], cols[keep], dist[keep]


def _radius_dense(D: np.ndarray, r: float) -> NeighborTriples:
    rows, cols = np.nonzero(D <= r)
    return rows.astype(np.int64), cols.astype(np.int64), D[rows, cols]


def estimate_radius(
    X: np.ndarray,
    Y: np.ndarray,
    target_degree: int,
    *,
    p: int = 2,
    D: Optional[np.ndarray] = None,
    exclude_self: bool = True,
) -> float:
    """Radius giving each point about ``target_degree`` neighbours.

    This is the mean distance to the ``target_degree``-th nearest reference
    point. With ``exclude_self`` (X and Y are the same set) the point itself,
    found at distance 0, is not counted.
    """
    if target_degree <= 0:
        raise ValueError(f"target_degree must be positive, got {target_degree}")
    k = min(target_degree + int(exclude_self), Y.shape[0])
    if D is not None:
        _, _, dist = _knn_dense(D, k)
    else:
        _, _, dist = _knn_tree(cKDTree(Y), X, k, p=p, eps=0.0)
    return float(dist.reshape(X.shape[0], k)[:, -1].mean())


def nn_distances(
    X: Any,
    Y: Any = None,
    params: Optional[NNGraphParams] = None,
    **overrides: Any,
):
    """Find the neighbours of every point of ``X`` among the points of ``Y``.

    Args:
        X: query points, shape (N, d).
        Y: reference points, shape (M, d). Defaults to ``X``.
        params: search options. Uses ``type``, ``k``, ``epsilon``, ``use_l1``,
            ``use_flann``, ``use_full``, ``center``, ``rescale`` and
            ``target_degree``.
        **overrides: option overrides applied on top of ``params``.

    Returns:
        rows: int64 indices into ``X``.
        cols: int64 indices into ``Y``.
        dist: float64 distances, same length as ``rows``.
        Xout: the centered/rescaled copy of ``X``.
        D: dense (N, M) distance matrix when ``use_full`` is set, else None.
        epsilon: effective search radius in radius mode, None in knn mode.
    """
    prm = resolve_params(params, **overrides)

    same_set = Y is None or Y is X
    X = as_points(X, name="X")
    Y = X if same_set else as_points(Y, name="Y")
    if X.shape[1] != Y.shape[1]:
        raise DimensionError(
            f"X and Y must have the same dimension, got {X.shape[1]} and {Y.shape[1]}"
        )

    Xout, Yout = _transform(X, Y, center=prm.center, rescale=prm.rescale)

    p = 1 if prm.use_l1 else 2
    approx = APPROX_EPS if prm.use_flann else 0.0

    epsilon: Optional[float] = None
    if prm.type == "radius":
        epsilon = float(prm.epsilon)

    if Xout.shape[0] == 0 or Yout.shape[0] == 0:
        rows, cols, dist = _empty_triples()
        return rows, cols, dist, Xout, None, epsilon

    D: Optional[np.ndarray] = None
    tree: Optional["cKDTree"] = None
    if prm.use_full:
        D = cdist(Xout, Yout, metric="cityblock" if prm.use_l1 else "euclidean")
    else:
        tree = cKDTree(Yout)

    if prm.type == "knn":
        k = min(int(prm.k), Yout.shape[0])
        if D is not None:
            rows, cols, dist = _knn_dense(D, k)
        else:
            rows, cols, dist = _knn_tree(tree, Xout, k, p=p, eps=approx)
    else:
        if prm.target_degree > 0:
            epsilon = estimate_radius(
                Xout, Yout, prm.target_degree, p=p, D=D, exclude_self=same_set
            )
            logger.debug(
                "Estimated radius %.6g for target degree %d", epsilon, prm.target_degree
            )
        if D is not None:
            rows, cols, dist = _radius_dense(D, epsilon)
        else:
            rows, cols, dist = _radius_tree(tree, Xout, Yout, epsilon, p=p, eps=approx)

    logger.debug(
        "nn_distances(type=%s, backend=%s): %d pairs for %d query points",
        prm.type,
        "dense" if D is not None else "kdtree",
        rows.shape[0],
        Xout.shape[0],
    )
    return rows, cols, dist, Xout, D, epsilon
