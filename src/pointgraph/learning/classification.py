"""k-nearest-neighbour classification on graphs.

Labels are propagated from the labelled vertices of a graph to the unlabelled
ones in three steps:

1. encode the integer labels as a one-hot matrix (:func:`classification_matrix`)
2. replace the rows of unlabelled vertices by the weighted average of their
   labelled neighbours' rows (:func:`regression_knn`)
3. decode each row back to a label by its largest entry (:func:`matrix_to_label`)

:func:`classification_knn` runs the three steps. It is meant to be used on a
graph where every unlabelled vertex is linked to labelled vertices, such as the
one built by :func:`knn_classify_graph`.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import numpy as np

from ..errors import DimensionError
from ..graph.adjacency import symmetrize, weights_from_distances, zero_diagonal
from ..graph.distances import as_points, nn_distances
from ..graph.nn_graph import estimate_sigma
from ..graph.params import NNGraphParams, resolve_params
from ..graph.structure import Graph, default_parameters, lightweight_parameters

logger = logging.getLogger(__name__)


def _as_mask(mask: Any, n: int) -> np.ndarray:
    m = np.asarray(mask).reshape(-1)
    if m.shape[0] != n:
        raise DimensionError(f"mask must have {n} entries, got {m.shape[0]}")
    return m.astype(bool)


def _as_labels(y: Any) -> np.ndarray:
    arr = np.asarray(y)
    if arr.ndim != 1:
        arr = arr.reshape(-1)
    if arr.size == 0:
        raise ValueError("labels must not be empty")
    if arr.dtype.kind == "f":
        if not np.all(np.isfinite(arr)) or not np.all(arr == np.round(arr)):
            raise ValueError("labels must be integers")
    elif arr.dtype.kind not in {"i", "u", "b"}:
        raise ValueError(f"labels must be integers, got dtype={arr.dtype}")
    return arr.astype(np.int64)


def classification_matrix(y: Any) -> np.ndarray:
    """One-hot encode integer labels.

    Parameters
    ----------
    y:
        Integer labels of length N.

    Returns
    -------
    B:
        Float array of shape ``(N, C)`` with ``C = max(y) - min(y) + 1`` and
        ``B[i, y[i] - min(y)] = 1``.
    """
    labels = _as_labels(y)
    offset = labels.min()
    n_classes = int(labels.max() - offset) + 1

    B = np.zeros((labels.shape[0], n_classes), dtype=np.float64)
    B[np.arange(labels.shape[0]), labels - offset] = 1.0
    return B


def regression_knn(G: Graph, mask: Any, y: Any) -> np.ndarray:
    """Weighted kNN regression of unknown vertex values.

    Parameters
    ----------
    G:
        Graph with weight matrix ``G.W``.
    mask:
        Boolean vector of length ``G.N``; True where the value is known.
    y:
        Values, shape ``(N,)`` or ``(N, C)``. Rows of unknown vertices are
        ignored.

    Returns
    -------
    sol:
        Same shape as ``y``. Known rows are copied from ``y``; every unknown
        row is the W-weighted mean of the known neighbours' rows, or zero if
        the vertex has no known neighbour.
    """
    known = _as_mask(mask, G.N)
    values = np.asarray(y, dtype=np.float64)
    squeeze = values.ndim == 1
    if squeeze:
        values = values.reshape(-1, 1)
    if values.shape[0] != G.N:
        raise DimensionError(f"y must have {G.N} rows, got {values.shape[0]}")

    W_known = G.W.tocsr()[:, known]
    num = np.asarray(W_known @ values[known])
    den = np.asarray(W_known.sum(axis=1)).reshape(-1)

    sol = np.zeros_like(values)
    reached = den > 0
    sol[reached] = num[reached] / den[reached, None]
    sol[known] = values[known]

    n_orphans = int(np.count_nonzero(~known & ~reached))
    if n_orphans:
        logger.warning("%d unknown vertices have no known neighbour", n_orphans)

    return sol.reshape(-1) if squeeze else sol


def matrix_to_label(sol: Any, offset: int = 0) -> np.ndarray:
    """Decode rows of a class-score matrix to integer labels.

    The label of row ``i`` is ``argmax(sol[i]) + offset``; ties resolve to the
    smallest class.
    """
    scores = np.asarray(sol, dtype=np.float64)
    if scores.ndim == 1:
        scores = scores.reshape(-1, 1)
    return np.argmax(scores, axis=1).astype(np.int64) + int(offset)


def classification_knn(G: Graph, mask: Any, y: Any) -> np.ndarray:
    """Classify the unlabelled vertices of ``G`` from the labelled ones.

    Parameters
    ----------
    G:
        Graph, typically from :func:`knn_classify_graph`.
    mask:
        Boolean vector of length ``G.N``; True where the label is known.
    y:
        Integer labels of length ``G.N``. Entries outside ``mask`` are ignored
        except that they take part in ``min(y)``, the label offset.

    Returns
    -------
    labels:
        int64 labels of length ``G.N``.
    """
    B = classification_matrix(y)
    sol = regression_knn(G, mask, B)
    return matrix_to_label(sol, int(np.min(_as_labels(y))))


def knn_classify_graph(
    points: Any,
    mask: Any,
    params: Optional[NNGraphParams] = None,
    **overrides: Any,
) -> Graph:
    """Graph linking every unlabelled point to its k nearest labelled points.

    Parameters
    ----------
    points:
        Point cloud of shape ``(N, d)``.
    mask:
        Boolean vector of length N; True for labelled points.
    params, overrides:
        Options as for :func:`pointgraph.graph.nn_graph.nn_graph`. Only ``k``,
        ``sigma``, ``use_l1``, ``use_flann``, ``use_full`` and ``light`` are
        used; the search is always knn and the result is symmetrized with
        ``'full'``.

    Returns
    -------
    G:
        Graph over all N points, ``coords`` being the input points.
    """
    prm = resolve_params(params, **overrides)
    X = as_points(points)
    n = X.shape[0]
    known = _as_mask(mask, n)

    labelled = np.flatnonzero(known)
    unlabelled = np.flatnonzero(~known)
    if labelled.size == 0:
        raise ValueError("knn_classify_graph needs at least one labelled point")

    search = prm.with_overrides(type="knn", center=False, rescale=False)
    rows, cols, dist, _, _, _ = nn_distances(X[unlabelled], X[labelled], search)

    if prm.sigma is not None:
        sigma = float(prm.sigma)
    else:
        sigma = estimate_sigma(dist, type="knn", use_l1=prm.use_l1)

    W = weights_from_distances(
        unlabelled[rows], labelled[cols], dist, sigma, n, use_l1=prm.use_l1
    )
    W = symmetrize(zero_diagonal(W), "full")

    G = Graph(
        N=n,
        W=W,
        coords=X,
        type="knn classification l1" if prm.use_l1 else "knn classification",
        sigma=sigma,
    )
    if prm.light:
        return lightweight_parameters(G)
    return default_parameters(G)
