"""The graph record and its parameter decorators.

A :class:`Graph` is a plain container: vertex count, sparse weight matrix,
vertex coordinates and a little metadata. Derived quantities (degrees, edge
count, Laplacian) are filled in by one of two decorators:

- :func:`lightweight_parameters`: cheap fields only (``directed``, ``d``, ``Ne``)
- :func:`default_parameters`: also the binary adjacency ``A`` and Laplacian ``L``
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

try:
    import scipy.sparse as sp
except Exception as e:  # pragma: no cover
    raise ImportError(
        "scipy is required for graph structures. Install with `pip install pointgraph`."
    ) from e

from ..errors import DimensionError
from .adjacency import is_symmetric
from .laplacian import LaplacianKind, degree_vector, laplacian_from_weights


@dataclass
class Graph:
    """Weighted similarity graph over a point cloud."""

    N: int
    W: "sp.csr_matrix"
    coords: Optional[np.ndarray] = None
    type: str = ""
    sigma: Optional[float] = None

    # filled in by the decorators
    directed: Optional[bool] = None
    d: Optional[np.ndarray] = None
    Ne: Optional[int] = None
    A: Optional["sp.csr_matrix"] = None
    L: Optional["sp.csr_matrix"] = None
    lap_type: Optional[LaplacianKind] = None

    def __post_init__(self) -> None:
        if self.W.shape != (self.N, self.N):
            raise DimensionError(
                f"W must have shape ({self.N}, {self.N}), got shape={self.W.shape}"
            )

    def is_directed(self) -> bool:
        return not is_symmetric(self.W)


def lightweight_parameters(G: Graph) -> Graph:
    """Fill in ``directed``, ``d`` (weighted degree) and ``Ne`` (edge count)."""
    G.directed = G.is_directed()
    G.d = degree_vector(G.W)

    nnz = int(G.W.count_nonzero())
    if G.directed:
        G.Ne = nnz
    else:
        # each undirected edge is stored twice, self-loops once
        loops = int(np.count_nonzero(G.W.diagonal()))
        G.Ne = (nnz - loops) // 2 + loops
    return G


def default_parameters(G: Graph, *, lap_type: LaplacianKind = "combinatorial") -> Graph:
    """Fill in the lightweight fields plus ``A``, ``L`` and ``lap_type``."""
    lightweight_parameters(G)

    A = sp.csr_matrix(G.W > 0, dtype=np.float64)
    A.eliminate_zeros()
    G.A = A

    G.lap_type = lap_type
    G.L = laplacian_from_weights(G.W, kind=lap_type)
    return G
