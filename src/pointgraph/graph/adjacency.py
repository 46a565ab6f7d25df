"""Weight matrix construction and symmetrization.

This module turns neighbour triples into sparse weight matrices and enforces
symmetry on them.

We keep the data structure simple and dependency-light:

- neighbour triples are parallel NumPy arrays (rows, cols, dist)
- outputs are SciPy sparse CSR matrices
"""

from __future__ import annotations

from typing import Literal, Optional

import numpy as np

try:
    import scipy.sparse as sp
    import scipy.sparse.linalg as spla
except Exception as e:  # pragma: no cover
    raise ImportError(
        "scipy is required for graph construction. Install with `pip install pointgraph`."
    ) from e

from ..errors import ConfigurationError, DimensionError


SymmetrizeType = Literal["average", "full"]


def weights_from_distances(
    rows: np.ndarray,
    cols: np.ndarray,
    dist: np.ndarray,
    sigma: float,
    n: int,
    *,
    m: Optional[int] = None,
    use_l1: bool = False,
) -> "sp.csr_matrix":
    """Scatter kernel weights of neighbour distances into a sparse matrix.

    The weight of a pair is ``exp(-dist / sigma)`` with ``use_l1`` and
    ``exp(-dist**2 / sigma)`` otherwise. Repeated (row, col) pairs are summed.

    Args:
        rows, cols: 0-based indices of each pair.
        dist: distance of each pair.
        sigma: kernel bandwidth, must be positive.
        n: number of rows of the output.
        m: number of columns (defaults to ``n``).
        use_l1: use the linear-exponential kernel.

    Returns:
        W: CSR matrix of shape (n, m), float64.
    """
    rows = np.asarray(rows, dtype=np.int64).reshape(-1)
    cols = np.asarray(cols, dtype=np.int64).reshape(-1)
    dist = np.asarray(dist, dtype=np.float64).reshape(-1)
    if not (rows.shape == cols.shape == dist.shape):
        raise DimensionError(
            f"rows, cols and dist must have the same length, got "
            f"{rows.shape[0]}, {cols.shape[0]}, {dist.shape[0]}"
        )
    if not sigma > 0:
        raise ValueError(f"sigma must be positive, got {sigma}")

    if use_l1:
        data = np.exp(-dist / sigma)
    else:
        data = np.exp(-(dist ** 2) / sigma)

    shape = (int(n), int(n if m is None else m))
    # COO -> CSR sums duplicate entries
    W = sp.coo_matrix((data, (rows, cols)), shape=shape).tocsr()
    W.sum_duplicates()
    return W


def zero_diagonal(W: "sp.spmatrix") -> "sp.csr_matrix":
    """Return ``W`` as CSR with its diagonal removed (no explicit zeros left)."""
    W = sp.csr_matrix(W, copy=True)
    if W.diagonal().any():
        W = sp.csr_matrix(W - sp.diags(W.diagonal(), shape=W.shape))
    W.eliminate_zeros()
    return W


def is_symmetric(W: "sp.spmatrix") -> bool:
    """Exact symmetry test: ``||W - W.T||_F == 0``."""
    if W.shape[0] != W.shape[1]:
        return False
    diff = (W - W.T).tocsr()
    if diff.nnz == 0:
        return True
    return float(spla.norm(diff, "fro")) == 0.0


def symmetrize(W: "sp.spmatrix", symmetrize_type: SymmetrizeType = "average") -> "sp.csr_matrix":
    """Force a square sparse matrix to be symmetric.

    Args:
        W: square sparse matrix.
        symmetrize_type:
            'average': ``(W + W.T) / 2``. A one-directional edge keeps half
            its weight.
            'full': element-wise ``max(W, W.T)``, i.e. the union of both edge
            directions where the larger weight wins.

    Returns:
        Symmetric CSR matrix.
    """
    if W.shape[0] != W.shape[1]:
        raise DimensionError(f"W must be square, got shape={W.shape}")

    W = sp.csr_matrix(W)
    if symmetrize_type == "average":
        S = (W + W.T) * 0.5
    elif symmetrize_type == "full":
        S = W.maximum(W.T)
    else:
        raise ConfigurationError(
            f"Unknown symmetrize_type {symmetrize_type!r}. Expected 'average' or 'full'."
        )

    S = sp.csr_matrix(S)
    S.eliminate_zeros()
    return S

