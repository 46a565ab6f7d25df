"""Graph Laplacians of weighted graphs.

This module provides:
- Combinatorial Laplacian: L = D - W
- Normalized Laplacian:    L = I - D^{-1/2} W D^{-1/2}
"""

from __future__ import annotations

from typing import Literal

import numpy as np

try:
    import scipy.sparse as sp
except Exception as e:  # pragma: no cover
    raise ImportError(
        "scipy is required for Laplacian construction. Install with `pip install pointgraph`."
    ) from e

from ..errors import ConfigurationError, DimensionError


LaplacianKind = Literal["combinatorial", "normalized"]


def degree_vector(W: "sp.spmatrix") -> np.ndarray:
    """Weighted degree (row sums) of ``W`` as a float64 vector."""
    return np.asarray(W.sum(axis=1)).reshape(-1).astype(np.float64)


def laplacian_from_weights(
    W: "sp.spmatrix",
    *,
    kind: LaplacianKind = "combinatorial",
    eps: float = 1e-12,
) -> "sp.csr_matrix":
    """Construct the Laplacian of an undirected weighted graph.

    Args:
        W: weight matrix (sparse), expected shape (N, N).
        kind: 'combinatorial' or 'normalized'.
        eps: degrees at or below this value are treated as zero (isolated
            vertices get a zero row in the normalized Laplacian's D^{-1/2}).

    Returns:
        L: Laplacian in CSR format.
    """
    if W.shape[0] != W.shape[1]:
        raise DimensionError(f"W must be square, got shape={W.shape}")

    W = sp.csr_matrix(W)

    # Self-loops do not contribute to the Laplacian.
    if W.diagonal().any():
        W = W - sp.diags(W.diagonal())
        W.eliminate_zeros()

    n = W.shape[0]
    if n == 0:
        return sp.csr_matrix((0, 0), dtype=np.float64)
    d = degree_vector(W)

    if kind == "combinatorial":
        L = sp.diags(d, offsets=0, shape=(n, n), format="csr") - W
    elif kind == "normalized":
        inv_sqrt = np.zeros_like(d)
        mask = d > eps
        inv_sqrt[mask] = 1.0 / np.sqrt(d[mask])
        D_inv_sqrt = sp.diags(inv_sqrt, offsets=0, shape=(n, n), format="csr")
        I = sp.identity(n, format="csr", dtype=np.float64)
        L = I - (D_inv_sqrt @ W @ D_inv_sqrt)
    else:
        raise ConfigurationError(f"Unknown Laplacian kind {kind!r}")

    return sp.csr_matrix(L)

