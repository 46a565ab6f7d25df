import numpy as np
import pytest


def _cycle4_weights():
    # 4-node cycle: 0-1-2-3-0 with unit weights (distance 0 -> exp(0) = 1)
    from pointgraph.graph.adjacency import weights_from_distances

    rows = np.array([0, 1, 1, 2, 2, 3, 3, 0])
    cols = np.array([1, 0, 2, 1, 3, 2, 0, 3])
    dist = np.zeros(8)
    return weights_from_distances(rows, cols, dist, 1.0, 4)


def test_laplacian_cycle4():
    pytest.importorskip("scipy")

    from pointgraph.graph.laplacian import laplacian_from_weights

    W = _cycle4_weights()
    assert W.shape == (4, 4)
    assert W.nnz == 8  # undirected cycle has 4 edges -> 8 directed entries

    deg = np.asarray(W.sum(axis=1)).reshape(-1)
    assert np.allclose(deg, 2.0)

    L = laplacian_from_weights(W, kind="combinatorial")
    expected = np.array(
        [
            [2, -1, 0, -1],
            [-1, 2, -1, 0],
            [0, -1, 2, -1],
            [-1, 0, -1, 2],
        ],
        dtype=float,
    )
    assert np.allclose(L.toarray(), expected)

    # Normalized Laplacian for a 2-regular graph: I - W/2
    Ln = laplacian_from_weights(W, kind="normalized")
    assert np.allclose(Ln.toarray(), np.eye(4) - 0.5 * W.toarray())


def test_laplacian_ignores_self_loops_and_isolated_vertices():
    import scipy.sparse as sp

    from pointgraph.graph.laplacian import laplacian_from_weights

    W = sp.csr_matrix(np.array([[5.0, 2.0, 0.0], [2.0, 0.0, 0.0], [0.0, 0.0, 0.0]]))

    L = laplacian_from_weights(W, kind="combinatorial").toarray()
    assert np.allclose(L, [[2, -2, 0], [-2, 2, 0], [0, 0, 0]])

    Ln = laplacian_from_weights(W, kind="normalized").toarray()
    assert np.allclose(Ln[:2, :2], [[1, -1], [-1, 1]])
    assert np.allclose(Ln[2], [0, 0, 1])


def test_laplacian_unknown_kind_raises():
    from pointgraph.errors import ConfigurationError
    from pointgraph.graph.laplacian import laplacian_from_weights

    with pytest.raises(ConfigurationError):
        laplacian_from_weights(_cycle4_weights(), kind="random_walk")

