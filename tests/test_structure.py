import numpy as np
import pytest
import scipy.sparse as sp

from pointgraph.errors import DimensionError
from pointgraph.graph.structure import Graph, default_parameters, lightweight_parameters


def _path3(directed=False):
    W = np.array([[0.0, 1.0, 0.0], [1.0, 0.0, 3.0], [0.0, 3.0, 0.0]])
    if directed:
        W[2, 1] = 0.0
    return Graph(N=3, W=sp.csr_matrix(W))


def test_lightweight_parameters_undirected():
    G = lightweight_parameters(_path3())
    assert G.directed is False
    assert G.Ne == 2
    assert np.allclose(G.d, [1.0, 4.0, 3.0])
    assert G.L is None


def test_lightweight_parameters_directed():
    G = lightweight_parameters(_path3(directed=True))
    assert G.directed is True
    assert G.Ne == 3
    assert np.allclose(G.d, [1.0, 4.0, 0.0])


def test_default_parameters():
    G = default_parameters(_path3())
    assert G.lap_type == "combinatorial"
    assert np.allclose(G.A.toarray(), [[0, 1, 0], [1, 0, 1], [0, 1, 0]])
    assert np.allclose(G.L.toarray(), [[1, -1, 0], [-1, 4, -3], [0, -3, 3]])

    Gn = default_parameters(_path3(), lap_type="normalized")
    assert Gn.lap_type == "normalized"
    assert np.allclose(np.diag(Gn.L.toarray()), 1.0)


def test_graph_rejects_mismatched_weight_matrix():
    with pytest.raises(DimensionError):
        Graph(N=3, W=sp.csr_matrix((3, 2)))
