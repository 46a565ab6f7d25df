import numpy as np
import pytest

from pointgraph.errors import ConfigurationError, DimensionError
from pointgraph.graph.distances import estimate_radius, nn_distances
from pointgraph.graph.params import NNGraphParams


def _sorted_triples(rows, cols, dist):
    order = np.lexsort((cols, rows))
    return rows[order], cols[order], dist[order]


def test_knn_returns_self_first(random_points):
    k = 4
    rows, cols, dist, Xout, D, eps = nn_distances(random_points, k=k)

    n = random_points.shape[0]
    assert rows.shape == cols.shape == dist.shape == (n * k,)
    assert D is None
    assert eps is None
    assert np.array_equal(Xout, random_points)

    cols = cols.reshape(n, k)
    dist = dist.reshape(n, k)
    assert np.array_equal(cols[:, 0], np.arange(n))
    assert np.all(dist[:, 0] == 0)
    # sorted by distance
    assert np.all(np.diff(dist, axis=1) >= 0)


def test_knn_k_is_clamped_to_number_of_points():
    X = np.array([[0.0], [1.0], [3.0]])
    rows, cols, dist, *_ = nn_distances(X, k=10)
    assert rows.shape == (9,)
    assert np.bincount(rows).tolist() == [3, 3, 3]
    assert np.isfinite(dist).all()


def test_knn_dense_matches_tree(random_points):
    tree = nn_distances(random_points, k=5)
    full = nn_distances(random_points, k=5, use_full=True)

    assert full[4].shape == (60, 60)
    a = _sorted_triples(*tree[:3])
    b = _sorted_triples(*full[:3])
    assert np.array_equal(a[0], b[0])
    assert np.array_equal(a[1], b[1])
    assert np.allclose(a[2], b[2])


def test_l1_and_l2_metrics():
    X = np.array([[0.0, 0.0]])
    Y = np.array([[1.0, 1.0]])

    _, _, d2, *_ = nn_distances(X, Y, k=1)
    _, _, d1, *_ = nn_distances(X, Y, k=1, use_l1=True)
    assert np.allclose(d2, [np.sqrt(2.0)])
    assert np.allclose(d1, [2.0])

    _, _, d1_full, *_ = nn_distances(X, Y, k=1, use_l1=True, use_full=True)
    assert np.allclose(d1_full, [2.0])


@pytest.mark.parametrize("use_full", [False, True])
def test_radius_search_between_two_sets(use_full):
    X = np.array([[0.0, 0.0], [5.0, 5.0]])
    Y = np.array([[0.0, 0.5], [0.0, 2.0], [0.3, 0.0]])

    rows, cols, dist, _, _, eps = nn_distances(
        X, Y, type="radius", epsilon=1.0, use_full=use_full
    )
    rows, cols, dist = _sorted_triples(rows, cols, dist)

    assert eps == pytest.approx(1.0)
    assert rows.tolist() == [0, 0]
    assert cols.tolist() == [0, 2]
    assert np.allclose(dist, [0.5, 0.3])


def test_radius_search_isolated_point_has_no_pairs():
    X = np.array([[0.0], [0.1], [10.0]])
    rows, cols, dist, *_ = nn_distances(X, type="radius", epsilon=0.5)
    # the isolated point only finds itself
    assert rows[cols != rows].tolist() == [0, 1]
    assert set(cols[rows == 2].tolist()) == {2}


def test_approximate_radius_search_stays_within_radius(random_points):
    eps = 0.3
    rows, cols, dist, Xout, *_ = nn_distances(
        random_points, type="radius", epsilon=eps, use_flann=True
    )
    assert np.all(dist <= eps)
    assert np.allclose(dist, np.linalg.norm(Xout[rows] - Xout[cols], axis=1))


def test_target_degree_sets_the_radius(random_points):
    rows, cols, dist, Xout, _, eps = nn_distances(
        random_points, type="radius", target_degree=5
    )
    assert eps == pytest.approx(estimate_radius(Xout, Xout, 5))
    assert eps != pytest.approx(0.01)
    assert np.all(dist <= eps)

    # about 5 neighbours per point plus the point itself
    mean_degree = rows.shape[0] / random_points.shape[0]
    assert 2.0 < mean_degree < 12.0


def test_center_and_rescale():
    X = np.array([[1.0, 1.0], [3.0, 1.0], [1.0, 5.0], [3.0, 5.0]])

    *_, Xc, _, _ = nn_distances(X, k=2, center=True)
    assert np.allclose(Xc.mean(axis=0), 0.0)
    assert np.allclose(X[0], [1.0, 1.0])  # input untouched

    *_, Xr, _, _ = nn_distances(X, k=2, center=True, rescale=True)
    bounding_radius = 0.5 * np.linalg.norm(Xr.max(axis=0) - Xr.min(axis=0))
    assert bounding_radius == pytest.approx(np.sqrt(4.0) / 10.0)


def test_params_object_and_overrides():
    X = np.arange(5, dtype=float)
    prm = NNGraphParams(k=2)
    rows, *_ = nn_distances(X, None, prm)
    assert rows.shape == (10,)
    rows, *_ = nn_distances(X, None, prm, k=3)
    assert rows.shape == (15,)


def test_bad_inputs():
    with pytest.raises(DimensionError):
        nn_distances(np.zeros((2, 2, 2)))
    with pytest.raises(DimensionError):
        nn_distances(np.zeros((3, 2)), np.zeros((3, 3)))
    with pytest.raises(ConfigurationError):
        nn_distances(np.zeros((3, 2)), type="grid")


@pytest.mark.parametrize("use_full", [False, True])
def test_target_degree_between_two_sets(use_full):
    # no self-match when the query and reference sets differ
    X = np.array([[0.0]])
    Y = np.array([[1.0], [2.0], [3.0]])

    *_, eps = nn_distances(X, Y, type="radius", target_degree=1, use_full=use_full)
    assert eps == pytest.approx(1.0)

    *_, eps = nn_distances(X, Y, type="radius", target_degree=2, use_full=use_full)
    assert eps == pytest.approx(2.0)


def test_estimate_radius_exclude_self():
    X = np.array([[0.0], [1.0], [3.0]])
    # 1st other neighbours: 1, 1, 2
    assert estimate_radius(X, X, 1) == pytest.approx(4.0 / 3.0)
    assert estimate_radius(X, X, 1, exclude_self=False) == pytest.approx(0.0)
