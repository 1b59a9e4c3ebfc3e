import numpy as np
import pytest
from scipy.sparse import csr_matrix

from lazywitness.data import (
    CallableMetricSpace,
    InvalidParameterError,
    PointCloudMetricSpace,
    PrecomputedMetricSpace,
)


def test_point_cloud_distances():
    rng = np.random.default_rng(0)
    X = rng.normal(size=(10, 4))
    space = PointCloudMetricSpace(X)
    assert space.size() == len(space) == 10
    assert space.distance(2, 5) == pytest.approx(np.linalg.norm(X[2] - X[5]))
    assert space.distance(3, 3) == 0.0
    block = space.distance_block([1, 4], np.arange(10))
    assert block.shape == (2, 10)
    assert block[0, 1] == 0.0
    assert block[1, 7] == pytest.approx(space.distance(4, 7))


def test_point_cloud_other_metric():
    X = np.array([[1.0, 0.0], [0.0, 1.0], [1.0, 1.0]])
    space = PointCloudMetricSpace(X, metric="cityblock")
    assert space.distance(0, 1) == pytest.approx(2.0)


def test_default_block_uses_distance():
    space = CallableMetricSpace(5, lambda i, j: abs(i - j) * 0.5)
    block = space.distance_block([0, 3], [1, 2, 4])
    np.testing.assert_allclose(block, [[0.5, 1.0, 2.0], [1.0, 0.5, 0.5]])


def test_precomputed_space():
    dist = np.array([[0.0, 2.0], [2.0, 0.0]])
    space = PrecomputedMetricSpace(csr_matrix(dist))
    assert space.distance(1, 0) == 2.0
    np.testing.assert_array_equal(space.distance_block([1], [0, 1]), [[2.0, 0.0]])
    with pytest.raises(InvalidParameterError):
        PrecomputedMetricSpace(np.zeros((2, 3)))


def test_index_out_of_range():
    space = PointCloudMetricSpace(np.zeros((3, 2)))
    with pytest.raises(InvalidParameterError):
        space.distance(0, 3)
