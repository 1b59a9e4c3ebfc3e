import math

import numpy as np
import pytest
from pydantic import ValidationError

from lazywitness.data import (
    CallableMetricSpace,
    InvalidMetricError,
    InvalidParameterError,
    NullReferenceError,
    PointCloudMetricSpace,
    PrecomputedMetricSpace,
)
from lazywitness.preprocessing import (
    ExplicitLandmarkSelector,
    MaxMinLandmarkSelector,
    RandomLandmarkSelector,
    maxmin_sample,
)


def _make_space(n=60, d=3, seed=0):
    rng = np.random.default_rng(seed)
    return PointCloudMetricSpace(rng.normal(size=(n, d)))


def _brute_force_maxmin(space, first, n):
    selected = [first]
    for _ in range(1, n):
        best, best_value = -1, -math.inf
        for z in range(space.size()):
            if z in selected:
                continue
            f = min(space.distance(z, l) for l in selected)
            if f > best_value:
                best, best_value = z, f
        selected.append(best)
    return selected


@pytest.mark.parametrize("n", [1, 2, 7, 60])
def test_landmarks_distinct_and_in_range(n):
    space = _make_space()
    selector = MaxMinLandmarkSelector(space, n, random_state=3)
    landmarks = selector.to_list()
    assert len(landmarks) == n == selector.size() == len(selector)
    assert len(set(landmarks)) == n
    assert all(0 <= idx < space.size() for idx in landmarks)
    assert [selector.get_landmark_index(i) for i in range(n)] == landmarks


def test_maxmin_matches_brute_force():
    space = _make_space(n=40, seed=1)
    selector = MaxMinLandmarkSelector(space, 10, random_state=11)
    expected = _brute_force_maxmin(space, selector.get_landmark_index(0), 10)
    assert selector.to_list() == expected


def test_maxmin_values_non_increasing():
    space = _make_space(n=80, seed=2)
    selector = MaxMinLandmarkSelector(space, 20, random_state=0)
    values = selector.max_min_distances
    assert math.isinf(values[0])
    assert np.all(np.diff(values[1:]) <= 1e-12)


def test_ties_broken_by_lowest_index():
    dist = np.ones((6, 6))
    np.fill_diagonal(dist, 0.0)
    space = PrecomputedMetricSpace(dist)
    selector = MaxMinLandmarkSelector(space, 6, random_state=5)
    first = selector.get_landmark_index(0)
    assert selector.to_list()[1:] == sorted(set(range(6)) - {first})


def test_seed_determinism_and_generator():
    space = _make_space()
    a = MaxMinLandmarkSelector(space, 12, random_state=42).to_list()
    b = MaxMinLandmarkSelector(space, 12, random_state=42).to_list()
    c = MaxMinLandmarkSelector(
        space, 12, random_state=np.random.default_rng(42)
    ).to_list()
    assert a == b == c


def test_covering_radius_matches_brute_force():
    space = _make_space(n=50, seed=4)
    selector = MaxMinLandmarkSelector(space, 8, random_state=1)
    landmarks = selector.to_list()
    nearest = [
        min(space.distance(z, l) for l in landmarks) for z in range(space.size())
    ]
    assert selector.covering_radius() == pytest.approx(max(nearest))
    np.testing.assert_allclose(selector.nearest_landmark_distances(), nearest)


def test_covering_radius_bounded_by_last_maxmin_value():
    space = _make_space(n=50, seed=5)
    selector = MaxMinLandmarkSelector(space, 10, random_state=2)
    assert selector.covering_radius() <= selector.max_min_distances[-1] + 1e-12


def test_landmark_indices_are_read_only():
    selector = MaxMinLandmarkSelector(_make_space(), 5, random_state=0)
    with pytest.raises(ValueError):
        selector.landmark_indices[0] = 1


@pytest.mark.parametrize("n", [0, 61, -2])
def test_invalid_landmark_count(n):
    with pytest.raises(InvalidParameterError):
        MaxMinLandmarkSelector(_make_space(), n)


def test_missing_metric_space():
    with pytest.raises(NullReferenceError):
        MaxMinLandmarkSelector(None, 3)


def test_local_index_out_of_range():
    selector = MaxMinLandmarkSelector(_make_space(), 4, random_state=0)
    with pytest.raises(InvalidParameterError):
        selector.get_landmark_index(4)


def test_nan_distance_is_rejected():
    space = CallableMetricSpace(5, lambda i, j: 0.0 if i == j else float("nan"))
    with pytest.raises(InvalidMetricError):
        MaxMinLandmarkSelector(space, 3, random_state=0)


def test_random_selector_distinct():
    space = _make_space()
    selector = RandomLandmarkSelector(space, 20, random_state=0)
    assert len(set(selector.to_list())) == 20
    assert selector.to_list() == RandomLandmarkSelector(space, 20, random_state=0).to_list()


def test_explicit_selector():
    space = _make_space(n=10)
    selector = ExplicitLandmarkSelector(space, [4, 0, 7])
    assert selector.to_list() == [4, 0, 7]
    with pytest.raises(InvalidParameterError):
        ExplicitLandmarkSelector(space, [1, 1])
    with pytest.raises(InvalidParameterError):
        ExplicitLandmarkSelector(space, [3, 10])
    with pytest.raises(InvalidParameterError):
        ExplicitLandmarkSelector(space, [])


def test_maxmin_sample_wrapper():
    space = _make_space()
    assert maxmin_sample(space, 5, random_state=9) == MaxMinLandmarkSelector(
        space, 5, random_state=9
    ).to_list()
    with pytest.raises(ValidationError):
        maxmin_sample(space, 0)
