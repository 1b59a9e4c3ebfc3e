# Copyright 2025 Zhiyuan Yu (Heemskerk's lab, University of Michigan)
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator, Sequence

import numpy as np
from loguru import logger
from numba import jit
from pydantic import ConfigDict, validate_call

from ..data.exceptions import (
    InvalidParameterError,
    verify_distances,
    verify_non_null,
)
from ..data.metric import FiniteMetricSpace
from ..data.types import IndexListLandmarks, SizeLandmarks

__all__ = [
    "LandmarkSelector",
    "MaxMinLandmarkSelector",
    "RandomLandmarkSelector",
    "ExplicitLandmarkSelector",
    "maxmin_sample",
]


@jit(nopython=True)
def _update_and_select_farthest(
    min_dists: np.ndarray, new_dists: np.ndarray, is_landmark: np.ndarray
) -> tuple[int, float]:
    # fold the newest landmark into min_dists, then take the out-of-bag argmax;
    # strict comparison keeps the lowest index among ties
    next_idx = -1
    next_value = -np.inf
    for z in range(len(min_dists)):
        if is_landmark[z]:
            continue
        if new_dists[z] < min_dists[z]:
            min_dists[z] = new_dists[z]
        if min_dists[z] > next_value:
            next_value = min_dists[z]
            next_idx = z
    return next_idx, next_value


class LandmarkSelector(ABC):
    """
    Ordered, fixed set of landmark points chosen from a finite metric space.

    Landmark-local indices 0..n-1 map to global point indices through
    `get_landmark_index`. The set is computed once, at construction.
    """

    def __init__(self, metric_space: FiniteMetricSpace, landmark_set_size: int):
        verify_non_null(metric_space, "metric_space")
        num_points = metric_space.size()
        if not 1 <= landmark_set_size <= num_points:
            raise InvalidParameterError(
                f"landmark_set_size must lie in [1, {num_points}], got {landmark_set_size}"
            )
        self._metric_space = metric_space
        self._landmark_set_size = landmark_set_size
        landmarks = np.asarray(self._compute_landmark_set(), dtype=np.int64)
        landmarks.setflags(write=False)
        self._landmarks = landmarks

    @abstractmethod
    def _compute_landmark_set(self) -> np.ndarray:
        pass

    @property
    def metric_space(self) -> FiniteMetricSpace:
        return self._metric_space

    @property
    def landmark_indices(self) -> np.ndarray:
        return self._landmarks

    def size(self) -> int:
        return self._landmark_set_size

    def get_landmark_index(self, local_index: int) -> int:
        if not 0 <= local_index < self._landmark_set_size:
            raise InvalidParameterError(
                f"landmark index {local_index} out of range [0, {self._landmark_set_size})"
            )
        return int(self._landmarks[local_index])

    def to_list(self) -> list[int]:
        return self._landmarks.tolist()

    def __len__(self) -> int:
        return self._landmark_set_size

    def __iter__(self) -> Iterator[int]:
        return iter(self.to_list())

    def __repr__(self) -> str:
        return f"{type(self).__name__}(size={self._landmark_set_size})"


class MaxMinLandmarkSelector(LandmarkSelector):
    """
    Sequential max-min (farthest-point) landmark selection.

    With landmarks l_0, ..., l_{i-1} chosen, let f(z) = min_j d(z, l_j); the
    next landmark is argmax f over the points not yet chosen. l_0 is drawn
    uniformly at random. f is kept up to date after every addition, so each
    step costs one distance row and the whole selection costs O(N n).
    """

    def __init__(
        self,
        metric_space: FiniteMetricSpace,
        landmark_set_size: int,
        random_state: int | np.random.Generator | None = None,
        verbose: bool = False,
    ):
        self._rng = np.random.default_rng(random_state)
        self.max_min_distances: np.ndarray = np.empty(0)
        self._min_dists: np.ndarray = np.empty(0)
        super().__init__(metric_space, landmark_set_size)
        if verbose:
            logger.info(
                f"Selected {self.size()} of {metric_space.size()} points as landmarks "
                f"(covering radius {self.covering_radius():.4g})"
            )

    def _distance_row(self, idx: int, all_points: np.ndarray) -> np.ndarray:
        row = np.ascontiguousarray(
            self._metric_space.distance_block([idx], all_points)[0], dtype=np.float64
        )
        verify_distances(row)
        return row

    def _compute_landmark_set(self) -> np.ndarray:
        num_points = self._metric_space.size()
        n = self._landmark_set_size
        all_points = np.arange(num_points, dtype=np.int64)

        indices = np.zeros(n, dtype=np.int64)
        max_min = np.full(n, np.inf)
        min_dists = np.full(num_points, np.inf)
        is_landmark = np.zeros(num_points, dtype=np.bool_)

        indices[0] = self._rng.integers(0, num_points)
        is_landmark[indices[0]] = True

        for i in range(1, n):
            new_dists = self._distance_row(int(indices[i - 1]), all_points)
            next_idx, next_value = _update_and_select_farthest(
                min_dists, new_dists, is_landmark
            )
            indices[i] = next_idx
            max_min[i] = next_value
            is_landmark[next_idx] = True

        # fold in the last landmark so min_dists reflects the full set
        new_dists = self._distance_row(int(indices[n - 1]), all_points)
        _update_and_select_farthest(min_dists, new_dists, is_landmark)
        min_dists[is_landmark] = 0.0

        self.max_min_distances = max_min
        self._min_dists = min_dists
        return indices

    def covering_radius(self) -> float:
        """Largest distance from any point to its nearest landmark."""
        return float(self._min_dists.max())

    def nearest_landmark_distances(self) -> np.ndarray:
        return self._min_dists.copy()


class RandomLandmarkSelector(LandmarkSelector):
    def __init__(
        self,
        metric_space: FiniteMetricSpace,
        landmark_set_size: int,
        random_state: int | np.random.Generator | None = None,
    ):
        self._rng = np.random.default_rng(random_state)
        super().__init__(metric_space, landmark_set_size)

    def _compute_landmark_set(self) -> np.ndarray:
        return self._rng.choice(
            self._metric_space.size(), size=self._landmark_set_size, replace=False
        )


class ExplicitLandmarkSelector(LandmarkSelector):
    def __init__(self, metric_space: FiniteMetricSpace, indices: Sequence[int]):
        verify_non_null(indices, "indices")
        self._explicit = np.asarray(indices, dtype=np.int64).ravel()
        super().__init__(metric_space, len(self._explicit))

    def _compute_landmark_set(self) -> np.ndarray:
        num_points = self._metric_space.size()
        if ((self._explicit < 0) | (self._explicit >= num_points)).any():
            raise InvalidParameterError(
                f"landmark indices must lie in [0, {num_points})"
            )
        if len(np.unique(self._explicit)) != len(self._explicit):
            raise InvalidParameterError("landmark indices must be distinct")
        return self._explicit


@validate_call(config=ConfigDict(arbitrary_types_allowed=True))
def maxmin_sample(
    metric_space: FiniteMetricSpace,
    n: SizeLandmarks,
    random_state: int | None = 0,
    verbose: bool = False,
) -> IndexListLandmarks:
    """
    Greedy farthest-point sampling of n landmarks.

    Args:
        metric_space: points to sample from
        n: number of landmarks, 1 <= n <= metric_space.size()
        random_state: seed for the first landmark

    Returns:
        global indices of the landmarks, in selection order
    """
    return MaxMinLandmarkSelector(
        metric_space, n, random_state=random_state, verbose=verbose
    ).to_list()
