# Copyright 2025 Zhiyuan Yu (Heemskerk's lab, University of Michigan)
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Sequence

import numpy as np
from scipy.sparse import issparse
from scipy.spatial.distance import cdist

from .exceptions import InvalidParameterError

__all__ = [
    "FiniteMetricSpace",
    "PointCloudMetricSpace",
    "PrecomputedMetricSpace",
    "CallableMetricSpace",
]


class FiniteMetricSpace(ABC):
    """
    Finite collection of indexed points with a pairwise distance query.

    Only indices are ever exchanged with the landmark and witness code, the
    point representation stays inside the concrete space.
    """

    @abstractmethod
    def size(self) -> int:
        pass

    @abstractmethod
    def distance(self, i: int, j: int) -> float:
        pass

    def distance_block(
        self, rows: Sequence[int] | np.ndarray, cols: Sequence[int] | np.ndarray
    ) -> np.ndarray:
        """
        Distances between two index sets as a (len(rows), len(cols)) array.
        Subclasses with vectorised access should override this.
        """
        rows = np.asarray(rows, dtype=np.int64)
        cols = np.asarray(cols, dtype=np.int64)
        block = np.empty((len(rows), len(cols)), dtype=np.float64)
        for r, i in enumerate(rows):
            for c, j in enumerate(cols):
                block[r, c] = self.distance(int(i), int(j))
        return block

    def __len__(self) -> int:
        return self.size()

    def _check_index(self, i: int) -> None:
        if not 0 <= i < self.size():
            raise InvalidParameterError(
                f"point index {i} out of range for metric space of size {self.size()}"
            )


class PointCloudMetricSpace(FiniteMetricSpace):
    def __init__(self, points: np.ndarray, metric: str = "euclidean", **metric_kwargs):
        points = np.asarray(points, dtype=np.float64)
        if points.ndim == 1:
            points = points[:, None]
        if points.ndim != 2:
            raise InvalidParameterError(
                f"points must be a 2-d array, got shape {points.shape}"
            )
        self.points = points
        self.metric = metric
        self.metric_kwargs = metric_kwargs

    def size(self) -> int:
        return self.points.shape[0]

    def distance(self, i: int, j: int) -> float:
        self._check_index(i)
        self._check_index(j)
        if i == j:
            return 0.0
        return float(
            cdist(
                self.points[[i]], self.points[[j]], metric=self.metric, **self.metric_kwargs
            )[0, 0]
        )

    def distance_block(self, rows, cols) -> np.ndarray:
        rows = np.asarray(rows, dtype=np.int64)
        cols = np.asarray(cols, dtype=np.int64)
        block = cdist(
            self.points[rows], self.points[cols], metric=self.metric, **self.metric_kwargs
        )
        # cdist may leave rounding noise on the diagonal for some metrics
        block[rows[:, None] == cols[None, :]] = 0.0
        return block


class PrecomputedMetricSpace(FiniteMetricSpace):
    def __init__(self, distance_matrix):
        if issparse(distance_matrix):
            distance_matrix = distance_matrix.toarray()
        distance_matrix = np.asarray(distance_matrix, dtype=np.float64)
        if distance_matrix.ndim != 2 or (
            distance_matrix.shape[0] != distance_matrix.shape[1]
        ):
            raise InvalidParameterError(
                f"distance matrix must be square, got shape {distance_matrix.shape}"
            )
        self.distance_matrix = distance_matrix

    def size(self) -> int:
        return self.distance_matrix.shape[0]

    def distance(self, i: int, j: int) -> float:
        self._check_index(i)
        self._check_index(j)
        return float(self.distance_matrix[i, j])

    def distance_block(self, rows, cols) -> np.ndarray:
        rows = np.asarray(rows, dtype=np.int64)
        cols = np.asarray(cols, dtype=np.int64)
        return self.distance_matrix[np.ix_(rows, cols)]


class CallableMetricSpace(FiniteMetricSpace):
    def __init__(self, size: int, distance_fn: Callable[[int, int], float]):
        if size < 0:
            raise InvalidParameterError(f"size must be nonnegative, got {size}")
        self._size = size
        self.distance_fn = distance_fn

    def size(self) -> int:
        return self._size

    def distance(self, i: int, j: int) -> float:
        self._check_index(i)
        self._check_index(j)
        return float(self.distance_fn(i, j))
