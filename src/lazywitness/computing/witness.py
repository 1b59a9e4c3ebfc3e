# Copyright 2025 Zhiyuan Yu (Heemskerk's lab, University of Michigan)
from __future__ import annotations

import math

import numpy as np
from loguru import logger
from numba import jit
from scipy.sparse import csr_matrix

from ..data.constants import (
    DEFAULT_NU,
    DEFAULT_NUM_DIVISIONS,
    DEFAULT_R,
    DEFAULT_RADIUS_POLICY,
    RADIUS_POLICY_CODES,
)
from ..data.exceptions import (
    InvalidParameterError,
    verify_distances,
    verify_non_null,
)
from ..data.graph import UndirectedWeightedGraph
from ..data.metric import FiniteMetricSpace
from ..data.types import RadiusPolicy
from ..preprocessing.landmarks import LandmarkSelector

__all__ = [
    "LazyWitnessStream",
    "compute_landmark_distances",
    "compute_nu_distances",
    "compute_witness_edge_weights",
]


def compute_landmark_distances(
    metric_space: FiniteMetricSpace, landmark_indices: np.ndarray
) -> np.ndarray:
    """n x N matrix D with D[a, k] = d(landmark a, point k)."""
    landmark_dists = np.ascontiguousarray(
        metric_space.distance_block(
            landmark_indices, np.arange(metric_space.size(), dtype=np.int64)
        ),
        dtype=np.float64,
    )
    verify_distances(landmark_dists)
    return landmark_dists


def compute_nu_distances(landmark_dists: np.ndarray, nu: int) -> np.ndarray:
    """
    m_k for every point k: the nu-th smallest entry (1-indexed) of column k of
    D, or 0 when nu = 0. Uses a partial partition instead of a full sort.
    """
    landmark_dists = np.asarray(landmark_dists)
    if landmark_dists.ndim != 2:
        raise InvalidParameterError(
            f"landmark distances must be a 2-d array, got shape {landmark_dists.shape}"
        )
    n, num_points = landmark_dists.shape
    if not 0 <= nu <= n:
        raise InvalidParameterError(f"nu must lie in [0, {n}], got {nu}")
    if nu == 0:
        return np.zeros(num_points, dtype=np.float64)
    return np.partition(landmark_dists, nu - 1, axis=0)[nu - 1].astype(np.float64)


@jit(nopython=True)
def _witness_edge_weights(
    landmark_dists: np.ndarray, nu_dists: np.ndarray, policy_code: int
) -> tuple[np.ndarray, np.ndarray]:
    n, num_points = landmark_dists.shape
    num_pairs = n * (n - 1) // 2
    pairs = np.empty((num_pairs, 2), dtype=np.int64)
    weights = np.empty(num_pairs, dtype=np.float64)

    count = 0
    for a in range(n):
        for b in range(a + 1, n):
            e_ab = np.inf
            m_argmin = 0.0
            r_min = np.inf
            for k in range(num_points):
                v = max(landmark_dists[a, k], landmark_dists[b, k])
                if v < e_ab:
                    e_ab = v
                    m_argmin = nu_dists[k]
                if policy_code == 2:
                    r_k = v - nu_dists[k]
                    if r_k < r_min:
                        r_min = r_k

            if policy_code == 0:
                r_ab = e_ab - m_argmin
            elif policy_code == 1:
                # running minimum minus the m of the last scanned witness
                r_ab = e_ab - nu_dists[num_points - 1]
            else:
                r_ab = r_min
            if r_ab < 0:
                r_ab = 0.0

            pairs[count, 0] = a
            pairs[count, 1] = b
            weights[count] = r_ab
            count += 1

    return pairs, weights


def compute_witness_edge_weights(
    landmark_dists: np.ndarray,
    nu_dists: np.ndarray,
    radius_policy: RadiusPolicy = DEFAULT_RADIUS_POLICY,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Witness radius of every landmark pair.

    For a pair (a, b), E_ab = min_k max(D[a, k], D[b, k]) over all witnesses k.
    The radius R_ab is derived from the scan according to `radius_policy`:

    - "argmin_witness": E_ab - m[k*], k* the first witness attaining E_ab
    - "last_witness": E_ab - m[N - 1], reproducing implementations that
      refresh R_ab on every scan step
    - "min_witness": min_k (max(D[a, k], D[b, k]) - m[k]), the smallest R for
      which max(D(a, k), D(b, k)) <= R + m_k holds for some witness

    Negative radii are clamped to 0.

    Returns:
        (pairs, weights): (n(n-1)/2, 2) landmark-local pairs with a < b in
        lexicographic order, and their radii
    """
    if radius_policy not in RADIUS_POLICY_CODES:
        raise InvalidParameterError(
            f"radius_policy must be one of {sorted(RADIUS_POLICY_CODES)}, got {radius_policy!r}"
        )
    landmark_dists = np.ascontiguousarray(landmark_dists, dtype=np.float64)
    nu_dists = np.ascontiguousarray(nu_dists, dtype=np.float64)
    if landmark_dists.ndim != 2:
        raise InvalidParameterError(
            f"landmark distances must be a 2-d array, got shape {landmark_dists.shape}"
        )
    if nu_dists.shape != (landmark_dists.shape[1],):
        raise InvalidParameterError(
            f"nu distances must have shape ({landmark_dists.shape[1]},), got {nu_dists.shape}"
        )
    return _witness_edge_weights(
        landmark_dists, nu_dists, RADIUS_POLICY_CODES[radius_policy]
    )


class LazyWitnessStream:
    """
    1-skeleton of the lazy witness complex of de Silva and Carlsson
    ("Topological estimation using witness complexes").

    Let D be the n x N matrix of distances between landmarks and all points.
    m_k is 0 when nu = 0 and the nu-th smallest entry of column k otherwise.
    Edge [ab] is weighted by the witness radius of the pair and kept when that
    radius does not exceed `max_distance`. A lazy witness complex is
    determined by its 1-skeleton, so expanding it to higher simplices is left
    to the downstream flag-complex stage, which receives `max_dimension` and
    `num_divisions` unchanged.

    All arguments are validated here, before any distance is computed.
    """

    def __init__(
        self,
        metric_space: FiniteMetricSpace,
        landmark_selector: LandmarkSelector,
        max_dimension: int,
        max_distance: float,
        nu: int = DEFAULT_NU,
        R: float = DEFAULT_R,
        num_divisions: int = DEFAULT_NUM_DIVISIONS,
        radius_policy: RadiusPolicy = DEFAULT_RADIUS_POLICY,
        verbose: bool = False,
    ):
        verify_non_null(metric_space, "metric_space")
        verify_non_null(landmark_selector, "landmark_selector")
        if landmark_selector.metric_space.size() != metric_space.size():
            raise InvalidParameterError(
                "landmark_selector was built on a metric space of size "
                f"{landmark_selector.metric_space.size()}, expected {metric_space.size()}"
            )
        if not 0 <= nu < landmark_selector.size():
            raise InvalidParameterError(
                f"nu must lie in [0, {landmark_selector.size() - 1}], got {nu}"
            )
        if math.isnan(max_distance) or max_distance < 0:
            raise InvalidParameterError(
                f"max_distance must be nonnegative, got {max_distance}"
            )
        if max_dimension < 0:
            raise InvalidParameterError(
                f"max_dimension must be nonnegative, got {max_dimension}"
            )
        if num_divisions < 1:
            raise InvalidParameterError(
                f"num_divisions must be positive, got {num_divisions}"
            )
        if radius_policy not in RADIUS_POLICY_CODES:
            raise InvalidParameterError(
                f"radius_policy must be one of {sorted(RADIUS_POLICY_CODES)}, got {radius_policy!r}"
            )
        if R != 0:
            logger.warning(
                f"R={R} is recorded but not applied; edge weights are already the minimal R"
            )

        self.metric_space = metric_space
        self.landmark_selector = landmark_selector
        self._max_dimension = max_dimension
        self._max_distance = float(max_distance)
        self._nu = nu
        self._R = float(R)
        self._num_divisions = num_divisions
        self._radius_policy = radius_policy
        self.verbose = verbose

        self.landmark_distances: np.ndarray | None = None
        self.nu_distances: np.ndarray | None = None
        self._graph: UndirectedWeightedGraph | None = None

    @property
    def max_dimension(self) -> int:
        return self._max_dimension

    @property
    def max_distance(self) -> float:
        return self._max_distance

    @property
    def nu(self) -> int:
        return self._nu

    @property
    def R(self) -> float:
        return self._R

    @property
    def num_divisions(self) -> int:
        return self._num_divisions

    @property
    def radius_policy(self) -> RadiusPolicy:
        return self._radius_policy

    @property
    def graph(self) -> UndirectedWeightedGraph:
        if self._graph is None:
            self._graph = self.construct_edges()
        return self._graph

    def construct_edges(self) -> UndirectedWeightedGraph:
        if self._graph is not None:
            return self._graph

        n = self.landmark_selector.size()
        landmark_dists = compute_landmark_distances(
            self.metric_space, self.landmark_selector.landmark_indices
        )
        nu_dists = compute_nu_distances(landmark_dists, self._nu)
        pairs, weights = compute_witness_edge_weights(
            landmark_dists, nu_dists, self._radius_policy
        )

        graph = UndirectedWeightedGraph(n)
        keep = weights <= self._max_distance
        for (a, b), w in zip(pairs[keep], weights[keep]):
            graph.add_edge(int(a), int(b), float(w))

        if self.verbose:
            logger.info(
                f"Lazy witness 1-skeleton built: {graph.num_edges} of {len(pairs)} "
                f"landmark pairs within max_distance={self._max_distance} "
                f"(nu={self._nu}, {self.metric_space.size()} witnesses)"
            )

        self.landmark_distances = landmark_dists
        self.nu_distances = nu_dists
        self._graph = graph
        return graph

    def to_sparse(self) -> csr_matrix:
        return self.graph.to_sparse()
