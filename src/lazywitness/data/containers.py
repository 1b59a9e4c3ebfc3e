# Copyright 2025 Zhiyuan Yu (Heemskerk's lab, University of Michigan)
from __future__ import annotations

import math

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.dataclasses import dataclass
from scipy.sparse import coo_matrix, csr_matrix

from .constants import (
    DEFAULT_MAX_DIMENSION,
    DEFAULT_NU,
    DEFAULT_NUM_DIVISIONS,
    DEFAULT_R,
    DEFAULT_RADIUS_POLICY,
)
from .types import (
    Diameter_t,
    EmbeddingMethod,
    NeighborRank,
    NumDivisions,
    RadiusPolicy,
    Size_t,
    SizeLandmarks,
)


class LazyWitnessParams(BaseModel):
    embedding_method: EmbeddingMethod | None = None
    metric: str = "euclidean"
    n_landmarks: SizeLandmarks
    nu: NeighborRank = DEFAULT_NU
    R: float = DEFAULT_R
    max_distance: Diameter_t = math.inf
    max_dimension: Size_t = DEFAULT_MAX_DIMENSION
    num_divisions: NumDivisions = DEFAULT_NUM_DIVISIONS
    radius_policy: RadiusPolicy = DEFAULT_RADIUS_POLICY
    random_state: int | None = 0

    @field_validator("nu")
    @classmethod
    def check_nu(cls, v: int, info: ValidationInfo) -> int:
        n_landmarks = info.data.get("n_landmarks")
        if n_landmarks is not None and v >= n_landmarks:
            raise ValueError(f"nu must be smaller than n_landmarks ({n_landmarks})")
        return v


@dataclass(config=ConfigDict(arbitrary_types_allowed=True))
class LazyWitnessData:
    """
    landmarks and weighted 1-skeleton of a lazy witness complex
    """

    params: LazyWitnessParams
    landmark_indices: list[int] = Field(default_factory=list)
    max_min_distances: list[float] = Field(default_factory=list)
    covering_radius: float | None = None
    nu_distances: np.ndarray | None = None
    edges: np.ndarray | None = None  # (E, 2) landmark-local indices, a < b
    edge_weights: np.ndarray | None = None

    @property
    def num_landmarks(self) -> int:
        return len(self.landmark_indices)

    @property
    def num_edges(self) -> int:
        return 0 if self.edges is None else len(self.edges)

    @property
    def edges_global(self) -> np.ndarray:
        """edges as pairs of indices into the original points"""
        assert self.edges is not None
        return np.asarray(self.landmark_indices, dtype=np.int64)[self.edges]

    def to_sparse(self) -> csr_matrix:
        assert self.edges is not None
        assert self.edge_weights is not None
        n = self.num_landmarks
        rows = np.concatenate([self.edges[:, 0], self.edges[:, 1]])
        cols = np.concatenate([self.edges[:, 1], self.edges[:, 0]])
        data = np.concatenate([self.edge_weights, self.edge_weights])
        return coo_matrix((data, (rows, cols)), shape=(n, n)).tocsr()
