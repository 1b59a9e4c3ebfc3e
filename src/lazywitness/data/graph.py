# Copyright 2025 Zhiyuan Yu (Heemskerk's lab, University of Michigan)
from __future__ import annotations

from typing import Iterator

import numpy as np
from scipy.sparse import coo_matrix, csr_matrix

from .exceptions import InvalidParameterError

__all__ = ["UndirectedWeightedGraph"]


class UndirectedWeightedGraph:
    """
    Adjacency-list graph on vertices 0..num_vertices-1 with one weight per edge.
    """

    def __init__(self, num_vertices: int):
        if num_vertices < 0:
            raise InvalidParameterError(
                f"num_vertices must be nonnegative, got {num_vertices}"
            )
        self._num_vertices = num_vertices
        self._adjacency: list[dict[int, float]] = [{} for _ in range(num_vertices)]
        self._num_edges = 0

    @property
    def num_vertices(self) -> int:
        return self._num_vertices

    @property
    def num_edges(self) -> int:
        return self._num_edges

    def _check_vertex(self, a: int) -> None:
        if not 0 <= a < self._num_vertices:
            raise InvalidParameterError(
                f"vertex {a} out of range for graph with {self._num_vertices} vertices"
            )

    def add_edge(self, a: int, b: int, weight: float) -> None:
        self._check_vertex(a)
        self._check_vertex(b)
        if a == b:
            raise InvalidParameterError(f"self loop on vertex {a} is not allowed")
        if b not in self._adjacency[a]:
            self._num_edges += 1
        self._adjacency[a][b] = float(weight)
        self._adjacency[b][a] = float(weight)

    def contains_edge(self, a: int, b: int) -> bool:
        if not (0 <= a < self._num_vertices and 0 <= b < self._num_vertices):
            return False
        return b in self._adjacency[a]

    def get_weight(self, a: int, b: int) -> float:
        if not self.contains_edge(a, b):
            raise KeyError(f"edge ({a}, {b}) not in graph")
        return self._adjacency[a][b]

    def neighbors(self, a: int) -> list[int]:
        self._check_vertex(a)
        return sorted(self._adjacency[a])

    def edges(self) -> Iterator[tuple[int, int, float]]:
        """Yield (a, b, weight) with a < b, sorted by (a, b)."""
        for a in range(self._num_vertices):
            for b in sorted(self._adjacency[a]):
                if a < b:
                    yield a, b, self._adjacency[a][b]

    def edge_arrays(self) -> tuple[np.ndarray, np.ndarray]:
        pairs = np.empty((self._num_edges, 2), dtype=np.int64)
        weights = np.empty(self._num_edges, dtype=np.float64)
        for idx, (a, b, w) in enumerate(self.edges()):
            pairs[idx, 0] = a
            pairs[idx, 1] = b
            weights[idx] = w
        return pairs, weights

    def to_sparse(self) -> csr_matrix:
        """
        Symmetric weighted adjacency matrix. Zero-weight edges are kept as
        explicit zeros, so use the sparsity pattern to test for edges.
        """
        pairs, weights = self.edge_arrays()
        rows = np.concatenate([pairs[:, 0], pairs[:, 1]])
        cols = np.concatenate([pairs[:, 1], pairs[:, 0]])
        data = np.concatenate([weights, weights])
        return coo_matrix(
            (data, (rows, cols)), shape=(self._num_vertices, self._num_vertices)
        ).tocsr()

    def __repr__(self) -> str:
        return (
            f"UndirectedWeightedGraph(num_vertices={self._num_vertices}, "
            f"num_edges={self._num_edges})"
        )
