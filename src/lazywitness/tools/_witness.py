# Copyright 2025 Zhiyuan Yu (Heemskerk's lab, University of Michigan)
from __future__ import annotations

import math

from anndata import AnnData
from pydantic import ConfigDict, validate_call

from ..computing.witness import LazyWitnessStream
from ..data.constants import (
    DEFAULT_MAX_DIMENSION,
    DEFAULT_NU,
    DEFAULT_NUM_DIVISIONS,
    DEFAULT_R,
    DEFAULT_RADIUS_POLICY,
)
from ..data.containers import LazyWitnessData, LazyWitnessParams
from ..data.metric import PointCloudMetricSpace
from ..data.types import (
    Diameter_t,
    EmbeddingMethod,
    NeighborRank,
    NumDivisions,
    RadiusPolicy,
    Size_t,
    SizeLandmarks,
)
from ..preprocessing.landmarks import MaxMinLandmarkSelector

__all__ = ["lazy_witness"]


@validate_call(config=ConfigDict(arbitrary_types_allowed=True))
def lazy_witness(
    adata: AnnData,
    embedding_method: EmbeddingMethod,
    n_landmarks: SizeLandmarks,
    *,
    nu: NeighborRank = DEFAULT_NU,
    max_distance: Diameter_t = math.inf,
    max_dimension: Size_t = DEFAULT_MAX_DIMENSION,
    num_divisions: NumDivisions = DEFAULT_NUM_DIVISIONS,
    R: float = DEFAULT_R,
    radius_policy: RadiusPolicy = DEFAULT_RADIUS_POLICY,
    metric: str = "euclidean",
    random_state: int | None = 0,
    key_added: str = "lazy_witness",
    verbose: bool = False,
) -> LazyWitnessData:
    """
    Select landmarks by max-min sampling on an embedding and build the weighted
    1-skeleton of the lazy witness complex; store it in adata.uns[key_added].

    Args:
        adata: AnnData object containing the data
        embedding_method: which embedding to use from adata.obsm
        n_landmarks: number of landmarks
        nu: neighbor rank used for the witness offsets m_k
        max_distance: keep edges whose witness radius does not exceed this
        radius_policy: how the witness radius is derived from the witness scan
        metric: any metric accepted by scipy.spatial.distance.cdist
        random_state: seed for the first landmark

    Returns:
        LazyWitnessData with landmark indices into adata.obs and local edges
    """
    if f"X_{embedding_method}" not in adata.obsm:
        raise ValueError(f"Embedding X_{embedding_method} does not exist in adata")

    params = LazyWitnessParams(
        embedding_method=embedding_method,
        metric=metric,
        n_landmarks=n_landmarks,
        nu=nu,
        R=R,
        max_distance=max_distance,
        max_dimension=max_dimension,
        num_divisions=num_divisions,
        radius_policy=radius_policy,
        random_state=random_state,
    )

    metric_space = PointCloudMetricSpace(
        adata.obsm[f"X_{embedding_method}"], metric=metric
    )
    selector = MaxMinLandmarkSelector(
        metric_space, n_landmarks, random_state=random_state, verbose=verbose
    )
    stream = LazyWitnessStream(
        metric_space,
        selector,
        max_dimension=max_dimension,
        max_distance=max_distance,
        nu=nu,
        R=R,
        num_divisions=num_divisions,
        radius_policy=radius_policy,
        verbose=verbose,
    )
    edges, edge_weights = stream.graph.edge_arrays()

    data = LazyWitnessData(
        params=params,
        landmark_indices=selector.to_list(),
        max_min_distances=selector.max_min_distances.tolist(),
        covering_radius=selector.covering_radius(),
        nu_distances=stream.nu_distances,
        edges=edges,
        edge_weights=edge_weights,
    )
    adata.uns[key_added] = data
    return data
