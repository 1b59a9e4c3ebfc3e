import numpy as np
import pytest
from anndata import AnnData
from pydantic import ValidationError

import lazywitness as lw
from lazywitness.data import LazyWitnessData


def _make_adata(n=80, seed=0):
    rng = np.random.default_rng(seed)
    theta = rng.uniform(0, 2 * np.pi, size=n)
    circle = np.stack([np.cos(theta), np.sin(theta)], axis=1)
    circle += rng.normal(scale=0.05, size=circle.shape)
    return AnnData(X=np.zeros((n, 3), dtype=np.float32), obsm={"X_pca": circle})


def test_lazy_witness_stores_result():
    adata = _make_adata()
    result = lw.tl.lazy_witness(adata, "pca", 12, nu=1, random_state=0)
    assert adata.uns["lazy_witness"] is result
    assert isinstance(result, LazyWitnessData)
    assert result.num_landmarks == 12
    assert len(set(result.landmark_indices)) == 12
    assert result.num_edges == 12 * 11 // 2
    assert result.edges_global.max() < adata.n_obs
    assert result.to_sparse().shape == (12, 12)
    assert result.params.nu == 1
    assert len(result.nu_distances) == adata.n_obs


def test_lazy_witness_cutoff_and_determinism():
    adata = _make_adata(seed=1)
    a = lw.tl.lazy_witness(adata, "pca", 10, max_distance=0.2, key_added="a")
    b = lw.tl.lazy_witness(adata, "pca", 10, max_distance=0.2, key_added="b")
    assert a.landmark_indices == b.landmark_indices
    np.testing.assert_array_equal(a.edge_weights, b.edge_weights)
    assert np.all(a.edge_weights <= 0.2)
    assert a.num_edges < 45


def test_lazy_witness_missing_embedding():
    with pytest.raises(ValueError):
        lw.tl.lazy_witness(_make_adata(), "umap", 5)


def test_lazy_witness_invalid_params():
    adata = _make_adata()
    with pytest.raises(ValidationError):
        lw.tl.lazy_witness(adata, "pca", 5, nu=5)
    with pytest.raises(ValidationError):
        lw.tl.lazy_witness(adata, "pca", 5, radius_policy="first_witness")
