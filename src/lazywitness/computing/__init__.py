"""Witness-complex compute kernels used by the public API layer."""
# Copyright 2025 Zhiyuan Yu (Heemskerk's lab, University of Michigan)

from .witness import (
    LazyWitnessStream,
    compute_landmark_distances,
    compute_nu_distances,
    compute_witness_edge_weights,
)
