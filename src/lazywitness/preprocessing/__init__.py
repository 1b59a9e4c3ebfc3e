# Copyright 2025 Zhiyuan Yu (Heemskerk's lab, University of Michigan)
from .landmarks import (
    ExplicitLandmarkSelector,
    LandmarkSelector,
    MaxMinLandmarkSelector,
    RandomLandmarkSelector,
    maxmin_sample,
)

__all__ = [
    "ExplicitLandmarkSelector",
    "LandmarkSelector",
    "MaxMinLandmarkSelector",
    "RandomLandmarkSelector",
    "maxmin_sample",
]
