# Copyright 2025 Zhiyuan Yu (Heemskerk's lab, University of Michigan)
from .containers import LazyWitnessData, LazyWitnessParams
from .exceptions import (
    InvalidMetricError,
    InvalidParameterError,
    LazyWitnessError,
    NullReferenceError,
)
from .graph import UndirectedWeightedGraph
from .metric import (
    CallableMetricSpace,
    FiniteMetricSpace,
    PointCloudMetricSpace,
    PrecomputedMetricSpace,
)
