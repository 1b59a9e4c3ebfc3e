import warnings

warnings.filterwarnings("ignore", category=FutureWarning, module="anndata")

from . import data
from . import preprocessing as pp
from . import tools as tl
from .computing import LazyWitnessStream
from .data import (
    InvalidMetricError,
    InvalidParameterError,
    NullReferenceError,
    PointCloudMetricSpace,
    PrecomputedMetricSpace,
    UndirectedWeightedGraph,
)
from .preprocessing import MaxMinLandmarkSelector
