# Copyright 2025 Zhiyuan Yu (Heemskerk's lab, University of Michigan)
import numpy as np


class LazyWitnessError(Exception):
    """Base class for errors raised while building a lazy witness complex."""


class InvalidParameterError(LazyWitnessError, ValueError):
    """A size, rank or cutoff argument is outside its admissible range."""


class NullReferenceError(LazyWitnessError, TypeError):
    """A required collaborator (metric space, landmark selector) is missing."""


class InvalidMetricError(LazyWitnessError, ValueError):
    """The metric space returned a negative or NaN distance."""


def verify_non_null(value, name: str) -> None:
    if value is None:
        raise NullReferenceError(f"{name} must not be None")


def verify_distances(distances) -> None:
    distances = np.asarray(distances)
    if np.isnan(distances).any():
        raise InvalidMetricError("metric space returned a NaN distance")
    if (distances < 0).any():
        raise InvalidMetricError(
            f"metric space returned a negative distance ({distances.min()})"
        )
