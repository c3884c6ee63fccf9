#!/usr/bin/env python3
"""Distance metrics between subband feature vectors."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Literal, Protocol, Union

import numpy as np
import numpy.typing as npt

from .errors import VectorLengthMismatchError
from .models import Descriptor, FeatureVector

MetricType = Literal["l1", "l2", "linf"]

VectorLike = Union[FeatureVector, Descriptor, npt.ArrayLike]


def as_vector(vec: VectorLike) -> npt.NDArray[np.float64]:
    """Convert a descriptor, feature vector or array to a flat float64 vector."""
    if isinstance(vec, Descriptor):
        return vec.features.to_array()
    if isinstance(vec, FeatureVector):
        return vec.to_array()
    return np.asarray(vec, dtype=np.float64).ravel()


def _check_lengths(len1: int, len2: int) -> None:
    if len1 != len2:
        msg = (
            f"Cannot compare feature vectors of different lengths ({len1} vs {len2}); "
            "were they built with the same number of levels?"
        )
        raise VectorLengthMismatchError(msg)


class DistanceMetric(Protocol):
    """Protocol defining the interface for distance metrics."""

    name: str

    def compute_distance(self, vec1: VectorLike, vec2: VectorLike) -> float:
        """Compute distance between two feature vectors.

        Args:
            vec1: First feature vector
            vec2: Second feature vector

        Returns:
            Distance score (lower = more similar)
        """
        ...

    def compute_batch_distance(
        self, vecs: npt.ArrayLike, query: VectorLike
    ) -> npt.NDArray[np.float64]:
        """Compute distances between multiple vectors and a query.

        Args:
            vecs: Array of interleaved feature vectors (N, dims)
            query: Query feature vector (dims,)

        Returns:
            Array of distances (N,)
        """
        ...


class _ElementwiseMetric(ABC):
    """Shared plumbing: validate shapes, then reduce absolute differences."""

    name = ""

    @abstractmethod
    def _reduce(self, abs_diff: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        """Collapse each row of absolute differences to one distance."""

    def compute_distance(self, vec1: VectorLike, vec2: VectorLike) -> float:
        a = as_vector(vec1)
        b = as_vector(vec2)
        _check_lengths(a.size, b.size)
        return float(self._reduce(np.abs(a - b)[np.newaxis, :])[0])

    def compute_batch_distance(
        self, vecs: npt.ArrayLike, query: VectorLike
    ) -> npt.NDArray[np.float64]:
        q = as_vector(query)
        mat = np.asarray(vecs, dtype=np.float64)
        if mat.ndim == 1:
            mat = mat.reshape(1, -1) if mat.size else mat.reshape(0, q.size)
        _check_lengths(mat.shape[1], q.size)
        if mat.shape[0] == 0:
            return np.empty(0, dtype=np.float64)
        return self._reduce(np.abs(mat - q))


class L1Distance(_ElementwiseMetric):
    """Manhattan distance: sum of absolute differences."""

    name = "l1"

    def _reduce(self, abs_diff: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        return abs_diff.sum(axis=1)


class L2Distance(_ElementwiseMetric):
    """Euclidean distance: square root of the sum of squared differences."""

    name = "l2"

    def _reduce(self, abs_diff: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        return np.sqrt(np.einsum("ij,ij->i", abs_diff, abs_diff))


class LInfDistance(_ElementwiseMetric):
    """Chebyshev distance: largest absolute difference."""

    name = "linf"

    def _reduce(self, abs_diff: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        return abs_diff.max(axis=1)


_METRIC_CLASSES: dict[str, type[_ElementwiseMetric]] = {
    "l1": L1Distance,
    "l2": L2Distance,
    "linf": LInfDistance,
}

METRICS: tuple[str, ...] = tuple(_METRIC_CLASSES)


def create_metric(name: str) -> DistanceMetric:
    """Factory function to create a distance metric by name.

    Args:
        name: One of "l1", "l2", "linf" (case-insensitive)

    Returns:
        Distance metric instance

    Raises:
        ValueError: If metric name is unknown
    """
    key = name.lower()
    if key not in _METRIC_CLASSES:
        msg = f"Unknown metric type: {name} (expected one of {', '.join(METRICS)})"
        raise ValueError(msg)
    return _METRIC_CLASSES[key]()
