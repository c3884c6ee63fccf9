#!/usr/bin/env python3
"""Exhaustive k-nearest-neighbour ranking of descriptors."""

from __future__ import annotations

from collections.abc import Collection, Sequence

import numpy as np
import numpy.typing as npt

from .errors import VectorLengthMismatchError
from .metrics import DistanceMetric, create_metric
from .models import Descriptor, RankedMatch


def _resolve_metric(metric: DistanceMetric | str) -> DistanceMetric:
    if isinstance(metric, str):
        return create_metric(metric)
    return metric


class CorpusIndex:
    """Raw feature matrix of a corpus with brute-force ranking.

    Every candidate is compared against the query. Candidates are ordered by
    a stable sort on distance, so equal distances keep corpus order and are
    never merged into one slot.
    """

    def __init__(self, descriptors: Sequence[Descriptor], metric: DistanceMetric | str = "l1"):
        """Build the feature matrix.

        Args:
            descriptors: Corpus descriptors, in corpus order
            metric: Distance metric instance or name

        Raises:
            VectorLengthMismatchError: If descriptors have different lengths
        """
        self.descriptors: list[Descriptor] = list(descriptors)
        self.metric = _resolve_metric(metric)
        self.identifiers: list[str] = [d.identifier for d in self.descriptors]

        if self.descriptors:
            expected = len(self.descriptors[0].features)
            for desc in self.descriptors[1:]:
                if len(desc.features) != expected:
                    msg = (
                        f"Descriptor '{desc.identifier}' has {len(desc.features)} bands, "
                        f"expected {expected}"
                    )
                    raise VectorLengthMismatchError(msg)
            self.matrix: npt.NDArray[np.float64] = np.vstack(
                [d.features.to_array() for d in self.descriptors]
            )
        else:
            self.matrix = np.empty((0, 0), dtype=np.float64)

    def __len__(self) -> int:
        return len(self.descriptors)

    def distances(self, reference: Descriptor) -> npt.NDArray[np.float64]:
        """Distance from the reference to every corpus entry, in corpus order."""
        if not self.descriptors:
            return np.empty(0, dtype=np.float64)
        return self.metric.compute_batch_distance(self.matrix, reference)

    def search(
        self, reference: Descriptor, k: int, exclude: Collection[int] | None = None
    ) -> list[RankedMatch]:
        """Return the k corpus entries closest to the reference.

        Args:
            reference: Query descriptor
            k: Number of neighbours (clamped to the corpus size; <= 0 gives [])
            exclude: Corpus positions to leave out of the result, if any

        Returns:
            Ranked matches ascending by distance
        """
        if k <= 0 or not self.descriptors:
            return []

        dists = self.distances(reference)
        order = np.argsort(dists, kind="stable")
        if exclude:
            skip = set(exclude)
            order = np.array([i for i in order if i not in skip], dtype=np.intp)

        return [
            RankedMatch(rank=pos + 1, distance=float(dists[i]), descriptor=self.descriptors[i])
            for pos, i in enumerate(order[:k])
        ]


def rank(
    reference: Descriptor,
    corpus: Sequence[Descriptor],
    metric: DistanceMetric | str,
    k: int,
) -> list[RankedMatch]:
    """Rank a corpus by distance to a reference descriptor.

    The reference itself is not excluded if it appears in the corpus.

    Args:
        reference: Query descriptor
        corpus: Candidate descriptors
        metric: Distance metric instance or name ("l1", "l2", "linf")
        k: Number of results to return

    Returns:
        At most k ranked matches; ties keep corpus order
    """
    return CorpusIndex(corpus, metric).search(reference, k)
