"""Pydantic models for feature vectors, descriptors and search results."""

from collections.abc import Iterator

import numpy as np
import numpy.typing as npt
from pydantic import BaseModel, ConfigDict, Field, model_validator


class FeatureVector(BaseModel):
    """Per-subband energy and entropy of one decomposed image.

    Index ``i`` of both sequences belongs to band ``i`` as numbered by
    :func:`haarsearch.bands.band_of`.

    Attributes:
        energy: Sum of squared intensities per band.
        entropy: Sum of ``-P * ln(P)`` over positive intensities per band.
    """
    model_config = ConfigDict(frozen=True)

    energy: tuple[float, ...] = Field(min_length=1)
    entropy: tuple[float, ...] = Field(min_length=1)

    @model_validator(mode="after")
    def check_lengths(self) -> "FeatureVector":
        if len(self.energy) != len(self.entropy):
            msg = (
                f"energy and entropy must have the same length, "
                f"got {len(self.energy)} and {len(self.entropy)}"
            )
            raise ValueError(msg)
        return self

    def __len__(self) -> int:
        return len(self.energy)

    @property
    def levels(self) -> int:
        """Decomposition levels this vector was built with."""
        return (len(self.energy) - 1) // 3

    def pairs(self) -> Iterator[tuple[float, float]]:
        """Yield (energy, entropy) per band."""
        return zip(self.energy, self.entropy, strict=True)

    def to_array(self) -> npt.NDArray[np.float64]:
        """Interleaved ``[e0, h0, e1, h1, ...]`` vector used by the metrics."""
        return np.column_stack((self.energy, self.entropy)).ravel()


class Descriptor(BaseModel):
    """Image identifier paired with its feature vector.

    Attributes:
        identifier: Opaque name of the image (file name or path).
        features: Subband statistics of the image.
    """
    model_config = ConfigDict(frozen=True)

    identifier: str
    features: FeatureVector


class RankedMatch(BaseModel):
    """One entry of a ranked search result.

    Attributes:
        rank: 1-based position in the result.
        distance: Distance to the reference descriptor.
        descriptor: The matched corpus descriptor.
    """
    model_config = ConfigDict(frozen=True)

    rank: int = Field(ge=1)
    distance: float = Field(ge=0.0)
    descriptor: Descriptor


class SearchReport(BaseModel):
    """Everything a result sink needs to archive one search.

    Attributes:
        reference: Descriptor of the reference image.
        metric: Name of the distance metric used.
        levels: Number of decomposition levels.
        k: Requested number of neighbours.
        normalization: Normalization mode applied before feature extraction.
        matches: Ranked matches, ascending by distance.
    """
    reference: Descriptor
    metric: str
    levels: int = Field(ge=0)
    k: int
    normalization: str
    matches: list[RankedMatch]
