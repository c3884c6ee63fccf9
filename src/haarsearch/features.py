#!/usr/bin/env python3
"""Per-subband energy and entropy features of Haar-decomposed images."""

from __future__ import annotations

from typing import Literal

import numpy as np
import numpy.typing as npt

from .bands import band_count, band_map
from .models import Descriptor, FeatureVector
from .transform import haar_transform

NormalizationMode = Literal["minmax", "offset", "none"]

NORMALIZATION_MODES: tuple[str, ...] = ("minmax", "offset", "none")

# Target range of the min-max stretch
_RANGE_MAX = 255.0
_FLAT_VALUE = _RANGE_MAX / 2
# Legacy mode shifts signed coefficients by a constant instead of stretching
_LEGACY_OFFSET = 128.0


def normalize(
    image: npt.ArrayLike, mode: NormalizationMode = "minmax"
) -> npt.NDArray[np.float64]:
    """Rescale intensities before feature extraction.

    Modes:
        - "minmax": stretch to [0, 255] using the observed min and max.
          A flat image (max == min) maps to 127.5 everywhere.
        - "offset": legacy variant, adds 128 to every value.
        - "none": values are copied unchanged.

    Args:
        image: 2D array of intensities (typically a decomposed image).
        mode: Normalization mode.

    Returns:
        New float64 array.

    Raises:
        ValueError: If mode is unknown.
    """
    data = np.array(image, dtype=np.float64)

    if mode == "minmax":
        lo = float(data.min())
        hi = float(data.max())
        if hi == lo:
            data.fill(_FLAT_VALUE)
            return data
        return (data - lo) / (hi - lo) * _RANGE_MAX
    if mode == "offset":
        return data + _LEGACY_OFFSET
    if mode == "none":
        return data
    msg = f"Unknown normalization mode: {mode}"
    raise ValueError(msg)


def extract_features(decomposed: npt.ArrayLike, levels: int) -> FeatureVector:
    """Aggregate energy and entropy per subband.

    For every pixel P of band b::

        energy[b]  += P**2
        entropy[b] += -P * ln(P)   (P > 0 only)

    The entropy term is an energy-weighted surprisal sum rather than a
    normalized Shannon entropy; non-positive values contribute nothing.

    Args:
        decomposed: Decomposed image with shape (ny, nx).
        levels: Number of levels the image was decomposed with.

    Returns:
        FeatureVector with 3 * levels + 1 bands.
    """
    data = np.asarray(decomposed, dtype=np.float64)
    if data.ndim != 2:  # noqa: PLR2004
        msg = f"decomposed image must be 2D (ny, nx), got shape {data.shape}"
        raise ValueError(msg)

    ny, nx = data.shape
    bands = band_map(nx, ny, levels).ravel()
    pixels = data.ravel()

    positive = pixels > 0
    safe = np.where(positive, pixels, 1.0)
    surprisal = np.where(positive, -pixels * np.log(safe), 0.0)

    n_bands = band_count(levels)
    energy = np.bincount(bands, weights=pixels * pixels, minlength=n_bands)
    entropy = np.bincount(bands, weights=surprisal, minlength=n_bands)

    return FeatureVector(
        energy=tuple(energy.tolist()), entropy=tuple(entropy.tolist())
    )


def describe(
    identifier: str,
    image: npt.ArrayLike,
    levels: int,
    normalization: NormalizationMode = "minmax",
    truncate: bool = False,
) -> Descriptor:
    """Build the descriptor of one image: transform, normalize, extract.

    Args:
        identifier: Name reported for the image.
        image: 2D grayscale intensities.
        levels: Number of decomposition levels.
        normalization: Mode passed to :func:`normalize`.
        truncate: Legacy truncation mode of the transform.

    Returns:
        Descriptor of the image.
    """
    decomposed = haar_transform(image, levels, truncate=truncate)
    normalized = normalize(decomposed, normalization)
    return Descriptor(identifier=identifier, features=extract_features(normalized, levels))
