#!/usr/bin/env python3
"""Multi-level 2D Haar wavelet transform with in-place quadrant layout."""

from __future__ import annotations

import numpy as np
import numpy.typing as npt

from .errors import InvalidDimensionsError

SQRT2 = np.sqrt(2.0)

# Buffer slots
_CURRENT = 0
_SCRATCH = 1


def max_levels(nx: int, ny: int) -> int:
    """Largest level count for which both dimensions divide by 2**levels.

    Args:
        nx: Image width.
        ny: Image height.

    Returns:
        Number of levels (0 if either dimension is odd or not positive).
    """
    levels = 0
    while nx > 0 and ny > 0 and nx % 2 == 0 and ny % 2 == 0:
        nx //= 2
        ny //= 2
        levels += 1
    return levels


def check_dimensions(nx: int, ny: int, levels: int) -> None:
    """Raise if an ``nx`` x ``ny`` image cannot be decomposed ``levels`` times.

    Raises:
        InvalidDimensionsError: If nx or ny is not divisible by 2**levels.
    """
    factor = 2**levels
    if nx % factor or ny % factor or nx < factor or ny < factor:
        msg = (
            f"image of size {nx}x{ny} cannot be decomposed into {levels} levels: "
            f"both dimensions must be positive multiples of {factor}"
        )
        raise InvalidDimensionsError(msg)


def _split_columns(src: npt.NDArray[np.float64], dst: npt.NDArray[np.float64]) -> None:
    """Pair neighbouring columns of ``src`` into low | high halves of ``dst``."""
    half = src.shape[1] // 2
    a = src[:, 0 : 2 * half : 2]
    b = src[:, 1 : 2 * half : 2]
    dst[:, :half] = (a + b) / 2 * SQRT2
    dst[:, half : 2 * half] = (a - b) / 2 * SQRT2


def _split_rows(src: npt.NDArray[np.float64], dst: npt.NDArray[np.float64]) -> None:
    """Pair neighbouring rows of ``src`` into low / high halves of ``dst``."""
    half = src.shape[0] // 2
    a = src[0 : 2 * half : 2, :]
    b = src[1 : 2 * half : 2, :]
    dst[:half, :] = (a + b) / 2 * SQRT2
    dst[half : 2 * half, :] = (a - b) / 2 * SQRT2


def haar_transform(
    image: npt.ArrayLike, levels: int, truncate: bool = False
) -> npt.NDArray[np.float64]:
    """Compute the multi-level orthonormal Haar decomposition of an image.

    Each level splits the active region into LL | HL over LH | HH quadrants
    and the next level works on the LL quadrant only. Already finalized
    detail quadrants are carried forward unchanged, so the result has the
    same shape as the input with the coarsest approximation in the top-left
    ``nx / 2**levels`` x ``ny / 2**levels`` corner.

    Args:
        image: 2D array of intensities with shape (ny, nx). Never modified.
        levels: Number of decomposition levels (0 returns a copy).
        truncate: Legacy compatibility mode. Instead of rejecting dimensions
            not divisible by 2**levels, drop the unpaired trailing row or
            column of each active region (it becomes 0 in the result).

    Returns:
        New float64 array holding the decomposed image.

    Raises:
        ValueError: If levels is negative or the image is not 2D.
        InvalidDimensionsError: If dimensions are invalid and truncate is False.
    """
    if levels < 0:
        msg = f"levels must be >= 0, got {levels}"
        raise ValueError(msg)

    src = np.asarray(image, dtype=np.float64)
    if src.ndim != 2:  # noqa: PLR2004
        msg = f"image must be 2D (ny, nx), got shape {src.shape}"
        raise ValueError(msg)

    ny, nx = src.shape
    if not truncate:
        check_dimensions(nx, ny, levels)

    # Slot _CURRENT holds the running decomposition, _SCRATCH the vertical split
    buffers = np.zeros((2, ny, nx), dtype=np.float64)
    buffers[_CURRENT] = src
    current = buffers[_CURRENT]
    scratch = buffers[_SCRATCH]

    for level in range(levels):
        w = nx >> level
        h = ny >> level

        # An active region narrower or shorter than 2 has no pairs left and
        # ends up all zero, like the remaining regions in truncation mode
        scratch[:h, :w] = 0.0
        _split_columns(current[:h, :w], scratch[:h, :w])

        current[:h, :w] = 0.0
        _split_rows(scratch[:h, :w], current[:h, :w])

    return buffers[_CURRENT].copy()
