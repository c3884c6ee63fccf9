#!/usr/bin/env python3
"""Mapping from pixel coordinates of a decomposed image to subband indices.

Band 0 is the coarsest approximation (LL). Bands 1..3 are the detail
subbands of the coarsest level and bands ``3*levels-2 .. 3*levels`` those of
the finest level, i.e. indices run coarse to fine, opposite to the order in
which the transform produces them.

Within a level the detail quadrants are numbered:
    1: top-right (HL)
    2: bottom-left (LH)
    3: bottom-right (HH)
"""

from __future__ import annotations

from functools import lru_cache

import numpy as np
import numpy.typing as npt

_QUADRANT_NAMES = ("LL", "HL", "LH", "HH")


def band_count(levels: int) -> int:
    """Number of subbands produced by a ``levels``-level decomposition."""
    return 3 * levels + 1


def band_of(x: int, y: int, nx: int, ny: int, levels: int) -> int:
    """Return the subband index of pixel (x, y).

    Args:
        x: Column of the pixel.
        y: Row of the pixel.
        nx: Width of the decomposed image.
        ny: Height of the decomposed image.
        levels: Number of decomposition levels.

    Returns:
        Band index in [0, 3 * levels].
    """
    for level in range(levels):
        div_x = nx // 2
        div_y = ny // 2
        right = x >= div_x
        bottom = y >= div_y
        if not right and not bottom:
            nx, ny = div_x, div_y
            continue
        local = int(right) + 2 * int(bottom)
        return (levels - level - 1) * 3 + local
    return 0


@lru_cache(maxsize=32)
def _cached_band_map(nx: int, ny: int, levels: int) -> npt.NDArray[np.intp]:
    ys, xs = np.indices((ny, nx))
    bands = np.zeros((ny, nx), dtype=np.intp)
    assigned = np.zeros((ny, nx), dtype=bool)

    w, h = nx, ny
    for level in range(levels):
        div_x = w // 2
        div_y = h // 2
        local = (xs >= div_x).astype(np.intp) + 2 * (ys >= div_y).astype(np.intp)
        terminal = ~assigned & (local > 0)
        bands[terminal] = (levels - level - 1) * 3 + local[terminal]
        assigned |= terminal
        w, h = div_x, div_y

    bands.setflags(write=False)
    return bands


def band_map(nx: int, ny: int, levels: int) -> npt.NDArray[np.intp]:
    """Lookup table of band indices for every pixel of an ``nx`` x ``ny`` image.

    The table is computed once per (nx, ny, levels) and shared, so it is
    returned read-only. ``band_map(nx, ny, levels)[y, x]`` equals
    ``band_of(x, y, nx, ny, levels)``.

    Args:
        nx: Image width.
        ny: Image height.
        levels: Number of decomposition levels.

    Returns:
        Integer array with shape (ny, nx).
    """
    if levels < 0:
        msg = f"levels must be >= 0, got {levels}"
        raise ValueError(msg)
    return _cached_band_map(nx, ny, levels)


def band_label(band: int, levels: int) -> str:
    """Short label for a band, e.g. ``"LL"`` or ``"L1-HL"`` (L1 = coarsest).

    Raises:
        ValueError: If band is outside [0, 3 * levels].
    """
    if not 0 <= band < band_count(levels):
        msg = f"band must be in [0, {3 * levels}], got {band}"
        raise ValueError(msg)
    if band == 0:
        return _QUADRANT_NAMES[0]
    level, local = divmod(band - 1, 3)
    return f"L{level + 1}-{_QUADRANT_NAMES[local + 1]}"
