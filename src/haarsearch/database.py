#!/usr/bin/env python3
"""Image corpus loading and descriptor building."""

from __future__ import annotations

import logging
from functools import partial
from pathlib import Path

import cv2
import numpy as np
import numpy.typing as npt
from tqdm import tqdm
from tqdm.contrib.concurrent import process_map

from .config import Config
from .errors import InvalidDimensionsError
from .features import NormalizationMode, describe
from .models import Descriptor

logger = logging.getLogger(__name__)


def load_image(path: Path) -> npt.NDArray[np.float64] | None:
    """Read an image as a single grayscale intensity channel.

    Color images are converted to grayscale; 16-bit images keep their depth.

    Args:
        path: Path to image file

    Returns:
        2D float64 array (ny, nx) or None if the file could not be decoded
    """
    img = cv2.imread(str(path), cv2.IMREAD_GRAYSCALE | cv2.IMREAD_ANYDEPTH)
    if img is None:
        return None
    return img.astype(np.float64)


def list_images(image_dir: Path, extensions: tuple[str, ...]) -> list[Path]:
    """Sorted list of files in ``image_dir`` with one of the given suffixes."""
    suffixes = {ext.lower() for ext in extensions}
    return sorted(f for f in image_dir.iterdir() if f.is_file() and f.suffix.lower() in suffixes)


def _worker_describe(
    path: Path,
    levels: int,
    normalization: NormalizationMode,
    truncate: bool,
) -> tuple[Descriptor | None, str | None]:
    """Worker function for parallel descriptor building.

    Args:
        path: Path to image file
        levels: Number of decomposition levels
        normalization: Normalization mode
        truncate: Legacy truncation mode

    Returns:
        Tuple of (descriptor, None) or (None, reason the image was skipped)
    """
    img = load_image(path)
    if img is None:
        return None, "unreadable"
    try:
        return describe(path.name, img, levels, normalization, truncate), None
    except InvalidDimensionsError as e:
        return None, str(e)


class ImageDatabase:
    """Descriptors of every readable image in a corpus directory."""

    def __init__(self, cfg: Config):
        """Scan the corpus directory and describe every image.

        Args:
            cfg: Configuration object
        """
        self.cfg = cfg
        self.descriptors: list[Descriptor] = []
        self.paths: list[Path] = []  # source file of each descriptor, same order
        self.skipped: dict[str, str] = {}

        self._build()

    def _build(self) -> None:
        files = list_images(self.cfg.image_dir, self.cfg.extensions)
        logger.info(f"Found {len(files)} images in {self.cfg.image_dir}")
        if not files:
            return

        worker = partial(
            _worker_describe,
            levels=self.cfg.levels,
            normalization=self.cfg.normalization,
            truncate=self.cfg.truncate,
        )

        if self.cfg.num_workers == 1:
            results = [worker(f) for f in tqdm(files, desc="Describing images")]
        else:
            results = process_map(
                worker,
                files,
                chunksize=8,
                max_workers=self.cfg.num_workers,
                desc="Describing images",
            )

        # process_map preserves input order, so corpus order follows the sorted listing
        for path, (descriptor, reason) in zip(files, results, strict=True):
            if descriptor is None:
                logger.warning(f"Skipping {path.name}: {reason}")
                self.skipped[path.name] = reason or "unknown"
            else:
                self.descriptors.append(descriptor)
                self.paths.append(path)

        logger.info(
            f"Described {len(self.descriptors)} images ({len(self.skipped)} skipped)"
        )

    def __len__(self) -> int:
        """Return number of described images."""
        return len(self.descriptors)
