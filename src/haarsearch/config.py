#!/usr/bin/env python3
"""Configuration dataclass for the haarsearch pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .features import NORMALIZATION_MODES, NormalizationMode
from .metrics import METRICS, MetricType


@dataclass
class Config:
    """Main configuration for a wavelet similarity search."""

    # Required Settings
    reference: Path
    image_dir: Path
    output_dir: Path | None = None  # None = do not write result files

    # Algorithm Settings
    levels: int = 2
    k: int = 10
    metric: MetricType = "l1"
    normalization: NormalizationMode = "minmax"
    truncate: bool = False  # Legacy mode: drop unpaired rows/columns instead of rejecting

    # Search Settings
    exclude_reference: bool = False
    num_workers: int | None = None  # None = all CPUs, 1 = in-process
    extensions: tuple[str, ...] = (".png", ".jpg", ".jpeg", ".tif", ".tiff", ".bmp", ".pgm")

    # Output Filenames
    fn_features: str = "feature_matrix.tsv"
    fn_ranking: str = "ranking.json"

    def __post_init__(self) -> None:
        """Coerce path-like settings to Path objects."""
        self.reference = Path(self.reference)
        self.image_dir = Path(self.image_dir)
        if self.output_dir is not None:
            self.output_dir = Path(self.output_dir)
        self.metric = self.metric.lower()  # type: ignore[assignment]

    def validate(self) -> None:
        """Validate configuration parameters.

        Raises:
            ValueError: If any parameter is invalid.
        """
        if self.levels < 1:
            msg = f"levels must be >= 1, got {self.levels}"
            raise ValueError(msg)
        if self.k < 1:
            msg = f"k must be >= 1, got {self.k}"
            raise ValueError(msg)
        if self.metric not in METRICS:
            msg = f"metric must be one of {METRICS}, got {self.metric!r}"
            raise ValueError(msg)
        if self.normalization not in NORMALIZATION_MODES:
            msg = f"normalization must be one of {NORMALIZATION_MODES}, got {self.normalization!r}"
            raise ValueError(msg)
        if self.num_workers is not None and self.num_workers < 1:
            msg = f"num_workers must be >= 1, got {self.num_workers}"
            raise ValueError(msg)
