#!/usr/bin/env python3
"""Content-based image retrieval with multi-level Haar wavelet descriptors."""

from __future__ import annotations

__version__ = "0.1.0"

# Core components
from .bands import band_count, band_label, band_map, band_of
from .errors import InvalidDimensionsError, VectorLengthMismatchError
from .features import describe, extract_features, normalize
from .models import Descriptor, FeatureVector, RankedMatch, SearchReport
from .search import CorpusIndex, rank
from .transform import haar_transform, max_levels

# Metrics
from .metrics import (
    METRICS,
    DistanceMetric,
    L1Distance,
    L2Distance,
    LInfDistance,
    create_metric,
)

# Pipeline
from .config import Config
from .database import ImageDatabase, load_image
from .processor import WaveletSearch

__all__ = [
    # Version
    "__version__",
    # Transform and bands
    "haar_transform",
    "max_levels",
    "band_of",
    "band_map",
    "band_count",
    "band_label",
    # Features
    "normalize",
    "extract_features",
    "describe",
    # Models
    "FeatureVector",
    "Descriptor",
    "RankedMatch",
    "SearchReport",
    # Errors
    "InvalidDimensionsError",
    "VectorLengthMismatchError",
    # Metrics
    "METRICS",
    "DistanceMetric",
    "L1Distance",
    "L2Distance",
    "LInfDistance",
    "create_metric",
    # Search
    "CorpusIndex",
    "rank",
    # Pipeline
    "Config",
    "ImageDatabase",
    "load_image",
    "WaveletSearch",
]
