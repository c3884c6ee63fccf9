#!/usr/bin/env python3
"""CLI interface for haarsearch."""

import argparse
import logging
import sys
from pathlib import Path

from .config import Config
from .database import load_image
from .features import NORMALIZATION_MODES
from .metrics import METRICS
from .processor import WaveletSearch
from .report import format_ranking
from .transform import max_levels


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="haarsearch",
        description="Rank images by Haar wavelet subband similarity to a reference image",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    parser.add_argument("reference", type=str, help="Path to the reference image")
    parser.add_argument("images", type=str, help="Path to folder containing images")

    parser.add_argument("--output", type=str, default=None,
                       help="Directory for the feature matrix and ranking files")
    parser.add_argument("--levels", type=int, default=2,
                       help="Number of wavelet decomposition levels")
    parser.add_argument("--k", type=int, default=10,
                       help="Number of nearest images to return")
    parser.add_argument("--metric", type=str, default="l1", choices=list(METRICS),
                       help="Distance metric between feature vectors")
    parser.add_argument("--normalization", type=str, default="minmax",
                       choices=list(NORMALIZATION_MODES),
                       help="Intensity normalization before feature extraction. "
                            "minmax=stretch to [0,255], offset=legacy +128 shift, "
                            "none=raw coefficients")
    parser.add_argument("--truncate", action="store_true",
                       help="Accept sizes not divisible by 2^levels by dropping "
                            "unpaired rows/columns (legacy behaviour)")
    parser.add_argument("--exclude-reference", action="store_true",
                       help="Leave the reference image out of the results")
    parser.add_argument("--num-workers", type=int, default=None,
                       help="Number of parallel workers (default: auto-detect CPU count)")
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for haarsearch.

    Parses command-line arguments and runs the search pipeline.
    """
    # Configure logging
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S"
    )

    args = build_parser().parse_args(argv)

    # Validate inputs
    if not Path(args.reference).is_file():
        print(f"Error: Reference image not found: {args.reference}")
        sys.exit(1)

    if not Path(args.images).is_dir():
        print(f"Error: Image folder not found: {args.images}")
        sys.exit(1)

    reference = load_image(Path(args.reference))
    if reference is None:
        print(f"Error: Could not read reference image: {args.reference}")
        sys.exit(1)

    ny, nx = reference.shape
    deepest = max_levels(nx, ny)
    if not args.truncate and args.levels > deepest:
        print(f"Error: --levels {args.levels} is too deep for a {nx}x{ny} reference image "
              f"(at most {deepest}; use --truncate to drop unpaired rows/columns)")
        sys.exit(1)

    cfg = Config(
        reference=Path(args.reference),
        image_dir=Path(args.images),
        output_dir=Path(args.output) if args.output else None,
        levels=args.levels,
        k=args.k,
        metric=args.metric,
        normalization=args.normalization,
        truncate=args.truncate,
        exclude_reference=args.exclude_reference,
        num_workers=args.num_workers,
    )

    try:
        search = WaveletSearch(cfg)
        report = search.process()
    except (ValueError, FileNotFoundError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(format_ranking(report.matches))


if __name__ == "__main__":
    main()
