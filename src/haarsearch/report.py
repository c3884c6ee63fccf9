"""Result writers: raw feature matrix and ranked list."""

import csv
from collections.abc import Sequence
from pathlib import Path

from .bands import band_count, band_label
from .models import Descriptor, RankedMatch, SearchReport


def feature_header(levels: int) -> list[str]:
    """Column names of the feature matrix for a given level count."""
    header = ["identifier"]
    for band in range(band_count(levels)):
        label = band_label(band, levels)
        header.extend((f"{label}_energy", f"{label}_entropy"))
    return header


def write_feature_matrix(path: Path, descriptors: Sequence[Descriptor], levels: int) -> None:
    """Write one tab-separated row of interleaved features per image.

    Args:
        path: Output file
        descriptors: Descriptors in corpus order
        levels: Decomposition levels (determines the header)
    """
    with path.open("w", newline="") as f:
        writer = csv.writer(f, delimiter="\t", lineterminator="\n")
        writer.writerow(feature_header(levels))
        for desc in descriptors:
            values = (repr(float(v)) for v in desc.features.to_array())
            writer.writerow([desc.identifier, *values])


def write_ranking(path: Path, report: SearchReport) -> None:
    """Write a search report as indented JSON."""
    path.write_text(report.model_dump_json(indent=2))


def format_ranking(matches: Sequence[RankedMatch]) -> str:
    """Fixed-width text table of a ranked result."""
    lines = [f"{'rank':>4}  {'distance':>16}  identifier"]
    lines.extend(
        f"{m.rank:>4}  {m.distance:>16.4f}  {m.descriptor.identifier}" for m in matches
    )
    return "\n".join(lines)
