"""End-to-end wavelet similarity search over an image directory."""

import logging

from .config import Config
from .database import ImageDatabase, load_image
from .features import describe
from .models import Descriptor, RankedMatch, SearchReport
from .report import write_feature_matrix, write_ranking
from .search import CorpusIndex

logger = logging.getLogger(__name__)


class WaveletSearch:
    """Rank the images of a directory by wavelet similarity to a reference image."""

    def __init__(self, cfg: Config):
        """
        Initialize the search.

        Args:
            cfg: Configuration object (validated here)
        """
        cfg.validate()
        self.cfg = cfg
        self.reference: Descriptor | None = None
        self.database: ImageDatabase | None = None
        self.index: CorpusIndex | None = None

    def describe_reference(self) -> Descriptor:
        """Load and describe the reference image.

        Returns:
            Descriptor of the reference image.

        Raises:
            FileNotFoundError: If the reference image cannot be read.
        """
        img = load_image(self.cfg.reference)
        if img is None:
            msg = f"Could not read reference image: {self.cfg.reference}"
            raise FileNotFoundError(msg)

        self.reference = describe(
            self.cfg.reference.name,
            img,
            self.cfg.levels,
            normalization=self.cfg.normalization,
            truncate=self.cfg.truncate,
        )
        return self.reference

    def build_index(self) -> CorpusIndex:
        """Describe the corpus and build the search index.

        Raises:
            ValueError: If no image of the corpus could be described.
        """
        self.database = ImageDatabase(self.cfg)
        if not self.database.descriptors:
            msg = f"No usable images found in {self.cfg.image_dir}"
            raise ValueError(msg)
        self.index = CorpusIndex(self.database.descriptors, self.cfg.metric)
        return self.index

    def reference_positions(self) -> list[int]:
        """Corpus positions whose source file is the reference image itself.

        Matching is by resolved path, so a different image that merely shares
        the reference's file name is kept.
        """
        if self.database is None:
            return []
        target = self.cfg.reference.resolve()
        return [i for i, path in enumerate(self.database.paths) if path.resolve() == target]

    def process(self) -> SearchReport:
        """Run the search and write result files if an output directory is set.

        Returns:
            Search report with the ranked matches.
        """
        logger.info(f"Reference: {self.cfg.reference}")
        logger.info(f"Image folder: {self.cfg.image_dir}")
        logger.info(f"Levels: {self.cfg.levels}")
        logger.info(f"Metric: {self.cfg.metric}")
        logger.info(f"Normalization: {self.cfg.normalization}")
        logger.info(f"k: {self.cfg.k}")
        if self.cfg.truncate:
            logger.info("Truncation mode: ON (odd rows/columns are dropped)")

        reference = self.describe_reference()
        index = self.build_index()

        exclude = self.reference_positions() if self.cfg.exclude_reference else None
        matches: list[RankedMatch] = index.search(reference, self.cfg.k, exclude=exclude)
        logger.info(f"Ranked {len(index)} images, returning {len(matches)}")

        report = SearchReport(
            reference=reference,
            metric=self.cfg.metric,
            levels=self.cfg.levels,
            k=self.cfg.k,
            normalization=self.cfg.normalization,
            matches=matches,
        )

        if self.cfg.output_dir is not None:
            self.save_results(report)

        return report

    def save_results(self, report: SearchReport) -> None:
        """Write the feature matrix and the ranking to the output directory."""
        if self.cfg.output_dir is None:
            msg = "No output directory configured"
            raise ValueError(msg)
        if self.database is None:
            msg = "Corpus has not been built; call build_index() first"
            raise RuntimeError(msg)
        self.cfg.output_dir.mkdir(parents=True, exist_ok=True)

        features_path = self.cfg.output_dir / self.cfg.fn_features
        ranking_path = self.cfg.output_dir / self.cfg.fn_ranking
        write_feature_matrix(features_path, self.database.descriptors, self.cfg.levels)
        write_ranking(ranking_path, report)

        logger.info(f"Feature matrix saved to {features_path}")
        logger.info(f"Ranking saved to {ranking_path}")
