"""
Unit tests for the L1, L2 and L-infinity distance metrics.
"""

import numpy as np
import pytest

from haarsearch import (
    METRICS,
    Descriptor,
    FeatureVector,
    L1Distance,
    L2Distance,
    LInfDistance,
    VectorLengthMismatchError,
    create_metric,
)
from haarsearch.metrics import _ElementwiseMetric


def make_features(energy, entropy=None) -> FeatureVector:
    """Build a feature vector, with zero entropy unless given."""
    if entropy is None:
        entropy = [0.0] * len(energy)
    return FeatureVector(energy=tuple(energy), entropy=tuple(entropy))


class TestKnownDistances:
    """Test each metric against hand-computed values."""

    a = np.array([0.0, 0.0, 0.0])
    b = np.array([1.0, -2.0, 2.0])

    def test_l1(self):
        """Test L1 is the sum of absolute differences."""
        assert L1Distance().compute_distance(self.a, self.b) == pytest.approx(5.0)

    def test_l2(self):
        """Test L2 is the Euclidean length of the difference."""
        assert L2Distance().compute_distance(self.a, self.b) == pytest.approx(3.0)

    def test_linf(self):
        """Test L-infinity is the largest absolute difference."""
        assert LInfDistance().compute_distance(self.a, self.b) == pytest.approx(2.0)

    @pytest.mark.parametrize("name", METRICS)
    def test_identical_descriptors_distance_zero(self, name):
        """Test identical feature vectors are at distance 0 for every metric."""
        fv = make_features([1.5, 2.5, 3.5, 4.5], [0.1, 0.2, 0.3, 0.4])
        d1 = Descriptor(identifier="a", features=fv)
        d2 = Descriptor(identifier="b", features=fv)

        assert create_metric(name).compute_distance(d1, d2) == 0.0

    def test_feature_vectors_are_interleaved(self):
        """Test entropy values take part in the comparison."""
        fv1 = make_features([1.0], [0.0])
        fv2 = make_features([1.0], [3.0])

        assert L1Distance().compute_distance(fv1, fv2) == pytest.approx(3.0)


class TestMetricLaws:
    """Test non-negativity, symmetry and the triangle inequality."""

    @pytest.mark.parametrize("name", METRICS)
    def test_laws_on_random_vectors(self, name):
        """Test metric axioms over many random triples."""
        metric = create_metric(name)
        rng = np.random.default_rng(8)

        for _ in range(50):
            a, b, c = rng.normal(scale=100.0, size=(3, 14))

            dab = metric.compute_distance(a, b)
            assert dab >= 0.0
            assert metric.compute_distance(a, a) == 0.0
            assert dab == pytest.approx(metric.compute_distance(b, a))
            assert dab <= metric.compute_distance(a, c) + metric.compute_distance(c, b) + 1e-9


class TestBatchDistance:
    """Test vectorized distances against the scalar version."""

    @pytest.mark.parametrize("name", METRICS)
    def test_batch_matches_scalar(self, name):
        """Test each batch row equals the pairwise distance."""
        metric = create_metric(name)
        rng = np.random.default_rng(9)
        vecs = rng.uniform(size=(6, 8))
        query = rng.uniform(size=8)

        batch = metric.compute_batch_distance(vecs, query)

        expected = [metric.compute_distance(v, query) for v in vecs]
        np.testing.assert_allclose(batch, expected)

    def test_empty_batch(self):
        """Test an empty batch gives an empty result."""
        out = L2Distance().compute_batch_distance(np.empty((0, 4)), np.zeros(4))

        assert out.shape == (0,)


class TestLengthMismatch:
    """Test vectors of different lengths are rejected."""

    @pytest.mark.parametrize("name", METRICS)
    def test_scalar_mismatch(self, name):
        """Test pairwise comparison fails fast on different lengths."""
        one_level = make_features([1.0] * 4)
        two_levels = make_features([1.0] * 7)

        with pytest.raises(VectorLengthMismatchError):
            create_metric(name).compute_distance(one_level, two_levels)

    def test_batch_mismatch(self):
        """Test batch comparison fails fast on different lengths."""
        with pytest.raises(VectorLengthMismatchError):
            L1Distance().compute_batch_distance(np.zeros((3, 8)), np.zeros(14))

    def test_mismatch_is_value_error(self):
        """Test callers catching ValueError also catch the mismatch."""
        with pytest.raises(ValueError):
            L1Distance().compute_distance([1.0, 2.0], [1.0])


class TestCreateMetric:
    """Test selection of metrics by name."""

    @pytest.mark.parametrize(
        ("name", "cls"),
        [("l1", L1Distance), ("L2", L2Distance), ("linf", LInfDistance), ("LINF", LInfDistance)],
    )
    def test_known_names(self, name, cls):
        """Test names map to metric classes, case-insensitively."""
        metric = create_metric(name)

        assert isinstance(metric, cls)
        assert metric.name == name.lower()

    def test_unknown_name(self):
        """Test unknown names raise ValueError."""
        with pytest.raises(ValueError, match="Unknown metric"):
            create_metric("cosine")


class TestMetricBase:
    """Test the shared metric base class."""

    def test_subclass_without_reduce_cannot_be_created(self):
        """Test a metric missing its reduction fails at instantiation."""

        class Incomplete(_ElementwiseMetric):
            name = "incomplete"

        with pytest.raises(TypeError):
            Incomplete()
