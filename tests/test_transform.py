"""
Unit tests for the multi-level Haar transform.
"""

import numpy as np
import pytest

from haarsearch import InvalidDimensionsError, band_of, haar_transform, max_levels


class TestSingleLevel:
    """Test one decomposition level against hand-computed values."""

    def test_known_2x2_values(self):
        """Test a 2x2 block splits into LL, HL, LH, HH coefficients."""
        img = np.array([[1.0, 2.0], [3.0, 4.0]])

        out = haar_transform(img, 1)

        expected = np.array([[5.0, -1.0], [-2.0, 0.0]])
        np.testing.assert_allclose(out, expected, atol=1e-12)

    def test_constant_image_scenario(self):
        """Test a 4x4 constant image puts all energy into the approximation band."""
        img = np.full((4, 4), 100.0)

        out = haar_transform(img, 1)

        # Two orthonormal low-pass steps: 100 * sqrt(2) * sqrt(2)
        np.testing.assert_allclose(out[:2, :2], 200.0)
        np.testing.assert_allclose(out[:2, 2:], 0.0, atol=1e-9)
        np.testing.assert_allclose(out[2:, :], 0.0, atol=1e-9)

    def test_vertical_edge_goes_to_hl(self):
        """Test alternating columns produce only top-right detail coefficients."""
        img = np.tile([10.0, 0.0], (4, 2))

        out = haar_transform(img, 1)

        assert np.all(np.abs(out[:2, 2:]) > 1.0)
        np.testing.assert_allclose(out[2:, :], 0.0, atol=1e-12)


class TestEnergyConservation:
    """Test the transform is orthonormal (Parseval)."""

    @pytest.mark.parametrize("levels", [1, 2, 3])
    def test_energy_preserved(self, levels):
        """Test the sum of squares is unchanged by the transform."""
        rng = np.random.default_rng(0)
        img = rng.uniform(0, 255, (16, 32))

        out = haar_transform(img, levels)

        assert np.sum(out**2) == pytest.approx(np.sum(img**2), rel=1e-10)


class TestMultiLevel:
    """Test nested quadrant layout across levels."""

    def test_detail_bands_carried_forward(self):
        """Test first-level detail quadrants are untouched by the second level."""
        rng = np.random.default_rng(1)
        img = rng.uniform(0, 255, (8, 8))

        one = haar_transform(img, 1)
        two = haar_transform(img, 2)

        np.testing.assert_allclose(two[:, 4:], one[:, 4:])
        np.testing.assert_allclose(two[4:, :], one[4:, :])

    def test_second_level_transforms_ll_quadrant(self):
        """Test the second level equals a single level on the LL quadrant."""
        rng = np.random.default_rng(2)
        img = rng.uniform(0, 255, (8, 8))

        one = haar_transform(img, 1)
        two = haar_transform(img, 2)

        np.testing.assert_allclose(two[:4, :4], haar_transform(one[:4, :4], 1))

    def test_zero_levels_returns_copy(self):
        """Test levels=0 returns an equal but distinct array."""
        img = np.arange(16, dtype=np.float64).reshape(4, 4)

        out = haar_transform(img, 0)

        np.testing.assert_array_equal(out, img)
        assert out is not img

    def test_input_not_mutated(self):
        """Test the input image is never written to."""
        img = np.arange(64, dtype=np.float64).reshape(8, 8)
        original = img.copy()

        haar_transform(img, 3)

        np.testing.assert_array_equal(img, original)

    def test_integer_input_accepted(self):
        """Test uint8 images are converted to float output."""
        img = np.full((4, 4), 7, dtype=np.uint8)

        out = haar_transform(img, 2)

        assert out.dtype == np.float64
        assert out[0, 0] == pytest.approx(28.0)

    def test_deterministic(self):
        """Test repeated transforms are bit-identical."""
        rng = np.random.default_rng(3)
        img = rng.normal(size=(16, 16))

        np.testing.assert_array_equal(haar_transform(img, 3), haar_transform(img, 3))


class TestDimensions:
    """Test validation and legacy truncation of image sizes."""

    def test_rejects_non_divisible_size(self):
        """Test strict mode rejects sizes not divisible by 2^levels."""
        img = np.zeros((6, 6))

        with pytest.raises(InvalidDimensionsError):
            haar_transform(img, 2)

    def test_accepts_divisible_size(self):
        """Test 6x6 is fine for a single level."""
        out = haar_transform(np.ones((6, 6)), 1)
        assert out.shape == (6, 6)

    def test_truncate_drops_unpaired_column(self):
        """Test truncation mode zeroes the trailing odd column."""
        img = np.full((4, 5), 3.0)

        out = haar_transform(img, 1, truncate=True)

        np.testing.assert_allclose(out[:, 4], 0.0)
        np.testing.assert_allclose(out[:2, :2], 6.0)

    def test_truncate_drops_unpaired_row(self):
        """Test truncation mode zeroes the trailing odd row."""
        img = np.full((5, 4), 3.0)

        out = haar_transform(img, 1, truncate=True)

        np.testing.assert_allclose(out[4, :], 0.0)

    def test_truncate_deeper_than_side(self):
        """Test levels beyond log2 of a side leave no untransformed pixels behind."""
        rng = np.random.default_rng(10)
        img = rng.uniform(1, 255, (13, 6))

        out = haar_transform(img, 3, truncate=True)

        # The third level has a 1-pixel-wide active region: no pairs, all zero
        assert band_of(0, 0, 6, 13, 3) == 1
        np.testing.assert_array_equal(out[:3, 0], 0.0)
        # Second-level details survive
        assert np.any(out[:3, 1:3] != 0.0)

    def test_negative_levels_rejected(self):
        """Test negative level counts raise ValueError."""
        with pytest.raises(ValueError, match="levels"):
            haar_transform(np.zeros((4, 4)), -1)

    def test_non_2d_rejected(self):
        """Test color or 1D inputs raise ValueError."""
        with pytest.raises(ValueError, match="2D"):
            haar_transform(np.zeros((4, 4, 3)), 1)

    @pytest.mark.parametrize(
        ("nx", "ny", "expected"),
        [(16, 16, 4), (8, 12, 2), (7, 8, 0), (64, 32, 5)],
    )
    def test_max_levels(self, nx, ny, expected):
        """Test the deepest valid decomposition for a size."""
        assert max_levels(nx, ny) == expected
