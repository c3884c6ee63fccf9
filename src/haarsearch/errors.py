"""Exceptions raised by the wavelet transform and the distance metrics."""


class InvalidDimensionsError(ValueError):
    """Image dimensions are not divisible by 2**levels."""


class VectorLengthMismatchError(ValueError):
    """Two feature vectors of different lengths were compared."""
