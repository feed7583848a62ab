"""Error taxonomy for the pyskycompass package."""

from typing import Any


class SkyCompassError(Exception):
    """Base class for every error raised by pyskycompass."""


class InvalidDimensionsError(SkyCompassError, ValueError):
    """Raised when an image, sensor or buffer has unusable dimensions."""


class AngleOutOfBoundsError(SkyCompassError, ValueError):
    """Raised when an angle of polarization lies outside [-90, 90] degrees."""

    def __init__(self, angle: float) -> None:
        super().__init__(f'Angle of polarization {angle} deg is outside [-90, 90]')
        self.angle = angle


class DegreeOutOfBoundsError(SkyCompassError, ValueError):
    """Raised when a degree of polarization lies outside [0, 1]."""

    def __init__(self, degree: float) -> None:
        super().__init__(f'Degree of polarization {degree} is outside [0, 1]')
        self.degree = degree


class NonFiniteError(SkyCompassError, ValueError):
    """Raised when a NaN or infinite value reaches a polarization quantity."""


class ZeroIntensityError(SkyCompassError, ValueError):
    """Raised when a Stokes vector with S0 == 0 has no defined degree of polarization."""


class InvalidFocalLengthError(SkyCompassError, ValueError):
    """Raised when an optic is built with a non-positive focal length."""


class EmptySearchRangeError(SkyCompassError, ValueError):
    """Raised when a searcher is configured with nothing to search."""


class FrameMismatchError(SkyCompassError, TypeError):
    """Raised when quantities tagged with different reference frames are combined."""

    def __init__(self, expected: Any, actual: Any) -> None:
        super().__init__(
            f'Expected frame {getattr(expected, "__name__", expected)}, '
            f'got {getattr(actual, "__name__", actual)}'
        )
        self.expected = expected
        self.actual = actual


class MissingCoordinateError(SkyCompassError, ValueError):
    """Raised when a ray without a sensor coordinate is placed or transformed."""


class RayImageAssemblyError(SkyCompassError, ValueError):
    """Base class for errors raised while placing rays on a grid."""


class AmbiguousRayError(RayImageAssemblyError):
    """Raised when two rays land on the same pixel."""

    def __init__(self, row: int, col: int) -> None:
        super().__init__(f'More than one ray maps to pixel (row={row}, col={col})')
        self.row = row
        self.col = col


class OutOfBoundsRayError(RayImageAssemblyError):
    """Raised when a ray's sensor coordinate falls outside the sensor."""

    def __init__(self, coordinate: Any) -> None:
        super().__init__(f'Ray at {coordinate} does not map onto the sensor')
        self.coordinate = coordinate


class ZenithOutOfViewError(SkyCompassError, ValueError):
    """Raised when an operation needs the zenith pixel but the camera does not image it."""


class FailedToConvergeError(SkyCompassError, RuntimeError):
    """Raised when an iterative estimator exhausts its iterations above threshold."""

    def __init__(self, iterations: int, threshold: float, achieved: float) -> None:
        super().__init__(
            f'Failed to converge after {iterations} iterations: '
            f'gradient norm {achieved:.3e} above threshold {threshold:.3e}'
        )
        self.iterations = iterations
        self.threshold = threshold
        self.achieved = achieved


class NoValidCandidateError(SkyCompassError, RuntimeError):
    """Raised when no candidate orientation could be scored against the measurement."""
