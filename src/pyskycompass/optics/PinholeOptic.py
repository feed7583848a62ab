"""Ideal pinhole lens."""

from math import atan2, cos, degrees, hypot, isfinite, radians, sin, tan
from typing import Optional, Tuple

from numpy.typing import NDArray
from numpy import float64, arctan2, hypot as array_hypot, rad2deg

from pyskycompass.exceptions import InvalidFocalLengthError
from pyskycompass.sensor.Coordinates import SensorCoordinate
from pyskycompass.optics.Optic import Optic, RayDirection


class PinholeOptic(Optic):
    """Rectilinear projection with the sensor at z = -focal length.

    The optical axis looks along body -Z, so the sensor center sees polar
    angle 180 degrees and directions with polar <= 90 degrees are never imaged.
    """

    __focal_length_micrometers: float

    def __init__(self, focal_length_micrometers: float) -> None:
        """Initialize the pinhole.

        Args:
            focal_length_micrometers: Focal length in micrometers.

        Raises:
            InvalidFocalLengthError: If the focal length is not a positive finite number.
        """
        if not isfinite(focal_length_micrometers) or focal_length_micrometers <= 0:
            raise InvalidFocalLengthError(f'Focal length must be positive, got {focal_length_micrometers}')
        self.__focal_length_micrometers = float(focal_length_micrometers)

    @property
    def focal_length_micrometers(self) -> float:
        """Return the focal length.

        Returns:
            Focal length in micrometers.
        """
        return self.__focal_length_micrometers

    def trace_backward(self, coordinate: SensorCoordinate) -> RayDirection:
        return RayDirection(
            polar_deg=degrees(atan2(hypot(coordinate.x, coordinate.y), -self.__focal_length_micrometers)),
            azimuth_deg=degrees(atan2(coordinate.y, coordinate.x)),
        )

    def trace_forward(self, direction: RayDirection) -> Optional[SensorCoordinate]:
        if not 90.0 < direction.polar_deg <= 180.0:
            return None
        radius: float = -self.__focal_length_micrometers * tan(radians(direction.polar_deg))
        azimuth: float = radians(direction.azimuth_deg)
        return SensorCoordinate(x=radius * cos(azimuth), y=radius * sin(azimuth))

    def trace_backward_array(
            self,
            x: NDArray[float64],
            y: NDArray[float64]
    ) -> Tuple[NDArray[float64], NDArray[float64]]:
        polar: NDArray[float64] = rad2deg(arctan2(array_hypot(x, y), -self.__focal_length_micrometers))
        azimuth: NDArray[float64] = rad2deg(arctan2(y, x))
        return polar, azimuth

    def __repr__(self) -> str:
        return f'PinholeOptic({self.__focal_length_micrometers})'
