"""A single polarization measurement along one viewing direction."""

from dataclasses import dataclass
from math import atan2, degrees
from typing import Generic, Optional, Type

from pyskycompass.light.Aop import Aop
from pyskycompass.light.Dop import Dop
from pyskycompass.light.Frame import F, Frame
from pyskycompass.exceptions import MissingCoordinateError
from pyskycompass.sensor.Coordinates import SensorCoordinate


@dataclass(frozen=True)
class Ray(Generic[F]):
    """Angle and degree of polarization, optionally tied to the sensor point that saw it."""

    aop: Aop[F]
    dop: Dop
    coordinate: Optional[SensorCoordinate] = None

    @property
    def frame(self) -> Type[Frame]:
        return self.aop.frame

    def __offset(self, zenith: SensorCoordinate) -> float:
        if self.coordinate is None:
            raise MissingCoordinateError('Frame transforms need the ray sensor coordinate')
        return degrees(atan2(self.coordinate.y - zenith.y, self.coordinate.x - zenith.x))

    def into_global_frame(self, zenith: Optional[SensorCoordinate]) -> Optional['Ray']:
        """Re-express the ray relative to the radial direction from the zenith point.

        Args:
            zenith: Sensor coordinate imaging the zenith, or None if it is not imaged.

        Returns:
            Global-frame ray, or None when the zenith is unknown.
        """
        if zenith is None:
            return None
        return Ray(self.aop.into_global_frame(self.__offset(zenith)), self.dop, self.coordinate)

    def into_sensor_frame(self, zenith: Optional[SensorCoordinate]) -> Optional['Ray']:
        """Inverse of :meth:`into_global_frame`."""
        if zenith is None:
            return None
        return Ray(self.aop.into_sensor_frame(self.__offset(zenith)), self.dop, self.coordinate)
