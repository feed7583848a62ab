"""Abstract optic mapping sensor-plane points to viewing directions."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Tuple

from numpy.typing import NDArray
from numpy import float64

from pyskycompass.sensor.Coordinates import SensorCoordinate


@dataclass(frozen=True)
class RayDirection:
    """Direction in the camera body frame.

    The polar angle is measured from the body +Z axis and the azimuth from
    +X towards +Y, both in degrees.
    """

    polar_deg: float
    azimuth_deg: float


class Optic(ABC):
    """Base class for lens models."""

    @abstractmethod
    def trace_backward(self, coordinate: SensorCoordinate) -> RayDirection:
        """Return the direction imaged at a sensor-plane point.

        Args:
            coordinate: Point on the sensor plane in micrometers.

        Returns:
            Viewing direction in the camera body frame.
        """
        ...

    @abstractmethod
    def trace_forward(self, direction: RayDirection) -> Optional[SensorCoordinate]:
        """Return the sensor-plane point imaging a direction.

        Args:
            direction: Viewing direction in the camera body frame.

        Returns:
            Point on the sensor plane, or None if the direction never reaches it.
        """
        ...

    @abstractmethod
    def trace_backward_array(
            self,
            x: NDArray[float64],
            y: NDArray[float64]
    ) -> Tuple[NDArray[float64], NDArray[float64]]:
        """Vectorised :meth:`trace_backward`.

        Args:
            x: Sensor-plane x coordinates in micrometers.
            y: Sensor-plane y coordinates in micrometers.

        Returns:
            Tuple of polar and azimuth angles in degrees.
        """
        ...
