"""Camera composed of an optic and an image sensor."""

from typing import Iterator, Optional, Tuple

from numpy.typing import NDArray
from numpy import float64, stack, sin, cos, deg2rad

from pyskycompass.optics.Optic import Optic, RayDirection
from pyskycompass.sensor.ImageSensor import ImageSensor
from pyskycompass.sensor.Coordinates import PixelCoordinate


class Camera:
    """Map between pixel indices and viewing directions in the camera body frame.

    The body frame has +X towards increasing columns, +Y towards increasing
    rows and +Z pointing back out of the lens.
    """

    __optic: Optic
    __sensor: ImageSensor
    __directions_cache: Optional[Tuple[NDArray[float64], NDArray[float64]]]
    __vectors_cache: Optional[NDArray[float64]]

    def __init__(
            self,
            optic: Optic,
            sensor: ImageSensor
    ) -> None:
        """Initialize the camera.

        Args:
            optic: Lens model.
            sensor: Sensor geometry.
        """
        self.__optic = optic
        self.__sensor = sensor
        self.__directions_cache = None
        self.__vectors_cache = None

    @property
    def optic(self) -> Optic:
        return self.__optic

    @property
    def sensor(self) -> ImageSensor:
        return self.__sensor

    def pixels(self) -> Iterator[PixelCoordinate]:
        """Iterate over every pixel index in row-major order."""
        return self.__sensor.pixels()

    def trace_from_pixel(self, pixel: PixelCoordinate) -> Optional[RayDirection]:
        """Return the direction imaged by a pixel.

        Args:
            pixel: Pixel index.

        Returns:
            Viewing direction, or None for a pixel off the sensor.
        """
        coordinate = self.__sensor.sensor_from_pixel(pixel)
        if coordinate is None:
            return None
        return self.__optic.trace_backward(coordinate)

    def trace_to_pixel(self, direction: RayDirection) -> Optional[PixelCoordinate]:
        """Return the pixel imaging a direction.

        Args:
            direction: Viewing direction in the camera body frame.

        Returns:
            Pixel index, or None when the direction misses the sensor.
        """
        coordinate = self.__optic.trace_forward(direction)
        if coordinate is None:
            return None
        return self.__sensor.pixel_from_sensor(coordinate)

    def ray_directions(self) -> Tuple[NDArray[float64], NDArray[float64]]:
        """Return the direction imaged by every pixel.

        Returns:
            Tuple of polar and azimuth angles in degrees, shaped (rows, cols).
        """
        if self.__directions_cache is None:
            x, y = self.__sensor.sensor_coordinates()
            self.__directions_cache = self.__optic.trace_backward_array(x, y)
        return self.__directions_cache

    def direction_vectors(self) -> NDArray[float64]:
        """Return unit viewing vectors in the camera body frame.

        Returns:
            Array shaped (rows, cols, 3).
        """
        if self.__vectors_cache is None:
            polar, azimuth = self.ray_directions()
            polar_rad, azimuth_rad = deg2rad(polar), deg2rad(azimuth)
            vectors = stack([
                sin(polar_rad) * cos(azimuth_rad),
                sin(polar_rad) * sin(azimuth_rad),
                cos(polar_rad),
            ], axis=-1)
            vectors.setflags(write=False)
            self.__vectors_cache = vectors
        return self.__vectors_cache
