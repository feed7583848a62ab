"""Mapping between pixel indices and sensor-plane coordinates."""

from math import copysign, floor, isfinite
from typing import Iterator, Optional, Tuple

from numpy.typing import NDArray
from numpy import arange, float64, meshgrid

from pyskycompass.exceptions import InvalidDimensionsError
from pyskycompass.sensor.Coordinates import PixelCoordinate, SensorCoordinate


def _round_half_away(value: float) -> int:
    return int(copysign(floor(abs(value) + 0.5), value))


class ImageSensor:
    """A rectangular grid of square pixels centered on the optical axis."""

    __pixel_size_micrometers: float
    __rows: int
    __cols: int
    __coordinates_cache: Optional[Tuple[NDArray[float64], NDArray[float64]]]

    def __init__(
            self,
            pixel_size_micrometers: float,
            rows: int,
            cols: int
    ) -> None:
        """Initialize the sensor geometry.

        Args:
            pixel_size_micrometers: Pixel pitch in micrometers.
            rows: Number of pixel rows.
            cols: Number of pixel columns.

        Raises:
            InvalidDimensionsError: If the pitch or an extent is not positive.
        """
        if not isfinite(pixel_size_micrometers) or pixel_size_micrometers <= 0:
            raise InvalidDimensionsError(f'Pixel size must be positive, got {pixel_size_micrometers}')
        if rows <= 0 or cols <= 0:
            raise InvalidDimensionsError(f'Sensor extents must be positive, got {rows}x{cols}')
        self.__pixel_size_micrometers = float(pixel_size_micrometers)
        self.__rows = int(rows)
        self.__cols = int(cols)
        self.__coordinates_cache = None

    @property
    def pixel_size_micrometers(self) -> float:
        """Return the pixel pitch.

        Returns:
            Pixel pitch in micrometers.
        """
        return self.__pixel_size_micrometers

    @property
    def rows(self) -> int:
        return self.__rows

    @property
    def cols(self) -> int:
        return self.__cols

    @property
    def shape(self) -> Tuple[int, int]:
        return self.__rows, self.__cols

    def __center(self) -> Tuple[float, float]:
        return (self.__rows - 1) / 2, (self.__cols - 1) / 2

    def contains(self, pixel: PixelCoordinate) -> bool:
        """Return whether a pixel index lies on the sensor."""
        return 0 <= pixel.row < self.__rows and 0 <= pixel.col < self.__cols

    def pixel_from_sensor(self, coordinate: SensorCoordinate) -> Optional[PixelCoordinate]:
        """Find the pixel containing a sensor-plane point.

        Args:
            coordinate: Point on the sensor plane in micrometers.

        Returns:
            The nearest pixel index (halves rounded away from zero), or None
            when the point is off the sensor.
        """
        if not (isfinite(coordinate.x) and isfinite(coordinate.y)):
            return None
        center_row, center_col = self.__center()
        pixel = PixelCoordinate(
            row=_round_half_away(coordinate.y / self.__pixel_size_micrometers + center_row),
            col=_round_half_away(coordinate.x / self.__pixel_size_micrometers + center_col),
        )
        return pixel if self.contains(pixel) else None

    def sensor_from_pixel(self, pixel: PixelCoordinate) -> Optional[SensorCoordinate]:
        """Return the sensor-plane center of a pixel.

        Args:
            pixel: Pixel index.

        Returns:
            Center of the pixel in micrometers, or None for an index off the sensor.
        """
        if not self.contains(pixel):
            return None
        center_row, center_col = self.__center()
        return SensorCoordinate(
            x=self.__pixel_size_micrometers * (pixel.col - center_col),
            y=self.__pixel_size_micrometers * (pixel.row - center_row),
        )

    def pixels(self) -> Iterator[PixelCoordinate]:
        """Iterate over every pixel index in row-major order."""
        for row in range(self.__rows):
            for col in range(self.__cols):
                yield PixelCoordinate(row=row, col=col)

    def sensor_coordinates(self) -> Tuple[NDArray[float64], NDArray[float64]]:
        """Return the sensor-plane coordinates of every pixel center.

        Returns:
            Tuple of x and y grids in micrometers, shaped (rows, cols).
        """
        if self.__coordinates_cache is not None:
            return self.__coordinates_cache

        center_row, center_col = self.__center()
        x_line: NDArray[float64] = self.__pixel_size_micrometers * (arange(self.__cols, dtype=float64) - center_col)
        y_line: NDArray[float64] = self.__pixel_size_micrometers * (arange(self.__rows, dtype=float64) - center_row)
        x, y = meshgrid(x_line, y_line, indexing='xy')
        x.setflags(write=False)
        y.setflags(write=False)

        self.__coordinates_cache = (x, y)
        return self.__coordinates_cache

    def __repr__(self) -> str:
        return f'ImageSensor({self.__pixel_size_micrometers}, rows={self.__rows}, cols={self.__cols})'
