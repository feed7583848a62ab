"""Dense grid of optional polarization rays."""

from functools import lru_cache
from typing import Generic, Iterable, Iterator, Optional, Sequence, Tuple, Type

from numpy.typing import NDArray
from numpy import float64, full, nan, isnan, isfinite, asarray, where, indices, arctan2, rad2deg, count_nonzero, errstate

from pyskycompass.light.Aop import Aop, wrap_degrees_array
from pyskycompass.light.Dop import Dop
from pyskycompass.light.Ray import Ray
from pyskycompass.light.Frame import F, Frame, SensorFrame, GlobalFrame, check_frame
from pyskycompass.sensor.ImageSensor import ImageSensor
from pyskycompass.sensor.Coordinates import PixelCoordinate
from pyskycompass.exceptions import (
    AmbiguousRayError, OutOfBoundsRayError, InvalidDimensionsError, AngleOutOfBoundsError, DegreeOutOfBoundsError
)


@lru_cache(maxsize=64)
def _radial_offsets(rows: int, cols: int, zenith_row: int, zenith_col: int) -> NDArray[float64]:
    """Angle in degrees from the sensor x axis to the direction away from the zenith pixel."""
    row_index, col_index = indices((rows, cols), dtype=float64)
    offsets = rad2deg(arctan2(row_index - zenith_row, col_index - zenith_col))
    offsets.setflags(write=False)
    return offsets


class RayImage(Generic[F]):
    """Immutable rows x cols grid of optional rays sharing one frame.

    Missing rays are NaN in both the angle and degree arrays.
    """

    __aop: NDArray[float64]
    __dop: NDArray[float64]
    __frame: Type[Frame]

    def __init__(
            self,
            aop: NDArray[float64],
            dop: NDArray[float64],
            frame: Type[F]
    ) -> None:
        """Wrap already validated arrays; use the ``from_*`` constructors instead."""
        missing = isnan(aop) | isnan(dop)
        self.__aop = where(missing, nan, aop)
        self.__dop = where(missing, nan, dop)
        self.__aop.setflags(write=False)
        self.__dop.setflags(write=False)
        self.__frame = frame

    @classmethod
    def from_arrays(
            cls,
            aop: NDArray,
            dop: NDArray,
            frame: Type[F]
    ) -> 'RayImage[F]':
        """Build an image from angle and degree arrays.

        Args:
            aop: Angles of polarization in degrees within [-90, 90], NaN where missing.
            dop: Degrees of polarization within [0, 1], NaN where missing.
            frame: Frame marker class of the angles.

        Returns:
            The image; a pixel missing in either array is missing in both.

        Raises:
            InvalidDimensionsError: If the arrays are not 2-D with the same shape.
            AngleOutOfBoundsError: If a present angle is infinite or outside [-90, 90].
            DegreeOutOfBoundsError: If a present degree is infinite or outside [0, 1].
        """
        aop = asarray(aop, dtype=float64)
        dop = asarray(dop, dtype=float64)
        if aop.ndim != 2 or aop.shape != dop.shape:
            raise InvalidDimensionsError(f'Expected two 2-D arrays of one shape, got {aop.shape} and {dop.shape}')

        present = ~(isnan(aop) | isnan(dop))
        with errstate(invalid='ignore'):
            bad_aop = present & ~(isfinite(aop) & (aop >= -90.0) & (aop <= 90.0))
            bad_dop = present & ~(isfinite(dop) & (dop >= 0.0) & (dop <= 1.0))
        if bad_aop.any():
            raise AngleOutOfBoundsError(angle=float(aop[bad_aop][0]))
        if bad_dop.any():
            raise DegreeOutOfBoundsError(degree=float(dop[bad_dop][0]))

        return cls(where(aop == -90.0, 90.0, aop), dop, frame)

    @classmethod
    def from_rays(
            cls,
            rays: Sequence[Optional[Ray[F]]],
            rows: int,
            cols: int,
            frame: Type[F] = SensorFrame
    ) -> 'RayImage[F]':
        """Build an image from a dense row-major sequence of optional rays.

        Args:
            rays: Exactly rows * cols entries, None where a pixel has no ray.
            rows: Number of rows.
            cols: Number of columns.
            frame: Frame marker class every ray must carry.

        Raises:
            InvalidDimensionsError: If the number of entries does not match.
            FrameMismatchError: If a ray carries another frame.
        """
        if len(rays) != rows * cols:
            raise InvalidDimensionsError(f'Expected {rows * cols} rays for {rows}x{cols}, got {len(rays)}')

        aop = full((rows, cols), nan)
        dop = full((rows, cols), nan)
        for index, ray in enumerate(rays):
            if ray is None:
                continue
            check_frame(frame, ray.frame)
            row, col = divmod(index, cols)
            aop[row, col] = ray.aop.angle
            dop[row, col] = ray.dop.value
        return cls(aop, dop, frame)

    @classmethod
    def from_rays_with_sensor(
            cls,
            rays: Iterable[Ray[F]],
            sensor: ImageSensor,
            frame: Type[F] = SensorFrame
    ) -> 'RayImage[F]':
        """Place rays on the pixel grid using their sensor coordinates.

        Args:
            rays: Rays carrying sensor coordinates.
            sensor: Sensor used to map coordinates to pixels.
            frame: Frame marker class every ray must carry.

        Raises:
            AmbiguousRayError: If two rays map to the same pixel.
            OutOfBoundsRayError: If a ray has no coordinate or maps off the sensor.
            FrameMismatchError: If a ray carries another frame.
        """
        aop = full(sensor.shape, nan)
        dop = full(sensor.shape, nan)
        for ray in rays:
            check_frame(frame, ray.frame)
            pixel = None if ray.coordinate is None else sensor.pixel_from_sensor(ray.coordinate)
            if pixel is None:
                raise OutOfBoundsRayError(coordinate=ray.coordinate)
            if not isnan(aop[pixel.row, pixel.col]):
                raise AmbiguousRayError(row=pixel.row, col=pixel.col)
            aop[pixel.row, pixel.col] = ray.aop.angle
            dop[pixel.row, pixel.col] = ray.dop.value
        return cls(aop, dop, frame)

    @property
    def rows(self) -> int:
        return self.__aop.shape[0]

    @property
    def cols(self) -> int:
        return self.__aop.shape[1]

    @property
    def shape(self) -> Tuple[int, int]:
        return self.__aop.shape

    @property
    def frame(self) -> Type[Frame]:
        return self.__frame

    def aop_array(self) -> NDArray[float64]:
        """Return the read-only angle array in degrees, NaN where missing."""
        return self.__aop

    def dop_array(self) -> NDArray[float64]:
        """Return the read-only degree array, NaN where missing."""
        return self.__dop

    def valid_mask(self) -> NDArray[bool]:
        return ~isnan(self.__aop)

    def count(self) -> int:
        """Return the number of pixels holding a ray."""
        return int(count_nonzero(self.valid_mask()))

    def ray(self, row: int, col: int) -> Optional[Ray[F]]:
        """Return the ray at a pixel.

        Raises:
            IndexError: If the pixel is outside the image.
        """
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            raise IndexError(f'Pixel (row={row}, col={col}) is outside a {self.rows}x{self.cols} image')
        if isnan(self.__aop[row, col]):
            return None
        return Ray(Aop(float(self.__aop[row, col]), self.__frame), Dop(float(self.__dop[row, col])))

    def pixels(self) -> Iterator[Tuple[PixelCoordinate, Optional[Ray[F]]]]:
        """Iterate over every pixel in row-major order with its optional ray."""
        for row in range(self.rows):
            for col in range(self.cols):
                yield PixelCoordinate(row=row, col=col), self.ray(row, col)

    def filter(self, predicate) -> 'RayImage[F]':
        """Drop every ray rejected by a :class:`RayFilter`.

        Args:
            predicate: Filter providing a vectorised ``mask``.

        Returns:
            A new image keeping only accepted rays.
        """
        keep = predicate.mask(self)
        return RayImage(where(keep, self.__aop, nan), where(keep, self.__dop, nan), self.__frame)

    def __offsets(self, zenith: PixelCoordinate) -> NDArray[float64]:
        return _radial_offsets(self.rows, self.cols, zenith.row, zenith.col)

    def into_global_frame(self, zenith: Optional[PixelCoordinate]) -> Optional['RayImage[GlobalFrame]']:
        """Re-express every angle relative to the radial direction from the zenith pixel.

        The zenith pixel may lie outside the image.

        Args:
            zenith: Pixel imaging the zenith, or None if it is not imaged.

        Returns:
            The Global-frame image, or None when the zenith is unknown.

        Raises:
            FrameMismatchError: If the image is not in the sensor frame.
        """
        if zenith is None:
            return None
        check_frame(SensorFrame, self.__frame)
        return RayImage(wrap_degrees_array(self.__aop - self.__offsets(zenith)), self.__dop, GlobalFrame)

    def into_sensor_frame(self, zenith: Optional[PixelCoordinate]) -> Optional['RayImage[SensorFrame]']:
        """Inverse of :meth:`into_global_frame`."""
        if zenith is None:
            return None
        check_frame(GlobalFrame, self.__frame)
        return RayImage(wrap_degrees_array(self.__aop + self.__offsets(zenith)), self.__dop, SensorFrame)

    def __repr__(self) -> str:
        return f'RayImage({self.rows}x{self.cols}, {self.__frame.__name__}, rays={self.count()})'
