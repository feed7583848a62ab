"""Raw DoFP frame and its demosaicing into polarization rays."""

import logging
from typing import Dict, Iterator, Optional, Tuple, Union

from numpy.typing import NDArray
from numpy import frombuffer, uint8, asarray, count_nonzero, isnan

from pyskycompass.light.Ray import Ray
from pyskycompass.light.Frame import SensorFrame
from pyskycompass.light.StokesVector import StokesVector
from pyskycompass.image.RayImage import RayImage
from pyskycompass.sensor.ImageSensor import ImageSensor
from pyskycompass.sensor.Coordinates import PixelCoordinate
from pyskycompass.sensor.StokesCalculator import StokesCalculator
from pyskycompass.sensor.SlicingPattern import SlicingPattern, default_wire_grid_orientations_slicing
from pyskycompass.exceptions import InvalidDimensionsError, SkyCompassError

logger = logging.getLogger(__name__)


class IntensityImage:
    """Raw frame of a division-of-focal-plane polarization camera.

    Every 2x2 block of raw samples forms one metapixel holding the four
    polarizer orientations.
    """

    __samples: NDArray
    __stokes_calculator: StokesCalculator
    __stokes_cache: Optional[Tuple[NDArray, NDArray, NDArray]]

    def __init__(
            self,
            samples: NDArray,
            wire_grid_orientations_slicing: Optional[Dict[int, SlicingPattern]] = None
    ) -> None:
        """Wrap a raw frame.

        Args:
            samples: Raw samples shaped (height, width).
            wire_grid_orientations_slicing: Mosaic layout; defaults to the
                90/135 over 45/0 metapixel.

        Raises:
            InvalidDimensionsError: If the frame is not 2-D or a dimension is odd or zero.
        """
        samples = asarray(samples)
        if samples.ndim != 2:
            raise InvalidDimensionsError(f'Raw frame must be 2-D, got shape {samples.shape}')
        height, width = samples.shape
        if height == 0 or width == 0 or height % 2 or width % 2:
            raise InvalidDimensionsError(f'Raw frame dimensions must be even and non-zero, got {width}x{height}')
        if wire_grid_orientations_slicing is None:
            wire_grid_orientations_slicing = default_wire_grid_orientations_slicing()

        samples = samples.copy()
        samples.setflags(write=False)
        self.__samples = samples
        self.__stokes_calculator = StokesCalculator(wire_grid_orientations_slicing=wire_grid_orientations_slicing)
        self.__stokes_cache = None

    @classmethod
    def from_bytes(
            cls,
            width: int,
            height: int,
            data: Union[bytes, bytearray, memoryview],
            wire_grid_orientations_slicing: Optional[Dict[int, SlicingPattern]] = None
    ) -> 'IntensityImage':
        """Decode a row-major buffer of 8-bit samples.

        Args:
            width: Raw frame width in samples.
            height: Raw frame height in samples.
            data: Exactly width * height bytes.
            wire_grid_orientations_slicing: Optional mosaic layout override.

        Raises:
            InvalidDimensionsError: If a dimension is odd or the buffer length does not match.
        """
        if width <= 0 or height <= 0 or width % 2 or height % 2:
            raise InvalidDimensionsError(f'Raw frame dimensions must be even and non-zero, got {width}x{height}')
        if len(data) != width * height:
            raise InvalidDimensionsError(f'Expected {width * height} bytes for {width}x{height}, got {len(data)}')
        samples = frombuffer(bytes(data), dtype=uint8).reshape(height, width)
        return cls(samples, wire_grid_orientations_slicing=wire_grid_orientations_slicing)

    @property
    def width(self) -> int:
        return self.__samples.shape[1]

    @property
    def height(self) -> int:
        return self.__samples.shape[0]

    @property
    def metapixel_rows(self) -> int:
        return self.height // 2

    @property
    def metapixel_cols(self) -> int:
        return self.width // 2

    @property
    def samples(self) -> NDArray:
        """Return the read-only raw samples."""
        return self.__samples

    def intensities(self) -> Dict[int, NDArray]:
        """Return the intensity behind each polarizer orientation, per metapixel.

        Returns:
            Mapping from orientation angle to an array shaped (height / 2, width / 2).
        """
        return {
            orientation_angle: self.__stokes_calculator.orientation_intensity(self.__samples, orientation_angle)
            for orientation_angle in (0, 45, 90, 135)
        }

    def __stokes(self) -> Tuple[NDArray, NDArray, NDArray]:
        if self.__stokes_cache is None:
            self.__stokes_cache = self.__stokes_calculator.stokes_parameters(self.__samples)
        return self.__stokes_cache

    def __check_sensor(self, sensor: Optional[ImageSensor]) -> None:
        if sensor is not None and sensor.shape != (self.metapixel_rows, self.metapixel_cols):
            raise InvalidDimensionsError(
                f'Sensor {sensor.rows}x{sensor.cols} does not match '
                f'{self.metapixel_rows}x{self.metapixel_cols} metapixels'
            )

    def rays(
            self,
            sensor: Optional[ImageSensor] = None,
            skip_invalid: bool = False
    ) -> Iterator[Ray[SensorFrame]]:
        """Return a lazy iterator of one sensor-frame ray per metapixel in row-major order.

        The sensor is checked immediately; rays are derived on demand.

        Args:
            sensor: Optional metapixel-grid sensor; when given, every ray
                carries the sensor coordinate of its metapixel.
            skip_invalid: Skip metapixels without a valid Stokes vector
                instead of raising.

        Raises:
            InvalidDimensionsError: If the sensor does not match the metapixel grid.
            SkyCompassError: The derivation error of the first invalid metapixel,
                unless ``skip_invalid`` is set.
        """
        self.__check_sensor(sensor)
        return self.__rays(sensor, skip_invalid)

    def __rays(self, sensor: Optional[ImageSensor], skip_invalid: bool) -> Iterator[Ray[SensorFrame]]:
        s0, s1, s2 = self.__stokes()
        for row in range(self.metapixel_rows):
            for col in range(self.metapixel_cols):
                stokes: StokesVector[SensorFrame] = StokesVector(
                    s0[row, col], s1[row, col], s2[row, col], SensorFrame
                )
                try:
                    aop, dop = stokes.aop(), stokes.dop()
                except SkyCompassError as error:
                    if not skip_invalid:
                        raise
                    logger.debug(f'Skipping metapixel (row={row}, col={col}): {error}')
                    continue
                coordinate = None
                if sensor is not None:
                    coordinate = sensor.sensor_from_pixel(PixelCoordinate(row=row, col=col))
                yield Ray(aop, dop, coordinate)

    def ray_image(self) -> RayImage[SensorFrame]:
        """Demosaic the whole frame at once.

        Returns:
            Sensor-frame image on the metapixel grid; invalid metapixels have no ray.
        """
        aop, dop = self.__stokes_calculator.measurements(self.__samples)
        invalid = int(count_nonzero(isnan(aop)))
        if invalid:
            logger.debug(f'{invalid} of {aop.size} metapixels have no valid Stokes vector')
        return RayImage.from_arrays(aop, dop, SensorFrame)
