"""Facade running the raw-frame to orientation pipeline."""

import logging
from typing import Optional, Union

from numpy.typing import NDArray
from astropy.time import Time
from astropy.coordinates import EarthLocation

from pyskycompass.light.Frame import SensorFrame, check_frame
from pyskycompass.image.RayImage import RayImage
from pyskycompass.image.RayFilter import DopFilter
from pyskycompass.image.IntensityImage import IntensityImage
from pyskycompass.optics.Camera import Camera
from pyskycompass.optics.PinholeOptic import PinholeOptic
from pyskycompass.sensor.SensorChip import SensorChip
from pyskycompass.sensor.ImageSensor import ImageSensor
from pyskycompass.sensor.MicroPolarizer import MicroPolarizer
from pyskycompass.sky_models.SkyModel import SkyModel
from pyskycompass.sky_models.Rayleigh import Rayleigh
from pyskycompass.estimator.Estimate import Estimate
from pyskycompass.estimator.Searcher import Searcher, StochasticSearcher
from pyskycompass.estimator.Simulation import Simulation
from pyskycompass.estimator.Orientation import Orientation
from pyskycompass.estimator.PatternMatch import PatternMatch
from pyskycompass.estimator.CoordinateDescent import CoordinateDescent
from pyskycompass.engine.EngineConfig import EngineConfig
from pyskycompass.exceptions import ZenithOutOfViewError

logger = logging.getLogger(__name__)


class Engine:
    """Demosaic raw frames, simulate raw frames and estimate camera orientation."""

    __config: EngineConfig
    __camera: Camera
    __micro_polarizer: MicroPolarizer
    __sensor_chip: SensorChip

    def __init__(self, config: Optional[EngineConfig] = None) -> None:
        """Build the camera and sensor models described by a configuration.

        The estimation camera works on the metapixel grid: half the raw pixel
        counts at twice the raw pixel pitch.

        Args:
            config: Engine configuration; defaults to ``EngineConfig()``.
        """
        self.__config = EngineConfig() if config is None else config
        self.__camera = Camera(
            optic=PinholeOptic(focal_length_micrometers=self.__config.lens_focal_length_micrometers),
            sensor=ImageSensor(
                pixel_size_micrometers=2 * self.__config.sensor_pixel_size_square_micrometers,
                rows=self.__config.number_pixels_vertical // 2,
                cols=self.__config.number_pixels_horizontal // 2,
            )
        )
        self.__micro_polarizer = MicroPolarizer(
            extinction_ratio=self.__config.extinction_ratio,
            tolerance=self.__config.tolerance,
            wire_grid_orientations_slicing=self.__config.wire_grid_orientations_slicing,
            random_seed=self.__config.random_seed
        )
        self.__sensor_chip = SensorChip(
            pixel_saturation_ratio=self.__config.pixel_saturation_ratio,
            adc_resolution=self.__config.adc_resolution,
            signal_to_noise_ratio=self.__config.signal_to_noise_ratio,
            random_seed=self.__config.random_seed
        )

    @property
    def config(self) -> EngineConfig:
        return self.__config

    @property
    def camera(self) -> Camera:
        return self.__camera

    def demosaic(self, raw: Union[bytes, bytearray, NDArray]) -> RayImage[SensorFrame]:
        """Turn a raw frame into a filtered sensor-frame ray image.

        Args:
            raw: Row-major 8-bit buffer, or a 2-D sample array, of the configured size.

        Returns:
            Image on the metapixel grid, keeping rays with DoP >= ``minimum_dop``.
        """
        if isinstance(raw, (bytes, bytearray, memoryview)):
            intensity_image = IntensityImage.from_bytes(
                width=self.__config.number_pixels_horizontal,
                height=self.__config.number_pixels_vertical,
                data=raw,
                wire_grid_orientations_slicing=self.__config.wire_grid_orientations_slicing
            )
        else:
            intensity_image = IntensityImage(
                raw, wire_grid_orientations_slicing=self.__config.wire_grid_orientations_slicing
            )
        ray_image = intensity_image.ray_image()
        if self.__config.minimum_dop > 0:
            ray_image = ray_image.filter(DopFilter(self.__config.minimum_dop))
        logger.info(f'Demosaiced {ray_image.count()} rays from a {intensity_image.width}x{intensity_image.height} frame')
        return ray_image

    def render(self, ray_image: RayImage[SensorFrame]) -> NDArray:
        """Synthesize the raw frame the sensor would record for a sensor-frame image."""
        check_frame(SensorFrame, ray_image.frame)
        intensity = self.__micro_polarizer.intensity_on_pixels(
            angle_of_polarization=ray_image.aop_array(),
            degree_of_polarization=ray_image.dop_array()
        )
        return self.__sensor_chip.get_bits_intensity(intensity_on_pixel=intensity)

    def simulate_measurement(
            self,
            orientation: Orientation,
            sky_model: SkyModel
    ) -> NDArray:
        """Synthesize the raw frame recorded at an orientation under a sky model.

        Raises:
            ZenithOutOfViewError: If the camera does not image the zenith.
        """
        simulation = Simulation(camera=self.__camera, orientation=orientation, sky_model=sky_model)
        sensor_image = simulation.ray_image().into_sensor_frame(simulation.zenith_pixel())
        if sensor_image is None:
            raise ZenithOutOfViewError(f'Orientation {orientation} does not image the zenith')
        return self.render(sensor_image)

    def default_searcher(self) -> Searcher:
        return StochasticSearcher(
            low=Orientation(*self.__config.search_low),
            high=Orientation(*self.__config.search_high),
            random_seed=self.__config.random_seed
        )

    def estimate(
            self,
            measured: RayImage[SensorFrame],
            sky_model: SkyModel,
            searcher: Optional[Searcher] = None
    ) -> Estimate:
        """Estimate the camera orientation from a demosaiced measurement.

        Args:
            measured: Sensor-frame image from :meth:`demosaic`.
            sky_model: Sky polarization model.
            searcher: Candidate source; defaults to :meth:`default_searcher`.

        Returns:
            Pattern match result, refined by coordinate descent when configured.
        """
        pattern_match = PatternMatch(
            camera=self.__camera,
            searcher=self.default_searcher() if searcher is None else searcher,
            max_iterations=self.__config.max_iterations,
            max_workers=self.__config.max_workers
        )
        estimate = pattern_match.estimate(measured, sky_model)
        if not self.__config.refine:
            return estimate

        refined = CoordinateDescent(
            camera=self.__camera,
            step=self.__config.refine_step,
            convergence_threshold=self.__config.convergence_threshold,
            max_iterations=self.__config.refine_max_iterations,
            max_workers=self.__config.max_workers
        ).refine(measured, sky_model, estimate.orientation)
        return Estimate(
            orientation=refined.orientation,
            loss=refined.loss,
            iterations=estimate.iterations + refined.iterations
        )

    def orientation_of(
            self,
            raw: Union[bytes, bytearray, NDArray],
            location: EarthLocation,
            time: Time,
            searcher: Optional[Searcher] = None
    ) -> Estimate:
        """Run the whole pipeline on a raw frame taken at a place and time."""
        sky_model = Rayleigh.from_position_and_time(location=location, time=time)
        logger.info(f'Solar bearing {sky_model.solar_bearing}')
        return self.estimate(self.demosaic(raw), sky_model, searcher=searcher)
