"""Orientation search by matching measured and simulated polarization patterns."""

import logging
from enum import Enum, auto
from itertools import islice
from functools import partial
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, Iterator, List, Optional

from astropy.time import Time
from astropy.coordinates import EarthLocation

from pyskycompass.light.Frame import SensorFrame, check_frame
from pyskycompass.image.RayImage import RayImage
from pyskycompass.optics.Camera import Camera
from pyskycompass.sky_models.SkyModel import SkyModel
from pyskycompass.sky_models.Rayleigh import Rayleigh
from pyskycompass.estimator.Estimate import Estimate
from pyskycompass.estimator.Searcher import Searcher
from pyskycompass.estimator.Orientation import Orientation
from pyskycompass.estimator.loss import score_orientation
from pyskycompass.exceptions import InvalidDimensionsError, NoValidCandidateError

logger = logging.getLogger(__name__)


class SearchState(Enum):
    INITIAL = auto()
    GENERATE = auto()
    SIMULATE = auto()
    SCORE = auto()
    COMPARE = auto()
    TERMINAL = auto()


class PatternMatch:
    """Score every candidate from a searcher and keep the one with the lowest loss.

    Candidates are scored in batches of ``max_workers`` on a thread pool and
    compared in enumeration order, so the result does not depend on the
    number of workers. Ties keep the earliest candidate.
    """

    __camera: Camera
    __searcher: Searcher
    __max_iterations: int
    __max_workers: int

    def __init__(
            self,
            camera: Camera,
            searcher: Searcher,
            max_iterations: int,
            max_workers: Optional[int] = None
    ) -> None:
        """Initialize the estimator.

        Args:
            camera: Camera that takes the measurements.
            searcher: Source of candidate orientations.
            max_iterations: Maximum number of candidates drawn from the searcher.
            max_workers: Threads scoring candidates; 1 scores sequentially.
                Defaults to 4.
        """
        if max_iterations <= 0:
            raise ValueError(f'max_iterations must be positive, got {max_iterations}')
        if max_workers is not None and max_workers <= 0:
            raise ValueError(f'max_workers must be positive, got {max_workers}')
        self.__camera = camera
        self.__searcher = searcher
        self.__max_iterations = max_iterations
        self.__max_workers = 4 if max_workers is None else max_workers

    @property
    def camera(self) -> Camera:
        return self.__camera

    @property
    def max_iterations(self) -> int:
        return self.__max_iterations

    def __check_measurement(self, measured: RayImage) -> None:
        check_frame(SensorFrame, measured.frame)
        if measured.shape != self.__camera.sensor.shape:
            raise InvalidDimensionsError(
                f'Measurement {measured.shape} does not match sensor {self.__camera.sensor.shape}'
            )
        if measured.count() == 0:
            logger.warning('Measurement holds no rays; every candidate will be skipped')

    def __search(
            self,
            candidates: Iterator[Orientation],
            score: Callable[[Orientation], Optional[float]],
            mapper: Callable[[Callable, Iterable], Iterable]
    ) -> Estimate:
        state = SearchState.INITIAL
        best: Optional[Orientation] = None
        best_loss = float('inf')
        iterations = 0
        skipped = 0
        batch: List[Orientation] = []
        losses: List[Optional[float]] = []

        while state is not SearchState.TERMINAL:
            match state:
                case SearchState.INITIAL:
                    logger.info(f'Pattern match over at most {self.__max_iterations} candidates')
                    state = SearchState.GENERATE
                case SearchState.GENERATE:
                    remaining = self.__max_iterations - iterations
                    batch = list(islice(candidates, min(self.__max_workers, remaining)))
                    iterations += len(batch)
                    state = SearchState.SIMULATE if batch else SearchState.TERMINAL
                case SearchState.SIMULATE:
                    # simulation and scoring run together on the worker threads
                    losses = list(mapper(score, batch))
                    state = SearchState.SCORE
                case SearchState.SCORE:
                    skipped += sum(loss is None for loss in losses)
                    state = SearchState.COMPARE
                case SearchState.COMPARE:
                    for candidate, loss in zip(batch, losses):
                        if loss is not None and loss < best_loss:
                            best, best_loss = candidate, loss
                    done = iterations >= self.__max_iterations
                    state = SearchState.TERMINAL if done else SearchState.GENERATE

        if skipped:
            logger.warning(f'{skipped} of {iterations} candidates could not be scored')
        if best is None:
            raise NoValidCandidateError(f'None of {iterations} candidates could be scored')
        logger.info(f'Best orientation {best} with loss {best_loss:.6e} after {iterations} candidates')
        return Estimate(orientation=best, loss=best_loss, iterations=iterations)

    def estimate(
            self,
            measured: RayImage[SensorFrame],
            sky_model: SkyModel
    ) -> Estimate:
        """Find the candidate orientation that best explains a measurement.

        Args:
            measured: Sensor-frame image on the camera's pixel grid.
            sky_model: Sky polarization model.

        Returns:
            The best candidate with its loss and the number of candidates drawn.

        Raises:
            InvalidDimensionsError: If the image does not match the sensor.
            FrameMismatchError: If the image is not in the sensor frame.
            NoValidCandidateError: If no candidate could be scored.
        """
        self.__check_measurement(measured)
        # fill the camera caches before worker threads read them
        self.__camera.direction_vectors()
        score = partial(score_orientation, self.__camera, measured, sky_model)
        candidates = self.__searcher.orientations()
        if self.__max_workers == 1:
            return self.__search(candidates, score, map)
        with ThreadPoolExecutor(max_workers=self.__max_workers) as executor:
            return self.__search(candidates, score, executor.map)

    def orientation_of(
            self,
            measured: RayImage[SensorFrame],
            location: EarthLocation,
            time: Time
    ) -> Estimate:
        """Estimate the orientation against a Rayleigh sky for a place and time.

        Args:
            measured: Sensor-frame image on the camera's pixel grid.
            location: Camera position.
            time: Exposure time.
        """
        return self.estimate(measured, Rayleigh.from_position_and_time(location=location, time=time))
