"""Local refinement of an orientation estimate by derivative-free descent."""

import logging
from math import sqrt
from functools import partial
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, List, Optional

from pyskycompass.light.Frame import SensorFrame, check_frame
from pyskycompass.image.RayImage import RayImage
from pyskycompass.optics.Camera import Camera
from pyskycompass.sky_models.SkyModel import SkyModel
from pyskycompass.estimator.Estimate import Estimate
from pyskycompass.estimator.Orientation import Orientation
from pyskycompass.estimator.loss import score_orientation
from pyskycompass.exceptions import FailedToConvergeError, NoValidCandidateError

logger = logging.getLogger(__name__)

_AXES = ('yaw', 'pitch', 'roll')


class CoordinateDescent:
    """Walk yaw, pitch and roll downhill until the loss gradient flattens out.

    Every iteration scores the six neighbours at +/- step along each axis. The
    central differences of those scores estimate the gradient; its norm is the
    convergence metric. The walk moves to the best improving neighbour and
    halves the step when none improves.
    """

    __camera: Camera
    __step: float
    __convergence_threshold: float
    __max_iterations: int
    __max_workers: int

    def __init__(
            self,
            camera: Camera,
            step: float = 1.0,
            convergence_threshold: float = 1e-6,
            max_iterations: int = 100,
            max_workers: Optional[int] = None
    ) -> None:
        """Initialize the refinement.

        Args:
            camera: Camera that takes the measurements.
            step: Initial step in degrees.
            convergence_threshold: Gradient norm, in radians squared per degree, below which to stop.
            max_iterations: Iterations before giving up.
            max_workers: Threads scoring the neighbours; 1 scores sequentially.
                Defaults to 6.
        """
        if step <= 0:
            raise ValueError(f'step must be positive, got {step}')
        if convergence_threshold < 0:
            raise ValueError(f'convergence_threshold must not be negative, got {convergence_threshold}')
        if max_iterations <= 0:
            raise ValueError(f'max_iterations must be positive, got {max_iterations}')
        if max_workers is not None and max_workers <= 0:
            raise ValueError(f'max_workers must be positive, got {max_workers}')
        self.__camera = camera
        self.__step = step
        self.__convergence_threshold = convergence_threshold
        self.__max_iterations = max_iterations
        self.__max_workers = 6 if max_workers is None else max_workers

    @staticmethod
    def __neighbours(center: Orientation, step: float) -> List[Orientation]:
        return [
            center.perturbed(**{axis: sign * step})
            for axis in _AXES
            for sign in (1.0, -1.0)
        ]

    @staticmethod
    def __gradient_norm(losses: List[Optional[float]], step: float) -> float:
        squared = 0.0
        for plus, minus in zip(losses[0::2], losses[1::2]):
            # an axis with an unscorable side contributes no slope
            if plus is not None and minus is not None:
                squared += ((plus - minus) / (2 * step)) ** 2
        return sqrt(squared)

    def __descend(
            self,
            initial: Orientation,
            score: Callable[[Orientation], Optional[float]],
            mapper: Callable[[Callable, Iterable], Iterable]
    ) -> Estimate:
        current = initial
        current_loss = score(current)
        if current_loss is None:
            raise NoValidCandidateError(f'Initial orientation {initial} cannot be scored')

        step = self.__step
        achieved = float('inf')
        for iteration in range(1, self.__max_iterations + 1):
            neighbours = self.__neighbours(current, step)
            losses = list(mapper(score, neighbours))
            achieved = self.__gradient_norm(losses, step)
            logger.debug(f'Iteration {iteration}: loss {current_loss:.6e}, step {step}, gradient {achieved:.3e}')
            if achieved <= self.__convergence_threshold:
                logger.info(f'Converged to {current} with loss {current_loss:.6e} after {iteration} iterations')
                return Estimate(orientation=current, loss=current_loss, iterations=iteration)

            best_index: Optional[int] = None
            for index, loss in enumerate(losses):
                if loss is not None and loss < current_loss and (
                        best_index is None or loss < losses[best_index]):
                    best_index = index
            if best_index is None:
                step /= 2
            else:
                current, current_loss = neighbours[best_index], losses[best_index]

        raise FailedToConvergeError(
            iterations=self.__max_iterations,
            threshold=self.__convergence_threshold,
            achieved=achieved
        )

    def refine(
            self,
            measured: RayImage[SensorFrame],
            sky_model: SkyModel,
            initial: Orientation
    ) -> Estimate:
        """Refine an orientation estimate.

        Args:
            measured: Sensor-frame image on the camera's pixel grid.
            sky_model: Sky polarization model.
            initial: Starting orientation, e.g. a pattern match result.

        Returns:
            The converged orientation and its loss.

        Raises:
            NoValidCandidateError: If the initial orientation cannot be scored.
            FailedToConvergeError: If the gradient norm is still above threshold
                after the last iteration.
        """
        check_frame(SensorFrame, measured.frame)
        self.__camera.direction_vectors()
        score = partial(score_orientation, self.__camera, measured, sky_model)
        if self.__max_workers == 1:
            return self.__descend(initial, score, map)
        with ThreadPoolExecutor(max_workers=self.__max_workers) as executor:
            return self.__descend(initial, score, executor.map)
