"""Predicates selecting rays by angle or degree of polarization."""

from abc import ABC, abstractmethod

from numpy.typing import NDArray
from numpy import abs as array_abs, errstate

from pyskycompass.light.Aop import Aop, wrap_degrees_array
from pyskycompass.light.Ray import Ray
from pyskycompass.light.Frame import check_frame
from pyskycompass.image.RayImage import RayImage


class RayFilter(ABC):
    """Predicate usable on a single ray or vectorised over a ray image."""

    @abstractmethod
    def evaluate(self, ray: Ray) -> bool:
        """Return whether a single ray is accepted."""
        ...

    @abstractmethod
    def mask(self, image: RayImage) -> NDArray[bool]:
        """Return a boolean grid of accepted pixels; missing rays are never accepted."""
        ...


class AopFilter(RayFilter):
    """Accept rays whose angle lies within a threshold of a center angle."""

    __center: Aop
    __threshold: float

    def __init__(self, center: Aop, threshold: float) -> None:
        """Initialize the filter.

        Args:
            center: Reference angle; rays must share its frame.
            threshold: Maximum absolute difference in degrees, modulo 180.
        """
        if threshold < 0:
            raise ValueError(f'Threshold must not be negative, got {threshold}')
        self.__center = center
        self.__threshold = threshold

    @property
    def center(self) -> Aop:
        return self.__center

    @property
    def threshold(self) -> float:
        return self.__threshold

    def evaluate(self, ray: Ray) -> bool:
        return ray.aop.in_threshold(self.__center, self.__threshold)

    def mask(self, image: RayImage) -> NDArray[bool]:
        check_frame(self.__center.frame, image.frame)
        with errstate(invalid='ignore'):
            return array_abs(wrap_degrees_array(image.aop_array() - self.__center.angle)) <= self.__threshold


class DopFilter(RayFilter):
    """Accept rays whose degree of polarization is at least a minimum."""

    __minimum: float

    def __init__(self, minimum: float) -> None:
        """Initialize the filter.

        Args:
            minimum: Smallest accepted degree of polarization.
        """
        self.__minimum = minimum

    @property
    def minimum(self) -> float:
        return self.__minimum

    def evaluate(self, ray: Ray) -> bool:
        return ray.dop.value >= self.__minimum

    def mask(self, image: RayImage) -> NDArray[bool]:
        with errstate(invalid='ignore'):
            return image.dop_array() >= self.__minimum
