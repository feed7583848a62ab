"""Angle of polarization with frame tagging and 180-degree wrapping."""

from math import isfinite
from typing import Generic, Type

from numpy.typing import NDArray
from numpy import float64, mod, where, asarray

from pyskycompass.light.Frame import F, Frame, SensorFrame, GlobalFrame, check_frame
from pyskycompass.exceptions import AngleOutOfBoundsError, NonFiniteError


def wrap_degrees(angle: float) -> float:
    """Wrap an angle of polarization into (-90, 90] degrees.

    Args:
        angle: Finite angle in degrees.

    Returns:
        Equivalent angle modulo 180 degrees.
    """
    wrapped: float = 90.0 - (90.0 - angle) % 180.0
    # the modulo can round up to exactly 180 for tiny negative operands
    return 90.0 if wrapped == -90.0 else wrapped


def wrap_degrees_array(angles: NDArray[float64]) -> NDArray[float64]:
    """Vectorised :func:`wrap_degrees`; NaN entries stay NaN.

    Args:
        angles: Angles in degrees.

    Returns:
        Angles wrapped into (-90, 90] degrees.
    """
    wrapped: NDArray[float64] = 90.0 - mod(90.0 - asarray(angles, dtype=float64), 180.0)
    return where(wrapped == -90.0, 90.0, wrapped)


class Aop(Generic[F]):
    """Angle of polarization in degrees, constrained to (-90, 90] and tagged with a frame."""

    __angle: float
    __frame: Type[Frame]

    def __init__(
            self,
            angle: float,
            frame: Type[F]
    ) -> None:
        """Create an angle of polarization, rejecting out-of-range input.

        Args:
            angle: Angle in degrees within [-90, 90]; -90 is stored as 90.
            frame: Frame marker class the angle is measured in.

        Raises:
            NonFiniteError: If the angle is NaN or infinite.
            AngleOutOfBoundsError: If the angle lies outside [-90, 90].
        """
        if not isfinite(angle):
            raise NonFiniteError(f'Angle of polarization must be finite, got {angle}')
        if not -90.0 <= angle <= 90.0:
            raise AngleOutOfBoundsError(angle=angle)
        self.__angle = 90.0 if angle == -90.0 else float(angle)
        self.__frame = frame

    @classmethod
    def from_angle(cls, angle: float, frame: Type[F]) -> 'Aop[F]':
        """Strict constructor, identical to calling the class."""
        return cls(angle, frame)

    @classmethod
    def from_angle_wrapped(cls, angle: float, frame: Type[F]) -> 'Aop[F]':
        """Create an angle of polarization from any finite angle by wrapping it.

        Args:
            angle: Angle in degrees.
            frame: Frame marker class the angle is measured in.

        Returns:
            The equivalent angle within (-90, 90].

        Raises:
            NonFiniteError: If the angle is NaN or infinite.
        """
        if not isfinite(angle):
            raise NonFiniteError(f'Angle of polarization must be finite, got {angle}')
        return cls(wrap_degrees(angle), frame)

    @property
    def angle(self) -> float:
        """Return the angle in degrees.

        Returns:
            Angle within (-90, 90].
        """
        return self.__angle

    @property
    def frame(self) -> Type[Frame]:
        """Return the frame marker class.

        Returns:
            Frame the angle is measured in.
        """
        return self.__frame

    def __add__(self, other: 'Aop[F]') -> 'Aop[F]':
        check_frame(self.__frame, other.frame)
        return Aop.from_angle_wrapped(self.__angle + other.angle, self.__frame)

    def __sub__(self, other: 'Aop[F]') -> 'Aop[F]':
        check_frame(self.__frame, other.frame)
        return Aop.from_angle_wrapped(self.__angle - other.angle, self.__frame)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Aop):
            return NotImplemented
        check_frame(self.__frame, other.frame)
        if abs(self.__angle) == 90.0 and abs(other.angle) == 90.0:
            return True
        return self.__angle == other.angle

    def __hash__(self) -> int:
        return hash((self.__angle, self.__frame))

    def __float__(self) -> float:
        return self.__angle

    def __repr__(self) -> str:
        return f'Aop({self.__angle}, {self.__frame.__name__})'

    def in_threshold(self, other: 'Aop[F]', threshold: float) -> bool:
        """Test whether two angles agree within a threshold, modulo 180 degrees.

        Args:
            other: Angle to compare against, in the same frame.
            threshold: Maximum absolute difference in degrees.

        Returns:
            True when |wrap(self - other)| <= threshold.
        """
        check_frame(self.__frame, other.frame)
        return abs(wrap_degrees(self.__angle - other.angle)) <= threshold

    def into_global_frame(self, offset: float) -> 'Aop':
        """Re-express a sensor-frame angle relative to a radial direction.

        Args:
            offset: Angle in degrees of the radial direction from the sensor x axis.

        Returns:
            Global-frame angle of polarization.
        """
        check_frame(SensorFrame, self.__frame)
        return Aop.from_angle_wrapped(self.__angle - offset, GlobalFrame)

    def into_sensor_frame(self, offset: float) -> 'Aop':
        """Inverse of :meth:`into_global_frame`.

        Args:
            offset: Angle in degrees of the radial direction from the sensor x axis.

        Returns:
            Sensor-frame angle of polarization.
        """
        check_frame(GlobalFrame, self.__frame)
        return Aop.from_angle_wrapped(self.__angle + offset, SensorFrame)
