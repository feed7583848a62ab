"""Degree of polarization constrained to [0, 1]."""

from math import isnan, isfinite
from functools import total_ordering
from typing import Union

from pyskycompass.exceptions import DegreeOutOfBoundsError, NonFiniteError


@total_ordering
class Dop:
    """Degree of polarization in [0, 1]."""

    __value: float

    def __init__(self, value: float) -> None:
        """Create a degree of polarization, rejecting out-of-range input.

        Args:
            value: Degree within [0, 1].

        Raises:
            NonFiniteError: If the value is NaN.
            DegreeOutOfBoundsError: If the value lies outside [0, 1].
        """
        if isnan(value):
            raise NonFiniteError('Degree of polarization must not be NaN')
        if not 0.0 <= value <= 1.0:
            raise DegreeOutOfBoundsError(degree=value)
        self.__value = float(value)

    @classmethod
    def clamped(cls, value: float) -> 'Dop':
        """Create a degree of polarization, clamping the value into [0, 1].

        Args:
            value: Any non-NaN value; infinities clamp to the nearest bound.

        Returns:
            The clamped degree of polarization.

        Raises:
            NonFiniteError: If the value is NaN.
        """
        if isnan(value):
            raise NonFiniteError('Degree of polarization must not be NaN')
        return cls(min(max(value, 0.0), 1.0))

    @property
    def value(self) -> float:
        """Return the degree as a float.

        Returns:
            Degree within [0, 1].
        """
        return self.__value

    @staticmethod
    def __operand(other: Union['Dop', float]) -> float:
        if isinstance(other, Dop):
            return other.value
        if not isfinite(other):
            raise NonFiniteError(f'Cannot combine a degree of polarization with {other}')
        return float(other)

    def __add__(self, other: Union['Dop', float]) -> 'Dop':
        return Dop.clamped(self.__value + self.__operand(other))

    def __sub__(self, other: Union['Dop', float]) -> 'Dop':
        return Dop.clamped(self.__value - self.__operand(other))

    def __mul__(self, other: Union['Dop', float]) -> 'Dop':
        return Dop.clamped(self.__value * self.__operand(other))

    __radd__ = __add__
    __rmul__ = __mul__

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Dop):
            return self.__value == other.value
        return NotImplemented

    def __lt__(self, other: 'Dop') -> bool:
        if isinstance(other, Dop):
            return self.__value < other.value
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.__value)

    def __float__(self) -> float:
        return self.__value

    def __repr__(self) -> str:
        return f'Dop({self.__value})'
