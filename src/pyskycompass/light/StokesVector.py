"""Linear Stokes vector with frame tagging."""

from math import atan2, degrees, hypot, isfinite
from typing import Generic, Type

from pyskycompass.light.Aop import Aop
from pyskycompass.light.Dop import Dop
from pyskycompass.light.Frame import F, Frame
from pyskycompass.exceptions import NonFiniteError, ZeroIntensityError


class StokesVector(Generic[F]):
    """Linear Stokes parameters (S0, S1, S2) measured in a given frame."""

    __s0: float
    __s1: float
    __s2: float
    __frame: Type[Frame]

    def __init__(
            self,
            s0: float,
            s1: float,
            s2: float,
            frame: Type[F]
    ) -> None:
        """Store the Stokes parameters.

        Args:
            s0: Total intensity.
            s1: Intensity difference between 0 and 90 degree polarizers.
            s2: Intensity difference between 45 and 135 degree polarizers.
            frame: Frame marker class the parameters are measured in.
        """
        self.__s0 = float(s0)
        self.__s1 = float(s1)
        self.__s2 = float(s2)
        self.__frame = frame

    @property
    def s0(self) -> float:
        return self.__s0

    @property
    def s1(self) -> float:
        return self.__s1

    @property
    def s2(self) -> float:
        return self.__s2

    @property
    def frame(self) -> Type[Frame]:
        return self.__frame

    def __check_finite(self) -> None:
        if not (isfinite(self.__s0) and isfinite(self.__s1) and isfinite(self.__s2)):
            raise NonFiniteError(f'Non-finite Stokes vector {self!r}')

    def aop(self) -> Aop[F]:
        """Derive the angle of polarization.

        Returns:
            atan2(S2, S1) / 2 in degrees, in this vector's frame.

        Raises:
            NonFiniteError: If any parameter is NaN or infinite.
        """
        self.__check_finite()
        return Aop.from_angle(degrees(atan2(self.__s2, self.__s1)) / 2.0, self.__frame)

    def dop(self) -> Dop:
        """Derive the degree of polarization.

        Returns:
            sqrt(S1^2 + S2^2) / S0.

        Raises:
            NonFiniteError: If any parameter is NaN or infinite.
            ZeroIntensityError: If S0 is zero.
            DegreeOutOfBoundsError: If the ratio falls outside [0, 1].
        """
        self.__check_finite()
        if self.__s0 == 0.0:
            raise ZeroIntensityError(f'S0 is zero for {self!r}')
        return Dop(hypot(self.__s1, self.__s2) / self.__s0)

    def __repr__(self) -> str:
        return f'StokesVector({self.__s0}, {self.__s1}, {self.__s2}, {self.__frame.__name__})'
