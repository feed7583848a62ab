"""Abstract base class for sky polarization models."""

from abc import ABC, abstractmethod
from typing import Optional

from numpy.typing import NDArray
from numpy import float64

from pyskycompass.light.Aop import Aop
from pyskycompass.light.Dop import Dop
from pyskycompass.light.Ray import Ray
from pyskycompass.light.Frame import GlobalFrame
from pyskycompass.sky_models.Bearing import Bearing


class SkyModel(ABC):
    """Predict skylight polarization for directions above the horizon.

    Angles are expressed in the global frame, measured from the local
    meridian through the zenith.
    """

    @abstractmethod
    def aop(self, bearing: Bearing) -> Optional[Aop[GlobalFrame]]:
        """Return the angle of polarization seen along a bearing.

        Args:
            bearing: Viewing direction.

        Returns:
            The angle, or None below the horizon.
        """
        ...

    @abstractmethod
    def dop(self, bearing: Bearing) -> Optional[Dop]:
        """Return the degree of polarization seen along a bearing.

        Args:
            bearing: Viewing direction.

        Returns:
            The degree, or None below the horizon.
        """
        ...

    @abstractmethod
    def aop_array(
            self,
            azimuth: NDArray[float64],
            elevation: NDArray[float64]
    ) -> NDArray[float64]:
        """Vectorised :meth:`aop` in degrees; NaN below the horizon."""
        ...

    @abstractmethod
    def dop_array(
            self,
            azimuth: NDArray[float64],
            elevation: NDArray[float64]
    ) -> NDArray[float64]:
        """Vectorised :meth:`dop`; NaN below the horizon."""
        ...

    def ray(self, bearing: Bearing) -> Optional[Ray[GlobalFrame]]:
        """Return the predicted ray along a bearing, or None below the horizon."""
        aop = self.aop(bearing)
        dop = self.dop(bearing)
        if aop is None or dop is None:
            return None
        return Ray(aop, dop)
