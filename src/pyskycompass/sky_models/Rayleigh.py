"""Rayleigh sky polarization model implementation."""

from typing import Optional

from astropy.time import Time
from numpy.typing import NDArray
from astropy.coordinates import EarthLocation
from numpy import float64, sin, cos, arctan2, arccos, clip, deg2rad, rad2deg, where, nan, asarray, isnan

from pyskycompass.light.Aop import Aop, wrap_degrees_array
from pyskycompass.light.Dop import Dop
from pyskycompass.light.Frame import GlobalFrame
from pyskycompass.sky_models.Bearing import Bearing
from pyskycompass.sky_models.SkyModel import SkyModel
from pyskycompass.sky_models.SolarPosition import solar_bearing


class Rayleigh(SkyModel):
    """Single-scattering Rayleigh sky for a given solar bearing."""

    __solar_bearing: Bearing
    __max_dop: float

    def __init__(
            self,
            solar_bearing: Bearing,
            max_dop: float = 1.0
    ) -> None:
        """Initialize the model.

        Args:
            solar_bearing: Position of the sun.
            max_dop: Degree of polarization at 90 degrees from the sun.
        """
        if not 0.0 <= max_dop <= 1.0:
            raise ValueError(f'Maximum degree of polarization must lie in [0, 1], got {max_dop}')
        self.__solar_bearing = solar_bearing
        self.__max_dop = max_dop

    @classmethod
    def from_solar_bearing(cls, bearing: Bearing, max_dop: float = 1.0) -> 'Rayleigh':
        return cls(solar_bearing=bearing, max_dop=max_dop)

    @classmethod
    def from_position_and_time(
            cls,
            location: EarthLocation,
            time: Time,
            max_dop: float = 1.0
    ) -> 'Rayleigh':
        """Build the model for the sun seen from a place at a time.

        Args:
            location: Observer on Earth.
            time: Observation time.
            max_dop: Degree of polarization at 90 degrees from the sun.
        """
        return cls(solar_bearing=solar_bearing(location=location, time=time), max_dop=max_dop)

    @property
    def solar_bearing(self) -> Bearing:
        """Return the solar bearing.

        Returns:
            Bearing of the sun the model is built for.
        """
        return self.__solar_bearing

    @property
    def max_dop(self) -> float:
        return self.__max_dop

    def __geometry(self, azimuth: NDArray[float64], elevation: NDArray[float64]):
        zenith_angle = deg2rad(90.0 - asarray(elevation, dtype=float64))
        solar_zenith_angle = deg2rad(self.__solar_bearing.zenith_angle)
        azimuthal_difference = deg2rad(asarray(azimuth, dtype=float64) - self.__solar_bearing.azimuth)
        return zenith_angle, solar_zenith_angle, azimuthal_difference

    @staticmethod
    def __below_horizon(elevation: NDArray[float64]) -> NDArray[bool]:
        elevation = asarray(elevation, dtype=float64)
        return isnan(elevation) | (elevation < 0.0)

    def aop_array(
            self,
            azimuth: NDArray[float64],
            elevation: NDArray[float64]
    ) -> NDArray[float64]:
        """Compute angle of polarization from solar and observation geometry.

        Args:
            azimuth: Azimuth of each observed point in degrees.
            elevation: Elevation of each observed point in degrees.

        Returns:
            Angle of polarization relative to the local meridian, in degrees.
        """
        zenith_angle, solar_zenith_angle, azimuthal_difference = self.__geometry(azimuth, elevation)
        aop = rad2deg(arctan2(
            sin(zenith_angle) * cos(solar_zenith_angle) -
            cos(zenith_angle) * cos(azimuthal_difference) * sin(solar_zenith_angle),
            sin(azimuthal_difference) * sin(solar_zenith_angle)
        ))
        return where(self.__below_horizon(elevation), nan, wrap_degrees_array(aop))

    def dop_array(
            self,
            azimuth: NDArray[float64],
            elevation: NDArray[float64]
    ) -> NDArray[float64]:
        """Compute degree of polarization from the scattering angle.

        Args:
            azimuth: Azimuth of each observed point in degrees.
            elevation: Elevation of each observed point in degrees.

        Returns:
            Degree of polarization for each observed point.
        """
        zenith_angle, solar_zenith_angle, azimuthal_difference = self.__geometry(azimuth, elevation)
        scattering_angle = arccos(clip(
            cos(zenith_angle) * cos(solar_zenith_angle) +
            sin(zenith_angle) * sin(solar_zenith_angle) * cos(azimuthal_difference),
            -1.0, 1.0
        ))
        dop = clip(
            self.__max_dop * sin(scattering_angle) ** 2 / (1 + cos(scattering_angle) ** 2),
            0.0, 1.0
        )
        return where(self.__below_horizon(elevation), nan, dop)

    def aop(self, bearing: Bearing) -> Optional[Aop[GlobalFrame]]:
        if not bearing.is_above_horizon:
            return None
        return Aop.from_angle_wrapped(float(self.aop_array(bearing.azimuth, bearing.elevation)), GlobalFrame)

    def dop(self, bearing: Bearing) -> Optional[Dop]:
        if not bearing.is_above_horizon:
            return None
        return Dop.clamped(float(self.dop_array(bearing.azimuth, bearing.elevation)))

    def __repr__(self) -> str:
        return f'Rayleigh({self.__solar_bearing}, max_dop={self.__max_dop})'
