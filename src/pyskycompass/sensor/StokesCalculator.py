"""Utilities to compute Stokes parameters and polarization metrics from raw DoFP frames."""

from typing import Dict, Tuple

from numpy.typing import NDArray
from numpy import float64, sqrt, arctan2, divide, full_like, nan, rad2deg, isfinite, where, asarray, errstate

from pyskycompass.sensor.SlicingPattern import SlicingPattern, validate_wire_grid_orientations_slicing


class StokesCalculator:
    """Compute Stokes parameters and polarization metrics from sensor data."""

    __wire_grid_orientations_slicing: Dict[int, SlicingPattern]

    def __init__(
            self,
            wire_grid_orientations_slicing: Dict[int, SlicingPattern]
    ) -> None:
        """Initialize the calculator with slicing patterns per orientation.

        Args:
            wire_grid_orientations_slicing: Slicing pattern per orientation angle.
        """
        validate_wire_grid_orientations_slicing(wire_grid_orientations_slicing)
        self.__wire_grid_orientations_slicing = wire_grid_orientations_slicing

    def orientation_intensity(
            self,
            raw_intensity: NDArray,
            orientation_angle: int
    ) -> NDArray[float64]:
        """Extract the intensity map for a given polarizer orientation.

        Args:
            raw_intensity: Raw samples shaped (height, width).
            orientation_angle: Orientation angle in degrees.

        Returns:
            Intensity values for the requested orientation, one per metapixel.
        """
        pattern: SlicingPattern = self.__wire_grid_orientations_slicing[orientation_angle]
        return asarray(
            raw_intensity[pattern.start_row::pattern.step, pattern.start_column::pattern.step],
            dtype=float64
        )

    def stokes_parameters(
            self,
            raw_intensity: NDArray
    ) -> Tuple[NDArray[float64], NDArray[float64], NDArray[float64]]:
        """Compute Stokes parameters S0, S1, and S2 from intensity data.

        Args:
            raw_intensity: Raw samples shaped (height, width).

        Returns:
            Tuple of S0, S1, and S2 arrays shaped (height / 2, width / 2).
        """
        orientation_0_intensity = self.orientation_intensity(raw_intensity, orientation_angle=0)
        orientation_45_intensity = self.orientation_intensity(raw_intensity, orientation_angle=45)
        orientation_90_intensity = self.orientation_intensity(raw_intensity, orientation_angle=90)
        orientation_135_intensity = self.orientation_intensity(raw_intensity, orientation_angle=135)

        s0: NDArray[float64] = 0.5 * (
                orientation_0_intensity + orientation_45_intensity +
                orientation_90_intensity + orientation_135_intensity
        )
        s1: NDArray[float64] = orientation_0_intensity - orientation_90_intensity
        s2: NDArray[float64] = orientation_45_intensity - orientation_135_intensity

        return s0, s1, s2

    @staticmethod
    def degree_of_polarization(
            s0: NDArray[float64],
            s1: NDArray[float64],
            s2: NDArray[float64]
    ) -> NDArray[float64]:
        """Compute degree of polarization from Stokes parameters.

        Args:
            s0: Stokes parameter S0.
            s1: Stokes parameter S1.
            s2: Stokes parameter S2.

        Returns:
            Degree of polarization values, NaN where S0 is zero.
        """
        numerator = sqrt(s1 ** 2 + s2 ** 2)
        return divide(numerator, s0, out=full_like(s0, nan), where=s0 != 0)

    @staticmethod
    def angle_of_polarization(
            s1: NDArray[float64],
            s2: NDArray[float64],
    ) -> NDArray[float64]:
        """Compute angle of polarization from Stokes parameters.

        Args:
            s1: Stokes parameter S1.
            s2: Stokes parameter S2.

        Returns:
            Angle of polarization values in degrees within [-90, 90].
        """
        return rad2deg(0.5 * arctan2(s2, s1))

    def measurements(
            self,
            raw_intensity: NDArray
    ) -> Tuple[NDArray[float64], NDArray[float64]]:
        """Compute angle and degree of polarization from sensor readings.

        Metapixels whose Stokes vector does not yield a degree of
        polarization within [0, 1] are NaN in both outputs.

        Args:
            raw_intensity: Raw samples shaped (height, width).

        Returns:
            Tuple of angle (degrees, -90 stored as 90) and degree of polarization arrays.
        """
        s0, s1, s2 = self.stokes_parameters(raw_intensity=raw_intensity)
        with errstate(invalid='ignore'):
            dop: NDArray[float64] = self.degree_of_polarization(s0=s0, s1=s1, s2=s2)
            aop: NDArray[float64] = self.angle_of_polarization(s1=s1, s2=s2)
            valid = isfinite(dop) & isfinite(aop) & (dop >= 0.0) & (dop <= 1.0)

        aop = where(aop == -90.0, 90.0, aop)
        return where(valid, aop, nan), where(valid, dop, nan)
