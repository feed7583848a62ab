"""Micro-polarizer array model for wire-grid orientation effects."""

from typing import Dict, Optional, Tuple, Union

from numpy.typing import NDArray
from numpy import float64, deg2rad, cos, zeros, repeat, broadcast_to, asarray
from numpy.random import Generator, default_rng

from pyskycompass.sensor.SlicingPattern import SlicingPattern, validate_wire_grid_orientations_slicing


class MicroPolarizer:
    """Simulate the raw response of a micro-polarizer array to polarized light."""

    __extinction_ratio: float
    __tolerance: float
    __wire_grid_orientations_slicing: Dict[int, SlicingPattern]
    __angle_map_cache: Optional[NDArray[float64]]
    __defects_cache: Optional[NDArray[float64]]
    __angle_map_shape: Optional[Tuple[int, int]]
    __defects_shape: Optional[Tuple[int, int]]
    __rng: Generator

    def __init__(
            self,
            extinction_ratio: float,
            tolerance: float,
            wire_grid_orientations_slicing: Dict[int, SlicingPattern],
            random_seed: Optional[int] = None
    ) -> None:
        """Initialize the micro-polarizer with tolerances and slicing patterns.

        Args:
            extinction_ratio: Polarizer efficiency in [0, 1] (e.g., 0.99).
            tolerance: Maximum angular offset of a wire grid, in degrees.
            wire_grid_orientations_slicing: Slicing pattern per orientation angle.
            random_seed: Optional seed for deterministic defect generation.
        """
        validate_wire_grid_orientations_slicing(wire_grid_orientations_slicing)
        if not 0.0 <= extinction_ratio <= 1.0:
            raise ValueError(f'Extinction ratio must lie in [0, 1], got {extinction_ratio}')
        if tolerance < 0:
            raise ValueError(f'Tolerance must not be negative, got {tolerance}')
        self.__tolerance = tolerance
        self.__extinction_ratio = extinction_ratio
        self.__wire_grid_orientations_slicing = wire_grid_orientations_slicing
        self.__angle_map_cache = None
        self.__defects_cache = None
        self.__angle_map_shape = None
        self.__defects_shape = None
        self.__rng = default_rng(random_seed)

    def __get_angle_map(
            self,
            row_dim: int,
            col_dim: int
    ) -> NDArray[float64]:
        """Return the wire-grid orientation of every raw sample, in radians."""
        if self.__angle_map_cache is not None and self.__angle_map_shape == (row_dim, col_dim):
            return self.__angle_map_cache

        angle_map = zeros((row_dim, col_dim), dtype=float64)
        for orientation_angle_deg, slicing_pattern in self.__wire_grid_orientations_slicing.items():
            angle_map[
                slicing_pattern.start_row::slicing_pattern.step,
                slicing_pattern.start_column::slicing_pattern.step
            ] = deg2rad(orientation_angle_deg)

        self.__angle_map_cache = angle_map
        self.__angle_map_shape = (row_dim, col_dim)
        if self.__defects_shape != self.__angle_map_shape:
            self.__defects_cache = None
            self.__defects_shape = None
        return angle_map

    def __get_defects(
            self,
            row_dim: int,
            col_dim: int
    ) -> NDArray[float64]:
        """Return random angular defects in radians, drawn once per raw shape."""
        if self.__tolerance == 0:
            return zeros((row_dim, col_dim), dtype=float64)

        if self.__defects_cache is not None and self.__defects_shape == (row_dim, col_dim):
            return self.__defects_cache

        defects = self.__rng.random((row_dim, col_dim))
        defects = deg2rad(self.__tolerance) * (1 - 2 * defects)
        self.__defects_cache = defects
        self.__defects_shape = (row_dim, col_dim)
        return defects

    def intensity_on_pixels(
            self,
            angle_of_polarization: NDArray[float64],
            degree_of_polarization: NDArray[float64],
            radiance: Union[float, NDArray[float64]] = 1.0
    ) -> NDArray[float64]:
        """Compute the raw intensity behind each micro-polarizer.

        Inputs are given per metapixel; every metapixel spreads over the
        2x2 block of raw samples it covers.

        Args:
            angle_of_polarization: Sensor-frame angle of polarization (degrees), NaN where unknown.
            degree_of_polarization: Degree of polarization, NaN where unknown.
            radiance: Radiance per metapixel, or a constant.

        Returns:
            Intensity on each raw sample, shaped (2 * rows, 2 * cols).
        """
        aop = asarray(angle_of_polarization, dtype=float64)
        dop = asarray(degree_of_polarization, dtype=float64)
        radiance = broadcast_to(asarray(radiance, dtype=float64), aop.shape)

        def spread(values: NDArray[float64]) -> NDArray[float64]:
            return repeat(repeat(values, 2, axis=0), 2, axis=1)

        row_dim, col_dim = 2 * aop.shape[0], 2 * aop.shape[1]
        angle_map = self.__get_angle_map(row_dim=row_dim, col_dim=col_dim)
        defects = self.__get_defects(row_dim=row_dim, col_dim=col_dim)

        # I = 0.5 * radiance * [1 + (extinction_ratio * DoP) * cos(2 * (AoP - wire grid angle))]
        return 0.5 * spread(radiance) * (
                1.0 + self.__extinction_ratio * spread(dop) * cos(
                    2.0 * (deg2rad(spread(aop)) - (angle_map + defects))
                )
        )
