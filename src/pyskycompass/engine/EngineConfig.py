from __future__ import annotations

from dataclasses import dataclass, asdict, fields
from typing import Any, Dict, Mapping, Optional, Tuple

from pyskycompass.exceptions import InvalidDimensionsError
from pyskycompass.sensor.SlicingPattern import (
    SlicingPattern, default_wire_grid_orientations_slicing, validate_wire_grid_orientations_slicing
)


@dataclass
class EngineConfig:
    # Sensor / optics (raw pixel grid; metapixels are 2x2 raw pixels)
    sensor_pixel_size_square_micrometers: float = 3.45
    number_pixels_vertical: int = 2048
    number_pixels_horizontal: int = 2448
    lens_focal_length_micrometers: float = 8000.0
    # Micro-polarizer
    tolerance: float = 0.0
    extinction_ratio: float = 1.0
    # Sensor chip
    pixel_saturation_ratio: float = 1.0
    adc_resolution: int = 8
    signal_to_noise_ratio: Optional[float] = None
    # Measurement filtering
    minimum_dop: float = 0.0
    # Pattern match
    max_iterations: int = 1000
    max_workers: Optional[int] = None
    random_seed: Optional[int] = None
    search_low: Tuple[float, float, float] = (-180.0, -10.0, 170.0)
    search_high: Tuple[float, float, float] = (180.0, 10.0, 190.0)
    # Coordinate descent refinement
    refine: bool = False
    refine_step: float = 1.0
    convergence_threshold: float = 1e-6
    refine_max_iterations: int = 100
    # Polarizer sampling (2x2 default)
    wire_grid_orientations_slicing: Optional[Dict[int, SlicingPattern]] = None

    def __post_init__(self):
        if self.wire_grid_orientations_slicing is None:
            self.wire_grid_orientations_slicing = default_wire_grid_orientations_slicing()
        validate_wire_grid_orientations_slicing(self.wire_grid_orientations_slicing)
        if (self.number_pixels_vertical <= 0 or self.number_pixels_horizontal <= 0
                or self.number_pixels_vertical % 2 or self.number_pixels_horizontal % 2):
            raise InvalidDimensionsError(
                f'Raw pixel counts must be even and positive, got '
                f'{self.number_pixels_horizontal}x{self.number_pixels_vertical}'
            )
        if not 0.0 <= self.minimum_dop <= 1.0:
            raise ValueError(f'minimum_dop must lie in [0, 1], got {self.minimum_dop}')
        self.search_low = tuple(float(angle) for angle in self.search_low)
        self.search_high = tuple(float(angle) for angle in self.search_high)

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> EngineConfig:
        """Build a configuration from plain values, e.g. a parsed JSON object.

        Slicing patterns may be given as ``{angle: [start_row, start_column, step]}``.
        """
        known = {field.name for field in fields(cls)}
        unknown = set(values) - known
        if unknown:
            raise ValueError(f'Unknown configuration keys: {sorted(unknown)}')

        values = dict(values)
        slicing = values.get('wire_grid_orientations_slicing')
        if slicing is not None:
            values['wire_grid_orientations_slicing'] = {
                int(angle): pattern if isinstance(pattern, SlicingPattern) else SlicingPattern(*pattern)
                for angle, pattern in slicing.items()
            }
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        values = asdict(self)
        values['wire_grid_orientations_slicing'] = {
            angle: [pattern.start_row, pattern.start_column, pattern.step]
            for angle, pattern in self.wire_grid_orientations_slicing.items()
        }
        values['search_low'] = list(self.search_low)
        values['search_high'] = list(self.search_high)
        return values
