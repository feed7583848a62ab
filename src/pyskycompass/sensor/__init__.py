"""Sensor module exports for the pyskycompass package."""

from typing import List

from .Coordinates import PixelCoordinate, SensorCoordinate
from .ImageSensor import ImageSensor
from .SensorChip import SensorChip
from .SlicingPattern import SlicingPattern, default_wire_grid_orientations_slicing
from .MicroPolarizer import MicroPolarizer
from .StokesCalculator import StokesCalculator

__all__: List[str] = [
    'PixelCoordinate',
    'SensorCoordinate',
    'ImageSensor',
    'SensorChip',
    'SlicingPattern',
    'default_wire_grid_orientations_slicing',
    'MicroPolarizer',
    'StokesCalculator',
]
