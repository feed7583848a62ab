"""Pixel and sensor-plane coordinates."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PixelCoordinate:
    """Integer pixel index, row first."""

    row: int
    col: int


@dataclass(frozen=True)
class SensorCoordinate:
    """Point on the sensor plane in micrometers, origin at the optical center.

    x grows with the column index and y with the row index.
    """

    x: float
    y: float
