"""Direction in the local East-North-Up frame."""

from math import isfinite
from dataclasses import dataclass


@dataclass(frozen=True)
class Bearing:
    """Azimuth clockwise from north and elevation above the horizon, in degrees."""

    azimuth: float
    elevation: float

    def __post_init__(self):
        if not (isfinite(self.azimuth) and isfinite(self.elevation)):
            raise ValueError(f'Bearing must be finite, got ({self.azimuth}, {self.elevation})')
        if not -90.0 <= self.elevation <= 90.0:
            raise ValueError(f'Elevation must lie in [-90, 90], got {self.elevation}')

    @property
    def is_above_horizon(self) -> bool:
        return self.elevation >= 0.0

    @property
    def zenith_angle(self) -> float:
        return 90.0 - self.elevation
