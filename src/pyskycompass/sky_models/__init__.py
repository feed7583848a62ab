"""Sky model exports for the pyskycompass package."""

from typing import List

from .Bearing import Bearing
from .SkyModel import SkyModel
from .SolarPosition import solar_bearing
from .Rayleigh import Rayleigh

__all__: List[str] = [
    'Bearing',
    'SkyModel',
    'solar_bearing',
    'Rayleigh',
]
