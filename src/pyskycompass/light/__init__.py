"""Polarization primitive exports for the pyskycompass package."""

from typing import List

from .Frame import Frame, SensorFrame, GlobalFrame
from .Aop import Aop, wrap_degrees, wrap_degrees_array
from .Dop import Dop
from .StokesVector import StokesVector
from .Ray import Ray

__all__: List[str] = [
    'Frame',
    'SensorFrame',
    'GlobalFrame',
    'Aop',
    'wrap_degrees',
    'wrap_degrees_array',
    'Dop',
    'StokesVector',
    'Ray',
]
