"""Image exports for the pyskycompass package."""

from typing import List

from .RayImage import RayImage
from .RayFilter import RayFilter, AopFilter, DopFilter
from .IntensityImage import IntensityImage

__all__: List[str] = [
    'RayImage',
    'RayFilter',
    'AopFilter',
    'DopFilter',
    'IntensityImage',
]
