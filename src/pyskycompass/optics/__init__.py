"""Optics exports for the pyskycompass package."""

from typing import List

from .Optic import Optic, RayDirection
from .PinholeOptic import PinholeOptic
from .Camera import Camera

__all__: List[str] = [
    'Optic',
    'RayDirection',
    'PinholeOptic',
    'Camera',
]
