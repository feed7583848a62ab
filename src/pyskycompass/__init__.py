from typing import List
from . import exceptions, light, sensor, optics, image, sky_models, frames, estimator, engine

__all__: List[str] = [
    'exceptions',
    'light',
    'sensor',
    'optics',
    'image',
    'sky_models',
    'frames',
    'estimator',
    'engine'
]
