"""Engine module exports for the pyskycompass package."""

from typing import List

from .EngineConfig import EngineConfig
from .Engine import Engine

__all__: List[str] = [
    'EngineConfig',
    'Engine',
]
