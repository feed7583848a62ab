"""Estimator exports for the pyskycompass package."""

from typing import List

from .Orientation import Orientation
from .Searcher import Searcher, VecSearcher, StochasticSearcher, GridSearcher
from .Simulation import Simulation
from .Estimate import Estimate
from .loss import weighted_aop_loss, score_orientation
from .PatternMatch import PatternMatch, SearchState
from .CoordinateDescent import CoordinateDescent
from .HoughTransform import HoughTransform

__all__: List[str] = [
    'Orientation',
    'Searcher',
    'VecSearcher',
    'StochasticSearcher',
    'GridSearcher',
    'Simulation',
    'Estimate',
    'weighted_aop_loss',
    'score_orientation',
    'PatternMatch',
    'SearchState',
    'CoordinateDescent',
    'HoughTransform',
]
