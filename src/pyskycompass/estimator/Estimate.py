"""Result of an orientation estimation."""

from dataclasses import dataclass

from pyskycompass.estimator.Orientation import Orientation


@dataclass(frozen=True)
class Estimate:
    """Best orientation found, its loss in radians squared and the iterations spent."""

    orientation: Orientation
    loss: float
    iterations: int
