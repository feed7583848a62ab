"""Scoring of a measured image against a simulated one."""

import logging
from math import isfinite
from typing import Optional

from numpy import deg2rad, isnan, nansum

from pyskycompass.light.Aop import wrap_degrees_array
from pyskycompass.light.Frame import GlobalFrame, SensorFrame, check_frame
from pyskycompass.image.RayImage import RayImage
from pyskycompass.optics.Camera import Camera
from pyskycompass.sky_models.SkyModel import SkyModel
from pyskycompass.estimator.Orientation import Orientation
from pyskycompass.estimator.Simulation import Simulation
from pyskycompass.exceptions import InvalidDimensionsError

logger = logging.getLogger(__name__)


def weighted_aop_loss(
        measured: RayImage[GlobalFrame],
        simulated: RayImage[GlobalFrame]
) -> float:
    """DoP-weighted mean squared angular error, in radians squared.

    Only pixels holding a ray in both images contribute; each is weighted
    by its measured degree of polarization.

    Args:
        measured: Global-frame measurement.
        simulated: Global-frame simulation of the same sensor.

    Returns:
        The loss, or NaN when no pixel overlaps or every weight is zero.
    """
    check_frame(GlobalFrame, measured.frame)
    check_frame(GlobalFrame, simulated.frame)
    if measured.shape != simulated.shape:
        raise InvalidDimensionsError(f'Cannot compare images of shape {measured.shape} and {simulated.shape}')

    difference = wrap_degrees_array(measured.aop_array() - simulated.aop_array())
    weights = measured.dop_array()
    overlap = ~(isnan(difference) | isnan(weights))
    total_weight = float(nansum(weights[overlap]))
    if total_weight == 0.0:
        return float('nan')
    return float(nansum(weights[overlap] * deg2rad(difference[overlap]) ** 2)) / total_weight


def score_orientation(
        camera: Camera,
        measured: RayImage[SensorFrame],
        sky_model: SkyModel,
        orientation: Orientation
) -> Optional[float]:
    """Score one candidate orientation against a sensor-frame measurement.

    Args:
        camera: Camera that took the measurement.
        measured: Sensor-frame image on the camera's pixel grid.
        sky_model: Sky polarization model.
        orientation: Candidate camera attitude.

    Returns:
        The loss, or None when the candidate cannot be scored because its
        zenith is not imaged or no pixel overlaps.
    """
    simulation = Simulation(camera=camera, orientation=orientation, sky_model=sky_model)
    zenith = simulation.zenith_pixel()
    measured_global = measured.into_global_frame(zenith)
    if measured_global is None:
        logger.debug(f'Candidate {orientation} skipped: zenith not imaged')
        return None
    loss = weighted_aop_loss(measured_global, simulation.ray_image())
    if not isfinite(loss):
        logger.debug(f'Candidate {orientation} skipped: no overlapping pixels')
        return None
    logger.debug(f'Candidate {orientation} scored {loss:.6e}')
    return loss
