"""Solar meridian detection by Hough voting."""

import logging
from typing import Optional

from numpy import arctan2, rad2deg, mod, floor, bincount, argmax, nonzero, ceil, int64

from pyskycompass.light.Aop import Aop
from pyskycompass.light.Frame import GlobalFrame, check_frame
from pyskycompass.image.RayImage import RayImage
from pyskycompass.image.RayFilter import AopFilter
from pyskycompass.sensor.Coordinates import PixelCoordinate

logger = logging.getLogger(__name__)


class HoughTransform:
    """Find the image line through the zenith along which the sky is polarized at 90 degrees.

    In the Global frame that line is the solar and antisolar meridian. Each
    pixel within ``threshold`` of 90 degrees votes for the direction of the
    line joining it to the zenith pixel.
    """

    __resolution: float
    __aop_filter: AopFilter

    def __init__(
            self,
            resolution: float = 1.0,
            threshold: float = 1.0
    ) -> None:
        """Initialize the accumulator.

        Args:
            resolution: Accumulator bin width in degrees.
            threshold: Tolerance in degrees around 90 for a pixel to vote.
        """
        if resolution <= 0 or resolution > 180:
            raise ValueError(f'resolution must lie in (0, 180], got {resolution}')
        self.__resolution = resolution
        self.__aop_filter = AopFilter(center=Aop(90.0, GlobalFrame), threshold=threshold)

    def meridian_angle(
            self,
            image: RayImage[GlobalFrame],
            zenith: PixelCoordinate
    ) -> Optional[float]:
        """Return the angle of the solar meridian in the image.

        Args:
            image: Global-frame image.
            zenith: Pixel imaging the zenith.

        Returns:
            Center of the winning bin in degrees within [-90, 90), measured
            from the column axis towards the row axis, or None without votes.
        """
        check_frame(GlobalFrame, image.frame)
        voting = self.__aop_filter.mask(image)
        if 0 <= zenith.row < image.rows and 0 <= zenith.col < image.cols:
            # the zenith pixel itself has no direction
            voting[zenith.row, zenith.col] = False
        rows, cols = nonzero(voting)
        if rows.size == 0:
            logger.warning('No pixel votes for a solar meridian')
            return None

        angles = mod(rad2deg(arctan2(rows - zenith.row, cols - zenith.col)) + 90.0, 180.0)
        bins = int(ceil(180.0 / self.__resolution))
        indices = floor(angles / self.__resolution).astype(int64).clip(0, bins - 1)
        accumulator = bincount(indices, minlength=bins)
        winner = int(argmax(accumulator))
        logger.debug(f'Hough winner bin {winner} with {accumulator[winner]} of {rows.size} votes')
        return -90.0 + (winner + 0.5) * self.__resolution
