"""Synthesize the image a camera would see of a modelled sky."""

from typing import Optional

from numpy import array, arccos, arctan2, clip, rad2deg
from scipy.spatial.transform import Rotation
from astropy.coordinates import EarthLocation

from pyskycompass.light.Ray import Ray
from pyskycompass.light.Frame import GlobalFrame
from pyskycompass.image.RayImage import RayImage
from pyskycompass.optics.Camera import Camera
from pyskycompass.optics.Optic import RayDirection
from pyskycompass.sensor.Coordinates import PixelCoordinate
from pyskycompass.sky_models.Bearing import Bearing
from pyskycompass.sky_models.SkyModel import SkyModel
from pyskycompass.frames.frame_utils import ecef_to_local, unit_xyz_local_to_altaz
from pyskycompass.estimator.Orientation import Orientation


class Simulation:
    """A camera at a given orientation looking at a sky model."""

    __camera: Camera
    __orientation: Orientation
    __sky_model: SkyModel
    __rotation: Rotation

    def __init__(
            self,
            camera: Camera,
            orientation: Orientation,
            sky_model: SkyModel
    ) -> None:
        """Initialize the simulation.

        Args:
            camera: Camera model.
            orientation: Camera attitude in the local ENU frame.
            sky_model: Sky polarization model.
        """
        self.__camera = camera
        self.__orientation = orientation
        self.__sky_model = sky_model
        self.__rotation = orientation.rotation

    @classmethod
    def from_ecef_orientation(
            cls,
            camera: Camera,
            ecef_rotation: Rotation,
            location: EarthLocation,
            sky_model: SkyModel
    ) -> 'Simulation':
        """Build a simulation from an Earth-fixed camera attitude.

        Args:
            camera: Camera model.
            ecef_rotation: Rotation taking camera body vectors to ECEF.
            location: Camera position.
            sky_model: Sky polarization model.
        """
        local_rotation = ecef_to_local(location).rotation * ecef_rotation
        return cls(camera, Orientation.from_rotation(local_rotation), sky_model)

    @property
    def orientation(self) -> Orientation:
        return self.__orientation

    @property
    def camera(self) -> Camera:
        return self.__camera

    def zenith_pixel(self) -> Optional[PixelCoordinate]:
        """Return the pixel imaging the local zenith.

        Returns:
            The pixel, or None when the zenith is behind the lens or off the sensor.
        """
        up_in_body = self.__rotation.inv().apply(array([0.0, 0.0, 1.0]))
        direction = RayDirection(
            polar_deg=float(rad2deg(arccos(clip(up_in_body[2], -1.0, 1.0)))),
            azimuth_deg=float(rad2deg(arctan2(up_in_body[1], up_in_body[0]))),
        )
        return self.__camera.trace_to_pixel(direction)

    def __bearing_of(self, body_vector) -> Bearing:
        # Rotation.apply rejects the read-only camera cache
        elevation, azimuth = unit_xyz_local_to_altaz(self.__rotation.apply(body_vector.copy()))
        return Bearing(azimuth=float(azimuth), elevation=float(elevation))

    def ray(self, pixel: PixelCoordinate) -> Optional[Ray[GlobalFrame]]:
        """Return the modelled ray at one pixel.

        Returns:
            The ray, or None when the pixel is off the sensor or sees below the horizon.
        """
        if not self.__camera.sensor.contains(pixel):
            return None
        body_vector = self.__camera.direction_vectors()[pixel.row, pixel.col]
        return self.__sky_model.ray(self.__bearing_of(body_vector))

    def ray_image(self) -> RayImage[GlobalFrame]:
        """Return the modelled Global-frame image over the whole sensor."""
        body_vectors = self.__camera.direction_vectors()
        rows, cols, _ = body_vectors.shape
        local_vectors = self.__rotation.apply(body_vectors.reshape(-1, 3).copy()).reshape(rows, cols, 3)
        elevation, azimuth = unit_xyz_local_to_altaz(local_vectors)
        return RayImage.from_arrays(
            self.__sky_model.aop_array(azimuth, elevation),
            self.__sky_model.dop_array(azimuth, elevation),
            GlobalFrame
        )
