import pytest
from astropy.utils import iers

from pyskycompass.optics import Camera, PinholeOptic
from pyskycompass.sensor import ImageSensor
from pyskycompass.sky_models import Bearing, Rayleigh

iers.conf.auto_download = False
iers.conf.iers_degraded_accuracy = 'warn'


@pytest.fixture
def camera():
    # odd extents put the zenith of a sky-facing camera on the center pixel
    return Camera(
        optic=PinholeOptic(focal_length_micrometers=2000.0),
        sensor=ImageSensor(pixel_size_micrometers=60.0, rows=41, cols=51),
    )


@pytest.fixture
def sky_model():
    return Rayleigh.from_solar_bearing(Bearing(azimuth=135.0, elevation=40.0))
